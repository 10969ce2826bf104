"""Loading of prompt definitions stored as YAML next to this module."""

import yaml
from pathlib import Path
from typing import Any, Dict, Optional
from logger import get_logger

logger = get_logger()

_REQUIRED_KEYS = ("system_prompt", "user_prompt_template")


class PromptManager:
    """Loads ``<name>.yaml`` prompt files and fills in their templates.

    Args:
        prompts_dir: Directory holding the YAML files. Defaults to the
            directory of this module.
    """

    def __init__(self, prompts_dir: Optional[Path] = None):
        self.prompts_dir = prompts_dir or Path(__file__).parent
        self._cache: Dict[str, Dict[str, Any]] = {}

    def load_prompt(self, prompt_name: str) -> Dict[str, Any]:
        """Read a prompt definition, caching it for later calls.

        Raises:
            FileNotFoundError: If the prompt file doesn't exist.
            ValueError: If required keys are missing.
            yaml.YAMLError: If the YAML is invalid.
        """
        if prompt_name not in self._cache:
            prompt_file = self.prompts_dir / f"{prompt_name}.yaml"
            if not prompt_file.exists():
                raise FileNotFoundError(f"Prompt file not found: {prompt_file}")

            logger.debug(f"Loading prompt from {prompt_file}")
            with open(prompt_file, "r") as f:
                prompt_config = yaml.safe_load(f) or {}

            missing = [key for key in _REQUIRED_KEYS if key not in prompt_config]
            if missing:
                raise ValueError(f"Prompt '{prompt_name}' is missing: {', '.join(missing)}")

            self._cache[prompt_name] = prompt_config

        return self._cache[prompt_name]

    def render_prompt(self, prompt_name: str, variables: Dict[str, Any]) -> Dict[str, Any]:
        """Load a prompt and substitute ``{placeholders}`` in its user template.

        Returns:
            Dictionary with system_prompt, user_prompt, parameters and version.
        """
        prompt_config = self.load_prompt(prompt_name)
        return {
            "system_prompt": prompt_config["system_prompt"],
            "user_prompt": prompt_config["user_prompt_template"].format(**variables),
            "parameters": prompt_config.get("parameters") or {},
            "version": str(prompt_config.get("version", "unknown")),
        }
