"""Configuration management for Dinari.

Reads configuration from ~/.config/dinari.toml and creates default config if needed.
"""

from pathlib import Path
from dataclasses import dataclass
import tomllib
import tomli_w


@dataclass
class Config:
    """Application configuration."""

    base_dir: Path
    db_data_dir: Path
    db_filename: str
    log_level: str
    log_dir: Path
    db_timeout: float = 5.0
    owner_id: str = ""
    timezone: str = "UTC"
    claim_before_insert: bool = True
    receipts_enabled: bool = False
    receipts_provider: str = "openai"
    receipts_openai_api_key: str = ""
    receipts_openai_model: str = "gpt-4o-mini"

    @property
    def db_path(self) -> Path:
        """Get the full database path (data_dir/filename)."""
        return self.db_data_dir / self.db_filename

    @classmethod
    def default(cls) -> "Config":
        """Create a Config with default values."""
        home = Path.home()
        base_dir = home / "data" / "dinari"
        return cls(
            base_dir=base_dir,
            db_data_dir=base_dir / "db",
            db_filename="dinari.db",
            log_level="INFO",
            log_dir=base_dir / "logs",
        )


def get_config_path() -> Path:
    """Get the path to the config file."""
    return Path.home() / ".config" / "dinari.toml"


def get_migrations_dir() -> Path:
    """Get the path to the migrations directory.

    This is always relative to the code location, not configurable.
    """
    return Path(__file__).parent / "db" / "migrations"


def load_config() -> Config:
    """Load configuration from file, creating default if it doesn't exist.

    Returns:
        Config object with loaded or default values.
    """
    config_path = get_config_path()

    # If config doesn't exist, create it with defaults
    if not config_path.exists():
        config = Config.default()
        _write_config(config)
        return config

    with open(config_path, "rb") as f:
        data = tomllib.load(f)

    return parse_config(data)


def parse_config(data: dict) -> Config:
    """Build a Config from parsed TOML data, using defaults for missing values.

    Args:
        data: Dictionary as returned by tomllib.

    Returns:
        Config object.
    """
    defaults = Config.default()
    base_dir = Path(data.get("base_dir", defaults.base_dir))

    db_config = data.get("database", {})
    db_data_dir = Path(db_config.get("data_dir", base_dir / "db"))
    db_filename = db_config.get("filename", defaults.db_filename)
    db_timeout = float(db_config.get("timeout", defaults.db_timeout))

    log_config = data.get("logging", {})
    log_level = log_config.get("level", defaults.log_level)
    log_dir = Path(log_config.get("log_dir", base_dir / "logs"))

    session_config = data.get("session", {})
    owner_id = session_config.get("owner_id", defaults.owner_id)

    recurring_config = data.get("recurring", {})
    timezone = recurring_config.get("timezone", defaults.timezone)
    claim_before_insert = recurring_config.get(
        "claim_before_insert", defaults.claim_before_insert
    )

    receipts_config = data.get("receipts", {})
    openai_config = receipts_config.get("openai", {})

    return Config(
        base_dir=base_dir,
        db_data_dir=db_data_dir,
        db_filename=db_filename,
        log_level=log_level,
        log_dir=log_dir,
        db_timeout=db_timeout,
        owner_id=owner_id,
        timezone=timezone,
        claim_before_insert=claim_before_insert,
        receipts_enabled=receipts_config.get("enabled", defaults.receipts_enabled),
        receipts_provider=receipts_config.get("provider", defaults.receipts_provider),
        receipts_openai_api_key=openai_config.get(
            "api_key", defaults.receipts_openai_api_key
        ),
        receipts_openai_model=openai_config.get(
            "model", defaults.receipts_openai_model
        ),
    )


def _write_config(config: Config) -> None:
    """Write config to the config file.

    Args:
        config: Config object to write.
    """
    config_path = get_config_path()

    # Ensure config directory exists
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data = {
        "base_dir": str(config.base_dir),
        "database": {
            "data_dir": str(config.db_data_dir),
            "filename": config.db_filename,
            "timeout": config.db_timeout,
        },
        "logging": {
            "level": config.log_level,
            "log_dir": str(config.log_dir),
        },
        "session": {
            "owner_id": config.owner_id,
        },
        "recurring": {
            "timezone": config.timezone,
            "claim_before_insert": config.claim_before_insert,
        },
        "receipts": {
            "enabled": config.receipts_enabled,
            "provider": config.receipts_provider,
            "openai": {
                "api_key": config.receipts_openai_api_key,
                "model": config.receipts_openai_model,
            },
        },
    }

    with open(config_path, "wb") as f:
        tomli_w.dump(data, f)
