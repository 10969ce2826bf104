"""OpenAI receipt provider using vision input and structured outputs."""

import base64
from typing import Optional
from pydantic import BaseModel
from openai import OpenAI
from receipts.providers.base import ReceiptProvider, ReceiptScan
from receipts.prompts.loader import PromptManager
from models.validation import parse_amount
from logger import get_logger

logger = get_logger()


class ReceiptExtraction(BaseModel):
    """Structured output returned by the model."""

    extracted_text: str
    total_amount: Optional[str] = None
    currency: Optional[str] = None


class OpenAIReceiptProvider(ReceiptProvider):
    """Reads receipts with an OpenAI vision model."""

    def __init__(self, api_key: str, model: Optional[str] = None, client=None):
        """Initialize OpenAI receipt provider.

        Args:
            api_key: OpenAI API key.
            model: Model to use (e.g., "gpt-4o-mini"). If None, uses prompt default.
            client: Optional preconfigured client (used by tests).
        """
        self.client = client or OpenAI(api_key=api_key)
        self.model = model
        self.prompt_manager = PromptManager()

    def scan(self, image: bytes, mime_type: str) -> ReceiptScan:
        rendered_prompt = self.prompt_manager.render_prompt(
            "receipt", {"mime_type": mime_type}
        )

        model = self.model or rendered_prompt["parameters"].get("model", "gpt-4o-mini")
        temperature = rendered_prompt["parameters"].get("temperature", 0)
        max_tokens = rendered_prompt["parameters"].get("max_tokens", 2000)

        logger.info(
            f"Scanning receipt ({len(image)} bytes) with model: {model}, "
            f"prompt version: {rendered_prompt['version']}"
        )

        data_url = f"data:{mime_type};base64,{base64.b64encode(image).decode('ascii')}"

        try:
            response = self.client.chat.completions.parse(
                model=model,
                messages=[
                    {"role": "system", "content": rendered_prompt["system_prompt"]},
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": rendered_prompt["user_prompt"]},
                            {"type": "image_url", "image_url": {"url": data_url}},
                        ],
                    },
                ],
                temperature=temperature,
                max_tokens=max_tokens,
                response_format=ReceiptExtraction,
            )
        except Exception as e:
            logger.error(f"OpenAI API error: {e}")
            raise

        result = response.choices[0].message.parsed
        if result is None:
            logger.warning("OpenAI returned null parsed response")
            return ReceiptScan(success=False, error="No response from model")

        amount = None
        if result.total_amount:
            amount = parse_amount(result.total_amount)
            if amount is None or amount <= 0:
                logger.info(f"Ignoring unusable amount '{result.total_amount}'")
                amount = None

        return ReceiptScan(
            success=True, extracted_text=result.extracted_text, detected_amount=amount
        )
