"""Factory for creating receipt provider instances."""

from typing import Optional
from config import Config
from receipts.providers.base import ReceiptProvider
from receipts.providers.openai import OpenAIReceiptProvider
from logger import get_logger

logger = get_logger()


def get_receipt_provider(config: Config) -> Optional[ReceiptProvider]:
    """Create a receipt provider instance based on configuration.

    Args:
        config: Application configuration.

    Returns:
        ReceiptProvider instance, or None if receipt scanning is disabled.

    Raises:
        ValueError: If a provider is configured but its settings are invalid.
    """
    if not config.receipts_enabled:
        logger.info("Receipt scanning is disabled")
        return None

    provider_name = config.receipts_provider

    if provider_name == "openai":
        if not config.receipts_openai_api_key:
            raise ValueError(
                "OpenAI receipt provider selected but api_key not configured"
            )
        logger.info(
            f"Initializing OpenAI receipt provider "
            f"(model: {config.receipts_openai_model or 'default'})"
        )
        return OpenAIReceiptProvider(
            api_key=config.receipts_openai_api_key,
            model=config.receipts_openai_model,
        )

    if not provider_name:
        logger.info("No receipt provider configured")
        return None

    raise ValueError(f"Unknown receipt provider: {provider_name}")
