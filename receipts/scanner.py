"""Receipt scanning entry point.

Wraps a provider call so callers always get a ReceiptScan back; a failed
scan never blocks entering the transaction by hand.
"""

import mimetypes
from pathlib import Path
from typing import Optional

from config import Config
from receipts.factory import get_receipt_provider
from receipts.providers.base import ReceiptProvider, ReceiptScan
from logger import get_logger

logger = get_logger()


def scan_receipt(
    image: bytes,
    mime_type: str = "image/jpeg",
    config: Optional[Config] = None,
    provider: Optional[ReceiptProvider] = None,
) -> ReceiptScan:
    """Extract text and a suggested amount from a receipt image.

    Args:
        image: Raw image bytes.
        mime_type: Image MIME type.
        config: Used to build a provider when ``provider`` is not given.
        provider: Explicit provider (takes precedence over ``config``).

    Returns:
        ReceiptScan; ``success`` is False when scanning is disabled or fails.
    """
    if not image:
        return ReceiptScan(success=False, error="No image provided")

    if provider is None:
        if config is None:
            return ReceiptScan(success=False, error="Receipt scanning is not configured")
        try:
            provider = get_receipt_provider(config)
        except ValueError as e:
            logger.error(f"Failed to initialize receipt provider: {e}")
            return ReceiptScan(success=False, error=str(e))
        if provider is None:
            return ReceiptScan(success=False, error="Receipt scanning is disabled")

    try:
        scan = provider.scan(image, mime_type)
    except Exception as e:
        logger.error(f"Receipt scan failed: {e}")
        return ReceiptScan(success=False, error=str(e))

    logger.info(
        f"Receipt scanned, detected amount: "
        f"{scan.detected_amount if scan.detected_amount is not None else 'none'}"
    )
    return scan


def scan_receipt_file(path: Path, config: Config) -> ReceiptScan:
    """Scan a receipt image stored on disk."""
    mime_type = mimetypes.guess_type(path.name)[0] or "image/jpeg"
    with open(path, "rb") as f:
        image = f.read()
    return scan_receipt(image, mime_type, config=config)
