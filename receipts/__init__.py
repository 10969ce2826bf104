"""Receipt scanning: extract text and a suggested amount from a receipt photo."""

from receipts.factory import get_receipt_provider
from receipts.scanner import scan_receipt

__all__ = ["get_receipt_provider", "scan_receipt"]
