"""Base provider interface for receipt text extraction."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


@dataclass
class ReceiptScan:
    """Result of scanning one receipt image.

    ``detected_amount`` is only a suggestion for prefilling a new
    transaction; it is never recorded without the user confirming it.
    """

    success: bool
    extracted_text: str = ""
    detected_amount: Optional[Decimal] = None
    error: Optional[str] = None

    def to_dict(self) -> dict:
        data = {
            "success": self.success,
            "extractedText": self.extracted_text,
            "detectedAmount": (
                str(self.detected_amount) if self.detected_amount is not None else None
            ),
        }
        if self.error:
            data["error"] = self.error
        return data


class ReceiptProvider(ABC):
    """Abstract base class for receipt scanning providers."""

    @abstractmethod
    def scan(self, image: bytes, mime_type: str) -> ReceiptScan:
        """Extract text and the receipt total from an image.

        Args:
            image: Raw image bytes.
            mime_type: Image MIME type, e.g. "image/jpeg".

        Returns:
            ReceiptScan with the extracted text and detected amount (if any).

        Raises:
            Exception: If the provider call fails.
        """
        pass
