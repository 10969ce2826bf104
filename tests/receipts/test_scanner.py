"""Tests for receipt scanning."""

from dataclasses import replace
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from receipts.factory import get_receipt_provider
from receipts.providers.base import ReceiptProvider, ReceiptScan
from receipts.providers.openai import OpenAIReceiptProvider, ReceiptExtraction
from receipts.scanner import scan_receipt, scan_receipt_file


class FakeProvider(ReceiptProvider):
    def __init__(self, scan=None, error=None):
        self.result = scan
        self.error = error
        self.calls = []

    def scan(self, image, mime_type):
        self.calls.append((image, mime_type))
        if self.error:
            raise self.error
        return self.result


def openai_client(parsed):
    """Build a stand-in OpenAI client whose parse call returns ``parsed``."""
    client = MagicMock()
    message = SimpleNamespace(parsed=parsed)
    client.chat.completions.parse.return_value = SimpleNamespace(
        choices=[SimpleNamespace(message=message)]
    )
    return client


class TestScanReceipt:
    """Tests for scan_receipt function."""

    def test_uses_provider(self):
        provider = FakeProvider(
            ReceiptScan(success=True, extracted_text="TOTAL 45.000", detected_amount=Decimal("45000"))
        )

        scan = scan_receipt(b"img", "image/png", provider=provider)

        assert scan.success is True
        assert scan.detected_amount == Decimal("45000")
        assert provider.calls == [(b"img", "image/png")]

    def test_empty_image(self):
        provider = FakeProvider()

        scan = scan_receipt(b"", provider=provider)

        assert scan.success is False
        assert provider.calls == []

    def test_not_configured(self):
        scan = scan_receipt(b"img")

        assert scan.success is False
        assert scan.error == "Receipt scanning is not configured"

    def test_disabled(self, test_config):
        scan = scan_receipt(b"img", config=test_config)

        assert scan.success is False
        assert scan.error == "Receipt scanning is disabled"

    def test_invalid_config_is_reported(self, test_config):
        config = replace(test_config, receipts_enabled=True, receipts_openai_api_key="")

        scan = scan_receipt(b"img", config=config)

        assert scan.success is False
        assert "api_key" in scan.error

    def test_provider_failure_is_not_raised(self):
        provider = FakeProvider(error=RuntimeError("timeout"))

        scan = scan_receipt(b"img", provider=provider)

        assert scan.success is False
        assert scan.error == "timeout"

    def test_scan_file_guesses_mime_type(self, tmp_path, test_config, monkeypatch):
        image = tmp_path / "struk.png"
        image.write_bytes(b"png-bytes")
        captured = {}

        def fake_scan(data, mime_type, config=None):
            captured.update(data=data, mime_type=mime_type, config=config)
            return ReceiptScan(success=True)

        monkeypatch.setattr("receipts.scanner.scan_receipt", fake_scan)

        scan_receipt_file(image, test_config)

        assert captured == {"data": b"png-bytes", "mime_type": "image/png", "config": test_config}


class TestReceiptScan:
    """Tests for ReceiptScan serialization."""

    def test_to_dict(self):
        scan = ReceiptScan(success=True, extracted_text="x", detected_amount=Decimal("12.50"))

        assert scan.to_dict() == {
            "success": True,
            "extractedText": "x",
            "detectedAmount": "12.50",
        }

    def test_to_dict_with_error(self):
        data = ReceiptScan(success=False, error="boom").to_dict()

        assert data["detectedAmount"] is None
        assert data["error"] == "boom"


class TestOpenAIReceiptProvider:
    """Tests for OpenAIReceiptProvider."""

    def test_scan(self):
        client = openai_client(
            ReceiptExtraction(extracted_text="INDOMARET\nTOTAL 45000", total_amount="45000.00")
        )
        provider = OpenAIReceiptProvider(api_key="sk-test", model="gpt-4o-mini", client=client)

        scan = provider.scan(b"img", "image/jpeg")

        assert scan.success is True
        assert scan.extracted_text == "INDOMARET\nTOTAL 45000"
        assert scan.detected_amount == Decimal("45000.00")

        kwargs = client.chat.completions.parse.call_args.kwargs
        assert kwargs["model"] == "gpt-4o-mini"
        assert kwargs["response_format"] is ReceiptExtraction
        image_part = kwargs["messages"][1]["content"][1]
        assert image_part["image_url"]["url"].startswith("data:image/jpeg;base64,")

    def test_unusable_amount_is_dropped(self):
        client = openai_client(ReceiptExtraction(extracted_text="???", total_amount="0"))
        provider = OpenAIReceiptProvider(api_key="sk-test", client=client)

        scan = provider.scan(b"img", "image/jpeg")

        assert scan.success is True
        assert scan.detected_amount is None

    def test_no_parsed_response(self):
        provider = OpenAIReceiptProvider(api_key="sk-test", client=openai_client(None))

        scan = provider.scan(b"img", "image/jpeg")

        assert scan.success is False

    def test_api_error_propagates(self):
        client = MagicMock()
        client.chat.completions.parse.side_effect = RuntimeError("rate limited")
        provider = OpenAIReceiptProvider(api_key="sk-test", client=client)

        with pytest.raises(RuntimeError):
            provider.scan(b"img", "image/jpeg")


class TestGetReceiptProvider:
    """Tests for get_receipt_provider factory."""

    def test_disabled(self, test_config):
        assert get_receipt_provider(test_config) is None

    def test_openai(self, test_config):
        config = replace(test_config, receipts_enabled=True, receipts_openai_api_key="sk-test")

        provider = get_receipt_provider(config)

        assert isinstance(provider, OpenAIReceiptProvider)
        assert provider.model == "gpt-4o-mini"

    def test_missing_key(self, test_config):
        config = replace(test_config, receipts_enabled=True)

        with pytest.raises(ValueError):
            get_receipt_provider(config)

    def test_unknown_provider(self, test_config):
        config = replace(test_config, receipts_enabled=True, receipts_provider="tesseract")

        with pytest.raises(ValueError, match="Unknown receipt provider"):
            get_receipt_provider(config)
