"""Tests for configuration parsing."""

from pathlib import Path

from config import Config, parse_config


def test_defaults_for_empty_file():
    config = parse_config({})
    defaults = Config.default()

    assert config == defaults
    assert config.timezone == "UTC"
    assert config.claim_before_insert is True
    assert config.receipts_enabled is False


def test_overrides(tmp_path):
    config = parse_config(
        {
            "base_dir": str(tmp_path),
            "database": {"filename": "wallet.db", "timeout": 2},
            "logging": {"level": "DEBUG"},
            "session": {"owner_id": "user-9"},
            "recurring": {"timezone": "Asia/Jakarta", "claim_before_insert": False},
            "receipts": {
                "enabled": True,
                "openai": {"api_key": "sk-test", "model": "gpt-4o"},
            },
        }
    )

    assert config.db_path == tmp_path / "db" / "wallet.db"
    assert config.log_dir == tmp_path / "logs"
    assert config.db_timeout == 2.0
    assert config.log_level == "DEBUG"
    assert config.owner_id == "user-9"
    assert config.timezone == "Asia/Jakarta"
    assert config.claim_before_insert is False
    assert config.receipts_enabled is True
    assert config.receipts_provider == "openai"
    assert config.receipts_openai_api_key == "sk-test"
    assert config.receipts_openai_model == "gpt-4o"


def test_explicit_data_dir(tmp_path):
    config = parse_config({"database": {"data_dir": str(tmp_path / "elsewhere")}})

    assert config.db_data_dir == Path(tmp_path / "elsewhere")
