"""Tests for environment configuration"""
import pytest

from marketplace.config import DEFAULT_CONTRACT_ADDRESS, load_settings


def test_defaults(monkeypatch):
    monkeypatch.delenv("MARKETPLACE_CONTRACT_ADDRESS", raising=False)
    monkeypatch.delenv("MARKETPLACE_CHAIN_ID", raising=False)
    monkeypatch.delenv("GAS_MARGIN_PERCENT", raising=False)

    settings = load_settings()

    assert settings.contract_address == DEFAULT_CONTRACT_ADDRESS
    assert settings.chain_id == 10143
    assert settings.gas_margin_percent == 20


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("MARKETPLACE_CONTRACT_ADDRESS", "0x" + "1" * 40)
    monkeypatch.setenv("MARKETPLACE_CHAIN_ID", "31337")
    monkeypatch.setenv("READ_RETRY_ATTEMPTS", "5")

    settings = load_settings()

    assert settings.contract_address == "0x" + "1" * 40
    assert settings.chain_id == 31337
    assert settings.read_retry_attempts == 5


def test_invalid_integer(monkeypatch):
    monkeypatch.setenv("MARKETPLACE_CHAIN_ID", "monad")

    with pytest.raises(ValueError):
        load_settings()


def test_retry_attempts_must_be_positive(monkeypatch):
    monkeypatch.setenv("READ_RETRY_ATTEMPTS", "0")

    with pytest.raises(ValueError):
        load_settings()


def test_explorer_tx_url(settings):
    assert settings.explorer_tx_url("0xabc") == "https://explorer.monad.xyz/tx/0xabc"
