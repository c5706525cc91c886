from __future__ import annotations

from dataclasses import replace

import pytest

from negotiator.core.config import PLACEHOLDER_JWT_SECRET, _build_config, validate_config
from negotiator.core.exceptions import ConfigurationError


def test_development_defaults(monkeypatch):
    for name in ("DATABASE_URL", "API_PORT", "SMTP_SANDBOX_MODE", "JWT_M2M_SECRET", "CORS_ORIGINS"):
        monkeypatch.delenv(name, raising=False)
    config = _build_config("development")
    assert config.DATABASE_URL.startswith("sqlite")
    assert config.API_PORT == 3000
    assert config.SMTP_SANDBOX_MODE
    assert not config.is_production
    assert config.CORS_ORIGINS == ("*",)


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("API_PORT", "8080")
    monkeypatch.setenv("CORS_ORIGINS", "https://a.example.com, https://b.example.com")
    monkeypatch.setenv("INVOICE_RENDER_API_KEY", "key")
    monkeypatch.setenv("INVOICE_TEMPLATE_ID", "tpl")
    config = _build_config("development")
    assert config.API_PORT == 8080
    assert config.CORS_ORIGINS == ("https://a.example.com", "https://b.example.com")
    assert config.invoice_rendering_enabled


def test_production_rejects_placeholder_secret(monkeypatch):
    monkeypatch.setenv("JWT_M2M_SECRET", PLACEHOLDER_JWT_SECRET)
    monkeypatch.setenv("VAPI_WEBHOOK_SECRET", "vapi")
    with pytest.raises(ConfigurationError, match="placeholder"):
        _build_config("production")


def test_production_requires_webhook_secret(test_config):
    config = replace(test_config, ENV="production", JWT_M2M_SECRET="real-secret", VAPI_WEBHOOK_SECRET=None)
    with pytest.raises(ConfigurationError, match="VAPI_WEBHOOK_SECRET"):
        validate_config(config)


def test_rejects_unsupported_database_url(test_config):
    with pytest.raises(ConfigurationError, match="DATABASE_URL"):
        validate_config(replace(test_config, DATABASE_URL="mysql://db/negotiator"))


def test_rejects_bad_log_level(test_config):
    with pytest.raises(ConfigurationError, match="LOG_LEVEL"):
        validate_config(replace(test_config, LOG_LEVEL="LOUD"))
