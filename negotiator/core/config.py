"""Configuration module for the negotiator application."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from urllib.parse import urlparse

from dotenv import load_dotenv

from negotiator.core.exceptions import ConfigurationError

load_dotenv()

PLACEHOLDER_JWT_SECRET = "change_me_m2m_secret"


def _as_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _as_list(value: str | None) -> tuple[str, ...]:
    if not value:
        return ()
    return tuple(item.strip() for item in value.split(",") if item.strip())


@dataclass(frozen=True)
class Config:
    """Runtime configuration with validation."""

    APP_NAME: str
    APP_VERSION: str
    ENV: str
    DEBUG: bool
    DATABASE_URL: str
    DB_POOL_SIZE: int
    DB_MAX_OVERFLOW: int
    DB_CONNECTIVITY_REQUIRED: bool
    JWT_M2M_SECRET: str
    JWT_M2M_TTL_HOURS: int
    VAPI_WEBHOOK_SECRET: str | None
    INVOICE_RENDER_URL: str
    INVOICE_RENDER_API_KEY: str | None
    INVOICE_TEMPLATE_ID: str | None
    INVOICE_DUE_DAYS: int
    HTTP_TIMEOUT_SECONDS: int
    SMTP_SERVER: str | None
    SMTP_PORT: int
    SMTP_USERNAME: str | None
    SMTP_PASSWORD: str | None
    SMTP_FROM_EMAIL: str
    SMTP_USE_TLS: bool
    SMTP_SANDBOX_MODE: bool
    API_HOST: str
    API_PORT: int
    LOG_LEVEL: str
    LOG_FILE: str
    CORS_ORIGINS: tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_production(self) -> bool:
        return self.ENV == "production"

    @property
    def invoice_rendering_enabled(self) -> bool:
        return bool(self.INVOICE_RENDER_API_KEY and self.INVOICE_TEMPLATE_ID)


def _build_config(env: str | None = None) -> Config:
    resolved_env = (env or os.getenv("ENV", "development")).strip().lower()
    debug = _as_bool(os.getenv("DEBUG"), default=False)

    config = Config(
        APP_NAME=os.getenv("APP_NAME", "Debt Negotiation API"),
        APP_VERSION=os.getenv("APP_VERSION", "1.0.0"),
        ENV=resolved_env,
        DEBUG=debug if resolved_env != "production" else False,
        DATABASE_URL=os.getenv("DATABASE_URL", "sqlite:///./negotiator.db"),
        DB_POOL_SIZE=int(os.getenv("DB_POOL_SIZE", "10")),
        DB_MAX_OVERFLOW=int(os.getenv("DB_MAX_OVERFLOW", "20")),
        DB_CONNECTIVITY_REQUIRED=_as_bool(
            os.getenv("DB_CONNECTIVITY_REQUIRED"), default=(resolved_env == "production")
        ),
        JWT_M2M_SECRET=os.getenv("JWT_M2M_SECRET", PLACEHOLDER_JWT_SECRET),
        JWT_M2M_TTL_HOURS=int(os.getenv("JWT_M2M_TTL_HOURS", "24")),
        VAPI_WEBHOOK_SECRET=os.getenv("VAPI_WEBHOOK_SECRET"),
        INVOICE_RENDER_URL=os.getenv("INVOICE_RENDER_URL", "https://api.carbone.io").rstrip("/"),
        INVOICE_RENDER_API_KEY=os.getenv("INVOICE_RENDER_API_KEY"),
        INVOICE_TEMPLATE_ID=os.getenv("INVOICE_TEMPLATE_ID"),
        INVOICE_DUE_DAYS=int(os.getenv("INVOICE_DUE_DAYS", "7")),
        HTTP_TIMEOUT_SECONDS=int(os.getenv("HTTP_TIMEOUT_SECONDS", "30")),
        SMTP_SERVER=os.getenv("SMTP_SERVER"),
        SMTP_PORT=int(os.getenv("SMTP_PORT", "587")),
        SMTP_USERNAME=os.getenv("SMTP_USERNAME"),
        SMTP_PASSWORD=os.getenv("SMTP_PASSWORD"),
        SMTP_FROM_EMAIL=os.getenv("SMTP_FROM_EMAIL", "noreply@debtcollection.com"),
        SMTP_USE_TLS=_as_bool(os.getenv("SMTP_USE_TLS"), default=True),
        SMTP_SANDBOX_MODE=_as_bool(
            os.getenv("SMTP_SANDBOX_MODE"), default=(resolved_env != "production")
        ),
        API_HOST=os.getenv("API_HOST", "0.0.0.0"),
        API_PORT=int(os.getenv("API_PORT", "3000")),
        LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO").upper(),
        LOG_FILE=os.getenv("LOG_FILE", ""),
        CORS_ORIGINS=_as_list(os.getenv("CORS_ORIGINS", "*")),
    )
    validate_config(config)
    return config


def _validate_database_url(database_url: str) -> None:
    parsed = urlparse(database_url)
    if parsed.scheme not in {"sqlite", "postgresql", "postgresql+psycopg2"}:
        raise ConfigurationError(
            "DATABASE_URL must use sqlite:// or postgresql:// style URL."
        )
    if parsed.scheme.startswith("postgresql") and not parsed.hostname:
        raise ConfigurationError("PostgreSQL DATABASE_URL is missing hostname.")


def validate_config(config: Config) -> None:
    _validate_database_url(config.DATABASE_URL)

    if config.DB_POOL_SIZE < 1:
        raise ConfigurationError("DB_POOL_SIZE must be >= 1.")
    if config.DB_MAX_OVERFLOW < 0:
        raise ConfigurationError("DB_MAX_OVERFLOW must be >= 0.")
    if config.JWT_M2M_TTL_HOURS < 1:
        raise ConfigurationError("JWT_M2M_TTL_HOURS must be >= 1.")
    if config.HTTP_TIMEOUT_SECONDS < 1:
        raise ConfigurationError("HTTP_TIMEOUT_SECONDS must be >= 1.")
    if config.INVOICE_DUE_DAYS < 0:
        raise ConfigurationError("INVOICE_DUE_DAYS must be >= 0.")
    if config.LOG_LEVEL not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
        raise ConfigurationError("LOG_LEVEL must be one of DEBUG/INFO/WARNING/ERROR/CRITICAL.")
    if config.is_production:
        if config.JWT_M2M_SECRET == PLACEHOLDER_JWT_SECRET:
            raise ConfigurationError("Production JWT_M2M_SECRET uses the placeholder value.")
        if not config.VAPI_WEBHOOK_SECRET:
            raise ConfigurationError("Production requires VAPI_WEBHOOK_SECRET.")


@lru_cache(maxsize=8)
def get_config(env: str | None = None) -> Config:
    """Get validated configuration for the requested environment."""
    return _build_config(env)
