"""Startup validation and bootstrap helpers."""

from __future__ import annotations

import logging

from sqlalchemy.engine import Engine

from negotiator.core.config import Config
from negotiator.core.logging_config import configure_logging
from negotiator.database.db import verify_database_connection

logger = logging.getLogger(__name__)


def validate_startup(config: Config, engine: Engine) -> bool:
    """Fail-fast connectivity check; returns whether the store answered."""
    database_ok = verify_database_connection(engine)
    if not database_ok and config.DB_CONNECTIVITY_REQUIRED:
        raise RuntimeError("Database connectivity check failed.")
    if not database_ok:
        logger.warning(
            "startup.database.connectivity_optional_failed",
            extra={"event": "startup.database.connectivity_optional_failed"},
        )

    if config.is_production and config.DATABASE_URL.startswith("sqlite"):
        logger.warning(
            "startup.production.sqlite_detected",
            extra={"event": "startup.production.sqlite_detected"},
        )

    logger.info(
        "startup.config.validated",
        extra={
            "event": "startup.config.validated",
            "env": config.ENV,
            "database_url_scheme": config.DATABASE_URL.split("://", 1)[0],
            "db_connectivity_required": config.DB_CONNECTIVITY_REQUIRED,
            "invoice_rendering": "remote" if config.invoice_rendering_enabled else "local",
            "smtp_sandbox": config.SMTP_SANDBOX_MODE,
        },
    )
    return database_ok


def bootstrap(config: Config, engine: Engine) -> bool:
    """Initialize logging and validate runtime configuration."""
    configure_logging(config)
    return validate_startup(config, engine)
