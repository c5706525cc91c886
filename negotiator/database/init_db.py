"""Apply migrations to the configured database.

Run with ``python -m negotiator.database.init_db``.
"""

from __future__ import annotations

import logging
from pathlib import Path

from alembic import command
from alembic.config import Config as AlembicConfig

from negotiator.core.config import Config, get_config
from negotiator.core.startup import bootstrap
from negotiator.database.db import build_engine

PROJECT_ROOT = Path(__file__).resolve().parents[2]

logger = logging.getLogger(__name__)


def build_alembic_config(database_url: str) -> AlembicConfig:
    cfg = AlembicConfig(str(PROJECT_ROOT / "alembic.ini"))
    cfg.set_main_option("script_location", str(PROJECT_ROOT / "migrations"))
    cfg.set_main_option("sqlalchemy.url", database_url)
    cfg.attributes["database_url_overridden"] = True
    cfg.attributes["configure_logger"] = False
    return cfg


def init_db(config: Config | None = None) -> None:
    cfg = config or get_config()
    bootstrap(cfg, build_engine(cfg))
    command.upgrade(build_alembic_config(cfg.DATABASE_URL), "head")
    logger.info(
        "database.migrations.applied",
        extra={"event": "database.migrations.applied", "database_url_scheme": cfg.DATABASE_URL.split("://", 1)[0]},
    )


if __name__ == "__main__":
    init_db()
