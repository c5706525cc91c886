"""Database engine and session management."""

from __future__ import annotations

import logging
from collections.abc import Generator
from contextlib import contextmanager

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from negotiator.core.config import Config

logger = logging.getLogger(__name__)


def build_engine(config: Config) -> Engine:
    """Create a pooled engine for the configured database."""
    if config.DATABASE_URL.startswith("sqlite"):
        return create_engine(
            config.DATABASE_URL,
            echo=config.DEBUG,
            connect_args={"check_same_thread": False},
        )
    return create_engine(
        config.DATABASE_URL,
        echo=config.DEBUG,
        pool_pre_ping=True,
        pool_recycle=3600,
        pool_size=config.DB_POOL_SIZE,
        max_overflow=config.DB_MAX_OVERFLOW,
        pool_timeout=2,
    )


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@contextmanager
def session_scope(session_factory: sessionmaker[Session]) -> Generator[Session, None, None]:
    """Context-manager wrapper for safe DB session lifecycle."""
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


def verify_database_connection(engine: Engine) -> bool:
    """Run a trivial query to confirm the store is reachable."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as exc:
        logger.error(
            "database.connection_failed",
            extra={"event": "database.connection_failed", "error": str(exc)},
        )
        return False
