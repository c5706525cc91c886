"""Shared base for services that work inside a request's session."""

from __future__ import annotations

from sqlalchemy.orm import Session


class BaseService:
    """Holds the session; callers own its lifetime."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def commit(self) -> None:
        """Commit current transaction and rollback on failure."""
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
