"""API-key authentication against the api_credentials table."""

from __future__ import annotations

import logging

from sqlalchemy import or_
from sqlalchemy.orm import Session

from negotiator.core.security import verify_api_key
from negotiator.models import ApiCredential
from negotiator.models.base import utcnow

logger = logging.getLogger(__name__)


class ApiKeyAuthenticator:
    def __init__(self, db: Session) -> None:
        self.db = db

    def active_credentials(self) -> list[ApiCredential]:
        now = utcnow()
        return (
            self.db.query(ApiCredential)
            .filter(
                ApiCredential.is_active.is_(True),
                or_(ApiCredential.expires_at.is_(None), ApiCredential.expires_at > now),
            )
            .all()
        )

    def authenticate(self, api_key: str) -> ApiCredential | None:
        """Return the matching credential and record its use, or None."""
        if not api_key:
            return None
        for credential in self.active_credentials():
            if not verify_api_key(api_key, credential.key_hash):
                continue
            credential.last_used_at = utcnow()
            credential.request_count = ApiCredential.request_count + 1
            self.db.commit()
            self.db.refresh(credential)
            logger.info(
                "auth.api_key.authenticated",
                extra={"event": "auth.api_key.authenticated", "key_name": credential.name},
            )
            return credential
        return None
