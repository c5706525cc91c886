"""Integration tracking record stored on each call session."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field

from negotiator.core.enums import IntegrationStatus


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class IntegrationSlot(BaseModel):
    status: IntegrationStatus = IntegrationStatus.PENDING
    external_id: str | None = None
    url: str | None = None
    timestamp: str | None = None
    recipient: str | None = None
    error: str | None = None

    def succeed(self, external_id: str | None, **fields: str | None) -> None:
        self.status = IntegrationStatus.SUCCESS
        self.external_id = external_id
        self.timestamp = _now_iso()
        self.error = None
        for key, value in fields.items():
            setattr(self, key, value)

    def fail(self, error: str) -> None:
        self.status = IntegrationStatus.FAILED
        self.timestamp = _now_iso()
        self.error = error

    @property
    def succeeded(self) -> bool:
        return self.status == IntegrationStatus.SUCCESS


class Integrations(BaseModel):
    invoice: IntegrationSlot = Field(default_factory=IntegrationSlot)
    email: IntegrationSlot = Field(default_factory=IntegrationSlot)
    crm: IntegrationSlot = Field(default_factory=IntegrationSlot)

    @classmethod
    def initial(cls, session_id: str) -> "Integrations":
        """Invoice and email start PENDING; the session row itself is the CRM record."""
        integrations = cls()
        integrations.crm.succeed(session_id)
        return integrations
