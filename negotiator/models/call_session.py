"""Call session model module."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import (
    JSON,
    CheckConstraint,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    String,
    event,
    text,
    update,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from negotiator.core.enums import CallChannel, CallOutcome
from negotiator.models.base import AuditMixin, Base, Money, UUIDPrimaryKeyMixin, utcnow
from negotiator.models.user import User

JSONDocument = JSON().with_variant(JSONB(), "postgresql")


class CallSession(Base, UUIDPrimaryKeyMixin, AuditMixin):
    __tablename__ = "call_sessions"
    __table_args__ = (
        CheckConstraint("initial_offer >= 0", name="ck_call_sessions_initial_offer_non_negative"),
        CheckConstraint("final_amount >= 0", name="ck_call_sessions_final_amount_non_negative"),
        CheckConstraint("debt_before >= 0", name="ck_call_sessions_debt_before_non_negative"),
        CheckConstraint("debt_after >= 0", name="ck_call_sessions_debt_after_non_negative"),
        CheckConstraint("debt_after <= debt_before", name="ck_call_sessions_financial_consistency"),
        CheckConstraint(
            "(outcome = 'REFUSED' AND final_amount = 0) OR "
            "(outcome IN ('SUCCESS', 'PARTIAL') AND final_amount > 0)",
            name="ck_call_sessions_outcome_amount_consistency",
        ),
        Index("idx_call_sessions_user_outcome", "user_id", "outcome"),
        Index("idx_call_sessions_started_at", "started_at"),
        Index("idx_call_sessions_external_session", "external_session_id"),
        Index("idx_call_sessions_channel_outcome", "call_channel", "outcome"),
        # At most one open (not yet ended) session per user.
        Index(
            "idx_active_call_sessions",
            "user_id",
            unique=True,
            postgresql_where=text("ended_at IS NULL"),
            sqlite_where=text("ended_at IS NULL"),
        ),
    )

    user_id: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="RESTRICT"), nullable=False)
    external_session_id: Mapped[str] = mapped_column(String(100), nullable=False)
    call_channel: Mapped[CallChannel] = mapped_column(
        Enum(CallChannel, name="call_channel"), default=CallChannel.VAPI, nullable=False
    )
    started_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    ended_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    outcome: Mapped[CallOutcome | None] = mapped_column(Enum(CallOutcome, name="call_outcome"))
    initial_offer: Mapped[float] = mapped_column(Money, nullable=False)
    final_amount: Mapped[float] = mapped_column(Money, nullable=False)
    debt_before: Mapped[float] = mapped_column(Money, nullable=False)
    debt_after: Mapped[float] = mapped_column(Money, nullable=False)
    negotiation_data: Mapped[dict[str, Any]] = mapped_column(JSONDocument, default=dict, nullable=False)
    integrations: Mapped[dict[str, Any]] = mapped_column(JSONDocument, default=dict, nullable=False)
    success_rate: Mapped[float] = mapped_column(Money, default=0, nullable=False)

    user = relationship("User", back_populates="call_sessions")

    @property
    def duration_seconds(self) -> int | None:
        if self.ended_at is None or self.started_at is None:
            return None
        return int((self.ended_at - self.started_at).total_seconds())


@event.listens_for(CallSession, "after_insert")
def propagate_debt_after(mapper, connection, target: CallSession) -> None:
    """Copy a paying session's debt_after onto its user within the same transaction."""
    if target.outcome is None or not CallOutcome(target.outcome).is_paying:
        return
    connection.execute(
        update(User.__table__)
        .where(User.__table__.c.id == target.user_id)
        .values(remaining_debt=target.debt_after, updated_at=utcnow())
    )
