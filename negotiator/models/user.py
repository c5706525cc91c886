"""User (debtor) model module."""

from __future__ import annotations

from sqlalchemy import CheckConstraint, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from negotiator.models.base import AuditMixin, Base, Money, UUIDPrimaryKeyMixin


class User(Base, UUIDPrimaryKeyMixin, AuditMixin):
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("total_debt >= 0", name="ck_users_total_debt_non_negative"),
        CheckConstraint("remaining_debt >= 0", name="ck_users_remaining_debt_non_negative"),
        CheckConstraint("remaining_debt <= total_debt", name="ck_users_debt_consistency"),
        Index("idx_users_remaining_debt", "remaining_debt"),
    )

    phone_number: Mapped[str] = mapped_column(String(20), unique=True, index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(320))
    total_debt: Mapped[float] = mapped_column(Money, nullable=False)
    remaining_debt: Mapped[float] = mapped_column(Money, nullable=False)

    call_sessions = relationship("CallSession", back_populates="user")
