"""Record completed negotiation calls and expose their history."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from negotiator.core.enums import CallChannel, CallOutcome
from negotiator.core.exceptions import DatabaseError, NotFoundError, ValidationError
from negotiator.models import CallSession, User
from negotiator.models.base import utcnow
from negotiator.schemas.call_results import CallSessionAnalytics
from negotiator.schemas.integrations import Integrations
from negotiator.services.base_service import BaseService
from negotiator.services.invoice_dispatcher import InvoiceDispatcher
from negotiator.services.invoice_renderer import InvoiceData
from negotiator.services.negotiation_service import MAX_ROUNDS, TARGET_MULTIPLIER, success_rate
from negotiator.utils.ids import prefixed_id

logger = logging.getLogger(__name__)


def calculate_debt_after(outcome: CallOutcome, current_debt: float, payment_amount: float) -> float:
    if outcome == CallOutcome.REFUSED:
        return current_debt
    return max(0.0, current_debt - payment_amount)


@dataclass(frozen=True)
class CallResultCommand:
    user_id: str
    outcome: CallOutcome
    initial_amount: float
    final_amount: float
    debt: float
    channel: CallChannel = CallChannel.MANUAL
    external_session_id: str | None = None
    user_amounts: list[float] = field(default_factory=list)
    agent_amounts: list[float] = field(default_factory=list)


@dataclass(frozen=True)
class CallSessionRecord:
    session: CallSession
    integrations: Integrations

    @property
    def invoice_generated(self) -> bool:
        return self.integrations.invoice.succeeded

    @property
    def email_sent(self) -> bool:
        return self.integrations.email.succeeded


def build_negotiation_data(command: CallResultCommand) -> dict[str, Any]:
    if command.user_amounts:
        user_amounts = list(command.user_amounts)
        agent_amounts = list(command.agent_amounts)
    else:
        user_amounts = [command.initial_amount, command.final_amount]
        agent_amounts = []

    rounds = [
        {"round": index, "user_offer": user_offer, "agent_counter": agent_counter}
        for index, (user_offer, agent_counter) in enumerate(zip(user_amounts, agent_amounts), start=1)
    ]
    return {
        "user_amounts": user_amounts,
        "agent_amounts": agent_amounts,
        "rounds": rounds,
        "target_amount": min(command.initial_amount * TARGET_MULTIPLIER, command.debt),
        "negotiation_strategy": command.channel.value.lower(),
        "metadata": {"max_rounds": MAX_ROUNDS, "target_multiplier": TARGET_MULTIPLIER},
    }


class CallSessionService(BaseService):
    """Write path for call outcomes plus read-side queries over sessions."""

    def __init__(self, db: Session, dispatcher: InvoiceDispatcher, invoice_due_days: int = 7) -> None:
        super().__init__(db)
        self.dispatcher = dispatcher
        self.invoice_due_days = invoice_due_days

    def record_call_result(self, command: CallResultCommand) -> CallSessionRecord:
        user = self.db.get(User, command.user_id)
        if user is None:
            raise NotFoundError("User not found")
        if command.debt > float(user.total_debt):
            raise ValidationError("debt exceeds the user's total debt")

        debt_after = calculate_debt_after(command.outcome, command.debt, command.final_amount)
        prefix = "VAPI" if command.channel == CallChannel.VAPI else "SESSION"
        external_session_id = command.external_session_id or prefixed_id(prefix)
        integrations = Integrations.initial(external_session_id)

        if command.outcome.is_paying and user.email:
            today = utcnow().date()
            invoice_data = InvoiceData(
                user_id=user.id,
                user_name=user.name,
                user_email=user.email,
                phone_number=user.phone_number,
                amount=command.final_amount,
                debt_before=command.debt,
                debt_after=debt_after,
                invoice_date=today,
                due_date=today + timedelta(days=self.invoice_due_days),
            )
            integrations = self.dispatcher.dispatch(invoice_data, integrations)

        now = utcnow()
        session = CallSession(
            user_id=user.id,
            external_session_id=external_session_id,
            call_channel=command.channel,
            outcome=command.outcome,
            started_at=now,
            ended_at=now,
            initial_offer=command.initial_amount,
            final_amount=command.final_amount,
            debt_before=command.debt,
            debt_after=debt_after,
            negotiation_data=build_negotiation_data(command),
            integrations=integrations.model_dump(mode="json"),
            success_rate=success_rate(command.initial_amount, command.final_amount),
        )
        self.db.add(session)
        try:
            self.commit()
        except SQLAlchemyError as exc:
            logger.exception(
                "call_result.persist_failed",
                extra={"event": "call_result.persist_failed", "user_id": command.user_id},
            )
            raise DatabaseError("Failed to save call result") from exc
        self.db.refresh(session)

        logger.info(
            "call_result.recorded",
            extra={
                "event": "call_result.recorded",
                "user_id": user.id,
                "session_id": session.id,
                "outcome": command.outcome.value,
                "final_amount": command.final_amount,
                "debt_after": debt_after,
                "invoice_status": integrations.invoice.status.value,
                "email_status": integrations.email.status.value,
            },
        )
        return CallSessionRecord(session=session, integrations=integrations)

    def get_session(self, session_id: str) -> CallSession | None:
        return self.db.get(CallSession, session_id)

    def list_sessions(
        self,
        user_id: str | None = None,
        outcome: CallOutcome | None = None,
        limit: int = 50,
    ) -> list[CallSession]:
        query = self.db.query(CallSession)
        if user_id:
            query = query.filter(CallSession.user_id == user_id)
        if outcome:
            query = query.filter(CallSession.outcome == outcome)
        return query.order_by(CallSession.started_at.desc()).limit(limit).all()

    def analytics(self) -> CallSessionAnalytics:
        rows = (
            self.db.query(CallSession.outcome, func.count(CallSession.id))
            .group_by(CallSession.outcome)
            .all()
        )
        outcomes = {outcome.value: 0 for outcome in CallOutcome}
        for outcome, count in rows:
            if outcome is not None:
                outcomes[CallOutcome(outcome).value] = count
        total = sum(outcomes.values())

        paying = (CallOutcome.SUCCESS, CallOutcome.PARTIAL)
        collected, average_rate = (
            self.db.query(func.sum(CallSession.final_amount), func.avg(CallSession.success_rate))
            .filter(CallSession.outcome.in_(paying))
            .one()
        )
        paid = outcomes[CallOutcome.SUCCESS.value] + outcomes[CallOutcome.PARTIAL.value]
        return CallSessionAnalytics(
            total_sessions=total,
            outcomes=outcomes,
            paid_sessions=paid,
            payment_rate=round(paid / total * 100, 2) if total else 0.0,
            collected_total=round(float(collected or 0), 2),
            average_success_rate=round(float(average_rate or 0), 2),
        )
