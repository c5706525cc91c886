"""Final call outcome endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from negotiator.api._authz import AuthenticatedCaller, require_m2m
from negotiator.core.dependencies import get_call_session_service
from negotiator.core.enums import ApiScope, CallChannel
from negotiator.schemas.call_results import CallResultRequest, CallResultResponse
from negotiator.services.call_session_service import CallResultCommand, CallSessionService

router = APIRouter(tags=["call-results"])


@router.post("/call_result", response_model=CallResultResponse)
def save_call_result(
    payload: CallResultRequest,
    caller: AuthenticatedCaller = Depends(require_m2m(ApiScope.CALL_RESULT)),
    service: CallSessionService = Depends(get_call_session_service),
) -> CallResultResponse:
    record = service.record_call_result(
        CallResultCommand(
            user_id=payload.user_id,
            outcome=payload.status,
            initial_amount=payload.initial_amount,
            final_amount=payload.final_amount,
            debt=payload.debt,
            channel=CallChannel.MANUAL,
        )
    )
    return CallResultResponse(
        status=payload.status,
        final_amount=payload.final_amount,
        debt_left=float(record.session.debt_after),
        invoice_id=record.integrations.invoice.external_id,
        email_sent=record.email_sent,
        session_id=record.session.id,
    )
