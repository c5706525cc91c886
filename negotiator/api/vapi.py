"""Voice-platform function-call and event webhook endpoints.

Every function-call route answers 200 with the ``{"results": [...]}``
envelope, carrying an ``error`` entry instead of an HTTP failure, because the
assistant is mid-call and cannot recover from a transport error.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import ValidationError as PydanticValidationError

from negotiator.api._authz import require_vapi_secret
from negotiator.core.dependencies import get_call_session_service, get_user_service
from negotiator.core.enums import CallChannel, VapiFunction
from negotiator.core.exceptions import NotFoundError
from negotiator.schemas.call_results import VapiCallResultResponse, WorkflowResults
from negotiator.schemas.users import UnknownCallerResult
from negotiator.schemas.vapi import (
    GetUserInfoCall,
    NegotiatePaymentCall,
    SaveCallResultCall,
    VapiEvent,
    VapiFunctionCallRequest,
    function_error,
    function_result,
    parse_function_call,
)
from negotiator.services.call_session_service import CallResultCommand, CallSessionService
from negotiator.services.negotiation_service import negotiate
from negotiator.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/vapi", tags=["vapi"], dependencies=[Depends(require_vapi_secret)])

_EVENT_NAMES = {
    "call-started": "vapi.event.call_started",
    "call-ended": "vapi.event.call_ended",
    "function-called": "vapi.event.function_called",
    "transcript-complete": "vapi.event.transcript_complete",
    "analysis-complete": "vapi.event.analysis_complete",
}


def _get_user_info(call: GetUserInfoCall, users: UserService) -> dict[str, Any]:
    user = users.get_by_phone(call.parameters.phone_number)
    if user is None:
        logger.warning(
            "vapi.user.unknown_caller",
            extra={"event": "vapi.user.unknown_caller", "phone_number": call.parameters.phone_number},
        )
        return function_result(call.name, UnknownCallerResult().model_dump())
    return function_result(call.name, users.to_info(user).model_dump())


def _negotiate_payment(call: NegotiatePaymentCall) -> dict[str, Any]:
    params = call.parameters
    result = negotiate(
        user_amounts=params.user_amounts,
        agent_amounts=params.agent_amounts,
        user_amount=params.user_amount,
        user_debt=params.user_debt,
    )
    return function_result(call.name, result.as_dict())


def _save_call_result(call: SaveCallResultCall, calls: CallSessionService) -> dict[str, Any]:
    params = call.parameters
    try:
        record = calls.record_call_result(
            CallResultCommand(
                user_id=params.user_id,
                outcome=params.status,
                initial_amount=params.initial_amount,
                final_amount=params.final_amount,
                debt=params.debt,
                channel=CallChannel.VAPI,
                external_session_id=params.session_id or params.phone_number,
                user_amounts=params.user_amounts,
                agent_amounts=params.agent_amounts,
            )
        )
    except NotFoundError:
        return function_error(call.name, "User not found")
    except Exception:
        logger.exception(
            "vapi.save_result.failed",
            extra={"event": "vapi.save_result.failed", "user_id": params.user_id},
        )
        return function_error(call.name, "Failed to save call result")

    response = VapiCallResultResponse(
        status=params.status,
        final_amount=params.final_amount,
        debt_left=float(record.session.debt_after),
        session_id=record.session.id,
        workflows=WorkflowResults(
            invoice_generated=record.invoice_generated,
            email_sent=record.email_sent,
        ),
    )
    return function_result(call.name, response.model_dump(mode="json"))


def _handle(
    name: str | None,
    parameters: dict[str, Any],
    users: UserService,
    calls: CallSessionService,
) -> dict[str, Any]:
    try:
        call = parse_function_call(name, parameters)
    except PydanticValidationError as exc:
        logger.warning(
            "vapi.function_call.invalid_parameters",
            extra={"event": "vapi.function_call.invalid_parameters", "function": name, "errors": exc.errors(include_url=False)},
        )
        return function_error(name, f"Invalid parameters for {name}")

    logger.info("vapi.function_call", extra={"event": "vapi.function_call", "function": call.name})
    try:
        if isinstance(call, GetUserInfoCall):
            return _get_user_info(call, users)
        if isinstance(call, NegotiatePaymentCall):
            return _negotiate_payment(call)
        if isinstance(call, SaveCallResultCall):
            return _save_call_result(call, calls)
    except Exception:
        logger.exception("vapi.function_call.failed", extra={"event": "vapi.function_call.failed", "function": call.name})
        return function_error(call.name, f"Failed to process {call.name}")

    logger.warning("vapi.function_call.unknown", extra={"event": "vapi.function_call.unknown", "function": call.name})
    return function_error(call.name, f"Unknown function: {call.name}")


@router.post("/get-user-info")
def vapi_get_user_info(
    payload: VapiFunctionCallRequest,
    users: UserService = Depends(get_user_service),
    calls: CallSessionService = Depends(get_call_session_service),
) -> dict:
    parameters = payload.message.functionCall.parameters
    return _handle(VapiFunction.GET_USER_INFO.value, parameters, users, calls)


@router.post("/negotiate")
def vapi_negotiate(
    payload: VapiFunctionCallRequest,
    users: UserService = Depends(get_user_service),
    calls: CallSessionService = Depends(get_call_session_service),
) -> dict:
    parameters = payload.message.functionCall.parameters
    return _handle(VapiFunction.NEGOTIATE_PAYMENT.value, parameters, users, calls)


@router.post("/save-result")
def vapi_save_result(
    payload: VapiFunctionCallRequest,
    users: UserService = Depends(get_user_service),
    calls: CallSessionService = Depends(get_call_session_service),
) -> dict:
    parameters = payload.message.functionCall.parameters
    return _handle(VapiFunction.SAVE_CALL_RESULT.value, parameters, users, calls)


@router.post("/function-call")
def vapi_function_call(
    payload: VapiFunctionCallRequest,
    users: UserService = Depends(get_user_service),
    calls: CallSessionService = Depends(get_call_session_service),
) -> dict:
    function_call = payload.message.functionCall
    return _handle(function_call.name, function_call.parameters, users, calls)


@router.post("/webhook")
def vapi_webhook(event: VapiEvent) -> dict:
    call = event.call or {}
    extra = event.model_extra or {}
    event_name = _EVENT_NAMES.get(event.type or "")
    fields: dict[str, Any] = {"event_type": event.type, "call_id": call.get("id")}

    if event.type == "call-started":
        fields["phone_number"] = (call.get("customer") or {}).get("number")
    elif event.type == "call-ended":
        fields["duration"] = call.get("duration")
        fields["ended_reason"] = call.get("endedReason")
    elif event.type == "function-called":
        fields["function"] = (extra.get("functionCall") or {}).get("name")
    elif event.type == "analysis-complete":
        fields["analysis"] = extra.get("analysis")

    if event_name is None:
        logger.debug("vapi.event.unhandled", extra={"event": "vapi.event.unhandled", **fields})
    else:
        logger.info(event_name, extra={"event": event_name, **fields})
    return {"received": True}
