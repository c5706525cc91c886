"""Read-side call session history and analytics (admin scope)."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from negotiator.api._authz import AuthenticatedCaller, require_m2m
from negotiator.core.dependencies import get_call_session_service
from negotiator.core.enums import ApiScope, CallOutcome
from negotiator.core.exceptions import NotFoundError
from negotiator.schemas.call_results import CallSessionAnalytics, CallSessionResponse
from negotiator.services.call_session_service import CallSessionService

router = APIRouter(prefix="/call-sessions", tags=["call-sessions"])


@router.get("")
def list_call_sessions(
    user_id: str | None = Query(default=None, max_length=36),
    outcome: CallOutcome | None = Query(default=None),
    limit: int = Query(default=50, ge=1, le=500),
    caller: AuthenticatedCaller = Depends(require_m2m(ApiScope.ADMIN)),
    service: CallSessionService = Depends(get_call_session_service),
) -> dict:
    sessions = service.list_sessions(user_id=user_id, outcome=outcome, limit=limit)
    return {
        "items": [CallSessionResponse.model_validate(session).model_dump(mode="json") for session in sessions],
        "total": len(sessions),
        "limit": limit,
    }


@router.get("/analytics", response_model=CallSessionAnalytics)
def call_session_analytics(
    caller: AuthenticatedCaller = Depends(require_m2m(ApiScope.ADMIN)),
    service: CallSessionService = Depends(get_call_session_service),
) -> CallSessionAnalytics:
    return service.analytics()


@router.get("/{session_id}", response_model=CallSessionResponse)
def get_call_session(
    session_id: str,
    caller: AuthenticatedCaller = Depends(require_m2m(ApiScope.ADMIN)),
    service: CallSessionService = Depends(get_call_session_service),
) -> CallSessionResponse:
    session = service.get_session(session_id)
    if session is None:
        raise NotFoundError(f"Call session not found: {session_id}")
    return CallSessionResponse.model_validate(session)
