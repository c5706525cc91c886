"""One-round negotiation endpoints.

``GET`` takes the offer histories as repeated query parameters
(``?user_amounts=100&user_amounts=150``); ``POST`` takes the same fields as JSON.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError as PydanticValidationError

from negotiator.api._authz import AuthenticatedCaller, require_m2m
from negotiator.core.enums import ApiScope
from negotiator.schemas.negotiation import NegotiationRequest, NegotiationResponse
from negotiator.services.negotiation_service import negotiate

router = APIRouter(tags=["negotiation"])


def _respond(payload: NegotiationRequest) -> NegotiationResponse:
    result = negotiate(
        user_amounts=payload.user_amounts,
        agent_amounts=payload.agent_amounts,
        user_amount=payload.user_amount,
        user_debt=payload.user_debt,
    )
    return NegotiationResponse(**result.as_dict())


@router.get("/negotiation", response_model=NegotiationResponse)
def negotiate_from_query(
    user_amount: float = Query(),
    user_debt: float = Query(),
    user_amounts: list[float] = Query(default=[]),
    agent_amounts: list[float] = Query(default=[]),
    caller: AuthenticatedCaller = Depends(require_m2m(ApiScope.NEGOTIATION)),
) -> NegotiationResponse:
    try:
        payload = NegotiationRequest(
            user_amounts=user_amounts,
            agent_amounts=agent_amounts,
            user_amount=user_amount,
            user_debt=user_debt,
        )
    except PydanticValidationError as exc:
        raise RequestValidationError(exc.errors(include_url=False)) from exc
    return _respond(payload)


@router.post("/negotiation", response_model=NegotiationResponse)
def negotiate_from_body(
    payload: NegotiationRequest,
    caller: AuthenticatedCaller = Depends(require_m2m(ApiScope.NEGOTIATION)),
) -> NegotiationResponse:
    return _respond(payload)
