"""Pydantic schema package for API contracts."""

from negotiator.schemas.call_results import (
    CallResultRequest,
    CallResultResponse,
    CallSessionAnalytics,
    CallSessionResponse,
    VapiCallResultParams,
    VapiCallResultResponse,
    WorkflowResults,
)
from negotiator.schemas.integrations import IntegrationSlot, Integrations
from negotiator.schemas.negotiation import NegotiationRequest, NegotiationResponse
from negotiator.schemas.users import UnknownCallerResult, UserInfoQuery, UserInfoResponse
from negotiator.schemas.vapi import (
    GetUserInfoCall,
    NegotiatePaymentCall,
    SaveCallResultCall,
    UnknownFunctionCall,
    VapiEvent,
    VapiFunctionCallRequest,
    parse_function_call,
)

__all__ = [
    "CallResultRequest",
    "CallResultResponse",
    "CallSessionAnalytics",
    "CallSessionResponse",
    "GetUserInfoCall",
    "IntegrationSlot",
    "Integrations",
    "NegotiatePaymentCall",
    "NegotiationRequest",
    "NegotiationResponse",
    "SaveCallResultCall",
    "UnknownCallerResult",
    "UnknownFunctionCall",
    "UserInfoQuery",
    "UserInfoResponse",
    "VapiCallResultParams",
    "VapiCallResultResponse",
    "VapiEvent",
    "VapiFunctionCallRequest",
    "WorkflowResults",
    "parse_function_call",
]
