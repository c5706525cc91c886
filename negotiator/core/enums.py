"""Canonical enum values shared by models, schemas, and services."""

from __future__ import annotations

import enum


class CallOutcome(str, enum.Enum):
    SUCCESS = "SUCCESS"
    PARTIAL = "PARTIAL"
    REFUSED = "REFUSED"

    @property
    def is_paying(self) -> bool:
        return self in (CallOutcome.SUCCESS, CallOutcome.PARTIAL)


class CallChannel(str, enum.Enum):
    VAPI = "VAPI"
    MANUAL = "MANUAL"
    INBOUND = "INBOUND"


class IntegrationStatus(str, enum.Enum):
    PENDING = "PENDING"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


class NegotiationStatus(str, enum.Enum):
    HAGGLE = "HAGGLE"
    STOP = "STOP"


class ApiScope(str, enum.Enum):
    USERINFO = "userinfo"
    NEGOTIATION = "negotiation"
    CALL_RESULT = "call_result"
    ADMIN = "admin"


class VapiFunction(str, enum.Enum):
    GET_USER_INFO = "getUserInfo"
    NEGOTIATE_PAYMENT = "negotiatePayment"
    SAVE_CALL_RESULT = "saveCallResult"
