"""User lookup request/response schemas."""

from __future__ import annotations

from pydantic import BaseModel, Field

UNKNOWN_CALLER_NAME = "valued customer"


class UserInfoQuery(BaseModel):
    phone_number: str = Field(min_length=1, max_length=20)


class UserInfoResponse(BaseModel):
    user_id: str
    name: str
    phone_number: str
    email: str | None = None
    debt: float


class UnknownCallerResult(BaseModel):
    """Returned to the voice platform instead of a hard failure mid-call."""

    user_id: None = None
    name: str = UNKNOWN_CALLER_NAME
    debt: float = 0
    error: str = "User not found in our system"
