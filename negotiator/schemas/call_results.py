"""Call result and call session schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from negotiator.core.enums import CallChannel, CallOutcome


class CallResultRequest(BaseModel):
    user_id: str = Field(min_length=1, max_length=36)
    status: CallOutcome
    initial_amount: float = Field(ge=0)
    final_amount: float = Field(ge=0)
    debt: float = Field(ge=0)

    @model_validator(mode="after")
    def outcome_matches_amount(self) -> "CallResultRequest":
        if self.status == CallOutcome.REFUSED and self.final_amount != 0:
            raise ValueError("final_amount must be 0 when status is REFUSED")
        if self.status != CallOutcome.REFUSED and self.final_amount <= 0:
            raise ValueError("final_amount must be greater than 0 when a payment was agreed")
        return self


class VapiCallResultParams(CallResultRequest):
    """Voice-platform variant; may also carry the call's offer history."""

    session_id: str | None = Field(default=None, max_length=100)
    phone_number: str | None = Field(default=None, max_length=20)
    user_amounts: list[float] = Field(default_factory=list)
    agent_amounts: list[float] = Field(default_factory=list)


class CallResultResponse(BaseModel):
    status: CallOutcome
    final_amount: float
    debt_left: float
    invoice_id: str | None = None
    # Reserved: invoices are attached to the email, never hosted.
    invoice_url: str | None = None
    email_sent: bool
    session_id: str


class WorkflowResults(BaseModel):
    invoice_generated: bool
    email_sent: bool
    crm_updated: bool = True


class VapiCallResultResponse(BaseModel):
    success: bool = True
    status: CallOutcome
    final_amount: float
    debt_left: float
    session_id: str
    workflows: WorkflowResults


class CallSessionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    external_session_id: str
    call_channel: CallChannel
    outcome: CallOutcome | None = None
    started_at: datetime
    ended_at: datetime | None = None
    duration_seconds: int | None = None
    initial_offer: float
    final_amount: float
    debt_before: float
    debt_after: float
    success_rate: float
    negotiation_data: dict[str, Any]
    integrations: dict[str, Any]


class CallSessionAnalytics(BaseModel):
    total_sessions: int
    outcomes: dict[str, int]
    paid_sessions: int
    payment_rate: float
    collected_total: float
    average_success_rate: float
