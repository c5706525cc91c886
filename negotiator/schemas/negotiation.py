"""Negotiation round request/response schemas."""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, Field, field_validator, model_validator

from negotiator.core.enums import NegotiationStatus

Amount = Annotated[float, Field(gt=0)]


class NegotiationRequest(BaseModel):
    user_amounts: list[Amount] = Field(default_factory=list)
    agent_amounts: list[Amount] = Field(default_factory=list)
    user_amount: float = Field(gt=0)
    user_debt: float = Field(ge=0)

    @field_validator("user_amounts", "agent_amounts", mode="before")
    @classmethod
    def none_means_empty_history(cls, value):
        return [] if value is None else value

    @model_validator(mode="after")
    def histories_are_consistent(self) -> "NegotiationRequest":
        if len(self.user_amounts) != len(self.agent_amounts):
            raise ValueError("user_amounts and agent_amounts must have the same length")
        if self.user_amount > self.user_debt:
            raise ValueError("user_amount cannot exceed user_debt")
        if any(amount > self.user_debt for amount in (*self.user_amounts, *self.agent_amounts)):
            raise ValueError("offer history amounts cannot exceed user_debt")
        return self


class NegotiationResponse(BaseModel):
    status: NegotiationStatus
    agent_amount: float
    user_amounts: list[float]
    agent_amounts: list[float]
