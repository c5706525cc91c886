"""Voice-platform function-call envelope.

Inbound bodies look like ``{"message": {"functionCall": {"name", "parameters"}}}``
and responses like ``{"results": [{"name", "result"} | {"name", "error"}]}``.
Function calls are parsed into a tagged union keyed on ``name``; names the
backend does not implement land in ``UnknownFunctionCall``.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag, TypeAdapter

from negotiator.core.enums import VapiFunction
from negotiator.schemas.call_results import VapiCallResultParams
from negotiator.schemas.negotiation import NegotiationRequest
from negotiator.schemas.users import UserInfoQuery

UNKNOWN_TAG = "unknown"


class FunctionCallPayload(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str | None = None
    parameters: dict[str, Any] = Field(default_factory=dict)


class VapiMessage(BaseModel):
    model_config = ConfigDict(extra="allow")

    functionCall: FunctionCallPayload


class VapiFunctionCallRequest(BaseModel):
    model_config = ConfigDict(extra="allow")

    message: VapiMessage


class VapiEvent(BaseModel):
    """Status event posted to the generic webhook (call-started, call-ended, ...)."""

    model_config = ConfigDict(extra="allow")

    type: str | None = None
    call: dict[str, Any] | None = None


class GetUserInfoCall(BaseModel):
    name: Literal["getUserInfo"]
    parameters: UserInfoQuery


class NegotiatePaymentCall(BaseModel):
    name: Literal["negotiatePayment"]
    parameters: NegotiationRequest


class SaveCallResultCall(BaseModel):
    name: Literal["saveCallResult"]
    parameters: VapiCallResultParams


class UnknownFunctionCall(BaseModel):
    name: str | None = None
    parameters: dict[str, Any] = Field(default_factory=dict)


def _function_tag(value: Any) -> str:
    name = value.get("name") if isinstance(value, dict) else getattr(value, "name", None)
    known = {function.value for function in VapiFunction}
    name = getattr(name, "value", name)
    return name if name in known else UNKNOWN_TAG


FunctionCall = Annotated[
    Union[
        Annotated[GetUserInfoCall, Tag(VapiFunction.GET_USER_INFO.value)],
        Annotated[NegotiatePaymentCall, Tag(VapiFunction.NEGOTIATE_PAYMENT.value)],
        Annotated[SaveCallResultCall, Tag(VapiFunction.SAVE_CALL_RESULT.value)],
        Annotated[UnknownFunctionCall, Tag(UNKNOWN_TAG)],
    ],
    Discriminator(_function_tag),
]

function_call_adapter: TypeAdapter[FunctionCall] = TypeAdapter(FunctionCall)


def parse_function_call(name: str | None, parameters: dict[str, Any]) -> FunctionCall:
    """Validate one function call; raises pydantic.ValidationError on bad parameters."""
    return function_call_adapter.validate_python({"name": name, "parameters": parameters})


def function_result(name: str, result: Any) -> dict[str, Any]:
    return {"results": [{"name": name, "result": result}]}


def function_error(name: str | None, error: str) -> dict[str, Any]:
    return {"results": [{"name": name, "error": error}]}
