from __future__ import annotations

import pytest
from pydantic import ValidationError

from negotiator.schemas.call_results import CallResultRequest
from negotiator.schemas.integrations import Integrations
from negotiator.schemas.negotiation import NegotiationRequest


def test_negotiation_request_rejects_mismatched_histories():
    with pytest.raises(ValidationError, match="same length"):
        NegotiationRequest(user_amounts=[100], agent_amounts=[], user_amount=120, user_debt=5000)


def test_negotiation_request_rejects_offer_above_debt():
    with pytest.raises(ValidationError, match="cannot exceed user_debt"):
        NegotiationRequest(user_amount=6000, user_debt=5000)


def test_negotiation_request_rejects_history_above_debt():
    with pytest.raises(ValidationError, match="history"):
        NegotiationRequest(user_amounts=[100], agent_amounts=[9000], user_amount=120, user_debt=5000)


@pytest.mark.parametrize("field, value", [("user_amount", 0), ("user_amount", -1), ("user_debt", -1)])
def test_negotiation_request_rejects_non_positive_amounts(field, value):
    payload = {"user_amount": 100, "user_debt": 5000, field: value}
    with pytest.raises(ValidationError):
        NegotiationRequest(**payload)


def test_call_result_outcome_must_match_amount():
    with pytest.raises(ValidationError, match="REFUSED"):
        CallResultRequest(user_id="u-1", status="REFUSED", initial_amount=100, final_amount=50, debt=5000)
    with pytest.raises(ValidationError, match="greater than 0"):
        CallResultRequest(user_id="u-1", status="SUCCESS", initial_amount=100, final_amount=0, debt=5000)


def test_call_result_rejects_unknown_status():
    with pytest.raises(ValidationError):
        CallResultRequest(user_id="u-1", status="MAYBE", initial_amount=100, final_amount=50, debt=5000)


def test_integrations_start_pending_with_crm_synced():
    integrations = Integrations.initial("SESSION-1").model_dump(mode="json")
    assert integrations["invoice"]["status"] == "PENDING"
    assert integrations["email"]["status"] == "PENDING"
    assert integrations["crm"]["status"] == "SUCCESS"
    assert integrations["crm"]["external_id"] == "SESSION-1"


def test_negotiation_request_rejects_zero_history_offer():
    with pytest.raises(ValidationError):
        NegotiationRequest(user_amounts=[0], agent_amounts=[180], user_amount=120, user_debt=5000)
