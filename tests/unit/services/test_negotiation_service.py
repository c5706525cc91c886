from __future__ import annotations

import pytest

from negotiator.core.enums import NegotiationStatus
from negotiator.services.negotiation_service import MAX_ROUNDS, negotiate, round_half_up_cents, success_rate


def test_first_round_opens_at_180_percent_of_offer():
    result = negotiate(user_amounts=[], agent_amounts=[], user_amount=100, user_debt=5000)
    assert result.status == NegotiationStatus.HAGGLE
    assert result.agent_amount == 180
    assert result.user_amounts == [100]
    assert result.agent_amounts == [180]


def test_first_round_opening_is_capped_at_70_percent_of_debt():
    result = negotiate(user_amounts=[], agent_amounts=[], user_amount=100, user_debt=200)
    assert result.status == NegotiationStatus.HAGGLE
    assert result.agent_amount == 140


def test_offer_meeting_target_is_accepted():
    result = negotiate(user_amounts=[100], agent_amounts=[180], user_amount=150, user_debt=5000)
    assert result.status == NegotiationStatus.STOP
    assert result.agent_amount == 150
    assert result.user_amounts == [100, 150]
    assert result.agent_amounts == [180, 150]


def test_second_round_concedes_share_of_gap():
    # gap 70, reduction 0.6 -> 180 - 42 = 138, above the 117 floor
    result = negotiate(user_amounts=[100], agent_amounts=[180], user_amount=110, user_debt=200)
    assert result.status == NegotiationStatus.HAGGLE
    assert result.agent_amount == 138
    assert result.user_amounts == [100, 110]
    assert result.agent_amounts == [180, 138]


def test_counter_is_clamped_to_half_of_debt():
    result = negotiate(user_amounts=[100], agent_amounts=[180], user_amount=110, user_debt=5000)
    assert result.status == NegotiationStatus.HAGGLE
    assert result.agent_amount == 2500


def test_final_round_always_stops_with_user_amount():
    result = negotiate(user_amounts=[100, 110], agent_amounts=[180, 138], user_amount=115, user_debt=200)
    assert result.status == NegotiationStatus.STOP
    assert result.agent_amount == 115
    assert result.agent_amounts == [180, 138, 115]


def test_rounds_beyond_limit_stop_immediately():
    result = negotiate(user_amounts=[100, 110, 115], agent_amounts=[180, 138, 120], user_amount=116, user_debt=200)
    assert result.status == NegotiationStatus.STOP
    assert result.agent_amount == 116


def test_counter_offers_are_rounded_to_cents():
    result = negotiate(user_amounts=[], agent_amounts=[], user_amount=33.33, user_debt=1000)
    assert result.agent_amount == 59.99


@pytest.mark.parametrize("user_debt", [100, 250, 999.99, 5000, 12000])
@pytest.mark.parametrize("opening", [10, 50, 80, 95])
def test_simulated_calls_terminate_within_limit_and_never_exceed_debt(user_debt, opening):
    user_amounts: list[float] = []
    agent_amounts: list[float] = []
    offer = float(opening)
    while True:
        result = negotiate(user_amounts, agent_amounts, user_amount=offer, user_debt=user_debt)
        assert result.agent_amount <= user_debt
        assert len(result.user_amounts) == len(result.agent_amounts)
        assert len(result.user_amounts) <= MAX_ROUNDS
        if result.status == NegotiationStatus.STOP:
            break
        user_amounts, agent_amounts = result.user_amounts, result.agent_amounts
        offer = min(user_debt, round(offer * 1.1, 2))


def test_success_rate_is_percentage_over_opening_offer():
    assert success_rate(100, 150) == 50.0
    assert success_rate(3, 4) == 33.33
    assert success_rate(200, 100) == -50.0


def test_success_rate_with_zero_opening_offer_is_zero():
    assert success_rate(0, 150) == 0.0


def test_round_half_up_cents_rounds_halves_upward():
    assert round_half_up_cents(1.234) == 1.23
    assert round_half_up_cents(0.125) == 0.13
    assert round_half_up_cents(10) == 10
