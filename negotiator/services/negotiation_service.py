"""Counter-offer calculator for debt negotiation calls.

The voice agent owns the offer history and resends it every round; this
module keeps no state between calls. The constants below are the whole
strategy: the agent aims for 130% of the debtor's first offer, opens at
up to 180% of it, and concedes a growing share of the gap each round.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

from negotiator.core.enums import NegotiationStatus

logger = logging.getLogger(__name__)

MAX_ROUNDS = 3
TARGET_MULTIPLIER = 1.3
OPENING_MULTIPLIER = 1.8
OPENING_DEBT_CAP = 0.7
BASE_REDUCTION = 0.4
ROUND_REDUCTION_STEP = 0.1
FALLBACK_CONCESSION = 0.9
TARGET_FLOOR_RATIO = 0.9
MIN_ACCEPTABLE_RATIO = 0.5
ACCEPTANCE_MARGIN = 1.1


@dataclass(frozen=True)
class NegotiationResult:
    status: NegotiationStatus
    agent_amount: float
    user_amounts: list[float] = field(default_factory=list)
    agent_amounts: list[float] = field(default_factory=list)

    def as_dict(self) -> dict:
        return {
            "status": self.status.value,
            "agent_amount": self.agent_amount,
            "user_amounts": list(self.user_amounts),
            "agent_amounts": list(self.agent_amounts),
        }


def round_half_up_cents(amount: float) -> float:
    """Round to cents, halves away from zero on the scaled value."""
    return math.floor(amount * 100 + 0.5) / 100


def success_rate(initial_amount: float, final_amount: float) -> float:
    """Percentage gained over the debtor's opening offer."""
    if initial_amount == 0:
        return 0.0
    increase = (final_amount - initial_amount) / initial_amount * 100
    return round_half_up_cents(increase)


def _accept(user_amounts: list[float], agent_amounts: list[float], user_amount: float) -> NegotiationResult:
    return NegotiationResult(
        status=NegotiationStatus.STOP,
        agent_amount=user_amount,
        user_amounts=[*user_amounts, user_amount],
        agent_amounts=[*agent_amounts, user_amount],
    )


def negotiate(
    user_amounts: list[float],
    agent_amounts: list[float],
    user_amount: float,
    user_debt: float,
) -> NegotiationResult:
    """Compute the agent's move for one round.

    Inputs are assumed validated (positive offers, histories of equal length).
    """
    current_round = len(user_amounts) + 1
    initial_offer = user_amounts[0] if user_amounts else user_amount
    target_amount = min(initial_offer * TARGET_MULTIPLIER, user_debt)

    logger.info(
        "negotiation.round",
        extra={
            "event": "negotiation.round",
            "round": current_round,
            "user_amount": user_amount,
            "user_debt": user_debt,
            "target_amount": target_amount,
        },
    )

    if current_round > MAX_ROUNDS:
        logger.info("negotiation.max_rounds_reached", extra={"event": "negotiation.max_rounds_reached"})
        return _accept(user_amounts, agent_amounts, user_amount)

    if user_amount >= target_amount:
        logger.info(
            "negotiation.target_met",
            extra={"event": "negotiation.target_met", "user_amount": user_amount, "target_amount": target_amount},
        )
        return _accept(user_amounts, agent_amounts, user_amount)

    if current_round == 1:
        agent_amount = min(user_amount * OPENING_MULTIPLIER, user_debt, user_debt * OPENING_DEBT_CAP)
    else:
        last_agent_amount = agent_amounts[-1]
        gap = last_agent_amount - user_amount
        reduction_factor = BASE_REDUCTION + current_round * ROUND_REDUCTION_STEP
        agent_amount = last_agent_amount - gap * reduction_factor
        if agent_amount >= last_agent_amount:
            agent_amount = last_agent_amount * FALLBACK_CONCESSION

        min_acceptable = max(
            target_amount * TARGET_FLOOR_RATIO,
            user_debt * MIN_ACCEPTABLE_RATIO,
            initial_offer,
        )
        agent_amount = max(agent_amount, min_acceptable)

    agent_amount = round_half_up_cents(agent_amount)

    acceptance_threshold = user_amount * ACCEPTANCE_MARGIN
    if agent_amount <= acceptance_threshold or current_round == MAX_ROUNDS:
        logger.info(
            "negotiation.accepting",
            extra={
                "event": "negotiation.accepting",
                "agent_amount": agent_amount,
                "user_amount": user_amount,
                "threshold": acceptance_threshold,
            },
        )
        return _accept(user_amounts, agent_amounts, user_amount)

    logger.info(
        "negotiation.counter_offer",
        extra={"event": "negotiation.counter_offer", "agent_amount": agent_amount, "round": current_round},
    )
    return NegotiationResult(
        status=NegotiationStatus.HAGGLE,
        agent_amount=agent_amount,
        user_amounts=[*user_amounts, user_amount],
        agent_amounts=[*agent_amounts, agent_amount],
    )
