from __future__ import annotations

import pytest
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError

from negotiator.core.enums import CallChannel, CallOutcome
from negotiator.models import Base, CallSession


def test_model_metadata_contains_target_tables():
    assert {"users", "call_sessions", "api_credentials"}.issubset(set(Base.metadata.tables.keys()))


def test_active_session_index_is_partial_and_unique(engine):
    with engine.connect() as conn:
        ddl = conn.execute(
            text("SELECT sql FROM sqlite_master WHERE type = 'index' AND name = 'idx_active_call_sessions'")
        ).scalar_one()
    assert ddl.startswith("CREATE UNIQUE INDEX")
    assert "WHERE ended_at IS NULL" in ddl


def _session(user_id, **overrides):
    fields = {
        "user_id": user_id,
        "external_session_id": "ext-1",
        "call_channel": CallChannel.VAPI,
        "outcome": CallOutcome.SUCCESS,
        "initial_offer": 100,
        "final_amount": 150,
        "debt_before": 5000,
        "debt_after": 4850,
        "negotiation_data": {},
        "integrations": {},
    }
    fields.update(overrides)
    return CallSession(**fields)


def test_refused_with_payment_violates_check(db_session, make_user):
    user = make_user()
    db_session.add(_session(user.id, outcome=CallOutcome.REFUSED, final_amount=50, debt_after=5000))
    with pytest.raises(IntegrityError):
        db_session.commit()


def test_only_one_open_session_per_user(db_session, make_user):
    user = make_user()
    db_session.add(_session(user.id, outcome=None, final_amount=0, debt_after=5000, ended_at=None))
    db_session.commit()
    db_session.add(_session(user.id, external_session_id="ext-2", outcome=None, final_amount=0, debt_after=5000))
    with pytest.raises(IntegrityError):
        db_session.commit()


def test_inserting_paid_session_propagates_debt(db_session, make_user):
    user = make_user(debt=5000)
    db_session.add(_session(user.id))
    db_session.commit()
    db_session.refresh(user)
    assert user.remaining_debt == 4850


def test_open_session_does_not_touch_debt(db_session, make_user):
    user = make_user(debt=5000)
    db_session.add(_session(user.id, outcome=None, final_amount=0, debt_after=5000))
    db_session.commit()
    db_session.refresh(user)
    assert user.remaining_debt == 5000
