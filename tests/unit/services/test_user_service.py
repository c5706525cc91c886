from __future__ import annotations

from negotiator.services.user_service import UserService


def test_lookup_by_phone_is_idempotent(db_session, make_user):
    make_user(phone_number="+1234567890", debt=5000)
    service = UserService(db_session)

    first = service.to_info(service.get_by_phone("+1234567890"))
    second = service.to_info(service.get_by_phone("+1234567890"))

    assert first == second
    assert first.debt == 5000
    assert first.name == "John Doe"


def test_lookup_normalizes_formatting(db_session, make_user):
    user = make_user(phone_number="+1234567890")
    assert UserService(db_session).get_by_phone("+1 (234) 567-890").id == user.id


def test_unknown_phone_returns_none(db_session):
    assert UserService(db_session).get_by_phone("+19999999999") is None


def test_info_reports_remaining_debt(db_session, make_user):
    user = make_user(debt=5000)
    user.remaining_debt = 4850
    db_session.commit()

    info = UserService(db_session).to_info(user)
    assert info.debt == 4850
    assert info.user_id == user.id
