"""Seed demo debtors, API credentials, and one sample call session.

Usage: ``python scripts/seed_data.py`` (after ``python -m negotiator.database.init_db``).
"""

import sys
from datetime import timedelta
from pathlib import Path

from sqlalchemy.orm import Session, sessionmaker

# Add project root to path
PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from negotiator.core.config import get_config
from negotiator.core.enums import ApiScope, CallChannel, CallOutcome, IntegrationStatus
from negotiator.core.security import hash_api_key
from negotiator.database.db import build_engine, build_session_factory, session_scope
from negotiator.models import ApiCredential, CallSession, User
from negotiator.models.base import utcnow

DEMO_USERS = [
    {"phone_number": "+1234567890", "name": "John Doe", "email": "john.doe@example.com", "debt": 5000.00},
    {"phone_number": "+1234567891", "name": "Jane Smith", "email": "jane.smith@example.com", "debt": 3500.50},
    {"phone_number": "+1234567892", "name": "Bob Johnson", "email": "bob.johnson@example.com", "debt": 7250.75},
    {"phone_number": "+1234567893", "name": "Alice Williams", "email": "alice.williams@example.com", "debt": 2100.00},
    {"phone_number": "+1234567894", "name": "Charlie Brown", "email": "charlie.brown@example.com", "debt": 9800.25},
]

DEMO_API_KEYS = [
    {
        "name": "VAPI Service",
        "key": "vapi_test_key_123456",
        "scopes": [ApiScope.USERINFO.value, ApiScope.NEGOTIATION.value, ApiScope.CALL_RESULT.value],
    },
    {
        "name": "Test Client",
        "key": "test_client_key_345678",
        "scopes": [scope.value for scope in ApiScope],
    },
]

SAMPLE_SESSION_ID = "SAMPLE-SESSION-123"


def seed_users(db: Session) -> int:
    created = 0
    for row in DEMO_USERS:
        user = db.query(User).filter(User.phone_number == row["phone_number"]).first()
        if user is not None:
            user.name = row["name"]
            user.email = row["email"]
            continue
        db.add(
            User(
                phone_number=row["phone_number"],
                name=row["name"],
                email=row["email"],
                total_debt=row["debt"],
                remaining_debt=row["debt"],
            )
        )
        created += 1
    db.flush()
    return created


def seed_api_keys(db: Session) -> int:
    created = 0
    expires_at = utcnow() + timedelta(days=365)
    for row in DEMO_API_KEYS:
        if db.query(ApiCredential).filter(ApiCredential.name == row["name"]).first() is not None:
            continue
        db.add(
            ApiCredential(
                name=row["name"],
                key_hash=hash_api_key(row["key"]),
                scopes=row["scopes"],
                is_active=True,
                expires_at=expires_at,
            )
        )
        created += 1
    db.flush()
    return created


def seed_sample_session(db: Session) -> bool:
    if db.query(CallSession).filter(CallSession.external_session_id == SAMPLE_SESSION_ID).first():
        return False
    john = db.query(User).filter(User.phone_number == DEMO_USERS[0]["phone_number"]).first()
    if john is None:
        return False

    now = utcnow()
    db.add(
        CallSession(
            user_id=john.id,
            external_session_id=SAMPLE_SESSION_ID,
            call_channel=CallChannel.VAPI,
            outcome=CallOutcome.PARTIAL,
            started_at=now - timedelta(minutes=10),
            ended_at=now - timedelta(minutes=1),
            initial_offer=100,
            final_amount=150,
            debt_before=5000,
            debt_after=4850,
            success_rate=50,
            negotiation_data={
                "user_amounts": [100, 150],
                "agent_amounts": [180, 150],
                "rounds": [
                    {"round": 1, "user_offer": 100, "agent_counter": 180},
                    {"round": 2, "user_offer": 150, "agent_counter": 150},
                ],
                "target_amount": 130,
                "negotiation_strategy": "vapi",
                "metadata": {"max_rounds": 3, "target_multiplier": 1.3},
            },
            integrations={
                "invoice": {"status": IntegrationStatus.SUCCESS.value, "external_id": "SAMPLE-INV-456"},
                "email": {
                    "status": IntegrationStatus.SUCCESS.value,
                    "external_id": "email-sample-789",
                    "recipient": DEMO_USERS[0]["email"],
                },
                "crm": {"status": IntegrationStatus.SUCCESS.value, "external_id": SAMPLE_SESSION_ID},
            },
        )
    )
    db.flush()
    return True


def seed(session_factory: sessionmaker) -> None:
    with session_scope(session_factory) as db:
        try:
            users = seed_users(db)
            keys = seed_api_keys(db)
            sample = seed_sample_session(db)
            db.commit()
        except Exception:
            db.rollback()
            raise
    print(f"Seeded {users} users, {keys} API credentials, sample session: {'yes' if sample else 'skipped'}")


if __name__ == "__main__":
    seed(build_session_factory(build_engine(get_config())))
