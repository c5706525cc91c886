from __future__ import annotations

import importlib.util
from pathlib import Path

from negotiator.auth.api_keys import ApiKeyAuthenticator
from negotiator.models import ApiCredential, CallSession, User

SEED_SCRIPT = Path(__file__).resolve().parents[1] / "scripts" / "seed_data.py"


def _load_seed_module():
    spec = importlib.util.spec_from_file_location("seed_data", SEED_SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_seed_is_repeatable(session_factory):
    seed_module = _load_seed_module()
    seed_module.seed(session_factory)
    seed_module.seed(session_factory)

    with session_factory() as db:
        assert db.query(User).count() == 5
        assert db.query(ApiCredential).count() == 2
        assert db.query(CallSession).count() == 1
        john = db.query(User).filter(User.phone_number == "+1234567890").one()
        assert john.remaining_debt == 4850
        assert ApiKeyAuthenticator(db).authenticate("test_client_key_345678").name == "Test Client"
