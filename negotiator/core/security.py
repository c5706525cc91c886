"""Security primitives for API keys and shared-secret checks."""

from __future__ import annotations

import hmac

import bcrypt

BCRYPT_ROUNDS = 10


def hash_api_key(api_key: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """Return a bcrypt hash suitable for the api_credentials table."""
    return bcrypt.hashpw(api_key.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_api_key(api_key: str, key_hash: str) -> bool:
    """Slow-hash comparison of a presented key against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(api_key.encode("utf-8"), key_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash.
        return False


def verify_shared_secret(presented: str | None, expected: str | None) -> bool:
    """Constant-time comparison for webhook shared secrets."""
    if not presented or not expected:
        return False
    return hmac.compare_digest(presented.encode("utf-8"), expected.encode("utf-8"))
