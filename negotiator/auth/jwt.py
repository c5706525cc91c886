"""Bearer tokens identifying a calling service (HS256 JWT).

A token carries ``service`` (who is calling), ``type="m2m"``, and the
``iat``/``exp``/``jti`` bookkeeping claims. Tokens grant every scope, so
anything unexpected about one is an authentication failure.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import json
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from negotiator.core.exceptions import AuthenticationError

SERVICE_TOKEN_TYPE = "m2m"
_HEADER = {"alg": "HS256", "typ": "JWT"}


@dataclass(frozen=True)
class ServiceClaims:
    service: str
    issued_at: int
    expires_at: int
    token_id: str

    def as_dict(self) -> dict[str, Any]:
        return {
            "service": self.service,
            "type": SERVICE_TOKEN_TYPE,
            "iat": self.issued_at,
            "exp": self.expires_at,
            "jti": self.token_id,
        }


def _segment(document: dict[str, Any]) -> bytes:
    raw = json.dumps(document, separators=(",", ":"), sort_keys=True).encode("utf-8")
    return base64.urlsafe_b64encode(raw).rstrip(b"=")


def _signature(signing_input: bytes, secret: str) -> bytes:
    if not secret:
        raise AuthenticationError("JWT secret must be configured.")
    digest = hmac.new(secret.encode("utf-8"), signing_input, hashlib.sha256).digest()
    return base64.urlsafe_b64encode(digest).rstrip(b"=")


def _read_segment(segment: bytes) -> Any:
    padded = segment + b"=" * (-len(segment) % 4)
    return json.loads(base64.urlsafe_b64decode(padded).decode("utf-8"))


def create_service_token(
    service: str,
    secret: str,
    ttl_hours: int = 24,
    now: datetime | None = None,
) -> str:
    """Issue a bearer token for ``service`` valid for ``ttl_hours``."""
    issued = now or datetime.now(timezone.utc)
    claims = ServiceClaims(
        service=service,
        issued_at=int(issued.timestamp()),
        expires_at=int((issued + timedelta(hours=ttl_hours)).timestamp()),
        token_id=str(uuid.uuid4()),
    )
    signing_input = _segment(_HEADER) + b"." + _segment(claims.as_dict())
    return (signing_input + b"." + _signature(signing_input, secret)).decode("ascii")


def decode_service_token(token: str, secret: str) -> ServiceClaims:
    """Verify signature, expiry and claim shape; return the caller's claims."""
    try:
        raw = token.encode("ascii")
    except UnicodeEncodeError as exc:
        raise AuthenticationError("Invalid token format.") from exc

    parts = raw.split(b".")
    if len(parts) != 3:
        raise AuthenticationError("Invalid token format.")
    header_segment, payload_segment, signature_segment = parts

    expected = _signature(header_segment + b"." + payload_segment, secret)
    if not hmac.compare_digest(expected, signature_segment):
        raise AuthenticationError("Invalid token signature.")

    try:
        payload = _read_segment(payload_segment)
    except (binascii.Error, UnicodeDecodeError, ValueError) as exc:
        raise AuthenticationError("Invalid token payload.") from exc
    if not isinstance(payload, dict):
        raise AuthenticationError("Invalid token payload.")

    exp = payload.get("exp")
    if isinstance(exp, bool) or not isinstance(exp, (int, float)):
        raise AuthenticationError("Token is missing exp claim.")
    if exp < datetime.now(timezone.utc).timestamp():
        raise AuthenticationError("Token has expired.")

    service = payload.get("service")
    if payload.get("type") != SERVICE_TOKEN_TYPE or not isinstance(service, str) or not service:
        raise AuthenticationError("Invalid token")

    iat = payload.get("iat")
    return ServiceClaims(
        service=service,
        issued_at=int(iat) if isinstance(iat, (int, float)) and not isinstance(iat, bool) else 0,
        expires_at=int(exp),
        token_id=str(payload.get("jti") or ""),
    )
