"""Authentication gate shared by the API route modules."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from negotiator.auth.api_keys import ApiKeyAuthenticator
from negotiator.auth.jwt import decode_service_token
from negotiator.auth.rbac import VALID_SCOPES, require_scopes
from negotiator.core.config import Config
from negotiator.core.dependencies import get_db_session, get_settings
from negotiator.core.enums import ApiScope
from negotiator.core.exceptions import AuthenticationError
from negotiator.core.security import verify_shared_secret

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthenticatedCaller:
    method: str
    principal: str
    scopes: frozenset[str]


def _extract_bearer_token(authorization: str) -> str:
    parts = authorization.strip().split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1].strip():
        raise AuthenticationError("No token provided")
    return parts[1].strip()


def authenticate_caller(
    x_api_key: str | None = Header(default=None, alias="X-API-Key"),
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
    settings: Config = Depends(get_settings),
) -> AuthenticatedCaller:
    """Accept an API key first, then fall back to a service bearer token."""
    if x_api_key:
        credential = ApiKeyAuthenticator(db).authenticate(x_api_key)
        if credential is not None:
            return AuthenticatedCaller(
                method="api_key",
                principal=credential.name,
                scopes=frozenset(credential.scopes or ()),
            )
        logger.warning("auth.api_key.rejected", extra={"event": "auth.api_key.rejected"})

    if not authorization:
        raise AuthenticationError("No authorization header provided")

    claims = decode_service_token(_extract_bearer_token(authorization), secret=settings.JWT_M2M_SECRET)
    logger.info("auth.jwt.authenticated", extra={"event": "auth.jwt.authenticated", "service": claims.service})
    return AuthenticatedCaller(method="service_token", principal=claims.service, scopes=VALID_SCOPES)


def require_m2m(*scopes: ApiScope) -> Callable[..., AuthenticatedCaller]:
    """Build a dependency that authenticates and checks the given scopes."""
    required = [scope.value for scope in scopes]

    def dependency(caller: AuthenticatedCaller = Depends(authenticate_caller)) -> AuthenticatedCaller:
        require_scopes(caller.scopes, required)
        return caller

    return dependency


def require_vapi_secret(
    x_vapi_signature: str | None = Header(default=None, alias="X-VAPI-Signature"),
    settings: Config = Depends(get_settings),
) -> None:
    """Gate voice-platform callbacks on the shared webhook secret."""
    if not x_vapi_signature or not settings.VAPI_WEBHOOK_SECRET:
        logger.warning("auth.vapi.missing_secret", extra={"event": "auth.vapi.missing_secret"})
        raise AuthenticationError("Unauthorized webhook request")
    if not verify_shared_secret(x_vapi_signature, settings.VAPI_WEBHOOK_SECRET):
        logger.warning("auth.vapi.invalid_secret", extra={"event": "auth.vapi.invalid_secret"})
        raise AuthenticationError("Invalid webhook signature")
