"""Scope checks for authenticated API callers."""

from __future__ import annotations

from collections.abc import Iterable

from negotiator.core.enums import ApiScope
from negotiator.core.exceptions import AuthorizationError

VALID_SCOPES = frozenset(scope.value for scope in ApiScope)


def has_scopes(granted: Iterable[str], required_scopes: Iterable[str]) -> bool:
    """Check that every required scope is granted; ``admin`` grants all."""
    granted_set = set(granted)
    if ApiScope.ADMIN.value in granted_set:
        return True
    return set(required_scopes).issubset(granted_set)


def require_scopes(granted: Iterable[str], required_scopes: Iterable[str]) -> None:
    """Raise when the granted scopes lack a required scope."""
    granted = list(granted)
    required = list(required_scopes)
    if has_scopes(granted, required):
        return
    missing = sorted(set(required) - set(granted))
    raise AuthorizationError(f"Missing required scopes: {', '.join(missing)}")
