"""SQLAlchemy model package."""

from negotiator.models.api_credential import ApiCredential
from negotiator.models.base import Base
from negotiator.models.call_session import CallSession
from negotiator.models.user import User

__all__ = [
    "ApiCredential",
    "Base",
    "CallSession",
    "User",
]
