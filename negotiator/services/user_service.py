"""Read-only debtor directory."""

from __future__ import annotations

import logging

from negotiator.models import User
from negotiator.schemas.users import UserInfoResponse
from negotiator.services.base_service import BaseService
from negotiator.utils.validators import normalize_phone

logger = logging.getLogger(__name__)


class UserService(BaseService):
    def get_by_phone(self, phone_number: str) -> User | None:
        logger.info("user.lookup.phone", extra={"event": "user.lookup.phone", "phone_number": phone_number})
        return self.db.query(User).filter(User.phone_number == normalize_phone(phone_number)).first()

    @staticmethod
    def to_info(user: User) -> UserInfoResponse:
        return UserInfoResponse(
            user_id=user.id,
            name=user.name,
            phone_number=user.phone_number,
            email=user.email,
            debt=float(user.remaining_debt),
        )
