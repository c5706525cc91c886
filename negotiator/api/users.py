"""Debtor lookup endpoint."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query

from negotiator.api._authz import AuthenticatedCaller, require_m2m
from negotiator.core.dependencies import get_user_service
from negotiator.core.enums import ApiScope
from negotiator.core.exceptions import NotFoundError
from negotiator.schemas.users import UserInfoResponse
from negotiator.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["users"])


@router.get("/userinfo", response_model=UserInfoResponse)
def get_user_info(
    phone_number: str = Query(min_length=1, max_length=20),
    caller: AuthenticatedCaller = Depends(require_m2m(ApiScope.USERINFO)),
    users: UserService = Depends(get_user_service),
) -> UserInfoResponse:
    user = users.get_by_phone(phone_number)
    if user is None:
        logger.warning("user.not_found", extra={"event": "user.not_found", "phone_number": phone_number})
        raise NotFoundError("User not found")
    return users.to_info(user)
