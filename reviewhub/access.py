"""Access gate: who is calling, and may they do this?

A ``Caller`` is built per request from the presented token and passed
explicitly to the service layer.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

from .auth import InvalidToken, decode_token
from .errors import Forbidden, Unauthorized
from .models import RoleEnum
from .storage import ReviewStore

logger = logging.getLogger(__name__)


class AccessLevel(IntEnum):
    ANONYMOUS = 0
    AUTHENTICATED = 1
    ADMIN = 2


@dataclass(frozen=True)
class Caller:
    user_id: Optional[str] = None
    level: AccessLevel = AccessLevel.ANONYMOUS

    @property
    def is_anonymous(self) -> bool:
        return self.level is AccessLevel.ANONYMOUS


ANONYMOUS = Caller()


def classify(token: Optional[str], store: ReviewStore) -> Caller:
    if not token:
        return ANONYMOUS
    try:
        payload = decode_token(token)
    except InvalidToken:
        logger.info("Rejected invalid or expired token")
        return ANONYMOUS

    user_id = payload.get("sub")
    if not user_id:
        return ANONYMOUS
    user = store.get_user(user_id)
    if user is None:
        return ANONYMOUS
    level = AccessLevel.ADMIN if user.role == RoleEnum.ADMIN else AccessLevel.AUTHENTICATED
    return Caller(user_id=user.id, level=level)


def require(caller: Caller, level: AccessLevel) -> None:
    if caller.level >= level:
        return
    if caller.is_anonymous:
        raise Unauthorized()
    raise Forbidden()
