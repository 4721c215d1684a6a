"""
FastAPI dependencies for authorization.

The caller's bearer token is reduced to a Role; routes declare the minimum
role they need with require_role().
"""

import enum
import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError

from app.core.exceptions import UnauthorizedError
from app.core.security import decode_token

logger = logging.getLogger(__name__)

# Missing credentials are allowed; they just mean an anonymous caller
optional_bearer = HTTPBearer(auto_error=False)


class Role(enum.IntEnum):
    """Caller authorization level, ordered from least to most privileged."""
    ANONYMOUS = 0
    USER = 1
    ADMIN = 2


def role_from_payload(payload: dict) -> Role:
    if payload.get("isAdmin") is True:
        return Role.ADMIN
    return Role.USER


async def get_current_role(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_bearer),
) -> Role:
    """
    Resolve the caller's role from the Authorization header.

    No token, or a token that fails verification, yields Role.ANONYMOUS.
    """
    if not credentials:
        return Role.ANONYMOUS

    try:
        payload = decode_token(credentials.credentials)
    except JWTError:
        logger.info("Ignoring invalid bearer token")
        return Role.ANONYMOUS

    return role_from_payload(payload)


def require_role(minimum: Role):
    """
    Build a dependency that rejects callers below `minimum` with 401.

    Usage:
        @router.delete("/{handle}", dependencies=[Depends(require_role(Role.ADMIN))])
    """
    async def check_role(role: Role = Depends(get_current_role)) -> Role:
        if role < minimum:
            raise UnauthorizedError()
        return role

    return check_role


ensure_admin = require_role(Role.ADMIN)
