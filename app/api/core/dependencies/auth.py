import logging
from typing import Optional

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.api.core.exceptions import AuthorizationError
from app.api.db.database import get_db
from app.api.modules.v1.users.models.users_model import User, UserRole
from app.api.utils.jwt import decode_token

logger = logging.getLogger("app")

# HTTP Bearer token extraction; missing credentials are reported as 401 below
security = HTTPBearer(auto_error=False)

UNAUTHORIZED_HEADERS = {"WWW-Authenticate": "Bearer"}


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers=UNAUTHORIZED_HEADERS,
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Extract and validate the bearer token, return the authenticated user.
    Enforces:
    - Credentials present
    - Valid JWT signature and not expired
    - User exists and is active

    Raises:
        HTTPException: 401 if authentication fails
    """
    if credentials is None:
        raise _unauthorized("Not authenticated")

    try:
        payload = decode_token(credentials.credentials)
    except jwt.InvalidTokenError:
        raise _unauthorized("Invalid or expired token")

    user_id = payload.get("sub")
    if not user_id or not payload.get("jti"):
        raise _unauthorized("Invalid token payload")

    user = await db.scalar(select(User).where(User.id == user_id))

    if not user:
        raise _unauthorized("User not found")

    if not user.is_active:
        raise _unauthorized("User account is inactive")

    return user


def require_role(*roles: UserRole):
    """
    Dependency factory restricting an endpoint to the given roles.

    Usage:
        @router.post("", dependencies=[Depends(require_role(UserRole.MANAGER))])

    Raises:
        AuthorizationError: the authenticated user's role is not in ``roles``
    """
    allowed = tuple(roles)

    async def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed:
            logger.warning(
                f"Role denied: {current_user.email} is {current_user.role.value}, "
                f"needs one of {[role.value for role in allowed]}"
            )
            raise AuthorizationError("You do not have permission to perform this action")
        return current_user

    return role_checker


require_reviewer = require_role(UserRole.MANAGER, UserRole.ADMIN)
