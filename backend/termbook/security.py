"""
Termbook Backend: Authentication Dependencies
===============================================

What:  Resolves the calling user from an `Authorization: Bearer <JWT>` header.
How:   python-jose verifies the HS256 signature and expiry; the `sub` claim is
       the user's numeric id, looked up in `users`.
Who:   Route handlers, through `Depends(get_current_user)` or
       `Depends(get_optional_user)`.

Tokens are minted by the identity service. `create_access_token` exists for
local tooling and the test suite.

The resolved `User` is passed explicitly into service calls; services never
look at the request themselves.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from termbook.config import settings
from termbook.database import get_db_session
from termbook.exceptions import AuthenticationError
from termbook.models import User

logger = logging.getLogger(__name__)

# auto_error=False: a missing header yields None, so anonymous routes can
# share the dependency and we answer with our own 401 envelope.
bearer_scheme = HTTPBearer(auto_error=False)


def create_access_token(user_id: int, expires_minutes: Optional[int] = None) -> str:
    """Sign a token whose subject is `user_id`."""
    minutes = expires_minutes or settings.access_token_expire_minutes
    claims = {
        "sub": str(user_id),
        "exp": datetime.now(timezone.utc) + timedelta(minutes=minutes),
    }
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> int:
    """
    Verify a token and return the user id from its `sub` claim.

    Raises:
        AuthenticationError: bad signature, expired, or no usable subject
    """
    try:
        payload = jwt.decode(
            token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm]
        )
    except JWTError as e:
        raise AuthenticationError(
            message="Invalid or expired token",
            context={"reason": str(e)},
        )

    subject = payload.get("sub")
    try:
        return int(subject)
    except (TypeError, ValueError):
        raise AuthenticationError(
            message="Invalid or expired token",
            context={"reason": "missing or non-numeric sub claim"},
        )


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db_session),
) -> Optional[User]:
    """
    The caller, or None for anonymous requests.

    A token that is present but invalid is still rejected with 401.
    """
    if credentials is None:
        return None

    user_id = decode_access_token(credentials.credentials)
    user = await db.get(User, user_id)
    if user is None:
        logger.warning("Token subject %s does not match any user", user_id)
        raise AuthenticationError(
            message="Invalid or expired token",
            context={"user_id": user_id},
        )
    return user


async def get_current_user(
    user: Optional[User] = Depends(get_optional_user),
) -> User:
    """The caller; 401 when the request is anonymous."""
    if user is None:
        raise AuthenticationError()
    return user
