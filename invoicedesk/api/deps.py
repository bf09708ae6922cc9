"""
API Dependencies.
Common dependencies for authentication, database sessions, etc.
"""

import logging
from typing import Annotated
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from invoicedesk.core.database import get_db
from invoicedesk.core.security import ACCESS_TOKEN, decode_token
from invoicedesk.models.user import User


logger = logging.getLogger(__name__)

# Bearer token scheme; missing credentials are handled below
security = HTTPBearer(auto_error=False)


async def _resolve_user(
    credentials: HTTPAuthorizationCredentials | None,
    db: AsyncSession,
) -> User | None:
    """User for a valid access token, None otherwise."""
    if not credentials:
        return None

    token_data = decode_token(credentials.credentials)
    if token_data is None:
        logger.warning("Invalid or expired token")
        return None

    if token_data.token_type != ACCESS_TOKEN:
        logger.warning("Wrong token type: %s", token_data.token_type)
        return None

    result = await db.execute(
        select(User).where(User.id == token_data.user_id)
    )
    user = result.scalar_one_or_none()

    if user is None:
        logger.warning("User %s not found", token_data.user_id)
        return None

    logger.debug("Authenticated user %s", user.email)
    return user


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Get the current user from the JWT bearer token.

    Raises:
        HTTPException: If the token is missing, invalid or the user is gone
    """
    if not credentials:
        logger.warning("Request without token")

    user = await _resolve_user(credentials, db)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired authentication token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


async def get_current_active_user(
    current_user: User = Depends(get_current_user),
) -> User:
    """
    Get the current active user.

    Raises:
        HTTPException: If the account is disabled
    """
    if not current_user.is_active:
        logger.warning("Disabled account: %s", current_user.email)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account disabled",
        )
    return current_user


async def get_optional_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> User | None:
    """
    Current active user, or None for anonymous requests.

    Used by the save endpoints, where the save pipeline reports the missing
    user itself.
    """
    user = await _resolve_user(credentials, db)
    if user is not None and not user.is_active:
        return None
    return user


# Type aliases for cleaner route signatures
CurrentUser = Annotated[User, Depends(get_current_active_user)]
OptionalUser = Annotated[User | None, Depends(get_optional_user)]
DbSession = Annotated[AsyncSession, Depends(get_db)]
