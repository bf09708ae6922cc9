"""
Authentication service.
Handles user registration, login, and token management.
"""

import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from fastapi import HTTPException, status

from invoicedesk.models.user import User
from invoicedesk.schemas.auth import RegisterRequest, LoginRequest
from invoicedesk.core.security import (
    REFRESH_TOKEN,
    get_password_hash,
    verify_password,
    create_token_pair,
    decode_token,
    TokenPair,
)


logger = logging.getLogger(__name__)


class AuthService:
    """Service for authentication operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def register(self, data: RegisterRequest) -> User:
        """
        Register a new user.

        Args:
            data: Registration data

        Returns:
            Created user

        Raises:
            HTTPException: If email already exists
        """
        if await self.get_user_by_email(data.email):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="An account with this email already exists",
            )

        user = User(
            email=data.email,
            hashed_password=get_password_hash(data.password),
            full_name=data.full_name,
            business_name=data.business_name,
        )

        self.db.add(user)
        await self.db.flush()
        await self.db.refresh(user)

        logger.info("Registered user %s", user.id)
        return user

    async def login(self, data: LoginRequest) -> tuple[User, TokenPair]:
        """
        Authenticate user and generate tokens.

        Returns:
            Tuple of (user, token_pair)

        Raises:
            HTTPException: If credentials are invalid or the account is disabled
        """
        user = await self.get_user_by_email(data.email)

        if not user or not verify_password(data.password, user.hashed_password):
            logger.warning("Failed login for %s", data.email)
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Incorrect email or password",
            )

        if not user.is_active:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Account disabled",
            )

        return user, create_token_pair(user.id, user.email)

    async def refresh_token(self, refresh_token: str) -> TokenPair:
        """
        Generate new token pair from refresh token.

        Raises:
            HTTPException: If the refresh token is invalid or its user is gone
        """
        token_data = decode_token(refresh_token)

        if token_data is None or token_data.token_type != REFRESH_TOKEN:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid refresh token",
            )

        user = await self.get_user_by_id(token_data.user_id)

        if not user:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="User not found",
            )

        if not user.is_active:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Account disabled",
            )

        return create_token_pair(user.id, user.email)

    async def get_user_by_id(self, user_id: int) -> User | None:
        """Get user by ID."""
        result = await self.db.execute(
            select(User).where(User.id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_user_by_email(self, email: str) -> User | None:
        """Get user by email."""
        result = await self.db.execute(
            select(User).where(User.email == email)
        )
        return result.scalar_one_or_none()
