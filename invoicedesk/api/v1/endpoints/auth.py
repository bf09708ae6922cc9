"""
Account endpoints: sign-up, token issue and refresh, current profile.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from invoicedesk.api.deps import DbSession, CurrentUser
from invoicedesk.core.security import TokenPair
from invoicedesk.schemas.auth import LoginRequest, RegisterRequest, RefreshTokenRequest
from invoicedesk.schemas.user import UserResponse
from invoicedesk.services.auth import AuthService


router = APIRouter()


def get_auth_service(db: DbSession) -> AuthService:
    return AuthService(db)


Accounts = Annotated[AuthService, Depends(get_auth_service)]


@router.post(
    "/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an account",
)
async def register(data: RegisterRequest, accounts: Accounts) -> UserResponse:
    """Open an account; the email must not be registered yet."""
    return UserResponse.model_validate(await accounts.register(data))


@router.post("/login", response_model=TokenPair, summary="Issue tokens")
async def login(data: LoginRequest, accounts: Accounts) -> TokenPair:
    """Exchange email and password for an access/refresh token pair."""
    _, tokens = await accounts.login(data)
    return tokens


@router.post("/refresh", response_model=TokenPair, summary="Refresh tokens")
async def refresh_token(data: RefreshTokenRequest, accounts: Accounts) -> TokenPair:
    return await accounts.refresh_token(data.refresh_token)


@router.get("/me", response_model=UserResponse, summary="Current profile")
async def read_profile(current_user: CurrentUser) -> UserResponse:
    return UserResponse.model_validate(current_user)
