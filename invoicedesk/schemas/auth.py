"""
Account credentials and token exchange payloads.
"""

from pydantic import EmailStr, Field, field_validator

from invoicedesk.schemas.base import BaseSchema


class Credentials(BaseSchema):
    """Email and password; addresses are matched case-insensitively."""

    email: EmailStr
    password: str = Field(..., min_length=6)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value):
        return value.strip().lower() if isinstance(value, str) else value


class LoginRequest(Credentials):
    pass


class RegisterRequest(Credentials):
    """New account: stricter password plus the identity shown on invoices."""

    password: str = Field(..., min_length=8, description="Minimum 8 characters")
    full_name: str = Field(..., min_length=2, max_length=255)
    business_name: str | None = Field(None, max_length=255)

    @field_validator("full_name", "business_name")
    @classmethod
    def strip_names(cls, value: str | None) -> str | None:
        return value.strip() if value else value


class RefreshTokenRequest(BaseSchema):
    refresh_token: str = Field(..., min_length=1)
