"""
User schemas.
"""

from datetime import datetime
from pydantic import EmailStr

from invoicedesk.schemas.base import BaseSchema


class UserResponse(BaseSchema):
    """Public user data."""

    id: int
    email: EmailStr
    full_name: str
    business_name: str | None
    is_active: bool
    created_at: datetime
    updated_at: datetime
