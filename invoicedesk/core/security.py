"""
Security utilities: bcrypt password hashing and JWT access/refresh tokens.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
import bcrypt
from jose import JWTError, jwt
from pydantic import BaseModel

from invoicedesk.core.config import settings


ACCESS_TOKEN = "access"
REFRESH_TOKEN = "refresh"


class TokenData(BaseModel):
    """Decoded token payload."""
    user_id: int
    email: Optional[str] = None
    token_type: str = ACCESS_TOKEN


class TokenPair(BaseModel):
    """Access and refresh token pair."""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its bcrypt hash."""
    return bcrypt.checkpw(
        plain_password.encode("utf-8"),
        hashed_password.encode("utf-8"),
    )


def get_password_hash(password: str) -> str:
    """Hash a password with a fresh salt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def _token_lifetime(token_type: str) -> timedelta:
    if token_type == REFRESH_TOKEN:
        return timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
    return timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)


def create_token(
    user_id: int,
    email: str,
    token_type: str = ACCESS_TOKEN,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Encode a signed JWT for a user.

    Args:
        user_id: Subject of the token
        email: User email, carried for logging only
        token_type: ``access`` or ``refresh``
        expires_delta: Overrides the configured lifetime

    Returns:
        Encoded JWT
    """
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "email": email,
        "type": token_type,
        "iat": now,
        "exp": now + (expires_delta or _token_lifetime(token_type)),
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_token_pair(user_id: int, email: str) -> TokenPair:
    """Create an access token and a refresh token for the same user."""
    return TokenPair(
        access_token=create_token(user_id, email, ACCESS_TOKEN),
        refresh_token=create_token(user_id, email, REFRESH_TOKEN),
    )


def decode_token(token: str) -> Optional[TokenData]:
    """
    Decode and validate a JWT.

    Returns:
        TokenData if the signature and expiry are valid, None otherwise
    """
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
        )
    except JWTError:
        return None

    subject = payload.get("sub")
    if subject is None:
        return None

    try:
        user_id = int(subject)
    except ValueError:
        return None

    return TokenData(
        user_id=user_id,
        email=payload.get("email"),
        token_type=payload.get("type", ACCESS_TOKEN),
    )
