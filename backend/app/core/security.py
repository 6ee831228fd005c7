"""
Security utilities for EventDrop.

Provides password hashing with bcrypt, JWT token management and the
bearer-token guard used by every owner-scoped endpoint.
"""

from datetime import datetime, timedelta
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext

from .config import Settings, get_settings
from .errors import AuthError

# Password hashing context using bcrypt
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ALGORITHM = "HS256"

# HTTP Bearer token scheme; a missing header is reported by the guard itself
bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: Plain text password to hash

    Returns:
        Salted hash string
    """
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    """
    Verify a password against its hash.

    Args:
        plain: Plain text password to verify
        hashed: Hashed password to compare against

    Returns:
        True if password matches, False otherwise
    """
    return pwd_context.verify(plain, hashed)


def create_access_token(
    user_id: str,
    settings: Settings,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Create a JWT access token.

    Args:
        user_id: User ID to encode in the token
        settings: Settings carrying the signing key and default lifetime
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string
    """
    if expires_delta is None:
        expires_delta = timedelta(hours=settings.access_token_expire_hours)

    now = datetime.utcnow()
    to_encode = {
        "sub": user_id,
        "exp": now + expires_delta,
        "iat": now,
    }
    return jwt.encode(to_encode, settings.secret_key, algorithm=ALGORITHM)


def decode_token(token: str, settings: Settings) -> dict:
    """
    Decode and validate a JWT token.

    Raises:
        JWTError: If token is malformed, badly signed or expired
    """
    return jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])


def verify_token(token: Optional[str], settings: Settings) -> str:
    """
    Validate a bearer token and return the user id it carries.

    Raises:
        AuthError: If the token is missing, malformed, expired,
            badly signed or has no subject
    """
    if not token:
        raise AuthError("Missing bearer token")

    try:
        payload = decode_token(token, settings)
    except JWTError:
        raise AuthError()

    user_id = payload.get("sub")
    if not user_id:
        raise AuthError()
    return user_id


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings),
) -> str:
    """
    FastAPI dependency that gates a route on a valid bearer token.

    Only the token is checked here; handlers scope their queries by the
    returned user id, so no database round trip is needed per request.
    """
    token = credentials.credentials if credentials else None
    return verify_token(token, settings)
