"""
Authentication service for EventDrop.

Registers photographer accounts, checks login credentials and resolves
the user behind a verified token.

Usage:
    service = AuthService(db_session, settings)
    response = await service.register(email, password, name)
"""

import logging
from functools import lru_cache

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings
from app.core.errors import AuthError, ConflictError, NotFoundError, ValidationError
from app.core.security import create_access_token, hash_password, verify_password
from app.models.user import User
from app.schemas.auth import AuthResponse, UserInfo

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


@lru_cache()
def _dummy_password_hash() -> str:
    # Unknown emails are checked against this so both failure paths hash once.
    return hash_password("eventdrop-timing-equalizer")


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


class AuthService:
    """Account registration, login and token-to-user resolution."""

    def __init__(self, db: AsyncSession, settings: Settings):
        self.db = db
        self.settings = settings

    async def register(self, email: str, password: str, name: str) -> AuthResponse:
        """
        Create an account and return a token for it.

        Raises:
            ValidationError: If email, password or name is blank
            ConflictError: If the email is already registered
        """
        email = normalize_email(email)
        name = (name or "").strip()
        missing = [
            field
            for field, value in (("email", email), ("password", (password or "").strip()), ("name", name))
            if not value
        ]
        if missing:
            raise ValidationError(
                "Email, password and name are required",
                details={"fields": missing},
            )

        result = await self.db.execute(select(User.id).where(User.email == email))
        if result.scalar_one_or_none() is not None:
            raise ConflictError("Email already registered", details={"field": "email"})

        user = User(email=email, password_hash=hash_password(password), name=name)
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            # Lost a race against a concurrent registration of the same email
            await self.db.rollback()
            raise ConflictError("Email already registered", details={"field": "email"})
        await self.db.refresh(user)

        logger.info("Registered user %s", user.id)
        return self._auth_response(user)

    async def login(self, email: str, password: str) -> AuthResponse:
        """
        Check credentials and issue a fresh token.

        Unknown email and wrong password fail identically.

        Raises:
            ValidationError: If email or password is blank
            AuthError: If the credentials do not match an account
        """
        email = normalize_email(email)
        if not email or not password:
            raise ValidationError("Email and password are required")

        result = await self.db.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()

        if user is None:
            verify_password(password, _dummy_password_hash())
            logger.info("Rejected login attempt")
            raise AuthError(INVALID_CREDENTIALS)

        if not verify_password(password, user.password_hash):
            logger.info("Rejected login attempt")
            raise AuthError(INVALID_CREDENTIALS)

        return self._auth_response(user)

    async def whoami(self, user_id: str) -> UserInfo:
        """
        Resolve the public fields of a token's user.

        Raises:
            NotFoundError: If the account no longer exists
        """
        result = await self.db.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()
        if user is None:
            raise NotFoundError("User not found", details={"resource_type": "user"})
        return UserInfo.model_validate(user)

    def _auth_response(self, user: User) -> AuthResponse:
        return AuthResponse(
            access_token=create_access_token(user.id, self.settings),
            token_type="bearer",
            expires_in=self.settings.access_token_expire_hours * 3600,
            user=UserInfo.model_validate(user),
        )
