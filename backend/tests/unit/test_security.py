"""
Unit tests for password hashing and JWT handling.
"""

from datetime import datetime, timedelta

import pytest
from jose import jwt

from app.core.config import Settings
from app.core.errors import AuthError
from app.core.security import (
    ALGORITHM,
    create_access_token,
    decode_token,
    hash_password,
    verify_password,
    verify_token,
)


@pytest.fixture
def settings() -> Settings:
    return Settings(secret_key="unit-test-secret-key-that-is-32-chars-long")


class TestPasswordHashing:

    def test_hash_is_salted(self):
        first = hash_password("hunter22")
        second = hash_password("hunter22")

        assert first != second
        assert first != "hunter22"

    def test_verify(self):
        hashed = hash_password("hunter22")

        assert verify_password("hunter22", hashed)
        assert not verify_password("hunter23", hashed)


class TestTokens:

    def test_round_trip(self, settings: Settings):
        token = create_access_token("user-123", settings)

        assert verify_token(token, settings) == "user-123"

    def test_default_lifetime(self, settings: Settings):
        token = create_access_token("user-123", settings)
        payload = decode_token(token, settings)

        assert payload["exp"] - payload["iat"] == settings.access_token_expire_hours * 3600

    def test_expired_token(self, settings: Settings):
        token = create_access_token("user-123", settings, expires_delta=timedelta(seconds=-1))

        with pytest.raises(AuthError):
            verify_token(token, settings)

    def test_wrong_signing_key(self, settings: Settings):
        token = create_access_token("user-123", Settings(secret_key="x" * 40))

        with pytest.raises(AuthError):
            verify_token(token, settings)

    def test_token_without_subject(self, settings: Settings):
        token = jwt.encode(
            {"exp": datetime.utcnow() + timedelta(hours=1)},
            settings.secret_key,
            algorithm=ALGORITHM,
        )

        with pytest.raises(AuthError):
            verify_token(token, settings)

    @pytest.mark.parametrize("token", [None, "", "not-a-jwt"])
    def test_missing_or_garbage_token(self, settings: Settings, token):
        with pytest.raises(AuthError) as exc_info:
            verify_token(token, settings)

        assert exc_info.value.status_code == 401
        assert exc_info.value.headers == {"WWW-Authenticate": "Bearer"}
