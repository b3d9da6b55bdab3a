"""
Unit Tests for Security Module
Tests for: password hashing, JWT tokens
"""
import pytest
from datetime import datetime, timedelta, timezone
from jose import jwt
from fastapi import HTTPException

from trackerpro.core.security import (
    BcryptPasswordHasher,
    password_hasher,
    create_access_token,
    decode_token,
    token_lifetime,
)
from trackerpro.core.config import settings


class TestPasswordHashing:
    """Test BcryptPasswordHasher"""

    def test_hash_password_returns_different_value(self):
        """Test that hashing returns a different value than input"""
        password = "testpassword123"
        hashed = password_hasher.hash(password)

        assert hashed != password
        assert hashed.startswith("$2")

    def test_hash_password_different_each_time(self):
        """Test that hashing same password returns different hashes"""
        password = "testpassword123"

        # Bcrypt generates different salts
        assert password_hasher.hash(password) != password_hasher.hash(password)

    def test_verify_password_correct(self):
        hashed = password_hasher.hash("testpassword123")

        assert password_hasher.verify("testpassword123", hashed) is True

    def test_verify_password_incorrect(self):
        hashed = password_hasher.hash("testpassword123")

        assert password_hasher.verify("wrongpassword", hashed) is False

    def test_verify_malformed_hash_is_false(self):
        """A digest that is not bcrypt never matches"""
        assert password_hasher.verify("anything", "not-a-bcrypt-hash") is False

    def test_verify_missing_hash_is_false(self):
        assert password_hasher.verify("anything", None) is False
        assert password_hasher.verify("anything", "") is False

    def test_long_password_truncated_to_72_bytes(self):
        """Bytes past the 72-byte limit do not affect verification"""
        base = "a" * 72
        hashed = password_hasher.hash(base + "tail-one")

        assert password_hasher.verify(base + "tail-two", hashed) is True

    def test_unicode_password(self):
        password = "pässwörd-密码"
        hashed = password_hasher.hash(password)

        assert password_hasher.verify(password, hashed) is True

    def test_configured_rounds(self):
        hasher = BcryptPasswordHasher(rounds=5)
        hashed = hasher.hash("secret")

        assert hashed.split("$")[2] == "05"
        assert hasher.verify("secret", hashed) is True


class TestJWTTokens:
    """Test JWT token creation and decoding"""

    def test_create_access_token(self):
        token = create_access_token({"sub": "1", "email": "test@example.com"})

        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        assert payload["sub"] == "1"
        assert payload["email"] == "test@example.com"
        assert payload["type"] == "access"
        assert "exp" in payload

    def test_create_access_token_custom_expiry(self):
        token = create_access_token({"sub": "1"}, expires_delta=timedelta(days=14))

        payload = decode_token(token)
        expires = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
        assert expires - datetime.now(timezone.utc) > timedelta(days=13)

    def test_decode_valid_token(self):
        token = create_access_token({"sub": "42", "role": "ADMIN"})

        payload = decode_token(token)

        assert payload["sub"] == "42"
        assert payload["role"] == "ADMIN"

    def test_decode_invalid_token(self):
        with pytest.raises(HTTPException) as exc_info:
            decode_token("invalid.token.here")

        assert exc_info.value.status_code == 401

    def test_decode_expired_token(self):
        token = create_access_token({"sub": "1"}, expires_delta=timedelta(seconds=-10))

        with pytest.raises(HTTPException) as exc_info:
            decode_token(token)

        assert exc_info.value.status_code == 401

    def test_decode_token_wrong_secret(self):
        token = jwt.encode({"sub": "1", "type": "access"}, "another-secret", algorithm="HS256")

        with pytest.raises(HTTPException):
            decode_token(token)


class TestTokenLifetime:

    def test_default_lifetime(self):
        assert token_lifetime() == timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    def test_remember_me_lifetime(self):
        assert token_lifetime(remember_me=True) == timedelta(days=settings.REMEMBER_ME_EXPIRE_DAYS)
