"""Unit tests for JWT session tokens."""
from datetime import datetime, timedelta

import pytest
from jose import jwt

from reviewhub.auth import InvalidToken, create_access_token, decode_token
from reviewhub.config import get_settings

settings = get_settings()


class TestJWTTokens:
    """Test JWT token creation and decoding."""

    def test_create_access_token(self):
        token = create_access_token({"sub": "admin-user", "role": "admin"})

        decoded = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
        assert decoded["sub"] == "admin-user"
        assert decoded["role"] == "admin"
        assert "exp" in decoded

    def test_create_token_with_custom_expiry(self):
        token = create_access_token({"sub": "user123"}, timedelta(minutes=30))

        decoded = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
        assert decoded["exp"] > datetime.utcnow().timestamp()

    def test_decode_token_valid(self):
        token = create_access_token({"sub": "reader", "role": "regular"})

        decoded = decode_token(token)
        assert decoded["sub"] == "reader"
        assert decoded["role"] == "regular"

    def test_decode_token_invalid(self):
        with pytest.raises(InvalidToken):
            decode_token("invalid.token.here")

    def test_decode_token_expired(self):
        token = create_access_token({"sub": "reader"}, timedelta(hours=-1))

        with pytest.raises(InvalidToken):
            decode_token(token)

    def test_decode_token_wrong_secret(self):
        token = jwt.encode({"sub": "reader"}, "another-secret", algorithm=settings.jwt_algorithm)

        with pytest.raises(InvalidToken):
            decode_token(token)
