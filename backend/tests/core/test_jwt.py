"""Tests for JWT issuing and validation."""
from datetime import UTC, datetime, timedelta
from uuid import uuid4

import jwt
import pytest

from core.auth import create_access_token, create_refresh_token, decode_token
from core.config import Settings
from services.exceptions import UnauthorizedError

SECRET = "core-auth-test-secret-key-0123456789abcdef"


@pytest.fixture
def settings() -> Settings:
    """Settings with a fixed signing secret."""
    return Settings(_env_file=None, jwt_secret_key=SECRET)


class TestTokenRoundTrip:
    """Tokens decode back to the user they were issued for."""

    def test_access_token(self, settings: Settings) -> None:
        """An access token decodes as an access token."""
        user_id = uuid4()
        assert decode_token(create_access_token(user_id, settings), "access", settings) == user_id

    def test_refresh_token(self, settings: Settings) -> None:
        """A refresh token decodes as a refresh token."""
        user_id = uuid4()
        token = create_refresh_token(user_id, settings)
        assert decode_token(token, "refresh", settings) == user_id

    def test_tokens_issued_together_differ(self, settings: Settings) -> None:
        """Two tokens for the same user in the same second are distinct."""
        user_id = uuid4()
        assert create_refresh_token(user_id, settings) != create_refresh_token(user_id, settings)

    def test_expiry_claims(self, settings: Settings) -> None:
        """Expiry follows the configured lifetimes."""
        token = create_access_token(uuid4(), settings)
        payload = jwt.decode(token, SECRET, algorithms=["HS256"])
        lifetime = payload["exp"] - payload["iat"]
        assert lifetime == settings.access_token_expire_minutes * 60


class TestDecodeFailures:
    """Every validation problem surfaces as UnauthorizedError."""

    def test_wrong_type(self, settings: Settings) -> None:
        """A refresh token is not accepted where an access token is expected."""
        token = create_refresh_token(uuid4(), settings)
        with pytest.raises(UnauthorizedError, match="Invalid token type"):
            decode_token(token, "access", settings)

    def test_expired(self, settings: Settings) -> None:
        """Expired tokens are rejected with a distinct message."""
        now = datetime.now(UTC)
        token = jwt.encode(
            {
                "sub": str(uuid4()),
                "type": "access",
                "iat": now - timedelta(hours=2),
                "exp": now - timedelta(hours=1),
            },
            SECRET,
            algorithm="HS256",
        )
        with pytest.raises(UnauthorizedError, match="Token has expired"):
            decode_token(token, "access", settings)

    def test_wrong_signature(self, settings: Settings) -> None:
        """Tokens signed with another secret are rejected."""
        other = Settings(_env_file=None, jwt_secret_key="another-secret-key-0123456789abcdefgh")
        token = create_access_token(uuid4(), other)
        with pytest.raises(UnauthorizedError, match="Invalid token"):
            decode_token(token, "access", settings)

    def test_garbage(self, settings: Settings) -> None:
        """Non-JWT strings are rejected."""
        with pytest.raises(UnauthorizedError):
            decode_token("not.a.jwt", "access", settings)

    def test_missing_type_claim(self, settings: Settings) -> None:
        """Tokens without a type claim are rejected."""
        token = jwt.encode(
            {"sub": str(uuid4()), "exp": datetime.now(UTC) + timedelta(minutes=5)},
            SECRET,
            algorithm="HS256",
        )
        with pytest.raises(UnauthorizedError):
            decode_token(token, "access", settings)

    def test_malformed_subject(self, settings: Settings) -> None:
        """A subject that is not a UUID is rejected."""
        token = jwt.encode(
            {
                "sub": "not-a-uuid",
                "type": "access",
                "exp": datetime.now(UTC) + timedelta(minutes=5),
            },
            SECRET,
            algorithm="HS256",
        )
        with pytest.raises(UnauthorizedError, match="malformed sub"):
            decode_token(token, "access", settings)
