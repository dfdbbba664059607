"""
Service layer for login, token rotation and logout.

Each user has a single refresh token slot. Login and reissue overwrite it, so
only the most recently issued refresh token can be exchanged.
"""
import hashlib
import logging
import secrets
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import create_access_token, create_refresh_token, decode_token
from core.config import Settings
from core.passwords import verify_password
from models.refresh_token import RefreshToken
from models.user import User
from services.exceptions import NotFoundError, UnauthorizedError

logger = logging.getLogger(__name__)


class UserNotFoundError(NotFoundError):
    """Raised when no account exists for the given email."""

    def __init__(self) -> None:
        super().__init__("User not found")


class InvalidCredentialsError(UnauthorizedError):
    """Raised when the password does not match."""

    def __init__(self) -> None:
        super().__init__("Invalid email or password")


class InvalidRefreshTokenError(UnauthorizedError):
    """Raised when a refresh token is not the user's current one."""

    def __init__(self) -> None:
        super().__init__("Invalid refresh token")


@dataclass
class TokenPair:
    """Access and refresh tokens issued together, plus the user they belong to."""

    access_token: str
    refresh_token: str
    user: User


def hash_refresh_token(token: str) -> str:
    """SHA-256 hex digest of a refresh token, as stored in the slot."""
    return hashlib.sha256(token.encode()).hexdigest()


async def _store_refresh_token(db: AsyncSession, user_id: UUID, token: str) -> None:
    record = await db.get(RefreshToken, user_id)
    if record is None:
        db.add(RefreshToken(user_id=user_id, token_hash=hash_refresh_token(token)))
    else:
        record.token_hash = hash_refresh_token(token)
    await db.flush()


async def _issue_pair(db: AsyncSession, user: User, settings: Settings) -> TokenPair:
    access_token = create_access_token(user.id, settings)
    refresh_token = create_refresh_token(user.id, settings)
    await _store_refresh_token(db, user.id, refresh_token)
    return TokenPair(access_token=access_token, refresh_token=refresh_token, user=user)


async def login(db: AsyncSession, email: str, password: str, settings: Settings) -> TokenPair:
    """
    Authenticate with email and password and issue a token pair.

    Raises:
        UserNotFoundError: If no account has this email.
        InvalidCredentialsError: If the password is wrong.
    """
    result = await db.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()
    if user is None:
        raise UserNotFoundError
    if not verify_password(password, user.password_hash):
        logger.info("Failed login for user %s", user.id)
        raise InvalidCredentialsError

    return await _issue_pair(db, user, settings)


async def reissue(db: AsyncSession, refresh_token: str, settings: Settings) -> TokenPair:
    """
    Exchange the current refresh token for a new pair, invalidating the old one.

    Raises:
        UnauthorizedError: If the token does not decode as a refresh token, the
            user has no stored token, or the stored token is a different one.
    """
    user_id = decode_token(refresh_token, "refresh", settings)

    record = await db.get(RefreshToken, user_id)
    if record is None or not secrets.compare_digest(
        record.token_hash, hash_refresh_token(refresh_token),
    ):
        logger.warning("Refresh token mismatch for user %s", user_id)
        raise InvalidRefreshTokenError

    user = await db.get(User, user_id)
    if user is None:
        raise InvalidRefreshTokenError

    return await _issue_pair(db, user, settings)


async def logout(db: AsyncSession, user_id: UUID) -> None:
    """Drop the user's stored refresh token. A no-op when none is stored."""
    record = await db.get(RefreshToken, user_id)
    if record is not None:
        await db.delete(record)
        await db.flush()
