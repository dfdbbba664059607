"""Service layer for account registration."""
import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.passwords import hash_password
from models.user import User
from services.email_verification_service import can_register, consume_verification
from services.exceptions import ConflictError, InvalidRequestError

logger = logging.getLogger(__name__)


class EmailAlreadyRegisteredError(ConflictError):
    """Raised when an account already exists for the email."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__("Email is already registered")


class EmailNotVerifiedError(InvalidRequestError):
    """Raised when signing up without a verified, unused email verification."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__("Email has not been verified")


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    """Get a user by email address."""
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def register_user(
    db: AsyncSession,
    email: str,
    password: str,
    nickname: str,
) -> User:
    """
    Create an account for a verified email and consume the verification.

    Raises:
        EmailAlreadyRegisteredError: If an account already uses the email.
        EmailNotVerifiedError: If the email has no verified, unconsumed record.
    """
    if await get_user_by_email(db, email) is not None:
        raise EmailAlreadyRegisteredError(email)
    if not await can_register(db, email):
        raise EmailNotVerifiedError(email)

    user = User(
        email=email,
        password_hash=hash_password(password),
        nickname=nickname,
        email_verified=True,
    )
    db.add(user)
    try:
        await db.flush()
    except IntegrityError as e:
        # Concurrent signup for the same email won the race
        await db.rollback()
        raise EmailAlreadyRegisteredError(email) from e

    await consume_verification(db, email)
    await db.refresh(user)
    logger.info("Registered user %s", user.id)
    return user
