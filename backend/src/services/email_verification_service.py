"""
Service layer for the email verification gate in front of registration.

Flow: a code is mailed to the address, the user submits it back, and a
verified (not yet consumed) record lets exactly one account be registered.
"""
import logging
import secrets
from datetime import UTC, datetime, timedelta
from enum import Enum

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import Settings
from core.mail import MailSender
from models.email_verification import EmailVerification

logger = logging.getLogger(__name__)

VERIFICATION_SUBJECT = "Your verification code"


class VerificationResult(str, Enum):
    """Outcome of checking a submitted verification code."""

    SUCCESS = "success"
    CODE_MISMATCH = "code_mismatch"
    CODE_EXPIRED = "code_expired"


def generate_code() -> str:
    """Return a random 6-digit numeric code (100000-999999)."""
    return f"{secrets.randbelow(900000) + 100000}"


async def get_verification(db: AsyncSession, email: str) -> EmailVerification | None:
    """Get the verification record for an email address."""
    result = await db.execute(
        select(EmailVerification).where(EmailVerification.email == email),
    )
    return result.scalar_one_or_none()


async def send_verification_code(
    db: AsyncSession,
    email: str,
    mailer: MailSender,
    settings: Settings,
) -> EmailVerification:
    """
    Issue a new code for ``email`` and mail it.

    Any earlier record for the address is overwritten, including its verified
    and consumed state. The record is flushed before sending; when delivery
    fails the MailDeliveryError propagates and the request transaction rolls
    the record back.

    Raises:
        MailDeliveryError: If the email could not be sent.
    """
    code = generate_code()
    expires_at = datetime.now(UTC) + timedelta(minutes=settings.email_code_ttl_minutes)

    record = await get_verification(db, email)
    if record is None:
        record = EmailVerification(email=email, code=code, expires_at=expires_at)
        db.add(record)
    else:
        record.code = code
        record.expires_at = expires_at
        record.verified = False
        record.consumed_at = None
    await db.flush()

    await mailer.send(
        email,
        VERIFICATION_SUBJECT,
        f"Your verification code is {code}. "
        f"It expires in {settings.email_code_ttl_minutes} minutes.",
    )
    logger.info("Sent verification code to %s", email)
    return record


async def verify_code(db: AsyncSession, email: str, code: str) -> VerificationResult:
    """
    Check a submitted code.

    An unknown email and a wrong code both report CODE_MISMATCH. A correct code
    past its expiry reports CODE_EXPIRED. Otherwise the record is marked verified.
    """
    record = await get_verification(db, email)
    # Bytes, since compare_digest rejects non-ASCII str arguments
    if record is None or not secrets.compare_digest(record.code.encode(), code.encode()):
        return VerificationResult.CODE_MISMATCH
    if datetime.now(UTC) > record.expires_at:
        return VerificationResult.CODE_EXPIRED

    record.verified = True
    await db.flush()
    return VerificationResult.SUCCESS


async def can_register(db: AsyncSession, email: str) -> bool:
    """True when the email has a verified record that no account has consumed yet."""
    record = await get_verification(db, email)
    return record is not None and record.verified and record.consumed_at is None


async def consume_verification(db: AsyncSession, email: str) -> None:
    """Mark the email's verification as used by a registration."""
    record = await get_verification(db, email)
    if record is not None:
        record.consumed_at = datetime.now(UTC)
        await db.flush()
