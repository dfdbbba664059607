"""Email verification model - pending one-time codes gating registration."""
from datetime import datetime

from sqlalchemy import Boolean, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base, TimestampMixin, UUIDv7Mixin


class EmailVerification(Base, UUIDv7Mixin, TimestampMixin):
    """
    One record per email address holding the last code sent to it.

    Sending a new code overwrites the record. Registration is allowed while
    ``verified`` is true and ``consumed_at`` is null; creating the account sets
    ``consumed_at`` so the same verification cannot back a second signup.
    """

    __tablename__ = "email_verifications"

    # id provided by UUIDv7Mixin
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    code: Mapped[str] = mapped_column(String(6))
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    verified: Mapped[bool] = mapped_column(Boolean, default=False)
    consumed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, default=None,
    )
