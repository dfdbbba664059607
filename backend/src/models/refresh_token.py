"""Refresh token model - the single active refresh token per user."""
from datetime import datetime
from uuid import UUID

from sqlalchemy import DateTime, ForeignKey, String, func
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base


class RefreshToken(Base):
    """
    Keyed single-slot store of the most recently issued refresh token.

    The primary key is the user id, so a user can never hold two live records.
    Issuing a new refresh token overwrites the slot and invalidates the old one.
    Only the SHA-256 hash of the token is stored.
    """

    __tablename__ = "refresh_tokens"

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    token_hash: Mapped[str] = mapped_column(
        String(64),
        comment="SHA-256 hash of the refresh token",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.clock_timestamp(),
        nullable=False,
    )
