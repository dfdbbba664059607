"""Share token model mapping public links to categories."""
from datetime import datetime
from uuid import UUID

from sqlalchemy import DateTime, ForeignKey, String, func
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base


class ShareToken(Base):
    """
    Share token model - an opaque credential granting read access to one category.

    The token value is the primary key. A category has at most one token.
    """

    __tablename__ = "category_share_tokens"

    token: Mapped[str] = mapped_column(String(64), primary_key=True)
    category_id: Mapped[UUID] = mapped_column(
        ForeignKey("categories.id", ondelete="CASCADE"),
        unique=True,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.clock_timestamp(),
        nullable=False,
    )
