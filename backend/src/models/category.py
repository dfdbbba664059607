"""Category model for storing saved tag filters."""
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, Index, String, text
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import Base, TimestampMixin, UUIDv7Mixin

if TYPE_CHECKING:
    from models.user import User


class Category(Base, UUIDv7Mixin, TimestampMixin):
    """
    Category model - a named, saved tag filter.

    A category does not store bookmarks. Its contents are computed on read as
    every bookmark of the owner whose ``tag_ids`` overlap the category's
    ``tag_ids`` (OR semantics across tags), newest first.

    Categories created by importing a shared link keep the source category's
    tag ids, which belong to the source owner.
    """

    __tablename__ = "categories"
    __table_args__ = (
        Index("ix_categories_tag_ids_gin", "tag_ids", postgresql_using="gin"),
        # Partial index for the cross-user public search paths
        Index(
            "ix_categories_public",
            "is_public",
            postgresql_where=text("is_public"),
        ),
    )

    # id provided by UUIDv7Mixin
    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
    )
    title: Mapped[str] = mapped_column(String(200))
    is_public: Mapped[bool] = mapped_column(Boolean, default=False, server_default=text("false"))
    tag_ids: Mapped[list[UUID]] = mapped_column(
        ARRAY(PG_UUID(as_uuid=True)),
        nullable=False,
        default=list,
        server_default=text("'{}'"),
    )

    user: Mapped["User"] = relationship(back_populates="categories")
