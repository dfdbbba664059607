"""SQLAlchemy models."""
from models.base import Base, TimestampMixin, UUIDv7Mixin
from models.bookmark import Bookmark
from models.category import Category
from models.email_verification import EmailVerification
from models.refresh_token import RefreshToken
from models.share_token import ShareToken
from models.tag import Tag
from models.user import User

__all__ = [
    "Base",
    "Bookmark",
    "Category",
    "EmailVerification",
    "RefreshToken",
    "ShareToken",
    "Tag",
    "TimestampMixin",
    "UUIDv7Mixin",
    "User",
]
