"""
Security test fixtures.

Resources here belong to ``test_user``; tests access them through
``other_client`` to check that ownership is enforced.
"""
import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from models.user import User
from schemas.bookmark import BookmarkCreate
from schemas.bookmark import BookmarkResponse
from schemas.category import CategoryCreate, CategoryResponse
from services import bookmark_service, category_service


@pytest.fixture
async def owner_bookmark(db_session: AsyncSession, test_user: User) -> BookmarkResponse:
    """A private bookmark owned by ``test_user``."""
    return await bookmark_service.create_bookmark(
        db_session,
        test_user.id,
        BookmarkCreate(
            url="https://owner-bookmark.example.com/",
            title="Owner's private bookmark",
            tags=["private"],
        ),
    )


@pytest.fixture
async def owner_category(
    db_session: AsyncSession,
    test_user: User,
    owner_bookmark: BookmarkResponse,  # noqa: ARG001
) -> CategoryResponse:
    """A private category owned by ``test_user`` covering ``owner_bookmark``."""
    return await category_service.create_category(
        db_session,
        test_user.id,
        CategoryCreate(title="Owner's private category", tags=["private"]),
    )
