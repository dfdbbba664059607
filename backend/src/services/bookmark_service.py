"""Service layer for bookmark CRUD, favorites and tag-based aggregation."""
import logging
from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from models.bookmark import Bookmark
from models.category import Category
from schemas.bookmark import BookmarkCreate, BookmarkResponse, BookmarkUpdate
from schemas.tag import TagView
from services.exceptions import NotFoundError
from services.tag_service import find_tags_by_ids, resolve_tags
from services.utils import contains_pattern

logger = logging.getLogger(__name__)


class BookmarkNotFoundError(NotFoundError):
    """Raised when a bookmark is not found or not owned by the caller."""

    def __init__(self, bookmark_id: UUID) -> None:
        self.bookmark_id = bookmark_id
        super().__init__("Bookmark not found")


async def to_response(db: AsyncSession, bookmark: Bookmark) -> BookmarkResponse:
    """Build a bookmark response, decorating ``tag_ids`` with tag views."""
    tags = await find_tags_by_ids(db, bookmark.tag_ids)
    return _build_response(bookmark, tags)


async def to_responses(db: AsyncSession, bookmarks: list[Bookmark]) -> list[BookmarkResponse]:
    """Build responses for many bookmarks with a single tag lookup."""
    all_ids = [tag_id for bookmark in bookmarks for tag_id in bookmark.tag_ids]
    tags_by_id = {tag.id: tag for tag in await find_tags_by_ids(db, all_ids)}
    return [
        _build_response(
            bookmark,
            [tags_by_id[tag_id] for tag_id in bookmark.tag_ids if tag_id in tags_by_id],
        )
        for bookmark in bookmarks
    ]


def _build_response(bookmark: Bookmark, tags: list) -> BookmarkResponse:
    return BookmarkResponse(
        id=bookmark.id,
        url=bookmark.url,
        title=bookmark.title,
        description=bookmark.description,
        favorite=bookmark.favorite,
        tags=[TagView.model_validate(tag) for tag in tags],
        created_at=bookmark.created_at,
    )


def _newest_first(query):  # noqa: ANN001, ANN202
    return query.order_by(Bookmark.created_at.desc(), Bookmark.id.desc())


async def _get_owned_bookmark(db: AsyncSession, user_id: UUID, bookmark_id: UUID) -> Bookmark:
    result = await db.execute(
        select(Bookmark).where(Bookmark.id == bookmark_id, Bookmark.user_id == user_id),
    )
    bookmark = result.scalar_one_or_none()
    if bookmark is None:
        raise BookmarkNotFoundError(bookmark_id)
    return bookmark


async def create_bookmark(
    db: AsyncSession,
    user_id: UUID,
    data: BookmarkCreate,
) -> BookmarkResponse:
    """
    Create a new bookmark for a user.

    Tag names are resolved against the user's tags; unknown names are created.

    Args:
        db: Database session.
        user_id: User ID to scope the bookmark.
        data: Bookmark creation data.

    Returns:
        The created bookmark, decorated with its tags.
    """
    resolved = await resolve_tags(db, user_id, data.tags)
    bookmark = Bookmark(
        user_id=user_id,
        url=str(data.url),
        title=data.title,
        description=data.description,
        favorite=data.favorite,
        tag_ids=resolved.tag_ids,
    )
    db.add(bookmark)
    await db.flush()
    await db.refresh(bookmark)
    logger.info("Created bookmark %s for user %s", bookmark.id, user_id)
    return _build_response(bookmark, resolved.tags)


async def get_bookmarks(db: AsyncSession, user_id: UUID) -> list[BookmarkResponse]:
    """Get all bookmarks for a user, newest first."""
    result = await db.execute(
        _newest_first(select(Bookmark).where(Bookmark.user_id == user_id)),
    )
    return await to_responses(db, list(result.scalars().all()))


async def get_bookmark(db: AsyncSession, user_id: UUID, bookmark_id: UUID) -> BookmarkResponse:
    """
    Get a single bookmark by id, scoped to user.

    Raises:
        BookmarkNotFoundError: If the bookmark doesn't exist or belongs to another user.
    """
    bookmark = await _get_owned_bookmark(db, user_id, bookmark_id)
    return await to_response(db, bookmark)


async def get_favorite_bookmarks(db: AsyncSession, user_id: UUID) -> list[BookmarkResponse]:
    """Get a user's favorite bookmarks, newest first."""
    result = await db.execute(
        _newest_first(
            select(Bookmark).where(
                Bookmark.user_id == user_id,
                Bookmark.favorite.is_(True),
            ),
        ),
    )
    return await to_responses(db, list(result.scalars().all()))


async def search_bookmarks_by_title(
    db: AsyncSession,
    user_id: UUID,
    keyword: str,
) -> list[BookmarkResponse]:
    """Case-insensitive substring search over the titles of a user's bookmarks."""
    pattern = contains_pattern(keyword)
    result = await db.execute(
        _newest_first(
            select(Bookmark).where(
                Bookmark.user_id == user_id,
                Bookmark.title.ilike(pattern),
            ),
        ),
    )
    return await to_responses(db, list(result.scalars().all()))


async def get_bookmarks_by_tag_ids(
    db: AsyncSession,
    user_id: UUID,
    tag_ids: list[UUID],
) -> list[BookmarkResponse]:
    """
    Get the user's bookmarks carrying at least one of ``tag_ids``, newest first.

    This is the read-time aggregation behind category contents. An empty
    ``tag_ids`` yields an empty list without querying.
    """
    if not tag_ids:
        return []
    result = await db.execute(
        _newest_first(
            select(Bookmark).where(
                Bookmark.user_id == user_id,
                Bookmark.tag_ids.overlap(list(tag_ids)),
            ),
        ),
    )
    return await to_responses(db, list(result.scalars().all()))


async def update_bookmark(
    db: AsyncSession,
    user_id: UUID,
    bookmark_id: UUID,
    data: BookmarkUpdate,
) -> BookmarkResponse:
    """
    Replace a bookmark's fields and tags.

    Tags no longer referenced by the bookmark are kept; only explicit tag
    deletion removes a tag.

    Raises:
        BookmarkNotFoundError: If the bookmark doesn't exist or belongs to another user.
    """
    bookmark = await _get_owned_bookmark(db, user_id, bookmark_id)
    resolved = await resolve_tags(db, user_id, data.tags)

    bookmark.url = str(data.url)
    bookmark.title = data.title
    bookmark.description = data.description
    bookmark.favorite = data.favorite
    bookmark.tag_ids = resolved.tag_ids

    await db.flush()
    await db.refresh(bookmark)
    return _build_response(bookmark, resolved.tags)


async def toggle_favorite(db: AsyncSession, user_id: UUID, bookmark_id: UUID) -> BookmarkResponse:
    """
    Flip a bookmark's favorite flag.

    Raises:
        BookmarkNotFoundError: If the bookmark doesn't exist or belongs to another user.
    """
    bookmark = await _get_owned_bookmark(db, user_id, bookmark_id)
    bookmark.favorite = not bookmark.favorite
    await db.flush()
    await db.refresh(bookmark)
    return await to_response(db, bookmark)


async def delete_bookmark(db: AsyncSession, user_id: UUID, bookmark_id: UUID) -> None:
    """
    Permanently delete a bookmark.

    Raises:
        BookmarkNotFoundError: If the bookmark doesn't exist or belongs to another user.
    """
    bookmark = await _get_owned_bookmark(db, user_id, bookmark_id)
    await db.delete(bookmark)
    await db.flush()


async def get_public_tag_ids(db: AsyncSession) -> list[UUID]:
    """Union of the tag ids of every public category, across all users."""
    result = await db.execute(
        select(Category.tag_ids).where(Category.is_public.is_(True)),
    )
    union: dict[UUID, None] = {}
    for tag_ids in result.scalars():
        union.update(dict.fromkeys(tag_ids))
    return list(union)


async def search_public_bookmarks(db: AsyncSession, keyword: str) -> list[BookmarkResponse]:
    """
    Search bookmarks exposed through public categories.

    Only bookmarks whose tags intersect the tag union of all public categories
    are candidates, whoever owns them. Among those, the keyword is matched
    case-insensitively against title, description and URL.
    """
    public_tag_ids = await get_public_tag_ids(db)
    if not public_tag_ids:
        return []

    pattern = contains_pattern(keyword)
    result = await db.execute(
        _newest_first(
            select(Bookmark).where(
                Bookmark.tag_ids.overlap(public_tag_ids),
                or_(
                    Bookmark.title.ilike(pattern),
                    Bookmark.description.ilike(pattern),
                    Bookmark.url.ilike(pattern),
                ),
            ),
        ),
    )
    return await to_responses(db, list(result.scalars().all()))
