"""
Service layer for sharing categories through public links.

A share token is an opaque bearer credential: anyone holding it can read the
category's computed contents, and any authenticated user can import a copy.
"""
import logging
import secrets
import string
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models.category import Category
from models.share_token import ShareToken
from schemas.category import CategoryResponse, SharedCategoryResponse
from services.bookmark_service import get_bookmarks_by_tag_ids
from services.category_service import get_owned_category, to_response
from services.exceptions import NotFoundError
from services.tag_service import find_tags_by_ids

logger = logging.getLogger(__name__)

SHARE_TOKEN_LENGTH = 16
SHARE_TOKEN_ALPHABET = string.ascii_letters + string.digits


class ShareLinkNotFoundError(NotFoundError):
    """Raised when a share token does not resolve to a category."""

    def __init__(self) -> None:
        super().__init__("Invalid share link")


def generate_token_value() -> str:
    """Return a random 16-character alphanumeric token."""
    return "".join(secrets.choice(SHARE_TOKEN_ALPHABET) for _ in range(SHARE_TOKEN_LENGTH))


async def _get_token_for_category(db: AsyncSession, category_id: UUID) -> ShareToken | None:
    result = await db.execute(
        select(ShareToken).where(ShareToken.category_id == category_id),
    )
    return result.scalar_one_or_none()


async def generate_share_token(db: AsyncSession, user_id: UUID, category_id: UUID) -> str:
    """
    Return the category's share token, minting one if it has none.

    Idempotent: repeated calls return the same token until it is revoked.

    Raises:
        CategoryNotFoundError: If the category doesn't exist or belongs to another user.
    """
    await get_owned_category(db, user_id, category_id)

    existing = await _get_token_for_category(db, category_id)
    if existing is not None:
        return existing.token

    share_token = ShareToken(token=generate_token_value(), category_id=category_id)
    db.add(share_token)
    await db.flush()
    logger.info("Created share token for category %s", category_id)
    return share_token.token


async def revoke_share_token(db: AsyncSession, user_id: UUID, category_id: UUID) -> None:
    """
    Delete the category's share token if it has one. Existing links stop working.

    Raises:
        CategoryNotFoundError: If the category doesn't exist or belongs to another user.
    """
    await get_owned_category(db, user_id, category_id)

    existing = await _get_token_for_category(db, category_id)
    if existing is not None:
        await db.delete(existing)
        await db.flush()
        logger.info("Revoked share token for category %s", category_id)


async def resolve_share_token(db: AsyncSession, token: str) -> UUID:
    """
    Map a share token to its category id. No ownership check.

    Raises:
        ShareLinkNotFoundError: If the token is unknown.
    """
    share_token = await db.get(ShareToken, token)
    if share_token is None:
        raise ShareLinkNotFoundError
    return share_token.category_id


async def _get_shared_source(db: AsyncSession, token: str) -> Category:
    category_id = await resolve_share_token(db, token)
    category = await db.get(Category, category_id)
    if category is None:
        raise ShareLinkNotFoundError
    return category


async def get_shared_category(db: AsyncSession, token: str) -> SharedCategoryResponse:
    """
    Read-only view of a shared category.

    The bookmarks are the category owner's bookmarks matching the category's
    tags, newest first.

    Raises:
        ShareLinkNotFoundError: If the token is unknown.
    """
    category = await _get_shared_source(db, token)
    tags = await find_tags_by_ids(db, category.tag_ids)
    bookmarks = await get_bookmarks_by_tag_ids(db, category.user_id, category.tag_ids)
    return SharedCategoryResponse(
        id=category.id,
        title=category.title,
        tag_names=[tag.name for tag in tags],
        bookmarks=bookmarks,
    )


def imported_tag_ids(source: Category) -> list[UUID]:
    """
    Tag ids given to a category imported from ``source``.

    The copy keeps the source's ids, which belong to the source owner. They
    display correctly but match none of the importer's own bookmarks.
    """
    return list(source.tag_ids)


async def import_shared_category(
    db: AsyncSession,
    user_id: UUID,
    token: str,
) -> CategoryResponse:
    """
    Clone a shared category into a new private category owned by ``user_id``.

    Raises:
        ShareLinkNotFoundError: If the token is unknown.
    """
    source = await _get_shared_source(db, token)
    category = Category(
        user_id=user_id,
        title=source.title,
        is_public=False,
        tag_ids=imported_tag_ids(source),
    )
    db.add(category)
    await db.flush()
    await db.refresh(category)
    logger.info("User %s imported category %s as %s", user_id, source.id, category.id)
    return await to_response(db, category)
