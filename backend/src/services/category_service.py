"""Service layer for category (saved tag filter) operations."""
import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from models.category import Category
from schemas.bookmark import BookmarkResponse
from schemas.category import (
    CategoryCreate,
    CategoryResponse,
    CategoryUpdate,
    PublicCategoryOwner,
    PublicCategoryResponse,
)
from schemas.tag import TagView
from services.bookmark_service import get_bookmarks_by_tag_ids
from services.exceptions import NotFoundError
from services.tag_service import find_tags_by_ids, resolve_tags
from services.utils import contains_pattern

logger = logging.getLogger(__name__)


class CategoryNotFoundError(NotFoundError):
    """Raised when a category is not found or not owned by the caller."""

    def __init__(self, category_id: UUID) -> None:
        self.category_id = category_id
        super().__init__("Category not found")


async def get_owned_category(db: AsyncSession, user_id: UUID, category_id: UUID) -> Category:
    """
    Get a category by id, scoped to user.

    Raises:
        CategoryNotFoundError: If the category doesn't exist or belongs to another user.
    """
    result = await db.execute(
        select(Category).where(Category.id == category_id, Category.user_id == user_id),
    )
    category = result.scalar_one_or_none()
    if category is None:
        raise CategoryNotFoundError(category_id)
    return category


async def to_response(db: AsyncSession, category: Category) -> CategoryResponse:
    """Build a category response, decorating ``tag_ids`` with tag views."""
    tags = await find_tags_by_ids(db, category.tag_ids)
    return _build_response(category, tags)


def _build_response(category: Category, tags: list) -> CategoryResponse:
    return CategoryResponse(
        id=category.id,
        title=category.title,
        tags=[TagView.model_validate(tag) for tag in tags],
        is_public=category.is_public,
        created_at=category.created_at,
    )


def _to_public_response(category: Category) -> PublicCategoryResponse:
    return PublicCategoryResponse(
        id=category.id,
        title=category.title,
        tag_ids=list(category.tag_ids),
        created_at=category.created_at,
        owner=PublicCategoryOwner(
            user_id=category.user_id,
            nickname=category.user.nickname,
        ),
    )


async def create_category(
    db: AsyncSession,
    user_id: UUID,
    data: CategoryCreate,
) -> CategoryResponse:
    """Create a category whose tags are resolved from names, creating missing tags."""
    resolved = await resolve_tags(db, user_id, data.tags)
    category = Category(
        user_id=user_id,
        title=data.title,
        is_public=data.is_public,
        tag_ids=resolved.tag_ids,
    )
    db.add(category)
    await db.flush()
    await db.refresh(category)
    logger.info("Created category %s for user %s", category.id, user_id)
    return _build_response(category, resolved.tags)


async def get_categories(db: AsyncSession, user_id: UUID) -> list[CategoryResponse]:
    """Get all categories for a user, newest first."""
    result = await db.execute(
        select(Category)
        .where(Category.user_id == user_id)
        .order_by(Category.created_at.desc(), Category.id.desc()),
    )
    categories = list(result.scalars().all())

    all_ids = [tag_id for category in categories for tag_id in category.tag_ids]
    tags_by_id = {tag.id: tag for tag in await find_tags_by_ids(db, all_ids)}
    return [
        _build_response(
            category,
            [tags_by_id[tag_id] for tag_id in category.tag_ids if tag_id in tags_by_id],
        )
        for category in categories
    ]


async def get_category_bookmarks(
    db: AsyncSession,
    user_id: UUID,
    category_id: UUID,
) -> list[BookmarkResponse]:
    """
    Compute a category's contents: the owner's bookmarks carrying any of its tags.

    Raises:
        CategoryNotFoundError: If the category doesn't exist or belongs to another user.
    """
    category = await get_owned_category(db, user_id, category_id)
    return await get_bookmarks_by_tag_ids(db, user_id, category.tag_ids)


async def update_category(
    db: AsyncSession,
    user_id: UUID,
    category_id: UUID,
    data: CategoryUpdate,
) -> CategoryResponse:
    """
    Replace a category's title, tags and visibility.

    Raises:
        CategoryNotFoundError: If the category doesn't exist or belongs to another user.
    """
    category = await get_owned_category(db, user_id, category_id)
    resolved = await resolve_tags(db, user_id, data.tags)

    category.title = data.title
    category.is_public = data.is_public
    category.tag_ids = resolved.tag_ids

    await db.flush()
    await db.refresh(category)
    return _build_response(category, resolved.tags)


async def toggle_visibility(
    db: AsyncSession,
    user_id: UUID,
    category_id: UUID,
) -> CategoryResponse:
    """
    Flip a category between public and private.

    Raises:
        CategoryNotFoundError: If the category doesn't exist or belongs to another user.
    """
    category = await get_owned_category(db, user_id, category_id)
    category.is_public = not category.is_public
    await db.flush()
    await db.refresh(category)
    return await to_response(db, category)


async def delete_category(db: AsyncSession, user_id: UUID, category_id: UUID) -> None:
    """
    Delete a category. Its share token goes with it (ON DELETE CASCADE).

    Raises:
        CategoryNotFoundError: If the category doesn't exist or belongs to another user.
    """
    category = await get_owned_category(db, user_id, category_id)
    await db.delete(category)
    await db.flush()
    logger.info("Deleted category %s for user %s", category_id, user_id)


async def search_public_categories_by_title(
    db: AsyncSession,
    keyword: str,
) -> list[PublicCategoryResponse]:
    """Case-insensitive title search across every user's public categories."""
    pattern = contains_pattern(keyword)
    result = await db.execute(
        select(Category)
        .options(joinedload(Category.user))
        .where(Category.is_public.is_(True), Category.title.ilike(pattern))
        .order_by(Category.created_at.desc(), Category.id.desc()),
    )
    return [_to_public_response(category) for category in result.scalars().all()]


async def search_public_categories_by_tag_ids(
    db: AsyncSession,
    tag_ids: list[UUID],
) -> list[PublicCategoryResponse]:
    """Public categories of any user sharing at least one of ``tag_ids``."""
    if not tag_ids:
        return []
    result = await db.execute(
        select(Category)
        .options(joinedload(Category.user))
        .where(Category.is_public.is_(True), Category.tag_ids.overlap(list(tag_ids)))
        .order_by(Category.created_at.desc(), Category.id.desc()),
    )
    return [_to_public_response(category) for category in result.scalars().all()]
