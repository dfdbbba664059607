"""Service layer for tag operations."""
import logging
from dataclasses import dataclass, field
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from models.bookmark import Bookmark
from models.category import Category
from models.tag import Tag
from schemas.validators import validate_tag_names
from services.exceptions import ConflictError, NotFoundError

logger = logging.getLogger(__name__)


class TagNotFoundError(NotFoundError):
    """Raised when a tag is not found or not owned by the caller."""

    def __init__(self, tag_id: UUID) -> None:
        self.tag_id = tag_id
        super().__init__("Tag not found")


class TagAlreadyExistsError(ConflictError):
    """Raised when a tag name is already used by another tag of the same user."""

    def __init__(self, tag_name: str) -> None:
        self.tag_name = tag_name
        super().__init__(f"Tag '{tag_name}' already exists")


@dataclass
class ResolvedTags:
    """Result of resolving tag names: ids and tags in matching order."""

    tag_ids: list[UUID] = field(default_factory=list)
    tags: list[Tag] = field(default_factory=list)


async def resolve_tags(
    db: AsyncSession,
    user_id: UUID,
    tag_names: list[str] | None,
) -> ResolvedTags:
    """
    Translate tag names into the user's tag ids, creating missing tags.

    Each name resolves to, in order of preference: the user's tag with exactly
    that name, the user's existing tag whose name matches case-insensitively, or
    a newly created tag. Names created in the same call are only de-duplicated
    exactly, so "News" and "NEWS" both get created when neither exists.

    Reusing a case-insensitive match is deliberate: writing "python" when the
    user already has "Python" attaches the existing tag instead of creating a
    near-duplicate. Only an exact-name lookup would create the variant.

    Args:
        db: Database session.
        user_id: User ID to scope tags.
        tag_names: Tag names to resolve. None or empty returns an empty result
            without touching the database.

    Returns:
        ResolvedTags whose ``tag_ids`` and ``tags`` correspond 1:1. A tag reached
        through two requested names is listed once.
    """
    if not tag_names:
        return ResolvedTags()

    names = validate_tag_names(tag_names)
    if not names:
        return ResolvedTags()

    result = await db.execute(
        select(Tag)
        .where(
            Tag.user_id == user_id,
            func.lower(Tag.name).in_([name.lower() for name in names]),
        )
        .order_by(Tag.created_at, Tag.id),
    )
    existing_tags = list(result.scalars())
    by_exact_name = {tag.name: tag for tag in existing_tags}
    by_folded_name: dict[str, Tag] = {}
    for tag in existing_tags:
        by_folded_name.setdefault(tag.name.lower(), tag)

    resolved = ResolvedTags()
    created = 0
    for name in names:
        tag = by_exact_name.get(name) or by_folded_name.get(name.lower())
        if tag is None:
            tag = Tag(user_id=user_id, name=name)
            db.add(tag)
            by_exact_name[name] = tag
            created += 1
        if tag not in resolved.tags:
            resolved.tags.append(tag)

    if created:
        await db.flush()
        logger.debug("Created %d tag(s) for user %s", created, user_id)

    resolved.tag_ids = [tag.id for tag in resolved.tags]
    return resolved


async def find_tags_by_ids(db: AsyncSession, tag_ids: list[UUID]) -> list[Tag]:
    """
    Load tags by id, preserving the order of ``tag_ids``.

    Ids whose tag no longer exists are silently dropped. Not scoped to a user:
    imported categories may reference another user's tags.
    """
    if not tag_ids:
        return []
    result = await db.execute(select(Tag).where(Tag.id.in_(tag_ids)))
    found = {tag.id: tag for tag in result.scalars()}
    return [found[tag_id] for tag_id in dict.fromkeys(tag_ids) if tag_id in found]


async def get_tag(db: AsyncSession, user_id: UUID, tag_id: UUID) -> Tag | None:
    """Get a tag by id, scoped to user."""
    result = await db.execute(
        select(Tag).where(Tag.id == tag_id, Tag.user_id == user_id),
    )
    return result.scalar_one_or_none()


async def get_tag_by_name(db: AsyncSession, user_id: UUID, name: str) -> Tag | None:
    """Get a tag by its exact name for a user."""
    result = await db.execute(
        select(Tag).where(Tag.user_id == user_id, Tag.name == name),
    )
    return result.scalar_one_or_none()


async def get_tags(db: AsyncSession, user_id: UUID) -> list[Tag]:
    """Get all tags for a user, newest first."""
    result = await db.execute(
        select(Tag)
        .where(Tag.user_id == user_id)
        .order_by(Tag.created_at.desc(), Tag.id.desc()),
    )
    return list(result.scalars().all())


async def _flush_name_change(db: AsyncSession, tag: Tag, name: str) -> None:
    try:
        await db.flush()
    except IntegrityError as e:
        await db.rollback()
        # Handle race condition: another request created the tag between check and flush
        if "uq_tags_user_id_name" in str(e):
            raise TagAlreadyExistsError(name) from e
        raise
    await db.refresh(tag)


async def create_tag(db: AsyncSession, user_id: UUID, name: str) -> Tag:
    """
    Create a tag explicitly.

    Raises:
        TagAlreadyExistsError: If the user already has a tag with exactly this name.
    """
    if await get_tag_by_name(db, user_id, name) is not None:
        raise TagAlreadyExistsError(name)

    tag = Tag(user_id=user_id, name=name)
    db.add(tag)
    await _flush_name_change(db, tag, name)
    return tag


async def rename_tag(
    db: AsyncSession,
    user_id: UUID,
    tag_id: UUID,
    new_name: str,
) -> Tag:
    """
    Rename a tag. Bookmarks and categories reference the id, so they follow the rename.

    Raises:
        TagNotFoundError: If the tag doesn't exist or belongs to another user.
        TagAlreadyExistsError: If another tag of the user already has the new name.
    """
    existing = await get_tag_by_name(db, user_id, new_name)
    if existing is not None and existing.id != tag_id:
        raise TagAlreadyExistsError(new_name)

    tag = await get_tag(db, user_id, tag_id)
    if tag is None:
        raise TagNotFoundError(tag_id)

    if tag.name == new_name:
        return tag

    tag.name = new_name
    await _flush_name_change(db, tag, new_name)
    return tag


async def remove_tag_references(db: AsyncSession, user_id: UUID, tag_id: UUID) -> int:
    """
    Remove a tag id from every bookmark and category of the user that references it.

    Consistency contract: referencing rows are read, then each one is re-saved
    without the id. Nothing here is atomic on its own; callers running inside
    the request transaction get all-or-nothing behavior from PostgreSQL, but
    must not rely on it. Concurrent writers to the same rows are last-writer-wins.

    Returns:
        Number of bookmarks and categories that were rewritten.
    """
    touched = 0
    for model in (Bookmark, Category):
        result = await db.execute(
            select(model).where(
                model.user_id == user_id,
                model.tag_ids.contains([tag_id]),
            ),
        )
        for row in result.scalars():
            # Reassign rather than mutate so the ARRAY change is detected
            row.tag_ids = [existing for existing in row.tag_ids if existing != tag_id]
            touched += 1
    await db.flush()
    return touched


async def delete_tag(db: AsyncSession, user_id: UUID, tag_id: UUID) -> None:
    """
    Delete a tag and cascade the deletion into the user's bookmarks and categories.

    Raises:
        TagNotFoundError: If the tag doesn't exist or belongs to another user.
    """
    tag = await get_tag(db, user_id, tag_id)
    if tag is None:
        raise TagNotFoundError(tag_id)

    await db.delete(tag)
    await db.flush()

    touched = await remove_tag_references(db, user_id, tag_id)
    logger.info("Deleted tag %s for user %s; rewrote %d reference(s)", tag_id, user_id, touched)
