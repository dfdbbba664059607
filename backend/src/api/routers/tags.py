"""Tag management endpoints."""
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_current_user
from models.tag import Tag
from models.user import User
from schemas.tag import TagCreate, TagRenameRequest, TagResponse
from services import tag_service

router = APIRouter(prefix="/api/tags", tags=["tags"])


@router.post("", response_model=TagResponse, status_code=status.HTTP_201_CREATED)
async def create_tag(
    data: TagCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> Tag:
    """
    Create a tag.

    Returns 409 if the user already has a tag with exactly this name.
    """
    return await tag_service.create_tag(db, current_user.id, data.name)


@router.get("", response_model=list[TagResponse])
async def list_tags(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> list[Tag]:
    """Get all tags for the current user, newest first."""
    return await tag_service.get_tags(db, current_user.id)


@router.put("/{tag_id}", response_model=TagResponse)
async def rename_tag(
    tag_id: UUID,
    data: TagRenameRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> Tag:
    """
    Rename a tag.

    Bookmarks and categories reference tags by id, so they show the new name.

    Returns 404 if the tag doesn't exist.
    Returns 409 if another tag already has the new name.
    """
    return await tag_service.rename_tag(db, current_user.id, tag_id, data.name)


@router.delete("/{tag_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_tag(
    tag_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> None:
    """
    Delete a tag.

    The tag is removed from every bookmark and category that uses it.

    Returns 404 if the tag doesn't exist.
    """
    await tag_service.delete_tag(db, current_user.id, tag_id)
