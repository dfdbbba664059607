"""Category endpoints, including share links."""
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_current_user
from models.user import User
from schemas.bookmark import BookmarkResponse
from schemas.category import (
    CategoryCreate,
    CategoryResponse,
    CategoryUpdate,
    SharedCategoryResponse,
    ShareTokenResponse,
)
from services import category_service, share_service

router = APIRouter(prefix="/api/categories", tags=["categories"])


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    data: CategoryCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> CategoryResponse:
    """Create a category from a title and tag names."""
    return await category_service.create_category(db, current_user.id, data)


@router.get("", response_model=list[CategoryResponse])
async def list_categories(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> list[CategoryResponse]:
    """List the current user's categories, newest first."""
    return await category_service.get_categories(db, current_user.id)


@router.get("/share/{token}", response_model=SharedCategoryResponse)
async def get_shared_category(
    token: str,
    db: AsyncSession = Depends(get_async_session),
) -> SharedCategoryResponse:
    """
    View a shared category. No authentication required.

    Returns 404 for an unknown or revoked token.
    """
    return await share_service.get_shared_category(db, token)


@router.post(
    "/share/{token}/import",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
)
async def import_shared_category(
    token: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> CategoryResponse:
    """Copy a shared category into the current user's categories as a private category."""
    return await share_service.import_shared_category(db, current_user.id, token)


@router.get("/{category_id}/bookmarks", response_model=list[BookmarkResponse])
async def get_category_bookmarks(
    category_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> list[BookmarkResponse]:
    """Get the bookmarks carrying any of the category's tags, newest first."""
    return await category_service.get_category_bookmarks(db, current_user.id, category_id)


@router.put("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: UUID,
    data: CategoryUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> CategoryResponse:
    """Replace a category's title, tags and visibility."""
    return await category_service.update_category(db, current_user.id, category_id, data)


@router.patch("/{category_id}/visibility", response_model=CategoryResponse)
async def toggle_visibility(
    category_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> CategoryResponse:
    """Toggle a category between public and private."""
    return await category_service.toggle_visibility(db, current_user.id, category_id)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> None:
    """Delete a category and its share link."""
    await category_service.delete_category(db, current_user.id, category_id)


@router.post("/{category_id}/share-token", response_model=ShareTokenResponse)
async def create_share_token(
    category_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> ShareTokenResponse:
    """Get the category's share token, creating one on first use."""
    token = await share_service.generate_share_token(db, current_user.id, category_id)
    return ShareTokenResponse(token=token)


@router.delete("/{category_id}/share-token", status_code=status.HTTP_204_NO_CONTENT)
async def revoke_share_token(
    category_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> None:
    """Revoke the category's share token. Links using it stop working."""
    await share_service.revoke_share_token(db, current_user.id, category_id)
