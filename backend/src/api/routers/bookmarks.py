"""Bookmark CRUD, favorites and search endpoints."""
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_current_user
from models.user import User
from schemas.bookmark import BookmarkCreate, BookmarkResponse, BookmarkUpdate
from services import bookmark_service

router = APIRouter(prefix="/api/bookmarks", tags=["bookmarks"])


@router.post("", response_model=BookmarkResponse, status_code=status.HTTP_201_CREATED)
async def create_bookmark(
    data: BookmarkCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> BookmarkResponse:
    """Create a new bookmark. Unknown tag names are created for the user."""
    return await bookmark_service.create_bookmark(db, current_user.id, data)


@router.get("", response_model=list[BookmarkResponse])
async def list_bookmarks(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> list[BookmarkResponse]:
    """List the current user's bookmarks, newest first."""
    return await bookmark_service.get_bookmarks(db, current_user.id)


@router.get("/search", response_model=list[BookmarkResponse])
async def search_bookmarks(
    keyword: str = Query(..., description="Case-insensitive substring matched against titles"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> list[BookmarkResponse]:
    """Search the current user's bookmarks by title."""
    return await bookmark_service.search_bookmarks_by_title(db, current_user.id, keyword)


@router.get("/search/public-categories", response_model=list[BookmarkResponse])
async def search_public_bookmarks(
    keyword: str = Query(..., description="Matched against title, description and URL"),
    db: AsyncSession = Depends(get_async_session),
) -> list[BookmarkResponse]:
    """
    Search bookmarks exposed through public categories. No authentication required.

    Only bookmarks tagged with a tag of some public category are searched.
    """
    return await bookmark_service.search_public_bookmarks(db, keyword)


@router.get("/favorites", response_model=list[BookmarkResponse])
async def list_favorites(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> list[BookmarkResponse]:
    """List the current user's favorite bookmarks, newest first."""
    return await bookmark_service.get_favorite_bookmarks(db, current_user.id)


@router.get("/{bookmark_id}", response_model=BookmarkResponse)
async def get_bookmark(
    bookmark_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> BookmarkResponse:
    """Get a single bookmark by ID."""
    return await bookmark_service.get_bookmark(db, current_user.id, bookmark_id)


@router.put("/{bookmark_id}", response_model=BookmarkResponse)
async def update_bookmark(
    bookmark_id: UUID,
    data: BookmarkUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> BookmarkResponse:
    """Replace a bookmark's fields and tags."""
    return await bookmark_service.update_bookmark(db, current_user.id, bookmark_id, data)


@router.patch("/{bookmark_id}/favorite", response_model=BookmarkResponse)
async def toggle_favorite(
    bookmark_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> BookmarkResponse:
    """Toggle a bookmark's favorite flag."""
    return await bookmark_service.toggle_favorite(db, current_user.id, bookmark_id)


@router.delete("/{bookmark_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_bookmark(
    bookmark_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> None:
    """Permanently delete a bookmark."""
    await bookmark_service.delete_bookmark(db, current_user.id, bookmark_id)
