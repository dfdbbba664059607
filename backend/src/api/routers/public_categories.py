"""Unauthenticated search over public categories."""
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session
from schemas.category import PublicCategoryResponse
from services import category_service

router = APIRouter(prefix="/api/public/categories", tags=["public"])


@router.get("/search/title", response_model=list[PublicCategoryResponse])
async def search_by_title(
    keyword: str = Query(..., description="Case-insensitive substring matched against titles"),
    db: AsyncSession = Depends(get_async_session),
) -> list[PublicCategoryResponse]:
    """Search public categories of all users by title."""
    return await category_service.search_public_categories_by_title(db, keyword)


@router.get("/search/tags", response_model=list[PublicCategoryResponse])
async def search_by_tags(
    tag_ids: list[UUID] = Query(default=[], description="Repeat the parameter for several tags"),
    db: AsyncSession = Depends(get_async_session),
) -> list[PublicCategoryResponse]:
    """Find public categories sharing at least one of the given tag ids."""
    return await category_service.search_public_categories_by_tag_ids(db, tag_ids)
