"""Pydantic schemas for category and sharing endpoints."""
from datetime import datetime
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from schemas.bookmark import BookmarkResponse
from schemas.tag import TagView
from schemas.validators import validate_tag_names


class CategoryCreate(BaseModel):
    """Schema for creating a category."""

    title: str = Field(..., min_length=1, max_length=200)
    tags: list[str] = Field(default_factory=list, description="Tag names; unknown names are created")
    is_public: bool = Field(
        default=False,
        validation_alias=AliasChoices("is_public", "isPublic"),
    )

    @field_validator("tags", mode="before")
    @classmethod
    def normalize_tags(cls, v: list[str] | None) -> list[str]:
        """Trim tags and drop blanks and exact duplicates."""
        if v is None:
            return []
        return validate_tag_names(v)


class CategoryUpdate(CategoryCreate):
    """Schema for replacing a category's title, tags and visibility."""


class CategoryResponse(BaseModel):
    """Schema for category responses."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    tags: list[TagView]
    is_public: bool
    created_at: datetime


class ShareTokenResponse(BaseModel):
    """Schema for the share token of a category."""

    token: str


class SharedCategoryResponse(BaseModel):
    """
    Read-only projection of a shared category.

    Exposes only the category's title, tag names and the owner's bookmarks that
    match the category's tags.
    """

    id: UUID
    title: str
    tag_names: list[str]
    bookmarks: list[BookmarkResponse]


class PublicCategoryOwner(BaseModel):
    """Owner of a public category as shown in public search results."""

    user_id: UUID
    nickname: str


class PublicCategoryResponse(BaseModel):
    """Schema for public category search results."""

    id: UUID
    title: str
    tag_ids: list[UUID]
    created_at: datetime
    owner: PublicCategoryOwner
