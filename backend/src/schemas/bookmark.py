"""Pydantic schemas for bookmark endpoints."""
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, field_validator

from schemas.tag import TagView
from schemas.validators import (
    validate_description_length,
    validate_tag_names,
    validate_title_length,
)


class BookmarkCreate(BaseModel):
    """Schema for creating a new bookmark."""

    # HttpUrl normalizes root domains with trailing slash (example.com -> example.com/)
    # but preserves paths as-is (example.com/page stays example.com/page)
    url: HttpUrl
    title: str | None = None
    description: str | None = None
    favorite: bool = False
    tags: list[str] = Field(default_factory=list, description="Tag names; unknown names are created")

    @field_validator("tags", mode="before")
    @classmethod
    def normalize_tags(cls, v: list[str] | None) -> list[str]:
        """Trim tags and drop blanks and exact duplicates."""
        if v is None:
            return []
        return validate_tag_names(v)

    @field_validator("title")
    @classmethod
    def check_title_length(cls, v: str | None) -> str | None:
        """Validate title length."""
        return validate_title_length(v)

    @field_validator("description")
    @classmethod
    def check_description_length(cls, v: str | None) -> str | None:
        """Validate description length."""
        return validate_description_length(v)


class BookmarkUpdate(BookmarkCreate):
    """
    Schema for replacing a bookmark.

    This is a full replacement: omitted optional fields are reset to their
    defaults and the tag list replaces the bookmark's tags entirely.
    """


class BookmarkResponse(BaseModel):
    """
    Schema for bookmark responses.

    Tags are decorated from ``tag_ids`` at read time; ids of tags deleted in the
    meantime are silently dropped.
    """

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    url: str
    title: str | None
    description: str | None
    favorite: bool
    tags: list[TagView]
    created_at: datetime
