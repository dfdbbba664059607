"""Pydantic schemas for tag endpoints."""
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from schemas.validators import MAX_TAG_NAME_LENGTH, validate_tag_name


class TagView(BaseModel):
    """Minimal tag projection used to decorate bookmarks and categories."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str


class TagResponse(TagView):
    """Schema for full tag responses."""

    created_at: datetime


class TagCreate(BaseModel):
    """Schema for creating a tag explicitly."""

    name: str = Field(..., min_length=1, max_length=MAX_TAG_NAME_LENGTH)

    @field_validator("name", mode="before")
    @classmethod
    def check_name(cls, v: str) -> str:
        """Trim and validate the tag name."""
        if not isinstance(v, str):
            raise ValueError("Tag name must be a string")
        return validate_tag_name(v)


class TagRenameRequest(TagCreate):
    """Schema for renaming a tag."""
