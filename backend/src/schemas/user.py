"""Pydantic schemas for user endpoints."""
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class SignupRequest(BaseModel):
    """Schema for registering a new account."""

    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    nickname: str = Field(..., min_length=1, max_length=100)


class UserResponse(BaseModel):
    """Minimal user view returned by login and /me."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    nickname: str
