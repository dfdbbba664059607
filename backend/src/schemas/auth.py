"""Pydantic schemas for authentication endpoints."""
from pydantic import BaseModel, EmailStr, Field

from schemas.user import UserResponse


class LoginRequest(BaseModel):
    """Schema for logging in with email and password."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class ReissueRequest(BaseModel):
    """Schema for exchanging a refresh token for a new token pair."""

    refresh_token: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    """Access/refresh token pair plus the authenticated user."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    user: UserResponse
