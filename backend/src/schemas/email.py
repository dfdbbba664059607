"""Pydantic schemas for email verification endpoints."""
from pydantic import BaseModel, EmailStr, Field


class SendCodeRequest(BaseModel):
    """Schema for requesting a verification code."""

    email: EmailStr


class VerifyCodeRequest(BaseModel):
    """Schema for submitting a verification code."""

    email: EmailStr
    code: str = Field(..., pattern=r"^[0-9]{6}$", description="Six ASCII digits")


class MessageResponse(BaseModel):
    """Plain acknowledgement message."""

    message: str
