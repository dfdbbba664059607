"""User registration and profile endpoints."""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_current_user
from models.user import User
from schemas.user import SignupRequest, UserResponse
from services import user_service


router = APIRouter(prefix="/api/users", tags=["users"])


@router.post("/signup", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    data: SignupRequest,
    db: AsyncSession = Depends(get_async_session),
) -> User:
    """
    Register an account for an email that passed verification.

    Returns 409 if the email is already registered and 400 if it has not been verified.
    """
    return await user_service.register_user(db, data.email, data.password, data.nickname)


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)) -> User:
    """Get the current authenticated user's info."""
    return current_user
