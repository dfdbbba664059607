"""Login, token rotation and logout endpoints."""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_current_user, get_settings
from core.config import Settings
from models.user import User
from schemas.auth import LoginRequest, LoginResponse, ReissueRequest
from schemas.user import UserResponse
from services import auth_service
from services.auth_service import TokenPair

router = APIRouter(prefix="/auth", tags=["auth"])


def _to_response(pair: TokenPair) -> LoginResponse:
    return LoginResponse(
        access_token=pair.access_token,
        refresh_token=pair.refresh_token,
        user=UserResponse.model_validate(pair.user),
    )


@router.post("/login", response_model=LoginResponse)
async def login(
    data: LoginRequest,
    db: AsyncSession = Depends(get_async_session),
    settings: Settings = Depends(get_settings),
) -> LoginResponse:
    """
    Log in with email and password.

    Returns 404 for an unknown email and 401 for a wrong password.
    """
    pair = await auth_service.login(db, data.email, data.password, settings)
    return _to_response(pair)


@router.post("/reissue", response_model=LoginResponse)
async def reissue(
    data: ReissueRequest,
    db: AsyncSession = Depends(get_async_session),
    settings: Settings = Depends(get_settings),
) -> LoginResponse:
    """
    Exchange the current refresh token for a new access/refresh pair.

    The presented refresh token stops working once the new pair is issued.
    """
    pair = await auth_service.reissue(db, data.refresh_token, settings)
    return _to_response(pair)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> None:
    """Invalidate the stored refresh token. Access tokens stay valid until they expire."""
    await auth_service.logout(db, current_user.id)
