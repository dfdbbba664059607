"""Email verification endpoints gating registration."""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_mail_sender, get_settings
from core.config import Settings
from core.mail import MailSender
from schemas.email import MessageResponse, SendCodeRequest, VerifyCodeRequest
from services import email_verification_service
from services.email_verification_service import VerificationResult
from services.exceptions import InvalidRequestError

router = APIRouter(prefix="/email", tags=["email"])

_FAILURE_MESSAGES = {
    VerificationResult.CODE_MISMATCH: "Verification code does not match",
    VerificationResult.CODE_EXPIRED: "Verification code has expired",
}


@router.post("/send-code", response_model=MessageResponse)
async def send_code(
    data: SendCodeRequest,
    db: AsyncSession = Depends(get_async_session),
    mailer: MailSender = Depends(get_mail_sender),
    settings: Settings = Depends(get_settings),
) -> MessageResponse:
    """
    Email a 6-digit verification code, replacing any earlier one.

    Returns 503 if the email could not be sent.
    """
    await email_verification_service.send_verification_code(db, data.email, mailer, settings)
    return MessageResponse(message="Verification code sent")


@router.post("/verify-code", response_model=MessageResponse)
async def verify_code(
    data: VerifyCodeRequest,
    db: AsyncSession = Depends(get_async_session),
) -> MessageResponse:
    """Check a verification code. Returns 400 when it does not match or has expired."""
    result = await email_verification_service.verify_code(db, data.email, data.code)
    if result is not VerificationResult.SUCCESS:
        raise InvalidRequestError(_FAILURE_MESSAGES[result])
    return MessageResponse(message="Email verified")
