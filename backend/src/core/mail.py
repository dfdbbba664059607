"""Outgoing email over SMTP."""
import asyncio
import logging
import smtplib
from email.message import EmailMessage

from fastapi import Depends

from core.config import Settings, get_settings
from services.exceptions import MailDeliveryError

logger = logging.getLogger(__name__)

SMTP_TIMEOUT_SECONDS = 10


class MailSender:
    """
    Sends plain-text email through the configured SMTP server.

    smtplib is blocking, so delivery runs in a worker thread. Any SMTP or
    socket failure is surfaced as MailDeliveryError; nothing is retried.
    """

    def __init__(self, settings: Settings) -> None:
        self.host = settings.smtp_host
        self.port = settings.smtp_port
        self.username = settings.smtp_username
        self.password = settings.smtp_password
        self.use_ssl = settings.smtp_use_ssl
        self.sender = settings.mail_from

    def build_message(self, to: str, subject: str, body: str) -> EmailMessage:
        """Build a plain-text message from the configured sender."""
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = to
        message["Subject"] = subject
        message.set_content(body)
        return message

    def _deliver(self, message: EmailMessage) -> None:
        if self.use_ssl:
            smtp: smtplib.SMTP = smtplib.SMTP_SSL(
                self.host, self.port, timeout=SMTP_TIMEOUT_SECONDS,
            )
        else:
            smtp = smtplib.SMTP(self.host, self.port, timeout=SMTP_TIMEOUT_SECONDS)
        with smtp:
            if not self.use_ssl:
                smtp.starttls()
            if self.username:
                smtp.login(self.username, self.password)
            smtp.send_message(message)

    async def send(self, to: str, subject: str, body: str) -> None:
        """
        Send an email.

        Raises:
            MailDeliveryError: If the message could not be delivered to the SMTP server.
        """
        message = self.build_message(to, subject, body)
        logger.debug("Sending email to=%s subject=%s", to, subject)
        try:
            await asyncio.to_thread(self._deliver, message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Failed to send email to %s: %s", to, e, exc_info=True)
            raise MailDeliveryError("Failed to send email") from e
        logger.debug("Email sent to=%s", to)


def get_mail_sender(settings: Settings = Depends(get_settings)) -> MailSender:
    """Dependency returning a mail sender for the current settings."""
    return MailSender(settings)
