"""
SMTP email notifier.

Sending is best-effort: any SMTP or network failure is logged and reported
as False so callers can carry on.
"""

import asyncio
import logging
import smtplib
from email.message import EmailMessage

from shared.config import Settings

from .interfaces import IEmailNotifier

logger = logging.getLogger(__name__)

INACTIVE_DELETION_SUBJECT = "Your account has been removed due to inactivity"


def build_inactive_deletion_message(
    sender: str,
    email: str,
    name: str,
    days_inactive: int,
) -> EmailMessage:
    """Compose the notice sent when an inactive account is deleted."""
    message = EmailMessage()
    message["From"] = sender
    message["To"] = email
    message["Subject"] = INACTIVE_DELETION_SUBJECT
    message.set_content(
        f"Hello {name},\n\n"
        f"Your account had not been used for {days_inactive} days and has been "
        "deleted together with its data.\n\n"
        "You are welcome to register again at any time.\n"
    )
    return message


class SmtpEmailNotifier(IEmailNotifier):
    """Sends notices through an SMTP relay configured in settings."""

    def __init__(self, settings: Settings):
        self._settings = settings

    def is_available(self) -> bool:
        return bool(self._settings.smtp_host and self._settings.email_from)

    def _send(self, message: EmailMessage) -> None:
        settings = self._settings
        with smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=30) as smtp:
            if settings.smtp_use_tls:
                smtp.starttls()
            if settings.smtp_username:
                smtp.login(settings.smtp_username, settings.smtp_password)
            smtp.send_message(message)

    async def send_inactive_deletion_notice(
        self,
        email: str,
        name: str,
        days_inactive: int,
    ) -> bool:
        if not self.is_available():
            return False

        loop = asyncio.get_running_loop()
        try:
            message = build_inactive_deletion_message(
                self._settings.email_from, email, name, days_inactive
            )
            await loop.run_in_executor(None, self._send, message)
        except (smtplib.SMTPException, OSError, ValueError) as e:
            logger.warning(f"Failed to send inactive deletion notice to {email}: {e}")
            return False

        logger.info(f"Sent inactive deletion notice to {email}")
        return True
