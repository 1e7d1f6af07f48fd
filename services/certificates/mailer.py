"""
SMTP mailer (Gmail with an app password by default).
"""

import logging
from email.message import EmailMessage
from typing import Optional, Sequence

import aiosmtplib
from pydantic import BaseModel

from core.config import settings

logger = logging.getLogger(__name__)


class DeliveryError(Exception):
    """Raised when an email could not be sent."""


class Attachment(BaseModel):
    filename: str
    content: bytes
    maintype: str = "application"
    subtype: str = "pdf"


class Mailer:
    """Sends mail through one SMTP account"""

    def __init__(
        self,
        user: Optional[str] = None,
        password: Optional[str] = None,
        host: Optional[str] = None,
        port: Optional[int] = None,
        sender_name: Optional[str] = None,
    ):
        self.user = user or settings.GMAIL_USER
        self.password = password or settings.GMAIL_APP_PASSWORD
        self.host = host or settings.SMTP_HOST
        self.port = port or settings.SMTP_PORT
        self.sender_name = sender_name or settings.BRAND

    @property
    def from_address(self) -> str:
        return f"{self.sender_name} <{self.user}>"

    def build_message(
        self,
        to: str,
        subject: str,
        html: Optional[str] = None,
        text: Optional[str] = None,
        attachments: Sequence[Attachment] = (),
    ) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.from_address
        message["To"] = to
        message["Subject"] = subject

        message.set_content(text or "")
        if html:
            message.add_alternative(html, subtype="html")
        for attachment in attachments:
            message.add_attachment(
                attachment.content,
                maintype=attachment.maintype,
                subtype=attachment.subtype,
                filename=attachment.filename,
            )
        return message

    async def send(
        self,
        to: str,
        subject: str,
        html: Optional[str] = None,
        text: Optional[str] = None,
        attachments: Sequence[Attachment] = (),
    ) -> None:
        """Send one message. Raises DeliveryError on any SMTP failure."""
        if not self.user:
            raise DeliveryError("Missing GMAIL_USER")
        if not self.password:
            raise DeliveryError("Missing GMAIL_APP_PASSWORD")

        message = self.build_message(to, subject, html=html, text=text, attachments=attachments)
        try:
            await aiosmtplib.send(
                message,
                hostname=self.host,
                port=self.port,
                username=self.user,
                password=self.password,
                use_tls=self.port == 465,
                start_tls=self.port == 587,
            )
        except aiosmtplib.SMTPException as e:
            logger.error(f"Failed to send '{subject}' to {to}: {e}")
            raise DeliveryError(str(e)) from e

        logger.info(f"Sent '{subject}' to {to}")


# Global mailer instance
_mailer: Optional[Mailer] = None


def get_mailer() -> Mailer:
    """Get or create the global mailer."""
    global _mailer

    if _mailer is None:
        _mailer = Mailer()

    return _mailer
