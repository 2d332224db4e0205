"""Email sending over SMTP"""

import aiosmtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from typing import Optional
import logging
import asyncio

from app.core.config import settings

logger = logging.getLogger(__name__)

class EmailService:
    """Sends plain text and HTML email. Never raises: the outcome is the return value."""

    def __init__(self):
        self.smtp_host = settings.SMTP_HOST
        self.smtp_port = settings.SMTP_PORT
        self.smtp_user = settings.SMTP_USER
        self.smtp_password = settings.SMTP_PASSWORD
        self.from_email = settings.SMTP_FROM_EMAIL
        self.from_name = settings.SMTP_FROM_NAME
        self.timeout = settings.EMAIL_TIMEOUT_SECONDS

    @property
    def is_configured(self) -> bool:
        return bool(self.smtp_host and self.smtp_user and self.smtp_password)

    def _build_message(self, to_email: str, subject: str, body: str, html_body: Optional[str]) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = f"{self.from_name} <{self.from_email}>"
        msg["To"] = to_email

        msg.attach(MIMEText(body, "plain", "utf-8"))
        if html_body:
            msg.attach(MIMEText(html_body, "html", "utf-8"))
        return msg

    async def send_email(
        self,
        to_email: str,
        subject: str,
        body: str,
        html_body: Optional[str] = None
    ) -> bool:
        """Send one email, bounded by EMAIL_TIMEOUT_SECONDS"""
        if not to_email:
            logger.warning("Email '%s' skipped: no recipient", subject)
            return False

        if not self.is_configured:
            logger.warning("Email '%s' to %s skipped: SMTP not configured", subject, to_email)
            return False

        msg = self._build_message(to_email, subject, body, html_body)

        try:
            await asyncio.wait_for(
                aiosmtplib.send(
                    msg,
                    hostname=self.smtp_host,
                    port=self.smtp_port,
                    username=self.smtp_user,
                    password=self.smtp_password,
                    use_tls=settings.SMTP_USE_TLS,
                    start_tls=settings.SMTP_START_TLS,
                ),
                timeout=self.timeout,
            )
            logger.info("Email sent successfully to %s", to_email)
            return True

        except asyncio.TimeoutError:
            logger.error("Email to %s timed out after %ss", to_email, self.timeout)
            return False
        except Exception as e:
            logger.error("Failed to send email to %s: %s", to_email, e)
            return False
