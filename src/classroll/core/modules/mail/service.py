import asyncio
import smtplib
import ssl
from email.message import EmailMessage
from email.utils import formataddr

import structlog

from classroll.core.core import Service
from classroll.errors import DeliveryError

logger = structlog.get_logger(__name__)


class MailService(Service):
    """Delivers one-time passcodes over SMTP."""

    async def on_start(self) -> None:
        if not self.config.smtp_host:
            logger.warning("smtp_not_configured")

    async def send_otp_code(self, email: str, code: str) -> None:
        """Send a login passcode to email.

        Raises:
            DeliveryError: If SMTP is not configured or the server rejects the message
        """
        if not self.config.smtp_host:
            logger.error("otp_email_failed", email=email, reason="smtp_not_configured")
            raise DeliveryError("SMTP not configured")

        message = self._build_otp_message(email, code)
        try:
            await asyncio.to_thread(self._send, message)
        except (smtplib.SMTPException, OSError) as e:
            logger.exception("otp_email_failed", email=email)
            raise DeliveryError(f"Failed to send OTP email to {email}") from e
        logger.info("otp_email_sent", email=email)

    def _build_otp_message(self, email: str, code: str) -> EmailMessage:
        sender = self.config.smtp_sender or self.config.smtp_username or ""
        minutes = self.config.otp_ttl_seconds // 60
        message = EmailMessage()
        message["Subject"] = "Your OTP for Login"
        message["From"] = formataddr((self.config.mail_app_name, sender))
        message["To"] = email
        message.set_content(f"Your one-time password (OTP) is {code}. It is valid for {minutes} minutes.")
        message.add_alternative(
            f"<p>Your one-time password (OTP) is <b>{code}</b>. It is valid for {minutes} minutes.</p>",
            subtype="html",
        )
        return message

    def _send(self, message: EmailMessage) -> None:
        context = ssl.create_default_context()
        with smtplib.SMTP(self.config.smtp_host, self.config.smtp_port, timeout=10) as server:
            server.starttls(context=context)
            if self.config.smtp_username and self.config.smtp_password:
                server.login(self.config.smtp_username, self.config.smtp_password)
            server.send_message(message)
