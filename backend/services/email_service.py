"""Email service for sending transactional emails via SendGrid."""

import logging
from typing import Optional

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from config import (
    APP_NAME,
    OTP_EXPIRE_MINUTES,
    REQUEST_TIMEOUT_SECONDS,
    SENDGRID_API_KEY,
    SENDGRID_FROM_EMAIL,
)


logger = logging.getLogger(__name__)


class EmailService:
    """Handles sending emails via SendGrid."""

    def __init__(
        self,
        api_key: Optional[str] = SENDGRID_API_KEY,
        from_email: Optional[str] = SENDGRID_FROM_EMAIL,
        timeout: int = REQUEST_TIMEOUT_SECONDS,
    ):
        self.api_key = api_key
        self.from_email = from_email
        self.timeout = timeout
        self.app_name = APP_NAME

    def missing_settings(self) -> list[str]:
        """Names of the sender settings that are not configured."""
        missing = []
        if not self.from_email:
            missing.append("sender email")
        if not self.api_key:
            missing.append("SendGrid API key")
        return missing

    def send_otp(self, to_email: str, code: str) -> bool:
        """
        Send a password reset passcode.

        Returns True on success, False on failure.
        """
        message = Mail(
            from_email=self.from_email,
            to_emails=to_email,
            subject=f"{self.app_name} - Your password reset code",
            plain_text_content=f"Your OTP code is: {code}",
            html_content=self._build_otp_email_html(code=code),
        )

        try:
            sg = SendGridAPIClient(self.api_key)
            sg.client.timeout = self.timeout
            response = sg.send(message)
            logger.info("OTP email accepted by SendGrid (status %s)", response.status_code)
            return True
        except Exception as e:
            # Avoid leaking provider errors to end users; log for operators.
            logger.exception("Email send failed: %s", e)
            return False

    def _build_otp_email_html(self, *, code: str) -> str:
        """Build HTML content for the passcode email."""
        return f"""
        <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
            <h2>Reset Your Password</h2>
            <p>We received a request to reset the password for your {self.app_name} account.</p>
            <p>Enter this code to continue. It expires in {OTP_EXPIRE_MINUTES} minutes.</p>
            <p style="margin: 30px 0; font-size: 28px; letter-spacing: 6px;">
                <strong>{code}</strong>
            </p>
            <p>If you didn't request this, you can safely ignore this email.</p>
            <p>The {self.app_name} Team</p>
        </div>
        """
