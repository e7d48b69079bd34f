"""Transactional email: verification, welcome, and password reset notifications."""

import logging
import smtplib
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr, formatdate
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from app.config import get_settings
from app.exceptions import EmailDeliveryError

logger = logging.getLogger("authflow")

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates" / "email"


@dataclass
class OutgoingEmail:
    """A rendered message ready for the transport."""

    to_email: str
    subject: str
    html: str
    category: str


class EmailService:
    """Renders email templates and hands them to the configured transport."""

    def __init__(self) -> None:
        self.settings = get_settings()
        self._env = Environment(
            loader=FileSystemLoader(str(TEMPLATE_DIR)),
            autoescape=select_autoescape(["html"]),
        )

    def send_verification_email(self, to_email: str, code: str) -> None:
        """Send the 6-digit verification code."""
        self._send(
            to_email,
            subject="Verify Your Email",
            template="verification.html",
            category="Email Verification",
            verification_code=code,
        )

    def send_welcome_email(self, to_email: str, name: str) -> None:
        """Send the welcome message once the address is verified."""
        self._send(
            to_email,
            subject=f"Welcome to {self.settings.MAIL_FROM_NAME}",
            template="welcome.html",
            category="Welcome",
            name=name,
        )

    def send_password_reset_email(self, to_email: str, reset_url: str) -> None:
        """Send the reset link. The URL embeds the single-use reset token."""
        self._send(
            to_email,
            subject="Reset Your Password",
            template="password_reset_request.html",
            category="Password Reset",
            reset_url=reset_url,
        )

    def send_password_reset_success_email(self, to_email: str) -> None:
        """Confirm that the password was changed."""
        self._send(
            to_email,
            subject="Password Reset Success",
            template="password_reset_success.html",
            category="Password Reset",
        )

    def render(self, template: str, **context: object) -> str:
        """Render an email body template."""
        return self._env.get_template(template).render(app_name=self.settings.MAIL_FROM_NAME, **context)

    def _send(self, to_email: str, subject: str, template: str, category: str, **context: object) -> None:
        message = OutgoingEmail(
            to_email=to_email,
            subject=subject,
            html=self.render(template, **context),
            category=category,
        )
        self._deliver(message)
        logger.info("EMAIL %s sent to %s", category, to_email)

    def _deliver(self, message: OutgoingEmail) -> None:
        """Hand a message to the transport. Raises EmailDeliveryError on failure."""
        if self.settings.MAIL_BACKEND == "smtp":
            self._deliver_smtp(message)
            return
        # Console backend: local development without a mail server
        logger.info("EMAIL (console) to=%s subject=%r\n%s", message.to_email, message.subject, message.html)

    def _deliver_smtp(self, message: OutgoingEmail) -> None:
        settings = self.settings
        if not settings.SMTP_HOST:
            raise EmailDeliveryError(f"Failed to send {message.category.lower()} email")

        try:
            mime = MIMEMultipart("alternative")
            mime["Subject"] = message.subject
            mime["From"] = formataddr((settings.MAIL_FROM_NAME, settings.MAIL_FROM_EMAIL))
            mime["To"] = message.to_email
            mime["Date"] = formatdate(localtime=False)
            mime["X-Category"] = message.category
            mime.attach(MIMEText(message.html, "html", "utf-8"))

            with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=30) as server:
                if settings.SMTP_USE_TLS:
                    server.starttls()
                if settings.SMTP_USERNAME:
                    server.login(settings.SMTP_USERNAME, settings.SMTP_PASSWORD)
                server.sendmail(settings.MAIL_FROM_EMAIL, [message.to_email], mime.as_string())
        except (smtplib.SMTPException, OSError, UnicodeError) as e:
            logger.error("Error sending %s email to %s: %s", message.category, message.to_email, e)
            raise EmailDeliveryError(f"Failed to send {message.category.lower()} email") from e


_email_service: EmailService | None = None


def get_email_service() -> EmailService:
    """Get singleton email service instance."""
    global _email_service
    if _email_service is None:
        _email_service = EmailService()
    return _email_service
