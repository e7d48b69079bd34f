"""Tests for transactional email rendering and delivery."""

import smtplib
from unittest.mock import MagicMock, patch

import pytest

from app.exceptions import EmailDeliveryError
from app.services.email import EmailService, OutgoingEmail


class TestEmailTemplates:
    """Each notification renders its template and reaches the transport once."""

    def test_verification_email(self, outbox: list):
        EmailService().send_verification_email("a@x.com", "482913")
        assert len(outbox) == 1
        assert outbox[0].to_email == "a@x.com"
        assert outbox[0].subject == "Verify Your Email"
        assert "482913" in outbox[0].html

    def test_welcome_email(self, outbox: list):
        EmailService().send_welcome_email("a@x.com", "Ada")
        assert outbox[0].category == "Welcome"
        assert "Ada" in outbox[0].html

    def test_welcome_email_escapes_name(self, outbox: list):
        EmailService().send_welcome_email("a@x.com", "<script>alert(1)</script>")
        assert "<script>" not in outbox[0].html
        assert "&lt;script&gt;" in outbox[0].html

    def test_password_reset_email(self, outbox: list):
        url = "http://localhost:5173/reset-password/abc123"
        EmailService().send_password_reset_email("a@x.com", url)
        assert outbox[0].subject == "Reset Your Password"
        assert f'href="{url}"' in outbox[0].html

    def test_password_reset_success_email(self, outbox: list):
        EmailService().send_password_reset_success_email("a@x.com")
        assert outbox[0].subject == "Password Reset Success"
        assert "successfully reset" in outbox[0].html


class TestEmailTransport:
    """Tests for the console and SMTP backends."""

    @pytest.fixture(name="message")
    def message_fixture(self) -> OutgoingEmail:
        return OutgoingEmail(to_email="a@x.com", subject="Hi", html="<p>Hi</p>", category="Welcome")

    def test_console_backend_logs(self, message: OutgoingEmail, caplog):
        service = EmailService()
        service.settings = MagicMock(MAIL_BACKEND="console")
        with caplog.at_level("INFO", logger="authflow"):
            service._deliver(message)
        assert "a@x.com" in caplog.text

    def test_smtp_backend_sends(self, message: OutgoingEmail):
        service = EmailService()
        service.settings = MagicMock(
            MAIL_BACKEND="smtp",
            SMTP_HOST="smtp.example.com",
            SMTP_PORT=587,
            SMTP_USE_TLS=True,
            SMTP_USERNAME="user",
            SMTP_PASSWORD="pass",
            MAIL_FROM_EMAIL="no-reply@example.com",
            MAIL_FROM_NAME="Authflow",
        )
        with patch("app.services.email.smtplib.SMTP") as smtp_cls:
            service._deliver(message)
        server = smtp_cls.return_value.__enter__.return_value
        server.starttls.assert_called_once()
        server.login.assert_called_once_with("user", "pass")
        args = server.sendmail.call_args.args
        assert args[0] == "no-reply@example.com"
        assert args[1] == ["a@x.com"]

    def test_smtp_failure_raises_delivery_error(self, message: OutgoingEmail):
        service = EmailService()
        service.settings = MagicMock(
            MAIL_BACKEND="smtp",
            SMTP_HOST="smtp.example.com",
            SMTP_PORT=587,
            SMTP_USE_TLS=False,
            SMTP_USERNAME="",
            MAIL_FROM_EMAIL="no-reply@example.com",
            MAIL_FROM_NAME="Authflow",
        )
        with patch("app.services.email.smtplib.SMTP", side_effect=smtplib.SMTPConnectError(421, b"busy")) as smtp_cls:
            with pytest.raises(EmailDeliveryError) as exc_info:
                service._deliver(message)
        smtp_cls.assert_called_once_with("smtp.example.com", 587, timeout=30)
        assert exc_info.value.status_code == 500
        assert exc_info.value.message == "Failed to send welcome email"

    def test_non_ascii_sender_raises_delivery_error(self, message: OutgoingEmail):
        """A sender address that cannot go in a header is reported as a delivery failure."""
        service = EmailService()
        service.settings = MagicMock(
            MAIL_BACKEND="smtp",
            SMTP_HOST="smtp.example.com",
            SMTP_PORT=587,
            SMTP_USE_TLS=False,
            SMTP_USERNAME="",
            MAIL_FROM_EMAIL="nö-reply@exämple.com",
            MAIL_FROM_NAME="Authflow",
        )
        with patch("app.services.email.smtplib.SMTP") as smtp_cls:
            with pytest.raises(EmailDeliveryError) as exc_info:
                service._deliver(message)
        smtp_cls.assert_not_called()
        assert exc_info.value.message == "Failed to send welcome email"

    def test_smtp_without_host_raises(self, message: OutgoingEmail):
        service = EmailService()
        service.settings = MagicMock(MAIL_BACKEND="smtp", SMTP_HOST="")
        with pytest.raises(EmailDeliveryError):
            service._deliver(message)
