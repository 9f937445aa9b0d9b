"""
Unit tests for the Email Service.

SMTP is mocked; no mail leaves the test run.
"""

from unittest.mock import MagicMock, patch
from urllib.parse import parse_qs, urlparse

import pytest

from linepicks.utils.email_service import EmailService


@pytest.fixture
def mail_config(app_ctx):
    app_ctx.config.update(
        MAIL_SERVER="smtp.example.com",
        MAIL_PORT=587,
        MAIL_USERNAME="mailer@example.com",
        MAIL_PASSWORD="secret",
        FRONTEND_URL="https://picks.example.com/",
        RESET_PASSWORD_PATH="/reset-password",
    )
    return app_ctx.config


@pytest.fixture
def smtp():
    with patch("linepicks.utils.email_service.smtplib.SMTP") as smtp_class:
        yield smtp_class.return_value.__enter__.return_value


def _user(email="a@example.com", name="Alice"):
    user = MagicMock()
    user.email = email
    user.full_name = name
    return user


class TestEmailService:
    """Tests for EmailService class."""

    @pytest.mark.unit
    def test_reset_url_embeds_token(self, mail_config):
        url = EmailService().build_reset_url("a+b@example.com", "tok_en-123")
        parsed = urlparse(url)

        assert f"{parsed.scheme}://{parsed.netloc}{parsed.path}" == "https://picks.example.com/reset-password"
        assert parse_qs(parsed.query) == {"token": ["tok_en-123"], "email": ["a+b@example.com"]}

    @pytest.mark.unit
    def test_send_password_reset_email(self, mail_config, smtp):
        assert EmailService().send_password_reset_email(_user(), "tok-123") is True

        smtp.starttls.assert_called_once()
        smtp.login.assert_called_once_with("mailer@example.com", "secret")
        from_addr, to_addrs, body = smtp.sendmail.call_args.args
        assert to_addrs == ["a@example.com"]
        assert "token=tok-123" in body
        assert "60 minutes" in body

    @pytest.mark.unit
    def test_send_welcome_email(self, mail_config, smtp):
        assert EmailService().send_welcome_email(_user()) is True
        smtp.sendmail.assert_called_once()

    @pytest.mark.unit
    def test_missing_credentials_skips_send(self, app_ctx, smtp):
        app_ctx.config.update(MAIL_USERNAME=None, MAIL_PASSWORD=None)

        assert EmailService().send_welcome_email(_user()) is False
        smtp.sendmail.assert_not_called()

    @pytest.mark.unit
    def test_smtp_failure_returns_false(self, mail_config):
        with patch("linepicks.utils.email_service.smtplib.SMTP", side_effect=OSError("refused")):
            assert EmailService().send_password_reset_email(_user(), "tok-123") is False
