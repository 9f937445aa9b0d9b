"""
Email Service for LinePicks

This module handles outgoing account email:
- Welcome emails
- Password reset emails

Delivery is best effort. Every send returns True/False and never raises, so
callers can log a failed delivery and carry on.
"""

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from urllib.parse import urlencode

from flask import current_app

logger = logging.getLogger(__name__)


class EmailService:
    """Handles all email sending functionality"""

    def __init__(self):
        self.smtp_server = current_app.config.get("MAIL_SERVER") or "localhost"
        self.smtp_port = current_app.config.get("MAIL_PORT", 587)
        self.smtp_username = current_app.config.get("MAIL_USERNAME")
        self.smtp_password = current_app.config.get("MAIL_PASSWORD")
        self.from_email = current_app.config.get(
            "FROM_EMAIL"
        ) or current_app.config.get("MAIL_USERNAME") or "no-reply@linepicks.app"
        self.from_name = current_app.config.get("FROM_NAME", "LinePicks")
        self.use_tls = current_app.config.get("MAIL_USE_TLS", True)
        self.frontend_url = current_app.config.get("FRONTEND_URL", "").rstrip("/")
        self.reset_path = current_app.config.get("RESET_PASSWORD_PATH", "/reset-password")
        self.reset_ttl_minutes = current_app.config.get("RESET_TOKEN_TTL", 3600) // 60

    def _create_message(self, to_email, subject, body_text, body_html=None):
        """Create email message"""
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = f"{self.from_name} <{self.from_email}>"
        msg["To"] = to_email

        msg.attach(MIMEText(body_text, "plain"))

        if body_html:
            msg.attach(MIMEText(body_html, "html"))

        return msg

    def _send_email(self, message):
        """Send email message"""
        try:
            if not self.smtp_username or not self.smtp_password:
                logger.warning("SMTP credentials not configured. Email not sent.")
                return False

            with smtplib.SMTP(self.smtp_server, self.smtp_port) as server:
                if self.use_tls:
                    server.starttls()
                server.login(self.smtp_username, self.smtp_password)

                text = message.as_string()
                server.sendmail(self.from_email, [message["To"]], text)

            logger.info(f"Email sent successfully to {message['To']}")
            return True

        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email to {message['To']}: {str(e)}")
            return False

    def build_reset_url(self, email, reset_token):
        """Recovery link with the token embedded as a query parameter"""
        query = urlencode({"token": reset_token, "email": email})
        return f"{self.frontend_url}{self.reset_path}?{query}"

    def send_welcome_email(self, user):
        """Send welcome email to new user"""
        subject = f"Welcome to {self.from_name}!"

        body_text = f"""
        Hi {user.full_name},

        Welcome to {self.from_name}! Your account has been created successfully.

        Each week you get one pick against the line. Make it count!

        Best regards,
        The {self.from_name} Team
        """

        message = self._create_message(user.email, subject, body_text)
        return self._send_email(message)

    def send_password_reset_email(self, user, reset_token):
        """Send password reset email"""
        reset_url = self.build_reset_url(user.email, reset_token)

        subject = f"Password Reset - {self.from_name}"

        body_text = f"""
        Hi {user.full_name},

        You requested a password reset for your {self.from_name} account.

        Click the link below to reset your password:
        {reset_url}

        This link will expire in {self.reset_ttl_minutes} minutes.

        If you didn't request this reset, please ignore this email.

        Best regards,
        The {self.from_name} Team
        """

        body_html = f"""
        <html>
        <body>
            <h2>Password Reset</h2>
            <p>Hi {user.full_name},</p>
            <p>You requested a password reset for your {self.from_name} account.</p>

            <p><a href="{reset_url}" style="background-color: #007bff; color: white; padding: 10px 20px; text-decoration: none; border-radius: 5px;">Reset Password</a></p>

            <p>Or copy and paste this link: <br><a href="{reset_url}">{reset_url}</a></p>

            <p><small>This link will expire in {self.reset_ttl_minutes} minutes.</small></p>

            <p>If you didn't request this reset, please ignore this email.</p>
        </body>
        </html>
        """

        message = self._create_message(user.email, subject, body_text, body_html)
        return self._send_email(message)
