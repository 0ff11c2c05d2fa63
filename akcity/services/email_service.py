"""SMTP notifications for account events."""

import html
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

logger = logging.getLogger(__name__)

_LAYOUT = """
<html>
    <body style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
        <h2 style="color: #1e293b;">{heading}</h2>
        <div style="color: #475569; line-height: 1.6;">{content}</div>
        <p style="color: #94a3b8; font-size: 12px; margin-top: 30px;">AKCity construction management</p>
    </body>
</html>
"""

_BUTTON = (
    '<p style="text-align: center; margin: 30px 0;">'
    '<a href="{url}" style="background-color: #3b82f6; color: white; padding: 12px 24px; '
    'text-decoration: none; border-radius: 5px;">{label}</a></p>'
)


class EmailService:
    """Sends account e-mails over SMTP.

    Without an SMTP host, username and sender address the service is
    disabled: messages are logged and reported as delivered.
    """

    def __init__(
        self,
        smtp_host: Optional[str] = None,
        smtp_port: int = 587,
        smtp_username: Optional[str] = None,
        smtp_password: Optional[str] = None,
        from_email: Optional[str] = None,
        from_name: str = "AKCity",
        frontend_base_url: str = "http://localhost:3000",
    ):
        self.smtp_host = smtp_host or ""
        self.smtp_port = smtp_port
        self.smtp_username = smtp_username or ""
        self.smtp_password = smtp_password or ""
        self.from_email = from_email or ""
        self.from_name = from_name
        self.frontend_base_url = frontend_base_url.rstrip("/")
        self.enabled = bool(self.smtp_host and self.smtp_username and self.from_email)

    def send_welcome_email(self, to_email: str, name: str, role: str) -> bool:
        """
        Greet a newly created account.

        Args:
            to_email: Recipient address
            name: Display name of the account
            role: Role value, e.g. ``project_manager``

        Returns:
            True when delivered (or logged while disabled)
        """
        login_url = f"{self.frontend_base_url}/login"
        role_label = role.replace("_", " ").title()
        text_body = (
            f"Welcome to AKCity, {name}!\n\n"
            f"Your account has been created with the {role_label} role.\n"
            f"Sign in at: {login_url}\n"
        )
        content = (
            f"<p>Your account has been created with the <strong>{html.escape(role_label)}</strong> role.</p>"
            + _BUTTON.format(url=login_url, label="Sign in")
        )
        html_body = _LAYOUT.format(heading=f"Welcome to AKCity, {html.escape(name)}!", content=content)
        return self._deliver(to_email, "Welcome to AKCity", text_body, html_body)

    def send_password_reset_email(self, to_email: str, name: str, reset_token: str) -> bool:
        reset_url = f"{self.frontend_base_url}/auth/reset-password?token={reset_token}"
        text_body = (
            f"Hello {name},\n\n"
            f"Reset your password here: {reset_url}\n\n"
            "If you did not request this, you can ignore this email.\n"
        )
        content = (
            "<p>We received a request to reset your password.</p>"
            + _BUTTON.format(url=reset_url, label="Reset password")
            + "<p>If you did not request this, you can ignore this email.</p>"
        )
        html_body = _LAYOUT.format(heading=f"Hello {html.escape(name)},", content=content)
        return self._deliver(to_email, "Reset your AKCity password", text_body, html_body)

    def send_notification_email(self, to_email: str, subject: str, content: str) -> bool:
        html_body = _LAYOUT.format(heading=html.escape(subject), content=f"<p>{html.escape(content)}</p>")
        return self._deliver(to_email, subject, content, html_body)

    def _build_message(self, to_email: str, subject: str, text_body: str, html_body: str) -> MIMEMultipart:
        # Plain text first so clients without HTML support pick it.
        message = MIMEMultipart("alternative")
        message["Subject"] = subject
        message["From"] = f"{self.from_name} <{self.from_email}>"
        message["To"] = to_email
        message.attach(MIMEText(text_body, "plain", "utf-8"))
        message.attach(MIMEText(html_body, "html", "utf-8"))
        return message

    def _deliver(self, to_email: str, subject: str, text_body: str, html_body: str) -> bool:
        if not self.enabled:
            logger.info("SMTP disabled; would send %r to %s", subject, to_email)
            return True

        message = self._build_message(to_email, subject, text_body, html_body)
        try:
            with smtplib.SMTP(self.smtp_host, self.smtp_port) as server:
                server.starttls()
                server.login(self.smtp_username, self.smtp_password)
                server.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("Failed to send %r to %s: %s", subject, to_email, exc)
            return False
        logger.info("Sent %r to %s", subject, to_email)
        return True
