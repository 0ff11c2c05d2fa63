from typing import Protocol


class NotificationSender(Protocol):
    """Outbound side channel. Callers treat failures as non-fatal."""

    def send_welcome_email(self, to_email: str, name: str, role: str) -> bool:
        ...

    def send_password_reset_email(self, to_email: str, name: str, reset_token: str) -> bool:
        ...

    def send_notification_email(self, to_email: str, subject: str, content: str) -> bool:
        ...
