from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List, Optional

from ...domain.errors import DomainError, DuplicateEmailError, ValidationError
from ...domain.models import User, UserRole
from ...domain.ports.notifications import NotificationSender
from ...domain.ports.persistence import UserRepository
from ...domain.ports.security import MAX_PASSWORD_BYTES, PasswordHasher

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^[0-9+\-\s()]+$")
MIN_PASSWORD_LENGTH = 8
NAME_LENGTH = (2, 50)


@dataclass(slots=True)
class CreateUserRequest:
    name: str
    email: str
    password: str
    phone: str
    role: str


@dataclass(slots=True)
class CreateUserResult:
    success: bool
    user: Optional[User] = None
    error: Optional[DomainError] = None

    @property
    def message(self) -> Optional[str]:
        return self.error.message if self.error else None


class CreateUserUseCase:
    """Registers a new account and greets it by e-mail.

    The welcome e-mail is best effort: when it cannot be sent the account
    still exists and the result is still a success.
    """

    def __init__(
        self,
        user_repository: UserRepository,
        hasher: PasswordHasher,
        notifier: NotificationSender,
    ) -> None:
        self._users = user_repository
        self._hasher = hasher
        self._notifier = notifier

    async def execute(self, request: CreateUserRequest) -> CreateUserResult:
        try:
            role = self._validate(request)
            email = request.email.strip().lower()
            if self._users.find_by_email(email):
                raise DuplicateEmailError()
            password_hash = await self._hasher.hash(request.password)
            user = User.create(
                name=request.name,
                email=email,
                password_hash=password_hash,
                phone=request.phone,
                role=role,
            )
            created = self._users.create(user)
        except DomainError as exc:
            return CreateUserResult(success=False, error=exc)
        except Exception:
            logger.exception("Unexpected error while creating user")
            return CreateUserResult(success=False, error=DomainError("Failed to create user"))

        logger.info("Created user %s with role %s", created.id, created.role.value)
        self._send_welcome(created)
        return CreateUserResult(success=True, user=created)

    def _validate(self, request: CreateUserRequest) -> UserRole:
        errors: List[str] = []
        for field_name in ("name", "email", "password", "phone", "role"):
            value = getattr(request, field_name)
            if value is None or (isinstance(value, str) and not value.strip()):
                errors.append(f"{field_name.capitalize()} is required")
        if errors:
            raise ValidationError("All fields are required", errors)

        name = request.name.strip()
        if not NAME_LENGTH[0] <= len(name) <= NAME_LENGTH[1]:
            errors.append(f"Name must be between {NAME_LENGTH[0]} and {NAME_LENGTH[1]} characters long")
        if not EMAIL_PATTERN.match(request.email.strip()):
            errors.append("Invalid email format")
        if len(request.password) < MIN_PASSWORD_LENGTH:
            errors.append(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
        elif len(request.password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            errors.append(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
        if not PHONE_PATTERN.match(request.phone):
            errors.append("Invalid phone number format")
        role: Optional[UserRole] = None
        try:
            role = UserRole(request.role)
        except ValueError:
            errors.append("Please select a valid role")
        if errors:
            raise ValidationError(None if len(errors) == 1 else "Validation error", errors)
        return role

    def _send_welcome(self, user: User) -> None:
        try:
            sent = self._notifier.send_welcome_email(user.email, user.name, user.role.value)
        except Exception:
            logger.exception("Failed to send welcome email to user %s", user.id)
            return
        if not sent:
            logger.warning("Welcome email to user %s was not delivered", user.id)
