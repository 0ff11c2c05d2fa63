"""Error taxonomy shared by the domain, application and infrastructure layers."""

from __future__ import annotations

from typing import List, Optional


class DomainError(Exception):
    """Base class for every error the core reports to its callers."""

    code = "domain_error"
    default_message = "Unexpected error"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(DomainError):
    """Malformed or missing input, detected before any side effect."""

    code = "validation_error"
    default_message = "Validation error"

    def __init__(self, message: Optional[str] = None, errors: Optional[List[str]] = None) -> None:
        self.errors = list(errors or [])
        if message is None and len(self.errors) == 1:
            message = self.errors[0]
        super().__init__(message)


class DuplicateEmailError(DomainError):
    code = "duplicate_email"
    default_message = "User with this email already exists"


class InvalidCredentialsError(DomainError):
    """Raised for unknown e-mail and wrong password alike."""

    code = "invalid_credentials"
    default_message = "Invalid credentials"


class AccountNotActiveError(DomainError):
    code = "account_not_active"
    default_message = "Account is not active"


class InvalidTransitionError(DomainError):
    """An entity state machine refused the requested transition."""

    code = "invalid_transition"
    default_message = "Invalid status transition"

    def __init__(self, message: Optional[str] = None, *, current: Optional[str] = None, target: Optional[str] = None) -> None:
        self.current = current
        self.target = target
        if message is None and current and target:
            message = f"Cannot transition from {current} to {target}"
        super().__init__(message)


class TokenExpiredError(DomainError):
    code = "token_expired"
    default_message = "Token expired"


class TokenInvalidError(DomainError):
    code = "token_invalid"
    default_message = "Invalid token"


class HashingError(DomainError):
    code = "hashing_error"
    default_message = "Password hashing failed"


class NotFoundError(DomainError):
    code = "not_found"
    default_message = "Resource not found"


class PersistenceError(DomainError):
    code = "persistence_error"
    default_message = "Storage operation failed"
