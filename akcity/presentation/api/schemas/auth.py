"""Pydantic schemas for the authentication endpoints."""

import re
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from ....domain.models import UserRole
from ....domain.ports.security import MAX_PASSWORD_BYTES

_PASSWORD_COMPLEXITY = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])")


class RegisterRequest(BaseModel):
    """Request schema for account registration."""

    name: str = Field(..., min_length=2, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=8)
    phone: str = Field(..., pattern=r"^[0-9+\-\s()]+$")
    role: UserRole

    @field_validator("password")
    @classmethod
    def password_is_complex(cls, value: str) -> str:
        if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
        if not _PASSWORD_COMPLEXITY.match(value):
            raise ValueError(
                "Password must contain at least one lowercase letter, one uppercase letter, "
                "one number and one special character"
            )
        return value


class LoginRequest(BaseModel):
    """Request schema for login."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class RefreshRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1)


class LogoutRequest(BaseModel):
    refresh_token: Optional[str] = None
