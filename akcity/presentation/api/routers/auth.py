"""API router for registration, login and session management."""

from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from ....application.use_cases.authenticate_user import AuthenticateUserRequest, AuthenticateUserUseCase
from ....application.use_cases.create_user import CreateUserRequest, CreateUserUseCase
from ....application.use_cases.logout import LogoutUseCase
from ....application.use_cases.refresh_session import RefreshSessionUseCase
from ....core.dependencies import (
    get_auth_rate_limiter,
    get_authenticate_user,
    get_create_user,
    get_logout,
    get_refresh_session,
)
from ....domain.errors import AccountNotActiveError, InvalidCredentialsError
from ....domain.models import User
from ....services.rate_limiter import FixedWindowRateLimiter
from ..dependencies import enforce_auth_rate_limit, get_access_token, get_current_user
from ..responses import domain_error_response, envelope
from ..schemas.auth import LoginRequest, LogoutRequest, RefreshRequest, RegisterRequest

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


def _session(user: User, access_token: str, refresh_token: str) -> Dict[str, Any]:
    return {
        "user": user.to_public_dict(),
        "access_token": access_token,
        "refresh_token": refresh_token,
        "token_type": "bearer",
    }


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    payload: RegisterRequest,
    rate_key: str = Depends(enforce_auth_rate_limit),
    limiter: FixedWindowRateLimiter = Depends(get_auth_rate_limiter),
    use_case: CreateUserUseCase = Depends(get_create_user),
):
    """Create an account. Every attempt counts against the client's limit."""
    limiter.record(rate_key)
    result = await use_case.execute(
        CreateUserRequest(
            name=payload.name,
            email=payload.email,
            password=payload.password,
            phone=payload.phone,
            role=payload.role.value,
        )
    )
    if not result.success:
        return domain_error_response(result.error)
    return envelope({"user": result.user.to_public_dict()}, "User registered successfully")


@router.post("/login")
async def login(
    payload: LoginRequest,
    rate_key: str = Depends(enforce_auth_rate_limit),
    limiter: FixedWindowRateLimiter = Depends(get_auth_rate_limiter),
    use_case: AuthenticateUserUseCase = Depends(get_authenticate_user),
):
    """Exchange credentials for tokens. Only failed attempts count against the limit."""
    result = await use_case.execute(AuthenticateUserRequest(email=payload.email, password=payload.password))
    if not result.success:
        if isinstance(result.error, (InvalidCredentialsError, AccountNotActiveError)):
            limiter.record(rate_key)
            return domain_error_response(result.error, status.HTTP_401_UNAUTHORIZED)
        return domain_error_response(result.error)
    return envelope(
        _session(result.user, result.access_token, result.refresh_token),
        "Login successful",
    )


@router.post("/refresh")
async def refresh(
    payload: RefreshRequest,
    use_case: RefreshSessionUseCase = Depends(get_refresh_session),
):
    result = await use_case.execute(payload.refresh_token)
    if not result.success:
        return domain_error_response(result.error)
    return envelope(
        _session(result.user, result.access_token, result.refresh_token),
        "Session refreshed",
    )


@router.post("/logout")
async def logout(
    payload: LogoutRequest,
    access_token: str = Depends(get_access_token),
    _: User = Depends(get_current_user),
    use_case: LogoutUseCase = Depends(get_logout),
):
    result = await use_case.execute(access_token, payload.refresh_token)
    if not result.success:
        return domain_error_response(result.error)
    return envelope(message="Logged out successfully")


@router.get("/me")
async def me(user: User = Depends(get_current_user)) -> Dict[str, Any]:
    return envelope({"user": user.to_public_dict(), "permissions": user.permissions()})
