from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ...core.dependencies import get_auth_rate_limiter, get_token_service, get_user_repository
from ...domain.models import User
from ...domain.ports.persistence import UserRepository
from ...domain.ports.security import TokenService
from ...services.rate_limiter import FixedWindowRateLimiter

_bearer_scheme = HTTPBearer(auto_error=False)


def get_access_token(credentials: HTTPAuthorizationCredentials = Depends(_bearer_scheme)) -> str:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Access token is required")
    return credentials.credentials


def get_current_user(
    token: str = Depends(get_access_token),
    token_service: TokenService = Depends(get_token_service),
    users: UserRepository = Depends(get_user_repository),
) -> User:
    """Resolve the bearer token to a stored, active account.

    Token failures propagate as domain errors and are rendered as 401 by the
    exception handlers. The role is read from the stored account so a role
    change takes effect without waiting for the token to expire.
    """
    payload = token_service.verify_access_token(token)
    user = users.find_by_id(payload.user_id)
    if user is None or not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found or inactive")
    return user


def require_permission(permission: str):
    def dependency(user: User = Depends(get_current_user)) -> User:
        if not user.has_permission(permission):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")
        return user

    return dependency


def client_key(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def enforce_auth_rate_limit(
    request: Request,
    limiter: FixedWindowRateLimiter = Depends(get_auth_rate_limiter),
) -> str:
    key = f"{request.url.path}:{client_key(request)}"
    retry_after = limiter.retry_after(key)
    if retry_after is not None:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many authentication attempts, please try again later",
            headers={"Retry-After": str(retry_after)},
        )
    return key
