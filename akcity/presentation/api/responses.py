from typing import Any, Dict, List, Optional

from fastapi import status
from fastapi.responses import JSONResponse

from ...domain.errors import (
    AccountNotActiveError,
    DomainError,
    DuplicateEmailError,
    InvalidCredentialsError,
    InvalidTransitionError,
    NotFoundError,
    TokenExpiredError,
    TokenInvalidError,
    ValidationError,
)

_STATUS_BY_ERROR = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (DuplicateEmailError, status.HTTP_409_CONFLICT),
    (InvalidCredentialsError, status.HTTP_401_UNAUTHORIZED),
    (TokenExpiredError, status.HTTP_401_UNAUTHORIZED),
    (TokenInvalidError, status.HTTP_401_UNAUTHORIZED),
    (AccountNotActiveError, status.HTTP_403_FORBIDDEN),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (InvalidTransitionError, status.HTTP_409_CONFLICT),
)


def status_for(error: DomainError) -> int:
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def envelope(data: Any = None, message: str = "OK") -> Dict[str, Any]:
    return {"success": True, "message": message, "data": data}


def error_response(
    status_code: int,
    message: str,
    errors: Optional[List[str]] = None,
    **extra: Any,
) -> JSONResponse:
    body: Dict[str, Any] = {"success": False, "message": message}
    if errors:
        body["errors"] = errors
    body.update(extra)
    return JSONResponse(status_code=status_code, content=body)


def domain_error_response(error: DomainError, status_code: Optional[int] = None) -> JSONResponse:
    errors = error.errors if isinstance(error, ValidationError) else None
    return error_response(status_code or status_for(error), error.message, errors)
