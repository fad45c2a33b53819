"""Response envelope shared by every admin endpoint.

Success and failure have the same shape: `success`, `data`, `error`, `meta`.
Errors raised by the auth services carry per-field messages, reported under
`error.fields`.
"""

from datetime import datetime
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, Field
from starlette.responses import JSONResponse

from auth.exceptions import AuthError
from utils.timezone import now_utc


class APIError(BaseModel):
    """Error details in API response."""

    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    fields: dict[str, list[str]] | None = Field(
        default=None, description="Messages keyed by the request field they concern"
    )


class APIMeta(BaseModel):
    timestamp: datetime = Field(default_factory=now_utc, description="Response timestamp (UTC)")
    request_id: str = Field(default_factory=lambda: str(uuid4()))


class APIResponse(BaseModel):
    success: bool
    data: Any | None = None
    error: APIError | None = None
    meta: APIMeta = Field(default_factory=APIMeta)


def success_response(data: Any) -> APIResponse:
    return APIResponse(success=True, data=data)


def error_response(
    code: str, message: str, fields: dict[str, list[str]] | None = None
) -> APIResponse:
    return APIResponse(success=False, error=APIError(code=code, message=message, fields=fields))


def error_json(
    status_code: int, code: str, message: str, fields: dict[str, list[str]] | None = None
) -> JSONResponse:
    """Error envelope as a ready-to-return response."""
    return JSONResponse(
        status_code=status_code,
        content=error_response(code, message, fields).model_dump(mode="json"),
    )


def auth_error_json(exc: AuthError) -> JSONResponse:
    """Report an AuthError with its own status, code and field messages."""
    return error_json(exc.status_code, exc.error_code, exc.message, exc.info)


class ErrorCodes:
    """Codes for failures that are not AuthError subclasses.

    AuthError subclasses report their own `error_code`.
    """

    NOT_AUTHENTICATED = "NOT_AUTHENTICATED"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
