"""API modules for the admin HTTP interface."""

from api.base import (
    APIError,
    APIMeta,
    APIResponse,
    success_response,
    error_response,
    error_json,
    auth_error_json,
    ErrorCodes,
)
