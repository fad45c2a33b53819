"""Exception handlers for the admin app.

Auth failures keep their own status and field messages. A directory outage
is reported as 503 since nothing about the request was wrong.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError

from api.base import auth_error_json, error_json, ErrorCodes
from auth.exceptions import AuthError
from clients.directory_client import DirectoryError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(AuthError)
    async def auth_error_handler(request: Request, exc: AuthError):
        logger.info(f"{request.method} {request.url.path} refused: {exc.error_code}")
        return auth_error_json(exc)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        fields: dict[str, list[str]] = {}
        for error in exc.errors():
            name = str(error["loc"][-1]) if error.get("loc") else "body"
            fields.setdefault(name, []).append(error["msg"])
        return error_json(422, ErrorCodes.VALIDATION_ERROR, "Invalid request", fields)

    @app.exception_handler(DirectoryError)
    async def directory_error_handler(request: Request, exc: DirectoryError):
        logger.error(f"Directory unavailable: {exc}")
        return error_json(503, ErrorCodes.SERVICE_UNAVAILABLE, "Directory service unavailable")

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception")
        return error_json(500, ErrorCodes.INTERNAL_ERROR, "An internal error occurred")
