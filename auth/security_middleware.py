"""Session and admin-set gate for the admin app."""

import logging

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from api.base import auth_error_json, error_json, ErrorCodes
from auth.admin_registry import AdminRegistry
from auth.exceptions import NotAuthorizedError, SessionExpiredError
from auth.session import SessionManager

logger = logging.getLogger(__name__)

SESSION_COOKIE = "session_token"


class AuthMiddleware(BaseHTTPMiddleware):
    """Only current administrators with a live session get past this.

    Membership is re-checked on every request: removing an administrator
    ends their access without waiting for the session to expire. Their
    session is revoked on the first refused request.
    """

    PUBLIC_PREFIXES = ("/auth/login/", "/auth/logout", "/health", "/docs", "/openapi.json")

    def __init__(self, app, session_manager: SessionManager, admin_registry: AdminRegistry):
        super().__init__(app)
        self._session_manager = session_manager
        self._admin_registry = admin_registry

    async def dispatch(self, request: Request, call_next):
        if request.url.path.startswith(self.PUBLIC_PREFIXES):
            return await call_next(request)

        token = request.cookies.get(SESSION_COOKIE)
        if not token:
            return error_json(401, ErrorCodes.NOT_AUTHENTICATED, "Authentication required")

        try:
            session = await self._session_manager.validate_session(token)
        except SessionExpiredError as e:
            return auth_error_json(e)

        if not await self._admin_registry.is_administrator(session.user_id):
            logger.warning(f"Revoking session of former administrator {session.user_id}")
            await self._session_manager.revoke_session(token)
            return auth_error_json(NotAuthorizedError("administrator access required"))

        request.state.user_id = session.user_id
        request.state.session = session
        return await call_next(request)
