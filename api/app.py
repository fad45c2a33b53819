"""FastAPI application for the bot's admin surface."""

from fastapi import FastAPI

from api.base import success_response
from api.errors import register_error_handlers
from auth.admin_registry import AdminRegistry
from auth.api import create_auth_router
from auth.challenge_store import AuthChallengeStore
from auth.security_logger import SecurityLogger
from auth.security_middleware import AuthMiddleware
from auth.session import SessionManager


def create_app(
    challenge_store: AuthChallengeStore,
    admin_registry: AdminRegistry,
    session_manager: SessionManager,
    security_logger: SecurityLogger,
) -> FastAPI:
    """Create the admin app with injected services."""
    app = FastAPI(title="Relay Translator Bot Admin")
    app.add_middleware(
        AuthMiddleware, session_manager=session_manager, admin_registry=admin_registry
    )
    register_error_handlers(app)

    app.include_router(
        create_auth_router(challenge_store, admin_registry, session_manager, security_logger),
        prefix="/auth",
    )

    @app.get("/health")
    async def health():
        return success_response({"status": "ok"})

    return app
