"""HTTP routes for bot administration.

Everything except login and logout sits behind AuthMiddleware, which puts the
authenticated administrator on `request.state.user_id`.

AuthError subclasses raised by the services propagate to the handler
registered in api/errors.py, which turns them into error responses carrying
their status code and field messages.
"""

from fastapi import APIRouter, Request, Response, Query

from auth.admin_registry import AdminRegistry
from auth.challenge_store import AuthChallengeStore
from auth.security_logger import SecurityLogger, SecurityEvent
from auth.security_middleware import SESSION_COOKIE
from auth.session import SessionManager
from auth.types import AddAdministratorRequest, SendCodeRequest, VerifyCodeRequest
from api.base import success_response


def _admins_payload(admins) -> list[dict]:
    return [a.model_dump() for a in admins]


def create_auth_router(
    challenge_store: AuthChallengeStore,
    admin_registry: AdminRegistry,
    session_manager: SessionManager,
    security_logger: SecurityLogger,
) -> APIRouter:
    """Create auth router with injected services."""
    router = APIRouter(tags=["auth"])

    @router.post("/login/send")
    async def send_code(body: SendCodeRequest):
        """Send login codewords to an administrator's login thread."""
        user_id = await challenge_store.send_auth_code(body.tag)
        return success_response({"user_id": user_id})

    @router.post("/login/verify")
    async def verify_code(body: VerifyCodeRequest, response: Response):
        """Validate codewords and start an admin session.

        Sets the session cookie on success.
        """
        await challenge_store.validate_auth_code(body.user_id, body.code)
        session = await session_manager.create_session(body.user_id)
        await security_logger.log(SecurityEvent.SESSION_CREATED, user_id=body.user_id)

        response.set_cookie(
            key=SESSION_COOKIE,
            value=session.token,
            httponly=True,
            secure=True,
            samesite="lax",
            max_age=int((session.expires_at - session.created_at).total_seconds()),
        )
        return success_response({"user_id": body.user_id})

    @router.post("/logout")
    async def logout(request: Request, response: Response):
        """Logout - revoke session and clear cookie."""
        session_token = request.cookies.get(SESSION_COOKIE)
        if session_token:
            await session_manager.revoke_session(session_token)
            await security_logger.log(SecurityEvent.SESSION_REVOKED)

        response.delete_cookie(key=SESSION_COOKIE)
        return success_response({"message": "Logged out successfully"})

    @router.get("/admins")
    async def list_admins():
        return success_response(_admins_payload(await admin_registry.get_administrators()))

    @router.post("/admins")
    async def add_admin(request: Request, body: AddAdministratorRequest):
        actor = request.state.user_id
        admins = await admin_registry.add_administrator(body.tag, actor_user_id=actor)
        return success_response(_admins_payload(admins))

    @router.delete("/admins/{admin_id}")
    async def remove_admin(request: Request, admin_id: str):
        actor = request.state.user_id
        admins = await admin_registry.remove_administrator(admin_id, actor_user_id=actor)
        return success_response(_admins_payload(admins))

    @router.get("/security-events")
    async def security_events(limit: int = Query(100, ge=1, le=1000)):
        return success_response(await security_logger.get_recent_events(limit=limit))

    return router
