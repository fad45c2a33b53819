"""Authentication configuration."""

from pydantic import BaseModel, Field


class AuthConfig(BaseModel):
    """
    Authentication configuration.

    All durations are in their natural units (minutes for login codes,
    seconds for the throttle, hours for sessions).
    """

    # Login codes
    auth_code_expiry_minutes: int = Field(
        default=1,
        description="How long a login code remains valid",
        ge=1,
        le=10,
    )
    failed_attempt_delay_seconds: float = Field(
        default=0.5,
        description="Delay before reporting an incorrect code",
        ge=0,
        le=5,
    )
    auth_fail_threshold: int = Field(
        default=10,
        description="Failed attempts before every further failure raises a security alert",
        ge=1,
    )

    # Threads
    login_thread_title: str = Field(
        default="Message Bot Login",
        description="Title of the thread login codes are delivered on",
    )
    compliance_thread_title: str = Field(
        default="Compliance Alerts",
        description="Title of the thread administrative notices are delivered on",
    )

    # Admin sessions
    session_expiry_hours: int = Field(
        default=12,
        description="Admin session lifetime in hours",
        ge=1,
        le=720,
    )

    # Audit trail
    security_event_retention: int = Field(
        default=1000,
        description="Number of security events kept in Valkey",
        ge=10,
    )


# Persistence layout shared with earlier deployments of the bot
AUTH_NAMESPACE = "authentication"
ADMIN_IDS_KEY = "adminIds"
PENDING_KEY = "pending"
FAILS_KEY = "fails"
SOLO_THREAD_KEY = "soloThreadId"
GROUP_THREAD_KEY = "groupThreadId"
