"""Pydantic models for the auth domain and directory records."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class Slug(BaseModel):
    """A `{slug}` reference as returned by the directory."""

    slug: str

    model_config = {"extra": "ignore"}


class User(BaseModel):
    """Directory snapshot of a user. Never mutated locally."""

    id: str
    tag: Slug
    org: Slug
    first_name: str | None = None
    middle_name: str | None = None
    last_name: str | None = None

    model_config = {"frozen": True, "extra": "ignore"}


class Distribution(BaseModel):
    """Recipients resolved from a tag expression."""

    userids: list[str] = Field(default_factory=list)
    warnings: list[Any] = Field(default_factory=list)

    model_config = {"extra": "ignore"}

    @property
    def is_single_user(self) -> bool:
        """Exactly one recipient and nothing the directory complained about."""
        return len(self.userids) == 1 and not self.warnings


class PendingChallenge(BaseModel):
    """A login code awaiting validation."""

    code: str = Field(..., description="Two-word code sent to the login thread")
    expires: datetime


class AuthFailureCounter(BaseModel):
    """Failed code comparisons since the last successful login."""

    count: int = Field(default=0, ge=0)
    since: datetime


class AdminEntry(BaseModel):
    """An authorized user as reported by admin-set operations."""

    id: str
    label: str


class Session(BaseModel):
    """An active admin session."""

    token: str = Field(..., description="Session token (opaque string)")
    user_id: str
    created_at: datetime
    expires_at: datetime
    last_activity_at: datetime


class SendCodeRequest(BaseModel):
    """Request payload for issuing a login code."""

    tag: str


class VerifyCodeRequest(BaseModel):
    """Request payload for validating a login code."""

    user_id: str
    code: str


class AddAdministratorRequest(BaseModel):
    """Request payload for adding an administrator."""

    tag: str
