"""Authentication and authorization for bot administrators."""

from auth.exceptions import (
    AuthError,
    InvalidTargetError,
    NotAuthorizedError,
    NoChallengePendingError,
    IncorrectCodeError,
    AdministratorNotFoundError,
    SessionExpiredError,
)
from auth.types import (
    User,
    Distribution,
    PendingChallenge,
    AuthFailureCounter,
    AdminEntry,
    Session,
)
from auth.config import AuthConfig
