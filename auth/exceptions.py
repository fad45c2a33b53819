"""Typed exceptions for auth failures.

Each carries an HTTP-style status code and field-level messages so the admin
surface can report them without knowing the individual types.
"""


class AuthError(Exception):
    """Base class for authentication/authorization errors."""

    status_code = 403
    error_code = "AUTH_ERROR"
    field = "detail"
    default_message = "authentication failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        self.info = {self.field: [self.message]}
        super().__init__(self.message)


class InvalidTargetError(AuthError):
    """Tag does not resolve to exactly one user, or resolved with warnings."""

    status_code = 400
    error_code = "INVALID_TARGET"
    field = "tag"
    default_message = "not a recognized tag, please try again"


class NotAuthorizedError(AuthError):
    """Target resolves but is not in the admin set."""

    status_code = 403
    error_code = "NOT_AUTHORIZED"
    field = "tag"
    default_message = "not an authorized user"


class NoChallengePendingError(AuthError):
    """No unexpired login code exists for this user."""

    status_code = 403
    error_code = "NO_CHALLENGE_PENDING"
    field = "code"
    default_message = "no authentication pending, please start over"


class IncorrectCodeError(AuthError):
    """Submitted code does not match the pending one."""

    status_code = 403
    error_code = "INCORRECT_CODE"
    field = "code"
    default_message = "incorrect codewords, please try again"


class AdministratorNotFoundError(AuthError):
    """Removal target is not in the admin set."""

    status_code = 400
    error_code = "NOT_FOUND"
    field = "id"
    default_message = "administrator id not found"


class SessionExpiredError(AuthError):
    """Session has expired and the operator must log in again."""

    status_code = 401
    error_code = "SESSION_EXPIRED"
    field = "session"
    default_message = "session not found or expired"
