"""Error taxonomy for the API.

Learn: Every known failure is raised as an AppError subclass tagged with
an ErrorKind at the point where it happens: the token service raises
TokenExpiredError, the commit helper turns a unique-constraint violation
into DuplicateKeyError, and so on. The handlers in errors.handlers then
look the kind up in a table instead of probing exception shapes.

AccessError is the one branch with its own renderer. Authentication and
authorization dependencies raise it and it short-circuits the request
with an "Access denied" / "Forbidden" body.
"""

from enum import Enum
from typing import Any, Iterable, Optional


class ErrorKind(str, Enum):
    NO_TOKEN = "no_token"
    INVALID_TOKEN = "invalid_token"
    TOKEN_EXPIRED = "token_expired"
    ACCESS_DENIED = "access_denied"
    ACCOUNT_DEACTIVATED = "account_deactivated"
    AUTH_REQUIRED = "auth_required"
    FORBIDDEN = "forbidden"
    INVALID_CREDENTIALS = "invalid_credentials"
    VALIDATION_FAILED = "validation_failed"
    DUPLICATE_KEY = "duplicate_key"
    INVALID_ID = "invalid_id"
    NOT_FOUND = "not_found"
    BAD_REQUEST = "bad_request"
    SERVER_ERROR = "server_error"


class AppError(Exception):
    """Base class for failures the API knows how to report."""

    kind: ErrorKind = ErrorKind.SERVER_ERROR
    status_code: int = 500
    default_message: str = "Server Error"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        status_code: Optional[int] = None,
        **extra: Any,
    ):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        self.extra = extra
        super().__init__(self.message)


class ServerError(AppError):
    """Wraps an unexpected exception so the handler sees a tagged error."""

    def __init__(self, cause: BaseException, *, expose: bool):
        self.cause = cause
        super().__init__(str(cause) if expose else None)


class BadRequestError(AppError):
    kind = ErrorKind.BAD_REQUEST
    status_code = 400
    default_message = "Bad request"


class NotFoundError(AppError):
    kind = ErrorKind.NOT_FOUND
    status_code = 404
    default_message = "Resource not found"


class InvalidIdError(AppError):
    """An id that is not even well-formed (cast failure)."""

    kind = ErrorKind.INVALID_ID
    status_code = 404
    default_message = "Resource not found"

    def __init__(self, value: Any):
        self.value = value
        super().__init__()


class DuplicateKeyError(AppError):
    kind = ErrorKind.DUPLICATE_KEY
    status_code = 400

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"{field} already exists")


class ValidationFailedError(AppError):
    kind = ErrorKind.VALIDATION_FAILED
    status_code = 400
    default_message = "Validation failed"

    def __init__(self, violations: Iterable):
        self.violations = list(violations)
        super().__init__()


class TokenError(AppError):
    """Base for token verification failures."""

    status_code = 401


class InvalidTokenError(TokenError):
    kind = ErrorKind.INVALID_TOKEN
    default_message = "Invalid token"


class TokenExpiredError(TokenError):
    kind = ErrorKind.TOKEN_EXPIRED
    default_message = "Token expired"


class InvalidCredentialsError(AppError):
    kind = ErrorKind.INVALID_CREDENTIALS
    status_code = 401
    default_message = "Invalid credentials"


class AccountDeactivatedError(AppError):
    kind = ErrorKind.ACCOUNT_DEACTIVATED
    status_code = 401
    default_message = "Account is deactivated"


class AccessError(AppError):
    """Rejection raised by the authentication/authorization dependencies."""

    def __init__(self, kind: ErrorKind, message: str, status_code: int = 401):
        self.kind = kind
        super().__init__(message, status_code=status_code)

    @property
    def label(self) -> str:
        return "Forbidden" if self.status_code == 403 else "Access denied"

    @classmethod
    def no_token(cls) -> "AccessError":
        return cls(ErrorKind.NO_TOKEN, "No token provided")

    @classmethod
    def denied(cls, message: str = "Invalid token or user not found") -> "AccessError":
        return cls(ErrorKind.ACCESS_DENIED, message)

    @classmethod
    def deactivated(cls) -> "AccessError":
        return cls(ErrorKind.ACCOUNT_DEACTIVATED, "User account is deactivated")

    @classmethod
    def auth_required(cls) -> "AccessError":
        return cls(ErrorKind.AUTH_REQUIRED, "Authentication required")

    @classmethod
    def forbidden(cls, message: str = "Insufficient permissions") -> "AccessError":
        return cls(ErrorKind.FORBIDDEN, message, status_code=403)
