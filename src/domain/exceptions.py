"""
Domain exceptions - Tagged error types for the account lifecycle.

Every error raised by the domain carries an ErrorKind. The transport
boundary maps kinds to status codes; the domain never formats responses.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Closed set of error categories surfaced by the domain."""

    INVALID_REQUEST = "invalid_request"
    CONFLICT = "conflict"
    EXPIRED = "expired"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    DEPENDENCY = "dependency"


class AccountError(Exception):
    """Base class for account domain errors."""

    kind: ErrorKind = ErrorKind.DEPENDENCY

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidRequest(AccountError):
    """Malformed input, missing or mismatched OTP."""

    kind = ErrorKind.INVALID_REQUEST


class Conflict(AccountError):
    """Duplicate account, already verified, or lost verification race."""

    kind = ErrorKind.CONFLICT


class AccountAlreadyExists(Conflict):
    """Email is already registered."""

    def __init__(self, email: str) -> None:
        super().__init__("Account already exists")
        self.email = email


class Expired(AccountError):
    """A time-bound secret is past its expiry."""

    kind = ErrorKind.EXPIRED


class Unauthorized(AccountError):
    """Bad credentials, unverified login, or missing/invalid session."""

    kind = ErrorKind.UNAUTHORIZED


class Forbidden(AccountError):
    """Authenticated account lacks the required role."""

    kind = ErrorKind.FORBIDDEN


class NotFound(AccountError):
    """No account for the given email."""

    kind = ErrorKind.NOT_FOUND


class DependencyFailure(AccountError):
    """A collaborator (repository, notifier) failed."""

    kind = ErrorKind.DEPENDENCY


class RepositoryError(DependencyFailure):
    """Persistence layer failure."""

    pass


class NotifierError(DependencyFailure):
    """OTP delivery failure."""

    pass


class InvalidToken(AccountError):
    """Token is malformed or its signature does not verify."""

    kind = ErrorKind.UNAUTHORIZED


class TokenExpired(Expired):
    """Token is well formed but past its exp claim."""

    pass
