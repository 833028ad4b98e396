"""
Domain layer - Pure business logic with zero framework imports.

This package contains the account identity state machine: registration,
OTP email verification, login, and bearer token issuance. It defines its
own port interfaces for infrastructure abstraction, keeping persistence,
email delivery and HTTP out of the core.
"""

from .accounts import AccountService, AccountSummary, IssuedSession
from .exceptions import (
    AccountAlreadyExists,
    AccountError,
    Conflict,
    DependencyFailure,
    ErrorKind,
    Expired,
    Forbidden,
    InvalidRequest,
    InvalidToken,
    NotFound,
    NotifierError,
    RepositoryError,
    TokenExpired,
    Unauthorized,
)
from .hashing import SecretHasher
from .otp import OtpGenerator
from .ports import (
    NO_CHALLENGE,
    Account,
    AccountDraft,
    AccountPatch,
    AccountRepository,
    AccountState,
    NoChallenge,
    Notifier,
    PendingChallenge,
    Role,
)
from .session import SessionGuard, require_role
from .tokens import TokenService

__all__ = [
    "NO_CHALLENGE",
    "Account",
    "AccountAlreadyExists",
    "AccountDraft",
    "AccountError",
    "AccountPatch",
    "AccountRepository",
    "AccountService",
    "AccountState",
    "AccountSummary",
    "Conflict",
    "DependencyFailure",
    "ErrorKind",
    "Expired",
    "Forbidden",
    "InvalidRequest",
    "InvalidToken",
    "IssuedSession",
    "NoChallenge",
    "NotFound",
    "Notifier",
    "NotifierError",
    "OtpGenerator",
    "PendingChallenge",
    "RepositoryError",
    "Role",
    "SecretHasher",
    "SessionGuard",
    "TokenExpired",
    "TokenService",
    "Unauthorized",
    "require_role",
]
