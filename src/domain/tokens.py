"""
Token service - signed, time-bound bearer tokens (JWT).

Tokens are self-contained: validation checks signature and expiry only.
Nothing is stored server-side, so there is no revocation; a token stays
valid until its exp claim passes.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

import jwt

from .exceptions import InvalidToken, TokenExpired

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class TokenService:
    """Mints and validates HS256 tokens carrying an account identifier."""

    secret: str
    expires_in: timedelta
    algorithm: str = "HS256"
    clock: Callable[[], datetime] = field(default=utcnow)

    def __post_init__(self) -> None:
        if not self.secret:
            raise ValueError("Token secret must not be empty")
        if self.expires_in <= timedelta(0):
            raise ValueError("Token lifetime must be positive")

    def mint(self, account_id: str) -> str:
        issued_at = self.clock()
        claims = {
            "sub": account_id,
            "iat": issued_at,
            "exp": issued_at + self.expires_in,
        }
        return jwt.encode(claims, self.secret, algorithm=self.algorithm)

    def validate(self, token: str) -> str:
        """
        Verify a token and return the account id it carries.

        Raises:
            TokenExpired: Signature is valid but exp has passed
            InvalidToken: Malformed token, bad signature, or missing claims
        """
        try:
            claims = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["sub", "iat", "exp"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise TokenExpired("Token expired") from e
        except jwt.InvalidTokenError as e:
            raise InvalidToken("Invalid token") from e

        subject = claims["sub"]
        if not isinstance(subject, str) or not subject:
            raise InvalidToken("Invalid token")
        return subject
