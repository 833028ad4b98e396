"""
OTP generator - numeric challenge codes and their expiry timestamps.
"""

import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta

from .ports import PendingChallenge

DIGITS = "0123456789"


@dataclass(frozen=True)
class OtpGenerator:
    """
    Produces fixed-length numeric codes.

    Uses the secrets module for cryptographic randomness. Codes are
    strings to preserve leading zeros.
    """

    length: int = 6
    ttl_minutes: int = 15

    def generate(self, length: int | None = None) -> str:
        size = self.length if length is None else length
        if size < 1:
            raise ValueError("OTP length must be positive")
        return "".join(secrets.choice(DIGITS) for _ in range(size))

    def expiry_from(self, now: datetime, minutes: int | None = None) -> datetime:
        return now + timedelta(minutes=self.ttl_minutes if minutes is None else minutes)

    def challenge(self, now: datetime) -> PendingChallenge:
        """Fresh code bound to its expiry."""
        return PendingChallenge(code=self.generate(), expires_at=self.expiry_from(now))
