"""
Secret hasher - bcrypt password hashing and verification.

bcrypt.checkpw() performs a constant-time comparison of the recomputed
hash, so verification time does not depend on the mismatch position.
"""

from dataclasses import dataclass, field

import bcrypt

from .exceptions import InvalidRequest

# bcrypt rejects longer input
MAX_SECRET_BYTES = 72


@dataclass
class SecretHasher:
    """One-way, salted password hashing with a configurable cost factor."""

    rounds: int = 10
    _dummy_hash: bytes = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.rounds < 10:
            raise ValueError("bcrypt cost factor must be at least 10")
        # Compared against when no stored hash exists, so a lookup miss
        # costs the same as a wrong password.
        self._dummy_hash = bcrypt.hashpw(
            b"dummy_password_for_timing_safety", bcrypt.gensalt(self.rounds)
        )

    def hash(self, plaintext: str) -> str:
        encoded = plaintext.encode()
        if len(encoded) > MAX_SECRET_BYTES:
            raise InvalidRequest(f"Password must be at most {MAX_SECRET_BYTES} bytes")
        return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=self.rounds)).decode()

    def verify(self, plaintext: str, hashed: str) -> bool:
        try:
            return bcrypt.checkpw(plaintext.encode(), hashed.encode())
        except ValueError:
            # Malformed stored hash or over-long input
            return False

    def burn(self, plaintext: str) -> None:
        """Run a comparison against the dummy hash and discard the result."""
        try:
            bcrypt.checkpw(plaintext.encode(), self._dummy_hash)
        except ValueError:
            # Same outcome as verify() on over-long input
            pass
