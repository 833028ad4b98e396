"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the account records the domain works with and the
interfaces (ports) it requires from infrastructure. Adapters implement
these protocols.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Protocol, Union


class Role(str, Enum):
    """Access level assigned at account creation."""

    USER = "user"
    ADMIN = "admin"


class AccountState(str, Enum):
    """
    Account lifecycle states.

    State Transitions (forward-only):
    - UNREGISTERED -> PENDING_VERIFICATION (register)
    - PENDING_VERIFICATION -> VERIFIED (correct, unexpired OTP)

    VERIFIED is terminal. Resending an OTP keeps the account in
    PENDING_VERIFICATION and only replaces the challenge.
    """

    UNREGISTERED = "UNREGISTERED"
    PENDING_VERIFICATION = "PENDING_VERIFICATION"
    VERIFIED = "VERIFIED"


@dataclass(frozen=True)
class PendingChallenge:
    """An outstanding OTP challenge."""

    code: str
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at < now


@dataclass(frozen=True)
class NoChallenge:
    """No OTP challenge is outstanding."""


NO_CHALLENGE = NoChallenge()

Challenge = Union[PendingChallenge, NoChallenge]


@dataclass(frozen=True)
class Account:
    """Stored account record. Never leaves the core as-is."""

    id: str
    name: str
    email: str
    password_hash: str
    is_verified: bool
    challenge: Challenge
    role: Role
    created_at: datetime

    @property
    def state(self) -> AccountState:
        if self.is_verified:
            return AccountState.VERIFIED
        return AccountState.PENDING_VERIFICATION


@dataclass(frozen=True)
class AccountDraft:
    """Fields supplied when creating an account."""

    name: str
    email: str
    password_hash: str
    challenge: Challenge
    role: Role = Role.USER


@dataclass(frozen=True)
class AccountPatch:
    """
    Partial update applied atomically by AccountRepository.update().

    Fields left as None are unchanged. The guards make the update a
    compare-and-swap: it only applies when every guard holds.

    Attributes:
        is_verified: New verification flag
        challenge: Replacement challenge (NO_CHALLENGE clears it)
        require_unverified: Only apply while the account is unverified
        require_code: Only apply while the pending code equals this value
    """

    is_verified: bool | None = None
    challenge: Challenge | None = None
    require_unverified: bool = False
    require_code: str | None = None


class AccountRepository(Protocol):
    """Port interface for account persistence."""

    def find_by_email(self, email: str) -> Account | None:
        """Look up an account by normalized email."""
        ...

    def find_by_id(self, account_id: str) -> Account | None:
        """Look up an account by identifier."""
        ...

    def create(self, draft: AccountDraft) -> Account:
        """
        Create an account.

        The store's uniqueness constraint on email is authoritative:
        a concurrent duplicate must lose here, not in a pre-check.

        Raises:
            AccountAlreadyExists: If the email is already registered
        """
        ...

    def update(self, account_id: str, patch: AccountPatch) -> Account | None:
        """
        Atomically apply a partial update.

        Returns:
            The updated account, or None if the account is missing or
            a guard in the patch did not hold
        """
        ...

    def ping(self) -> None:
        """Raise if the store is unreachable."""
        ...


class Notifier(Protocol):
    """Port interface for OTP delivery."""

    def send_otp(self, email: str, code: str) -> None:
        """
        Deliver an OTP to an email address.

        Raises:
            NotifierError: If delivery fails
        """
        ...
