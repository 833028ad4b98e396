"""
Account domain service - credential issuance and verification state machine.

Account State Machine (Forward-Only Transitions)
================================================

States:
- UNREGISTERED: No record for the email
- PENDING_VERIFICATION: Record exists, OTP challenge outstanding
- VERIFIED: Email control proven, challenge cleared (terminal)

Valid Transitions:
    UNREGISTERED -> PENDING_VERIFICATION   (register)
    PENDING_VERIFICATION -> VERIFIED       (verify_email with correct, unexpired code)

Resending keeps the account in PENDING_VERIFICATION and supersedes the
previous code. Nothing moves an account back to unverified.

Note: Single-use consumption of the OTP is enforced by the repository.
The verifying update is a compare-and-swap guarded on the account being
unverified and the stored code being the submitted one, so of two
concurrent verifications at most one observes success.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import NoReturn

from .exceptions import Conflict, Expired, InvalidRequest, NotFound, Unauthorized
from .hashing import SecretHasher
from .otp import OtpGenerator
from .ports import (
    NO_CHALLENGE,
    Account,
    AccountDraft,
    AccountPatch,
    AccountRepository,
    Notifier,
    PendingChallenge,
    Role,
)
from .tokens import TokenService, utcnow

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


@dataclass(frozen=True)
class AccountSummary:
    """Account fields safe to expose outside the core."""

    id: str
    name: str
    email: str
    is_verified: bool
    role: Role
    created_at: datetime

    @classmethod
    def of(cls, account: Account) -> "AccountSummary":
        return cls(
            id=account.id,
            name=account.name,
            email=account.email,
            is_verified=account.is_verified,
            role=account.role,
            created_at=account.created_at,
        )


@dataclass(frozen=True)
class IssuedSession:
    """An account summary paired with a freshly minted bearer token."""

    account: AccountSummary
    token: str


def normalize_email(email: str) -> str:
    """
    Normalize email address for consistent storage and lookup.

    Applies: strip whitespace + lowercase
    """
    return email.strip().lower()


@dataclass
class AccountService:
    """
    Domain service for the account lifecycle.

    Orchestrates the repository, hasher, OTP generator, notifier and
    token service to implement register, verify, resend and login.
    """

    repository: AccountRepository
    notifier: Notifier
    tokens: TokenService
    hasher: SecretHasher = field(default_factory=SecretHasher)
    otp: OtpGenerator = field(default_factory=OtpGenerator)
    clock: Callable[[], datetime] = field(default=utcnow)

    def register(self, name: str, email: str, password: str) -> AccountSummary:
        """
        Register a new account and send it a verification code.

        The account is persisted before the notifier is called. If delivery
        fails the error propagates, the account remains pending, and the
        caller recovers through resend_otp().

        Raises:
            AccountAlreadyExists: If the email is already registered
            NotifierError: If the code could not be delivered
        """
        normalized_email = normalize_email(email)
        challenge = self.otp.challenge(self.clock())

        # Uniqueness is decided by repository.create(); no pre-check.
        account = self.repository.create(
            AccountDraft(
                name=name.strip(),
                email=normalized_email,
                password_hash=self.hasher.hash(password),
                challenge=challenge,
            )
        )
        logger.info("Account registered: %s", account.id)

        self.notifier.send_otp(normalized_email, challenge.code)
        return AccountSummary.of(account)

    def verify_email(self, email: str, code: str) -> IssuedSession:
        """
        Consume a pending OTP and mark the account verified.

        Checks run in order; the first failure wins.

        Raises:
            NotFound: No account for the email
            Conflict: Already verified (including a lost concurrent race)
            InvalidRequest: No pending code, or the code does not match
            Expired: The pending code is past its expiry
        """
        account = self._require_account(normalize_email(email))
        if account.is_verified:
            raise Conflict("Email already verified")

        challenge = account.challenge
        if not isinstance(challenge, PendingChallenge):
            raise InvalidRequest("OTP not found, please request a new one")
        if challenge.is_expired(self.clock()):
            raise Expired("OTP expired, please request a new one")
        if challenge.code != code:
            raise InvalidRequest("Invalid OTP")

        verified = self.repository.update(
            account.id,
            AccountPatch(
                is_verified=True,
                challenge=NO_CHALLENGE,
                require_unverified=True,
                require_code=code,
            ),
        )
        if verified is None:
            self._raise_lost_verification(account.id)

        logger.info("Account verified: %s", verified.id)
        return IssuedSession(
            account=AccountSummary.of(verified), token=self.tokens.mint(verified.id)
        )

    def resend_otp(self, email: str) -> None:
        """
        Replace the pending challenge with a fresh code and deliver it.

        The previous code becomes invalid immediately, even if unexpired.

        Raises:
            NotFound: No account for the email
            Conflict: Account already verified
            NotifierError: If the code could not be delivered
        """
        normalized_email = normalize_email(email)
        account = self._require_account(normalized_email)
        if account.is_verified:
            raise Conflict("Email already verified")

        challenge = self.otp.challenge(self.clock())
        updated = self.repository.update(
            account.id, AccountPatch(challenge=challenge, require_unverified=True)
        )
        if updated is None:
            # Verified (or removed) between read and write
            raise Conflict("Email already verified")

        logger.info("Verification code reissued: %s", account.id)
        self.notifier.send_otp(normalized_email, challenge.code)

    def login(self, email: str, password: str) -> IssuedSession:
        """
        Authenticate with email and password.

        Unknown email and wrong password fail with the same message. The
        hasher still runs on a lookup miss so both paths cost a bcrypt
        comparison.

        Raises:
            Unauthorized: Bad credentials or unverified account
        """
        account = self.repository.find_by_email(normalize_email(email))
        if account is None:
            self.hasher.burn(password)
            raise Unauthorized(INVALID_CREDENTIALS)

        if not account.is_verified:
            raise Unauthorized("Please verify your email first")

        if not self.hasher.verify(password, account.password_hash):
            raise Unauthorized(INVALID_CREDENTIALS)

        return IssuedSession(
            account=AccountSummary.of(account), token=self.tokens.mint(account.id)
        )

    def _require_account(self, email: str) -> Account:
        account = self.repository.find_by_email(email)
        if account is None:
            raise NotFound("User not found")
        return account

    def _raise_lost_verification(self, account_id: str) -> NoReturn:
        current = self.repository.find_by_id(account_id)
        if current is None:
            raise NotFound("User not found")
        if current.is_verified:
            logger.warning("Concurrent verification lost the race: %s", account_id)
            raise Conflict("Email already verified")
        # Superseded by a resend between read and write
        raise InvalidRequest("Invalid OTP")
