"""
Test doubles and helpers shared across the suite.
"""

from datetime import datetime, timedelta, timezone

from src.domain.accounts import AccountService
from src.domain.exceptions import NotifierError

TEST_SECRET = "test-secret-key-with-enough-length-for-hs256"
PASSWORD = "Secr3tP"


class FixedClock:
    """Clock that only moves when told to."""

    def __init__(self, now: datetime | None = None) -> None:
        self.now = now or datetime.now(timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


class RecordingNotifier:
    """Notifier that keeps every (email, code) it was asked to deliver."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str]] = []
        self.fail = False

    def send_otp(self, email: str, code: str) -> None:
        if self.fail:
            raise NotifierError("Failed to send verification email")
        self.sent.append((email, code))

    def last_code(self, email: str) -> str:
        for recipient, code in reversed(self.sent):
            if recipient == email:
                return code
        raise AssertionError(f"No code sent to {email}")


def register_pending(service: AccountService, notifier: RecordingNotifier, email: str) -> str:
    """Register an account and return the code it was sent."""
    service.register("Attacker Target", email, PASSWORD)
    return notifier.last_code(email)


def register_verified(service: AccountService, notifier: RecordingNotifier, email: str) -> None:
    service.verify_email(email, register_pending(service, notifier, email))
