"""
In-memory repository adapter - Implements AccountRepository protocol.

Process-local storage for development and tests. A single lock serialises
every read-modify-write, giving the same per-record atomicity the
PostgreSQL adapter gets from guarded UPDATE statements.
"""

import threading
import uuid
from dataclasses import replace
from datetime import datetime, timezone

from src.domain.exceptions import AccountAlreadyExists
from src.domain.ports import Account, AccountDraft, AccountPatch, PendingChallenge


class InMemoryAccountRepository:
    """
    Implements AccountRepository protocol with a dict keyed by account id.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._accounts: dict[str, Account] = {}
        self._ids_by_email: dict[str, str] = {}

    def find_by_email(self, email: str) -> Account | None:
        with self._lock:
            account_id = self._ids_by_email.get(email)
            return self._accounts.get(account_id) if account_id else None

    def find_by_id(self, account_id: str) -> Account | None:
        with self._lock:
            return self._accounts.get(account_id)

    def create(self, draft: AccountDraft) -> Account:
        with self._lock:
            if draft.email in self._ids_by_email:
                raise AccountAlreadyExists(draft.email)
            account = Account(
                id=str(uuid.uuid4()),
                name=draft.name,
                email=draft.email,
                password_hash=draft.password_hash,
                is_verified=False,
                challenge=draft.challenge,
                role=draft.role,
                created_at=datetime.now(timezone.utc),
            )
            self._accounts[account.id] = account
            self._ids_by_email[account.email] = account.id
            return account

    def update(self, account_id: str, patch: AccountPatch) -> Account | None:
        with self._lock:
            account = self._accounts.get(account_id)
            if account is None:
                return None
            if patch.require_unverified and account.is_verified:
                return None
            if patch.require_code is not None:
                pending = account.challenge
                if not isinstance(pending, PendingChallenge) or pending.code != patch.require_code:
                    return None

            changes: dict[str, object] = {}
            if patch.is_verified is not None:
                changes["is_verified"] = patch.is_verified
            if patch.challenge is not None:
                changes["challenge"] = patch.challenge
            updated = replace(account, **changes)
            self._accounts[account_id] = updated
            return updated

    def ping(self) -> None:
        return None
