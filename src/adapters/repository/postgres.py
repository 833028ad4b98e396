"""
PostgreSQL repository adapter - Implements AccountRepository protocol.

This module provides the PostgreSQL implementation of the domain's
repository port using psycopg3 with raw SQL.

Atomicity Design:
-----------------
1. **create()**: INSERT ... ON CONFLICT (email) DO NOTHING. The UNIQUE
   constraint on email decides concurrent registrations; exactly one
   INSERT returns a row, the rest raise AccountAlreadyExists.

2. **update()**: a single UPDATE whose WHERE clause carries the patch
   guards (is_verified = FALSE, otp_code = %s). Consuming an OTP is
   therefore a compare-and-swap: of two concurrent verifications with the
   same code, the second matches zero rows and reports None.

3. Table constraints keep the challenge columns paired and forbid a
   verified row from holding a challenge.
"""

import logging
import uuid
from pathlib import Path
from typing import Any

import psycopg
from psycopg_pool import ConnectionPool

from src.domain.exceptions import AccountAlreadyExists, RepositoryError
from src.domain.ports import (
    NO_CHALLENGE,
    Account,
    AccountDraft,
    AccountPatch,
    Challenge,
    PendingChallenge,
    Role,
)

logger = logging.getLogger(__name__)

_COLUMNS = (
    "id, name, email, password_hash, is_verified, otp_code, otp_expires_at, role, created_at"
)


def _row_to_account(row: tuple[Any, ...]) -> Account:
    otp_code, otp_expires_at = row[5], row[6]
    challenge: Challenge = NO_CHALLENGE
    if otp_code is not None and otp_expires_at is not None:
        challenge = PendingChallenge(code=otp_code, expires_at=otp_expires_at)
    return Account(
        id=str(row[0]),
        name=row[1],
        email=row[2],
        password_hash=row[3],
        is_verified=row[4],
        challenge=challenge,
        role=Role(row[7]),
        created_at=row[8],
    )


def _challenge_params(challenge: Challenge) -> tuple[str | None, Any]:
    if isinstance(challenge, PendingChallenge):
        return challenge.code, challenge.expires_at
    return None, None


class PostgresAccountRepository:
    """
    Implements AccountRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security. psycopg errors are
    re-raised as RepositoryError so the domain never sees driver types.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    def find_by_email(self, email: str) -> Account | None:
        return self._fetch_one(f"SELECT {_COLUMNS} FROM accounts WHERE email = %s", (email,))

    def find_by_id(self, account_id: str) -> Account | None:
        try:
            key = uuid.UUID(account_id)
        except ValueError:
            return None
        return self._fetch_one(f"SELECT {_COLUMNS} FROM accounts WHERE id = %s", (key,))

    def create(self, draft: AccountDraft) -> Account:
        """
        Insert a new account in the unverified state.

        Raises:
            AccountAlreadyExists: If the email is already present
        """
        sql = f"""
            INSERT INTO accounts (id, name, email, password_hash, is_verified,
                                  otp_code, otp_expires_at, role, created_at)
            VALUES (%s, %s, %s, %s, FALSE, %s, %s, %s, NOW())
            ON CONFLICT (email) DO NOTHING
            RETURNING {_COLUMNS}
        """
        otp_code, otp_expires_at = _challenge_params(draft.challenge)
        params = (
            uuid.uuid4(),
            draft.name,
            draft.email,
            draft.password_hash,
            otp_code,
            otp_expires_at,
            draft.role.value,
        )
        row = self._execute_returning(sql, params)
        if row is None:
            raise AccountAlreadyExists(draft.email)
        return _row_to_account(row)

    def update(self, account_id: str, patch: AccountPatch) -> Account | None:
        """
        Apply a partial update in one guarded UPDATE statement.

        Returns:
            The updated account, or None when no row matched the id and guards
        """
        try:
            key = uuid.UUID(account_id)
        except ValueError:
            return None

        assignments: list[str] = []
        params: list[Any] = []
        if patch.is_verified is not None:
            assignments.append("is_verified = %s")
            params.append(patch.is_verified)
        if patch.challenge is not None:
            assignments.append("otp_code = %s, otp_expires_at = %s")
            params.extend(_challenge_params(patch.challenge))
        if not assignments:
            # Nothing to change; still honour the guards
            assignments.append("id = id")

        conditions = ["id = %s"]
        params.append(key)
        if patch.require_unverified:
            conditions.append("is_verified = FALSE")
        if patch.require_code is not None:
            conditions.append("otp_code = %s")
            params.append(patch.require_code)

        sql = (
            f"UPDATE accounts SET {', '.join(assignments)} "
            f"WHERE {' AND '.join(conditions)} "
            f"RETURNING {_COLUMNS}"
        )
        row = self._execute_returning(sql, tuple(params))
        return _row_to_account(row) if row is not None else None

    def ping(self) -> None:
        try:
            with self._pool.connection() as conn:
                conn.execute("SELECT 1")
        except psycopg.Error as e:
            raise RepositoryError("Database unavailable") from e

    def _fetch_one(self, sql: str, params: tuple[Any, ...]) -> Account | None:
        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, params)
                row = cursor.fetchone()
        except psycopg.Error as e:
            logger.error("Account lookup failed: %s", e)
            raise RepositoryError("Account lookup failed") from e
        return _row_to_account(row) if row is not None else None

    def _execute_returning(self, sql: str, params: tuple[Any, ...]) -> tuple[Any, ...] | None:
        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, params)
                row = cursor.fetchone()
                conn.commit()
        except psycopg.Error as e:
            logger.error("Account write failed: %s", e)
            raise RepositoryError("Account write failed") from e
        return row


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: src/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning("Migrations directory not found: %s", migrations_dir)
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info("Running %d migration(s)", len(sql_files))

    for sql_file in sql_files:
        logger.info("Executing migration: %s", sql_file.name)
        try:
            with pool.connection() as conn:
                conn.execute(sql_file.read_text())
            logger.info("Migration complete: %s", sql_file.name)
        except psycopg.Error as e:
            logger.error("Migration failed: %s - %s", sql_file.name, e)
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
