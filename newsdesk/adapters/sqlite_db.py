"""
SQLite subscriber store.

Implements SubscriberStorePort and UnitOfWorkPort using SQLite.
Uses standard SQL so the schema ports to Postgres unchanged.

Connection model:
- outside a transaction every call opens, commits and closes its own connection
- inside SQLiteUnitOfWork all calls share one connection and one transaction
- `timeout` is SQLite's busy wait; exceeding it is a StorageError, not a retry
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime
from typing import Any
from uuid import UUID, uuid4

from newsdesk.components.token import InvalidTokenShape, SubscriptionToken, parse
from newsdesk.core.ports.db import StorageError, UniqueViolationError
from newsdesk.domain.entities import ConfirmedSubscriber, Subscriber, SubscriberStatus
from newsdesk.domain.subscriber import NewSubscriber, SubscriberEmail

logger = logging.getLogger(__name__)

DEFAULT_BUSY_TIMEOUT_SECONDS = 5.0

# -----------------------------------------------------------------------------
# Helper functions
# -----------------------------------------------------------------------------


def dict_factory(cursor: sqlite3.Cursor, row: tuple[Any, ...]) -> dict[str, Any]:
    """Convert SQLite row to dictionary."""
    return {col[0]: row[idx] for idx, col in enumerate(cursor.description)}


def connect(db_path: str, timeout: float = DEFAULT_BUSY_TIMEOUT_SECONDS) -> sqlite3.Connection:
    """Open a connection configured the way every repo expects."""
    conn = sqlite3.connect(db_path, timeout=timeout, check_same_thread=False)
    conn.row_factory = dict_factory
    conn.execute("PRAGMA foreign_keys = ON;")
    return conn


# -----------------------------------------------------------------------------
# Base SQLite Repository
# -----------------------------------------------------------------------------


class SQLiteRepoBase:
    """Base class for SQLite repositories."""

    def __init__(
        self,
        db_path: str,
        connection: sqlite3.Connection | None = None,
        timeout: float = DEFAULT_BUSY_TIMEOUT_SECONDS,
    ):
        self.db_path = db_path
        self.timeout = timeout
        self._external_conn = connection

    def _get_conn(self) -> sqlite3.Connection:
        """Get database connection (uses external if provided)."""
        if self._external_conn is not None:
            return self._external_conn
        return connect(self.db_path, self.timeout)

    def _should_close(self) -> bool:
        """Whether to close connection after use."""
        return self._external_conn is None

    @contextmanager
    def _session(self, action: str) -> Iterator[sqlite3.Connection]:
        """
        Yield a connection and translate sqlite3 errors.

        Owned connections are committed on success and always closed;
        closing without commit discards the writes.
        """
        conn: sqlite3.Connection | None = None
        try:
            conn = self._get_conn()
            yield conn
            if self._should_close():
                conn.commit()
        except sqlite3.IntegrityError as e:
            if "UNIQUE constraint failed" in str(e):
                raise UniqueViolationError(f"{action}: {e}") from e
            raise StorageError(f"{action}: {e}") from e
        except sqlite3.Error as e:
            raise StorageError(f"{action}: {e}") from e
        finally:
            if conn is not None and self._should_close():
                conn.close()


# -----------------------------------------------------------------------------
# Subscriber Store
# -----------------------------------------------------------------------------


class SQLiteSubscriberStore(SQLiteRepoBase):
    """SQLite implementation of SubscriberStorePort."""

    def find_subscriber_id_by_email(self, email: str) -> UUID | None:
        with self._session("Failed to look up subscriber by email") as conn:
            row = conn.execute(
                "SELECT id FROM subscriptions WHERE email = ?", (email,)
            ).fetchone()
        return UUID(row["id"]) if row else None

    def find_token_by_subscriber(self, subscriber_id: UUID) -> SubscriptionToken | None:
        with self._session("Failed to look up subscription token") as conn:
            row = conn.execute(
                "SELECT subscription_token FROM subscription_tokens WHERE subscriber_id = ?",
                (str(subscriber_id),),
            ).fetchone()
        if not row:
            return None
        try:
            return parse(row["subscription_token"])
        except InvalidTokenShape as e:
            raise StorageError(
                f"Stored subscription token for subscriber {subscriber_id} is malformed"
            ) from e

    def find_subscriber_by_token(self, token: SubscriptionToken) -> UUID | None:
        with self._session("Failed to look up subscriber by token") as conn:
            row = conn.execute(
                "SELECT subscriber_id FROM subscription_tokens WHERE subscription_token = ?",
                (str(token),),
            ).fetchone()
        return UUID(row["subscriber_id"]) if row else None

    def get_subscriber(self, subscriber_id: UUID) -> Subscriber | None:
        with self._session("Failed to load subscriber") as conn:
            row = conn.execute(
                "SELECT * FROM subscriptions WHERE id = ?", (str(subscriber_id),)
            ).fetchone()
        return self._map_row(row) if row else None

    def insert_subscriber(self, new_subscriber: NewSubscriber) -> UUID:
        subscriber_id = uuid4()
        with self._session("Failed to insert subscriber") as conn:
            conn.execute(
                """
                INSERT INTO subscriptions (id, email, name, subscribed_at, status)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    str(subscriber_id),
                    str(new_subscriber.email),
                    str(new_subscriber.name),
                    datetime.now(UTC).isoformat(),
                    SubscriberStatus.PENDING_CONFIRMATION.value,
                ),
            )
        return subscriber_id

    def store_token(self, subscriber_id: UUID, token: SubscriptionToken) -> None:
        with self._session("Failed to store subscription token") as conn:
            conn.execute(
                """
                INSERT INTO subscription_tokens (subscription_token, subscriber_id)
                VALUES (?, ?)
                """,
                (str(token), str(subscriber_id)),
            )

    def mark_confirmed(self, subscriber_id: UUID) -> None:
        with self._session("Failed to mark subscriber as confirmed") as conn:
            conn.execute(
                "UPDATE subscriptions SET status = ? WHERE id = ?",
                (SubscriberStatus.CONFIRMED.value, str(subscriber_id)),
            )

    def list_confirmed_emails(self) -> list[ConfirmedSubscriber]:
        with self._session("Failed to list confirmed subscribers") as conn:
            rows = conn.execute(
                "SELECT email FROM subscriptions WHERE status = ? "
                "ORDER BY subscribed_at, rowid",
                (SubscriberStatus.CONFIRMED.value,),
            ).fetchall()

        result: list[ConfirmedSubscriber] = []
        for row in rows:
            raw = row["email"]
            try:
                result.append(ConfirmedSubscriber(raw_email=raw, email=SubscriberEmail.parse(raw)))
            except ValueError as e:
                result.append(ConfirmedSubscriber(raw_email=raw, error=e))
        return result

    def count_by_status(self, status: SubscriberStatus) -> int:
        with self._session("Failed to count subscribers") as conn:
            row = conn.execute(
                "SELECT COUNT(*) AS n FROM subscriptions WHERE status = ?",
                (status.value,),
            ).fetchone()
        return int(row["n"])

    def transaction(self) -> SQLiteUnitOfWork:
        return SQLiteUnitOfWork(self.db_path, timeout=self.timeout)

    def _map_row(self, row: dict[str, Any]) -> Subscriber:
        return Subscriber(
            id=UUID(row["id"]),
            email=row["email"],
            name=row["name"],
            status=SubscriberStatus(row["status"]),
            subscribed_at=datetime.fromisoformat(row["subscribed_at"]),
        )


# -----------------------------------------------------------------------------
# Unit of Work
# -----------------------------------------------------------------------------


class SQLiteUnitOfWork:
    """
    SQLite Unit of Work implementation.

    All repository calls made through `subscribers` share one connection and
    therefore one transaction. Anything not committed when the block exits is
    rolled back.
    """

    def __init__(self, db_path: str, timeout: float = DEFAULT_BUSY_TIMEOUT_SECONDS):
        self.db_path = db_path
        self.timeout = timeout
        self._conn: sqlite3.Connection | None = None
        self._committed = False
        self._subscribers: SQLiteSubscriberStore | None = None

    def __enter__(self) -> SQLiteUnitOfWork:
        try:
            self._conn = connect(self.db_path, self.timeout)
        except sqlite3.Error as e:
            raise StorageError(f"Failed to open a database connection: {e}") from e
        self._committed = False
        self._subscribers = None
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        try:
            if exc_type is not None or not self._committed:
                self.rollback()
        finally:
            if self._conn:
                self._conn.close()
                self._conn = None

    def commit(self) -> None:
        if self._conn is None:
            raise StorageError("Transaction is not open")
        try:
            self._conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to commit transaction: {e}") from e
        self._committed = True

    def rollback(self) -> None:
        if self._conn:
            try:
                self._conn.rollback()
            except sqlite3.Error:
                logger.exception("Rollback failed")

    @property
    def subscribers(self) -> SQLiteSubscriberStore:
        if self._conn is None:
            raise StorageError("Transaction is not open")
        if self._subscribers is None:
            self._subscribers = SQLiteSubscriberStore(self.db_path, self._conn, self.timeout)
        return self._subscribers
