"""
Subscriber store interfaces.

Protocol-based interfaces for subscriber persistence.
Implementations: SQLite (newsdesk.adapters.sqlite_db).

Invariants enforced by the store, not by callers:
- email is unique across subscribers
- a subscriber has at most one token; a token maps to one subscriber
- writes inside transaction() commit together or not at all
"""

from __future__ import annotations

from typing import Any, Protocol
from uuid import UUID

from newsdesk.components.token import SubscriptionToken
from newsdesk.domain.entities import ConfirmedSubscriber, Subscriber, SubscriberStatus
from newsdesk.domain.subscriber import NewSubscriber

# -----------------------------------------------------------------------------
# Subscriber Store
# -----------------------------------------------------------------------------


class SubscriberStorePort(Protocol):
    """
    Subscriber and token persistence.

    Every method may raise StorageError.
    """

    def find_subscriber_id_by_email(self, email: str) -> UUID | None:
        """Get subscriber ID for an email address."""
        ...

    def find_token_by_subscriber(self, subscriber_id: UUID) -> SubscriptionToken | None:
        """Get the subscriber's token, if one was issued."""
        ...

    def find_subscriber_by_token(self, token: SubscriptionToken) -> UUID | None:
        """Get the subscriber ID a token was issued to."""
        ...

    def get_subscriber(self, subscriber_id: UUID) -> Subscriber | None:
        """Get a full subscriber record."""
        ...

    def insert_subscriber(self, new_subscriber: NewSubscriber) -> UUID:
        """
        Insert a pending subscriber.

        Raises:
            UniqueViolationError: Email already present
        """
        ...

    def store_token(self, subscriber_id: UUID, token: SubscriptionToken) -> None:
        """
        Bind a token to a subscriber.

        Raises:
            UniqueViolationError: Subscriber already has a token
        """
        ...

    def mark_confirmed(self, subscriber_id: UUID) -> None:
        """Set status to confirmed (idempotent)."""
        ...

    def list_confirmed_emails(self) -> list[ConfirmedSubscriber]:
        """List confirmed subscribers; invalid stored emails are reported per row."""
        ...

    def count_by_status(self, status: SubscriberStatus) -> int:
        """Count subscribers by status."""
        ...

    def transaction(self) -> UnitOfWorkPort:
        """Open a scoped transaction."""
        ...


# -----------------------------------------------------------------------------
# Unit of Work (Transaction Management)
# -----------------------------------------------------------------------------


class UnitOfWorkPort(Protocol):
    """
    Unit of Work pattern for transaction management.

    Usage:
        with store.transaction() as uow:
            subscriber_id = uow.subscribers.insert_subscriber(new_subscriber)
            uow.subscribers.store_token(subscriber_id, token)
            uow.commit()

    Leaving the block without commit() discards the writes.
    """

    subscribers: SubscriberStorePort

    def __enter__(self) -> UnitOfWorkPort:
        """Enter transaction context."""
        ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        """Exit transaction context (rollback unless committed)."""
        ...

    def commit(self) -> None:
        """Commit the transaction."""
        ...

    def rollback(self) -> None:
        """Rollback the transaction."""
        ...


# --- Error Types ---


class StorageError(Exception):
    """Persistence operation failed."""

    pass


class UniqueViolationError(StorageError):
    """A uniqueness constraint rejected the write."""

    pass
