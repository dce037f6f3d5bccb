"""
Subscription workflow ports.

The workflow only needs the read side of the store plus a transaction for
the insert-subscriber + store-token pair.
"""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

from newsdesk.components.token import SubscriptionToken
from newsdesk.core.ports.db import UnitOfWorkPort
from newsdesk.core.ports.email import EmailPort
from newsdesk.domain.entities import Subscriber


class SubscriptionStorePort(Protocol):
    """Store operations used by the subscription workflow."""

    def find_subscriber_id_by_email(self, email: str) -> UUID | None:
        ...

    def get_subscriber(self, subscriber_id: UUID) -> Subscriber | None:
        ...

    def find_token_by_subscriber(self, subscriber_id: UUID) -> SubscriptionToken | None:
        ...

    def transaction(self) -> UnitOfWorkPort:
        ...


ConfirmationEmailSenderPort = EmailPort
