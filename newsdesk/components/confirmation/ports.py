"""Confirmation workflow ports."""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

from newsdesk.components.token import SubscriptionToken


class ConfirmationStorePort(Protocol):
    """Store operations used by the confirmation workflow."""

    def find_subscriber_by_token(self, token: SubscriptionToken) -> UUID | None:
        """Get the subscriber ID a token was issued to."""
        ...

    def mark_confirmed(self, subscriber_id: UUID) -> None:
        """Set status to confirmed (idempotent)."""
        ...
