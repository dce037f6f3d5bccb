"""
Subscriber entities and lifecycle.

State machine (subscriber):
- pending_confirmation → confirmed (via confirmation link)
- confirmed is terminal; a subscriber never reverts
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID

from newsdesk.domain.subscriber import SubscriberEmail


class SubscriberStatus(Enum):
    """Subscriber lifecycle status."""

    PENDING_CONFIRMATION = "pending_confirmation"  # Awaiting email confirmation
    CONFIRMED = "confirmed"  # Eligible for newsletters


VALID_TRANSITIONS: dict[SubscriberStatus, set[SubscriberStatus]] = {
    SubscriberStatus.PENDING_CONFIRMATION: {SubscriberStatus.CONFIRMED},
    SubscriberStatus.CONFIRMED: set(),  # Terminal state
}


def can_transition(from_status: SubscriberStatus, to_status: SubscriberStatus) -> bool:
    """Check if a subscriber status transition is allowed."""
    return to_status in VALID_TRANSITIONS.get(from_status, set())


@dataclass(frozen=True)
class Subscriber:
    """Stored subscriber record."""

    id: UUID
    email: str
    name: str
    status: SubscriberStatus
    subscribed_at: datetime


@dataclass(frozen=True)
class ConfirmedSubscriber:
    """
    One row of the confirmed-subscriber listing.

    Exactly one of email / error is set. A row whose stored address no longer
    validates carries the parse error instead of aborting the whole listing.
    """

    raw_email: str
    email: SubscriberEmail | None = None
    error: ValueError | None = None

    @property
    def is_valid(self) -> bool:
        return self.email is not None
