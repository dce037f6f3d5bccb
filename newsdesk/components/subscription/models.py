"""
Subscription workflow models.

Inputs are raw strings straight from the form; validation happens in the
workflow so every caller gets the same rules.
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from newsdesk.components.token import SubscriptionToken
from newsdesk.domain.subscriber import (
    DEFAULT_FORBIDDEN_NAME_CHARACTERS,
    DEFAULT_MAX_NAME_LENGTH,
)

# --- Input Models ---


@dataclass(frozen=True)
class SubscribeInput:
    """Input for a subscribe request."""

    email: str
    name: str


# --- Output Models ---


@dataclass(frozen=True)
class SubscribeOutput:
    """
    Output from a successful subscribe request.

    subscription_token is None only when the address was already confirmed;
    in that case no email was sent.
    """

    subscriber_id: UUID
    subscription_token: SubscriptionToken | None
    token_reused: bool = False  # An earlier request already issued the token
    already_confirmed: bool = False


# --- Configuration ---


@dataclass(frozen=True)
class SubscriptionConfig:
    """Subscription workflow configuration."""

    base_url: str = "http://127.0.0.1:8000"
    confirmation_path: str = "/subscriptions/confirm"
    confirmation_subject: str = "Welcome!"
    max_attempts: int = 3
    max_name_length: int = DEFAULT_MAX_NAME_LENGTH
    forbidden_name_characters: frozenset[str] = DEFAULT_FORBIDDEN_NAME_CHARACTERS
