"""
Subscription workflow.

Turns a subscribe request into a pending subscriber with exactly one token,
then emails the confirmation link.

Key behaviors:
- Idempotent: a repeated request for a pending address reuses the stored
  token; no second subscriber row, no second token
- insert-subscriber + store-token commit together or not at all
- A concurrent request that wins the insert race shows up as a uniqueness
  violation; the lookup/reuse path is re-run instead of failing
- An address that is already confirmed gets no token and no email
- The record stays committed when the confirmation email fails
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from uuid import UUID

from newsdesk.components.subscription.models import (
    SubscribeInput,
    SubscribeOutput,
    SubscriptionConfig,
)
from newsdesk.components.subscription.ports import (
    ConfirmationEmailSenderPort,
    SubscriptionStorePort,
)
from newsdesk.components.token import SubscriptionToken, generate
from newsdesk.core.errors import UnexpectedError, ValidationError
from newsdesk.core.ports.db import StorageError, UniqueViolationError
from newsdesk.core.ports.email import EmailError, ensure_delivered
from newsdesk.domain.entities import SubscriberStatus
from newsdesk.domain.subscriber import NewSubscriber

logger = logging.getLogger(__name__)


# --- Pure Functions ---


def build_confirmation_url(
    base_url: str,
    token: SubscriptionToken,
    path: str = "/subscriptions/confirm",
) -> str:
    """Build the confirmation link embedded in the email."""
    base = base_url.rstrip("/")
    return f"{base}{path}?subscription_token={token}"


def render_confirmation_email(confirmation_link: str) -> tuple[str, str]:
    """Return (html_body, text_body) for the confirmation email."""
    html_body = (
        "Welcome to our newsletter!<br />"
        f'Click <a href="{confirmation_link}">here</a> to confirm your subscription.'
    )
    text_body = (
        "Welcome to our newsletter!\n"
        f"Visit {confirmation_link} to confirm your subscription."
    )
    return html_body, text_body


def parse_new_subscriber(inp: SubscribeInput, config: SubscriptionConfig) -> NewSubscriber:
    """
    Validate the raw form fields.

    Raises:
        ValidationError: Either field is invalid
    """
    try:
        return NewSubscriber.parse(
            inp.email,
            inp.name,
            max_name_length=config.max_name_length,
            forbidden_name_characters=config.forbidden_name_characters,
        )
    except ValueError as e:
        raise ValidationError(str(e)) from e


# --- Store Orchestration ---


@dataclass(frozen=True)
class _Resolution:
    subscriber_id: UUID
    token: SubscriptionToken | None
    token_reused: bool = False
    already_confirmed: bool = False


@contextmanager
def _step(context: str) -> Iterator[None]:
    """Wrap storage failures with context; let uniqueness conflicts through."""
    try:
        yield
    except UniqueViolationError:
        raise
    except StorageError as e:
        raise UnexpectedError(context) from e


def _create_or_reuse_token(
    new_subscriber: NewSubscriber,
    store: SubscriptionStorePort,
) -> _Resolution:
    """
    One pass of lookup → reuse, or lookup → insert + store token.

    Raises:
        UniqueViolationError: A concurrent request created the row or token first
        UnexpectedError: Any other storage failure
    """
    subscriber_id: UUID | None = None
    with _step("Failed to get a subscriber ID from the email address if one exists."):
        subscriber_id = store.find_subscriber_id_by_email(str(new_subscriber.email))

    if subscriber_id is not None:
        with _step("Failed to load the existing subscriber."):
            subscriber = store.get_subscriber(subscriber_id)
        if subscriber is not None and subscriber.status == SubscriberStatus.CONFIRMED:
            return _Resolution(subscriber_id, None, already_confirmed=True)

        with _step("Failed to get a subscription token from the subscriber ID if one exists."):
            existing = store.find_token_by_subscriber(subscriber_id)
        if existing is not None:
            return _Resolution(subscriber_id, existing, token_reused=True)

    with _step("Failed to commit SQL transaction to store a new subscriber."):
        with store.transaction() as uow:
            if subscriber_id is None:
                with _step("Failed to insert new subscriber in the database."):
                    subscriber_id = uow.subscribers.insert_subscriber(new_subscriber)
                logger.info("Inserted pending subscriber %s", subscriber_id)

            token = generate()
            with _step("Failed to store the confirmation token for a new subscriber."):
                uow.subscribers.store_token(subscriber_id, token)
            uow.commit()

    return _Resolution(subscriber_id, token)


def resolve_subscription_token(
    new_subscriber: NewSubscriber,
    store: SubscriptionStorePort,
    max_attempts: int = 3,
) -> _Resolution:
    """Run the create-or-reuse pass, re-running it after lost insert races."""
    last_conflict: UniqueViolationError | None = None
    for attempt in range(1, max_attempts + 1):
        try:
            return _create_or_reuse_token(new_subscriber, store)
        except UniqueViolationError as e:
            last_conflict = e
            logger.info(
                "Concurrent subscribe for %s detected (attempt %d/%d); re-running lookup",
                new_subscriber.email,
                attempt,
                max_attempts,
            )

    raise UnexpectedError(
        "Failed to store a subscription token after repeated concurrent updates."
    ) from last_conflict


def send_confirmation_email(
    email_sender: ConfirmationEmailSenderPort,
    new_subscriber: NewSubscriber,
    token: SubscriptionToken,
    config: SubscriptionConfig,
) -> None:
    """
    Email the confirmation link.

    Raises:
        EmailError: Delivery failed
    """
    link = build_confirmation_url(config.base_url, token, config.confirmation_path)
    html_body, text_body = render_confirmation_email(link)
    result = email_sender.send_email(
        str(new_subscriber.email),
        config.confirmation_subject,
        html_body,
        text_body,
    )
    ensure_delivered(result)


# --- Run Handler ---


def run_subscribe(
    inp: SubscribeInput,
    *,
    store: SubscriptionStorePort,
    email_sender: ConfirmationEmailSenderPort,
    config: SubscriptionConfig | None = None,
) -> SubscribeOutput:
    """
    Handle a subscribe request.

    Raises:
        ValidationError: Invalid email or name
        UnexpectedError: Storage failure, or the confirmation email failed
    """
    cfg = config or SubscriptionConfig()
    new_subscriber = parse_new_subscriber(inp, cfg)

    resolution = resolve_subscription_token(new_subscriber, store, cfg.max_attempts)

    if resolution.already_confirmed:
        logger.info(
            "Subscriber %s is already confirmed; no confirmation email sent",
            resolution.subscriber_id,
        )
        return SubscribeOutput(
            subscriber_id=resolution.subscriber_id,
            subscription_token=None,
            already_confirmed=True,
        )

    token = resolution.token
    if token is None:
        raise UnexpectedError("No subscription token was resolved for a pending subscriber.")

    if resolution.token_reused:
        logger.info("Reusing subscription token for pending subscriber %s", resolution.subscriber_id)

    try:
        send_confirmation_email(email_sender, new_subscriber, token, cfg)
    except EmailError as e:
        raise UnexpectedError("Failed to send a confirmation email.") from e

    logger.info("Confirmation email sent to subscriber %s", resolution.subscriber_id)
    return SubscribeOutput(
        subscriber_id=resolution.subscriber_id,
        subscription_token=token,
        token_reused=resolution.token_reused,
    )
