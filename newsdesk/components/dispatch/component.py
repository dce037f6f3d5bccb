"""
Newsletter dispatcher.

Delivers one issue to every confirmed subscriber, in listing order.

Delivery policy is fail-fast:
- a stored address that no longer validates is skipped with a warning
- the first delivery failure stops the batch and is raised as UnexpectedError;
  every earlier recipient has already been attempted, later ones are not
- per-recipient outcomes are logged, never returned
"""

from __future__ import annotations

import logging

from newsdesk.components.dispatch.models import PublishInput
from newsdesk.components.dispatch.ports import DispatchStorePort, NewsletterEmailSenderPort
from newsdesk.core.errors import UnexpectedError, ValidationError, format_error_chain
from newsdesk.core.ports.db import StorageError
from newsdesk.core.ports.email import EmailError, ensure_delivered

logger = logging.getLogger(__name__)


def validate_issue(inp: PublishInput) -> None:
    """
    Reject an issue with a blank title or body.

    Raises:
        ValidationError: Naming the first missing field
    """
    for field_name in ("title", "text_content", "html_content"):
        value = getattr(inp, field_name)
        if value is None or not value.strip():
            raise ValidationError(f"Newsletter {field_name} is required.")


def run_publish(
    inp: PublishInput,
    *,
    store: DispatchStorePort,
    email_sender: NewsletterEmailSenderPort,
) -> None:
    """
    Publish a newsletter issue to all confirmed subscribers.

    Raises:
        ValidationError: Blank title or content
        UnexpectedError: Listing failed, or a delivery failed (fail-fast)
    """
    validate_issue(inp)

    try:
        subscribers = store.list_confirmed_emails()
    except StorageError as e:
        raise UnexpectedError("Failed to get confirmed subscribers") from e

    delivered = 0
    skipped = 0
    for subscriber in subscribers:
        if subscriber.email is None:
            skipped += 1
            cause = subscriber.error or ValueError(f"{subscriber.raw_email} is invalid")
            logger.warning(
                "Skipping a confirmed subscriber. Their stored contact details are invalid: %s",
                format_error_chain(cause),
            )
            continue

        recipient = str(subscriber.email)
        try:
            ensure_delivered(
                email_sender.send_email(
                    recipient,
                    inp.title,
                    inp.html_content,
                    inp.text_content,
                )
            )
        except EmailError as e:
            logger.error(
                "Newsletter delivery stopped after %d sent, %d skipped", delivered, skipped
            )
            raise UnexpectedError(f"Failed to send newsletter issue to {recipient}") from e
        delivered += 1

    logger.info(
        "Newsletter '%s' published: %d sent, %d skipped", inp.title, delivered, skipped
    )
