"""Newsletter dispatch ports."""

from __future__ import annotations

from typing import Protocol

from newsdesk.core.ports.email import EmailPort
from newsdesk.domain.entities import ConfirmedSubscriber


class DispatchStorePort(Protocol):
    """Store operations used by the dispatcher."""

    def list_confirmed_emails(self) -> list[ConfirmedSubscriber]:
        """List confirmed subscribers; invalid stored emails are reported per row."""
        ...


NewsletterEmailSenderPort = EmailPort
