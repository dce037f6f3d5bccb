"""
Dev email adapter.

Logs emails instead of sending them and keeps them in memory so tests can
assert on what would have gone out (recipients, subjects, confirmation links).

Key behaviors:
- Returns SKIPPED status (counts as handed off, not as a failure)
- Records every email, in call order
- `fail_for` makes chosen recipients return FAILED, for failure-path tests
"""

from __future__ import annotations

import logging
import re
import threading
from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import uuid4

from newsdesk.core.ports.email import EmailResult, EmailStatus

logger = logging.getLogger(__name__)

_LINK_RE = re.compile(r"https?://[^\s\"<>]+")


@dataclass
class SentEmail:
    """Record of a logged email for test assertions."""

    id: str
    recipient: str
    subject: str
    body_html: str
    body_text: str
    status: EmailStatus
    logged_at: datetime

    @property
    def links(self) -> list[str]:
        """Links found in the plain-text body, in order."""
        return _LINK_RE.findall(self.body_text)


@dataclass
class DevEmailAdapter:
    """
    Dev email adapter that logs instead of sending.

    Implements EmailPort. Safe to share between request threads.
    """

    sent_emails: list[SentEmail] = field(default_factory=list)
    fail_for: set[str] = field(default_factory=set)

    # Configuration
    log_level: int = logging.INFO
    log_body: bool = False  # Bodies carry confirmation links
    body_preview_length: int = 100

    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def send_email(
        self,
        recipient: str,
        subject: str,
        body_html: str,
        body_text: str | None = None,
    ) -> EmailResult:
        """
        Log an email instead of sending.

        Returns:
            EmailResult with SKIPPED status, or FAILED for recipients in fail_for
        """
        message_id = f"dev-{uuid4().hex[:12]}"
        failed = recipient in self.fail_for
        status = EmailStatus.FAILED if failed else EmailStatus.SKIPPED

        with self._lock:
            self.sent_emails.append(
                SentEmail(
                    id=message_id,
                    recipient=recipient,
                    subject=subject,
                    body_html=body_html,
                    body_text=body_text or "",
                    status=status,
                    logged_at=datetime.now(UTC),
                )
            )

        self._log_email(recipient, subject, body_html, message_id, status)

        if failed:
            return EmailResult.failed(recipient, "Dev mode - simulated delivery failure")
        return EmailResult(
            status=EmailStatus.SKIPPED,
            message_id=message_id,
            recipient=recipient,
            error="Dev mode - email logged, not sent",
        )

    def _log_email(
        self,
        recipient: str,
        subject: str,
        body_html: str,
        message_id: str,
        status: EmailStatus,
    ) -> None:
        parts = [
            f"EMAIL (dev): To={recipient}",
            f"Subject={subject}",
            f"Status={status.value}",
        ]

        if self.log_body and body_html:
            preview = body_html[: self.body_preview_length]
            if len(body_html) > self.body_preview_length:
                preview += "..."
            parts.append(f"Body={preview}")

        parts.append(f"MessageID={message_id}")
        logger.log(self.log_level, ", ".join(parts))

    # --- Test Helper Methods ---

    def get_last_email(self) -> SentEmail | None:
        """Get the most recently logged email."""
        return self.sent_emails[-1] if self.sent_emails else None

    def get_emails_to(self, recipient: str) -> list[SentEmail]:
        """Get all emails logged to a specific recipient."""
        return [e for e in self.sent_emails if e.recipient == recipient]

    def clear(self) -> None:
        """Clear all stored emails (for test isolation)."""
        with self._lock:
            self.sent_emails.clear()

    @property
    def email_count(self) -> int:
        """Get the number of logged emails."""
        return len(self.sent_emails)


def create_dev_email_adapter(
    log_level: int = logging.INFO,
    log_body: bool = False,
) -> DevEmailAdapter:
    """Create a dev email adapter."""
    return DevEmailAdapter(log_level=log_level, log_body=log_body)
