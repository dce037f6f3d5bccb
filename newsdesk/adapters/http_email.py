"""
HTTP email adapter.

Sends through a Postmark-style JSON email API:

    POST {api_base_url}/email
    X-Postmark-Server-Token: <token>
    {"From": ..., "To": ..., "Subject": ..., "HtmlBody": ..., "TextBody": ...}

One attempt per call, bounded by `timeout_seconds`. Non-2xx responses,
timeouts and transport errors come back as FAILED results. No retry.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from newsdesk.core.ports.email import EmailAddress, EmailMessage, EmailResult

logger = logging.getLogger(__name__)

AUTH_HEADER = "X-Postmark-Server-Token"


class HttpEmailAdapter:
    """Implements EmailPort over HTTP."""

    def __init__(
        self,
        api_base_url: str,
        sender: EmailAddress,
        auth_token: str,
        timeout_seconds: float = 10.0,
        client: httpx.Client | None = None,
    ) -> None:
        self.api_base_url = api_base_url.rstrip("/")
        self.sender = sender
        self._auth_token = auth_token
        self._client = client or httpx.Client(timeout=timeout_seconds)
        self.timeout_seconds = timeout_seconds

    def send_email(
        self,
        recipient: str,
        subject: str,
        body_html: str,
        body_text: str | None = None,
    ) -> EmailResult:
        message = EmailMessage(
            recipient=EmailAddress(recipient),
            subject=subject,
            body_html=body_html,
            body_text=body_text or "",
            sender=self.sender,
        )
        return self.send(message)

    def send(self, message: EmailMessage) -> EmailResult:
        """Send a full EmailMessage."""
        recipient = message.recipient.email
        try:
            response = self._client.post(
                f"{self.api_base_url}/email",
                json=self._payload(message),
                headers={AUTH_HEADER: self._auth_token, **message.headers},
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
        except httpx.TimeoutException as e:
            logger.warning("Email API timed out sending to %s", recipient)
            return EmailResult.failed(recipient, f"timed out: {e}")
        except httpx.HTTPStatusError as e:
            logger.warning(
                "Email API rejected message to %s with HTTP %s",
                recipient,
                e.response.status_code,
            )
            return EmailResult.failed(recipient, f"HTTP {e.response.status_code}")
        except httpx.HTTPError as e:
            logger.warning("Email API transport error sending to %s: %s", recipient, e)
            return EmailResult.failed(recipient, str(e))

        return EmailResult.success(recipient, message_id=self._message_id(response))

    def close(self) -> None:
        self._client.close()

    def _payload(self, message: EmailMessage) -> dict[str, Any]:
        sender = message.sender or self.sender
        return {
            "From": str(sender),
            "To": str(message.recipient),
            "Subject": message.subject,
            "HtmlBody": message.body_html,
            "TextBody": message.body_text,
        }

    @staticmethod
    def _message_id(response: httpx.Response) -> str | None:
        try:
            data = response.json()
        except ValueError:
            return None
        if isinstance(data, dict):
            value = data.get("MessageID")
            return str(value) if value is not None else None
        return None
