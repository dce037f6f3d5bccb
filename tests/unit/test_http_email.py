"""
Unit tests for HttpEmailAdapter against an httpx.MockTransport.
"""

import json

import httpx
import pytest

from newsdesk.adapters.http_email import AUTH_HEADER, HttpEmailAdapter
from newsdesk.core.ports.email import EmailAddress, EmailStatus

SENDER = EmailAddress("newsletter@example.com", "newsdesk")


def make_adapter(handler) -> HttpEmailAdapter:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return HttpEmailAdapter(
        api_base_url="https://email.test/",
        sender=SENDER,
        auth_token="server-token",
        timeout_seconds=1.0,
        client=client,
    )


class TestHttpEmailAdapter:
    def test_request_shape(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"MessageID": "abc-123"})

        adapter = make_adapter(handler)
        result = adapter.send_email("reader@example.com", "Welcome!", "<p>hi</p>", "hi")

        assert len(seen) == 1
        request = seen[0]
        assert request.method == "POST"
        assert str(request.url) == "https://email.test/email"
        assert request.headers[AUTH_HEADER] == "server-token"
        assert json.loads(request.content) == {
            "From": '"newsdesk" <newsletter@example.com>',
            "To": "reader@example.com",
            "Subject": "Welcome!",
            "HtmlBody": "<p>hi</p>",
            "TextBody": "hi",
        }
        assert result.status == EmailStatus.SENT
        assert result.message_id == "abc-123"

    @pytest.mark.parametrize("status_code", [400, 401, 422, 500, 503])
    def test_non_2xx_is_failed_result(self, status_code: int) -> None:
        adapter = make_adapter(lambda request: httpx.Response(status_code))

        result = adapter.send_email("reader@example.com", "Welcome!", "<p>hi</p>", "hi")

        assert result.status == EmailStatus.FAILED
        assert result.error == f"HTTP {status_code}"

    def test_timeout_is_failed_result(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        result = make_adapter(handler).send_email("reader@example.com", "S", "<p>b</p>")

        assert result.status == EmailStatus.FAILED
        assert result.error is not None and result.error.startswith("timed out")

    def test_transport_error_is_failed_result(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        result = make_adapter(handler).send_email("reader@example.com", "S", "<p>b</p>")

        assert result.status == EmailStatus.FAILED
        assert "connection refused" in (result.error or "")

    def test_non_json_success_has_no_message_id(self) -> None:
        adapter = make_adapter(lambda request: httpx.Response(200, text="ok"))

        result = adapter.send_email("reader@example.com", "S", "<p>b</p>")

        assert result.status == EmailStatus.SENT
        assert result.message_id is None

    def test_one_attempt_per_call(self) -> None:
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            return httpx.Response(500)

        make_adapter(handler).send_email("reader@example.com", "S", "<p>b</p>")

        assert calls == 1
