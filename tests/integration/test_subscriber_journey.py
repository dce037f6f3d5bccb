"""
Subscribe → confirm → publish over HTTP against a migrated SQLite file.
"""

from fastapi.testclient import TestClient

from newsdesk.adapters.dev_email import DevEmailAdapter

ISSUE = {
    "title": "Issue #1",
    "text_content": "Plain text issue",
    "html_content": "<p>HTML issue</p>",
}


def subscribe_and_confirm(client: TestClient, adapter: DevEmailAdapter, email: str, name: str):
    response = client.post("/subscriptions", data={"email": email, "name": name})
    assert response.status_code == 200
    (link,) = adapter.get_emails_to(email)[-1].links
    confirm_path = link.removeprefix("http://test.local")
    response = client.get(confirm_path)
    assert response.status_code == 200


def test_full_journey(
    client: TestClient,
    email_adapter: DevEmailAdapter,
    operator_headers: dict[str, str],
) -> None:
    subscribe_and_confirm(client, email_adapter, "reader1@example.com", "Reader One")
    subscribe_and_confirm(client, email_adapter, "reader2@example.com", "Reader Two")
    client.post("/subscriptions", data={"email": "lurker@example.com", "name": "Lurker"})
    email_adapter.clear()

    response = client.post("/admin/newsletters", data=ISSUE, headers=operator_headers)

    assert response.status_code == 200
    assert sorted(e.recipient for e in email_adapter.sent_emails) == [
        "reader1@example.com",
        "reader2@example.com",
    ]
    assert {e.subject for e in email_adapter.sent_emails} == {"Issue #1"}


def test_resubscribe_after_confirm_keeps_confirmed_and_silent(
    client: TestClient,
    email_adapter: DevEmailAdapter,
    operator_headers: dict[str, str],
) -> None:
    subscribe_and_confirm(client, email_adapter, "reader@example.com", "Reader")
    email_adapter.clear()

    response = client.post(
        "/subscriptions", data={"email": "reader@example.com", "name": "Reader"}
    )
    assert response.status_code == 200
    assert email_adapter.email_count == 0

    client.post("/admin/newsletters", data=ISSUE, headers=operator_headers)
    assert [e.recipient for e in email_adapter.sent_emails] == ["reader@example.com"]


def test_email_outage_then_retry_confirms_with_same_link(
    client: TestClient,
    email_adapter: DevEmailAdapter,
) -> None:
    form = {"email": "reader@example.com", "name": "Reader"}
    email_adapter.fail_for.add("reader@example.com")
    assert client.post("/subscriptions", data=form).status_code == 500
    failed_links = email_adapter.get_last_email().links

    email_adapter.fail_for.clear()
    assert client.post("/subscriptions", data=form).status_code == 200
    retry_links = email_adapter.get_last_email().links

    assert retry_links == failed_links
    response = client.get(retry_links[0].removeprefix("http://test.local"))
    assert response.status_code == 200
