from datetime import UTC, datetime, timedelta

import pytest

from newsdesk.api.auth_utils import (
    create_access_token,
    decode_access_token,
    issue_operator_token,
    operator_from_token,
)


def test_operator_token_round_trip():
    token = issue_operator_token("ops@example.com")
    assert operator_from_token(token) == "ops@example.com"


def test_blank_operator_is_rejected():
    with pytest.raises(ValueError):
        issue_operator_token("  ")


def test_expired_token_is_rejected():
    past = datetime.now(UTC) - timedelta(days=2)
    token = create_access_token({"sub": "ops"}, expires_delta=timedelta(hours=1), now_utc=past)

    assert decode_access_token(token) is None
    assert operator_from_token(token) is None


def test_wrong_key_is_rejected():
    token = create_access_token({"sub": "ops"}, secret_key="another-key")
    assert operator_from_token(token) is None


def test_empty_subject_is_rejected():
    token = create_access_token({"sub": ""})
    assert operator_from_token(token) is None


def test_garbage_is_rejected():
    assert decode_access_token("not.a.jwt") is None
