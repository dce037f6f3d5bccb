from pathlib import Path

import pytest

from newsdesk.adapters.sqlite_db import SQLiteSubscriberStore
from newsdesk.api.auth_utils import operator_from_token
from newsdesk.app_shell.cli import main
from newsdesk.domain.subscriber import NewSubscriber

PROJECT_ROOT = Path(__file__).resolve().parents[2]


@pytest.fixture
def cli_env(tmp_path, monkeypatch):
    monkeypatch.chdir(PROJECT_ROOT)
    monkeypatch.setenv("NEWSDESK_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("NEWSDESK_RULES_PATH", str(PROJECT_ROOT / "rules.yaml"))
    return tmp_path / "data"


def test_migrate_creates_database(cli_env, capsys):
    main(["migrate"])

    assert (cli_env / "newsdesk.db").exists()
    assert "Applied 2 migration(s)." in capsys.readouterr().out

    main(["migrate"])
    assert "Applied 0 migration(s)." in capsys.readouterr().out


def test_migrate_dry_run_lists_pending(cli_env, capsys):
    main(["migrate", "--dry-run"])

    out = capsys.readouterr().out
    assert "2 pending migration(s)." in out
    assert "001_subscriptions.sql" in out


def test_issue_token_prints_usable_jwt(cli_env, capsys):
    main(["issue-token", "ops@example.com"])

    token = capsys.readouterr().out.strip()
    assert operator_from_token(token) == "ops@example.com"


def test_stats_counts_by_status(cli_env, capsys):
    main(["migrate"])
    store = SQLiteSubscriberStore(str(cli_env / "newsdesk.db"))
    confirmed_id = store.insert_subscriber(NewSubscriber.parse("a@example.com", "Ann"))
    store.insert_subscriber(NewSubscriber.parse("b@example.com", "Bob"))
    store.mark_confirmed(confirmed_id)
    capsys.readouterr()

    main(["stats"])

    out = capsys.readouterr().out
    assert "pending_confirmation: 1" in out
    assert "confirmed: 1" in out


def test_missing_rules_file_exits(cli_env, monkeypatch, tmp_path):
    monkeypatch.setenv("NEWSDESK_RULES_PATH", str(tmp_path / "missing.yaml"))

    with pytest.raises(SystemExit):
        main(["stats"])


def test_serve_runs_the_api(cli_env, monkeypatch):
    calls = []
    monkeypatch.setattr(
        "newsdesk.app_shell.cli.uvicorn.run",
        lambda app, host, port: calls.append((app, host, port)),
    )

    main(["serve", "--port", "9001"])

    assert calls == [("newsdesk.api.main:app", "127.0.0.1", 9001)]
