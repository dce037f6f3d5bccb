import os
from collections.abc import Generator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from newsdesk.adapters.dev_email import DevEmailAdapter
from newsdesk.adapters.sqlite.migrator import SQLiteMigrator
from newsdesk.adapters.sqlite_db import SQLiteSubscriberStore
from newsdesk.api.auth_utils import issue_operator_token
from newsdesk.api.deps import (
    get_email_sender,
    get_subscriber_store,
    get_subscription_config,
)
from newsdesk.components.subscription import SubscriptionConfig

PROJECT_ROOT = Path(__file__).resolve().parent.parent
MIGRATIONS_DIR = PROJECT_ROOT / "migrations"
TEST_BASE_URL = "http://test.local"


@pytest.fixture
def test_db_path(tmp_path: Path) -> str:
    """A file SQLite database with the real schema applied."""
    db_path = os.path.join(str(tmp_path), "newsdesk.db")
    SQLiteMigrator(db_path, str(MIGRATIONS_DIR)).run_migrations()
    return db_path


@pytest.fixture
def store(test_db_path: str) -> SQLiteSubscriberStore:
    return SQLiteSubscriberStore(test_db_path)


@pytest.fixture
def email_adapter() -> DevEmailAdapter:
    return DevEmailAdapter()


@pytest.fixture
def subscription_config() -> SubscriptionConfig:
    return SubscriptionConfig(base_url=TEST_BASE_URL)


@pytest.fixture
def client(
    store: SQLiteSubscriberStore,
    email_adapter: DevEmailAdapter,
    subscription_config: SubscriptionConfig,
) -> Generator[TestClient, None, None]:
    """TestClient wired to the temp database and the in-memory email adapter."""
    from newsdesk.api.main import app

    app.dependency_overrides[get_subscriber_store] = lambda: store
    app.dependency_overrides[get_email_sender] = lambda: email_adapter
    app.dependency_overrides[get_subscription_config] = lambda: subscription_config

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def operator_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {issue_operator_token('ops@example.com')}"}
