"""
Concurrent first-subscribes for one address on a shared SQLite file.

Every caller must end up with the same subscriber and the same token, and the
database must hold exactly one row of each.
"""

import sqlite3
import threading
from concurrent.futures import ThreadPoolExecutor

from newsdesk.adapters.dev_email import DevEmailAdapter
from newsdesk.adapters.sqlite_db import SQLiteSubscriberStore
from newsdesk.components.subscription import (
    SubscribeInput,
    SubscribeOutput,
    SubscriptionConfig,
    run_subscribe,
)

WORKERS = 8


def test_concurrent_first_subscribes_share_one_row_and_token(test_db_path: str) -> None:
    adapter = DevEmailAdapter()
    config = SubscriptionConfig(base_url="http://test.local", max_attempts=WORKERS)
    barrier = threading.Barrier(WORKERS)

    def subscribe_once(_: int) -> SubscribeOutput:
        store = SQLiteSubscriberStore(test_db_path, timeout=30.0)
        barrier.wait()
        return run_subscribe(
            SubscribeInput(email="race@example.com", name="Racer"),
            store=store,
            email_sender=adapter,
            config=config,
        )

    with ThreadPoolExecutor(max_workers=WORKERS) as pool:
        results = list(pool.map(subscribe_once, range(WORKERS)))

    assert len({r.subscriber_id for r in results}) == 1
    assert len({str(r.subscription_token) for r in results}) == 1
    assert sum(1 for r in results if not r.token_reused) == 1

    conn = sqlite3.connect(test_db_path)
    assert conn.execute("SELECT COUNT(*) FROM subscriptions").fetchone()[0] == 1
    assert conn.execute("SELECT COUNT(*) FROM subscription_tokens").fetchone()[0] == 1
    conn.close()

    assert adapter.email_count == WORKERS
    assert len({tuple(e.links) for e in adapter.sent_emails}) == 1
