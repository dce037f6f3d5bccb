import argparse
import logging
import sys
from datetime import timedelta

import uvicorn

from newsdesk.adapters.sqlite.migrator import SQLiteMigrator
from newsdesk.adapters.sqlite_db import SQLiteSubscriberStore
from newsdesk.api.auth_utils import issue_operator_token
from newsdesk.api.deps import Settings
from newsdesk.core.ports.db import StorageError
from newsdesk.domain.entities import SubscriberStatus
from newsdesk.rules.loader import load_rules
from newsdesk.rules.models import Rules

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("cli")


def get_rules(settings: Settings) -> Rules:
    if not settings.rules_path.exists():
        logger.error("Rules file %s not found.", settings.rules_path)
        sys.exit(1)
    return load_rules(settings.rules_path)


def handle_migrate(settings: Settings, rules: Rules, args: argparse.Namespace) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    migrator = SQLiteMigrator(settings.db_path(rules), settings.migrations_dir(rules))
    if args.dry_run:
        pending = migrator.pending_migrations()
        print(f"{len(pending)} pending migration(s).")
        for filename in pending:
            print(f"  {filename}")
        return

    applied = migrator.run_migrations()
    print(f"Applied {len(applied)} migration(s).")


def handle_issue_token(settings: Settings, rules: Rules, args: argparse.Namespace) -> None:
    expires = timedelta(minutes=args.minutes) if args.minutes else None
    try:
        token = issue_operator_token(args.operator, expires_delta=expires)
    except ValueError as e:
        logger.error("%s", e)
        sys.exit(1)
    print(token)


def handle_stats(settings: Settings, rules: Rules, args: argparse.Namespace) -> None:
    store = SQLiteSubscriberStore(
        settings.db_path(rules), timeout=rules.storage.busy_timeout_seconds
    )
    try:
        for subscriber_status in SubscriberStatus:
            print(f"{subscriber_status.value}: {store.count_by_status(subscriber_status)}")
    except StorageError as e:
        logger.error("Could not read subscriber counts: %s", e)
        sys.exit(1)


def handle_serve(settings: Settings, rules: Rules, args: argparse.Namespace) -> None:
    uvicorn.run("newsdesk.api.main:app", host=args.host, port=args.port)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="newsdesk CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # migrate
    migrate_parser = subparsers.add_parser("migrate", help="Apply SQL migrations")
    migrate_parser.add_argument(
        "--dry-run", action="store_true", help="List pending migrations without applying"
    )

    # issue-token
    token_parser = subparsers.add_parser("issue-token", help="Print an operator JWT")
    token_parser.add_argument("operator", help="Operator id (JWT subject)")
    token_parser.add_argument("--minutes", type=int, help="Token lifetime in minutes")

    # stats
    subparsers.add_parser("stats", help="Show subscriber counts by status")

    # serve
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    args = parser.parse_args(argv)

    settings = Settings()
    rules = get_rules(settings)

    if args.command == "migrate":
        handle_migrate(settings, rules, args)
    elif args.command == "issue-token":
        handle_issue_token(settings, rules, args)
    elif args.command == "stats":
        handle_stats(settings, rules, args)
    elif args.command == "serve":
        handle_serve(settings, rules, args)


if __name__ == "__main__":
    main()
