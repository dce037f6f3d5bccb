import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from newsdesk.adapters.dev_email import DevEmailAdapter
from newsdesk.adapters.http_email import HttpEmailAdapter
from newsdesk.adapters.sqlite_db import SQLiteSubscriberStore
from newsdesk.api.auth_utils import COOKIE_NAME, operator_from_token
from newsdesk.components.subscription import SubscriptionConfig
from newsdesk.core.ports.email import EmailAddress, EmailPort
from newsdesk.rules.loader import load_rules
from newsdesk.rules.models import Rules

logger = logging.getLogger(__name__)


# --- Settings ---
class Settings:
    """Process environment. Secrets live here, tunables live in rules.yaml."""

    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.data_dir = Path(os.environ.get("NEWSDESK_DATA_DIR", "./data"))
        self.rules_path = Path(
            os.environ.get("NEWSDESK_RULES_PATH", str(self.base_dir / "rules.yaml"))
        )
        self.base_url = os.environ.get("NEWSDESK_BASE_URL") or None
        self.email_auth_token = os.environ.get("NEWSDESK_EMAIL_AUTH_TOKEN", "")

    def db_path(self, rules: Rules) -> str:
        return str(self.data_dir / rules.storage.db_filename)

    def migrations_dir(self, rules: Rules) -> str:
        path = Path(rules.storage.migrations_dir)
        return str(path if path.is_absolute() else self.base_dir / path)


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def get_rules(settings: Settings = Depends(get_settings)) -> Rules:
    return load_rules(settings.rules_path)


# --- Store ---
def get_subscriber_store(
    settings: Settings = Depends(get_settings),
    rules: Rules = Depends(get_rules),
) -> SQLiteSubscriberStore:
    return SQLiteSubscriberStore(
        settings.db_path(rules),
        timeout=rules.storage.busy_timeout_seconds,
    )


# --- Email ---
# One sender per process; the HTTP adapter holds a connection pool.
_email_sender_instance: EmailPort | None = None


def build_email_sender(settings: Settings, rules: Rules) -> EmailPort:
    """Create the email adapter named by rules.email.adapter."""
    email_rules = rules.email
    if email_rules.adapter == "http":
        if not settings.email_auth_token:
            raise RuntimeError("NEWSDESK_EMAIL_AUTH_TOKEN is required for the http email adapter")
        return HttpEmailAdapter(
            api_base_url=email_rules.api_base_url,
            sender=EmailAddress(email_rules.sender, email_rules.sender_name),
            auth_token=settings.email_auth_token,
            timeout_seconds=email_rules.timeout_seconds,
        )
    return DevEmailAdapter()


def get_email_sender(
    settings: Settings = Depends(get_settings),
    rules: Rules = Depends(get_rules),
) -> EmailPort:
    """Get email sender singleton."""
    global _email_sender_instance
    if _email_sender_instance is None:
        _email_sender_instance = build_email_sender(settings, rules)
        logger.info("Email adapter: %s", rules.email.adapter)
    return _email_sender_instance


# --- Component Config ---
def get_subscription_config(
    settings: Settings = Depends(get_settings),
    rules: Rules = Depends(get_rules),
) -> SubscriptionConfig:
    return SubscriptionConfig(
        base_url=(settings.base_url or rules.app.base_url).rstrip("/"),
        confirmation_path=rules.app.confirmation_path,
        confirmation_subject=rules.subscriptions.confirmation_subject,
        max_attempts=rules.subscriptions.max_attempts,
        max_name_length=rules.subscribers.name.max_length,
        forbidden_name_characters=frozenset(rules.subscribers.name.forbidden_characters),
    )


# --- Auth ---
bearer_scheme = HTTPBearer(auto_error=False)


def get_current_operator(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> str:
    """Operator id from a bearer header or the access_token cookie."""
    token = credentials.credentials if credentials else None

    if not token:
        cookie_token = request.cookies.get(COOKIE_NAME)
        if cookie_token:
            token = cookie_token.removeprefix("Bearer ").strip()

    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    operator_id = operator_from_token(token)
    if operator_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return operator_id
