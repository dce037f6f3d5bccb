# newsdesk: Ports (Protocol Interfaces)
# Abstract interfaces for adapters; no implementations here

from newsdesk.core.ports.db import (
    StorageError,
    SubscriberStorePort,
    UniqueViolationError,
    UnitOfWorkPort,
)
from newsdesk.core.ports.email import (
    EmailAddress,
    EmailError,
    EmailMessage,
    EmailPort,
    EmailResult,
    EmailSendError,
    EmailStatus,
    ensure_delivered,
)

__all__ = [
    # Store
    "StorageError",
    "SubscriberStorePort",
    "UniqueViolationError",
    "UnitOfWorkPort",
    # Email
    "EmailAddress",
    "EmailError",
    "EmailMessage",
    "EmailPort",
    "EmailResult",
    "EmailSendError",
    "EmailStatus",
    "ensure_delivered",
]
