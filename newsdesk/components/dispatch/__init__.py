"""
Dispatch component.

Fan-out of newsletter issues to confirmed subscribers.
"""

from newsdesk.components.dispatch.component import run_publish, validate_issue
from newsdesk.components.dispatch.models import PublishInput
from newsdesk.components.dispatch.ports import DispatchStorePort, NewsletterEmailSenderPort

__all__ = [
    "run_publish",
    "validate_issue",
    "PublishInput",
    "DispatchStorePort",
    "NewsletterEmailSenderPort",
]
