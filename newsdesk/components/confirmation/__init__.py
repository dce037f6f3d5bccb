"""
Confirmation component.

Resolves a confirmation token and marks its subscriber confirmed.
"""

from newsdesk.components.confirmation.component import run_confirm
from newsdesk.components.confirmation.models import ConfirmInput, ConfirmOutput
from newsdesk.components.confirmation.ports import ConfirmationStorePort

__all__ = [
    "run_confirm",
    "ConfirmInput",
    "ConfirmOutput",
    "ConfirmationStorePort",
]
