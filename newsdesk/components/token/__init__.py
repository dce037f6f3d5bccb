"""
Subscription token component.

Validated, fixed-shape opaque identifier used in confirmation links.
"""

from newsdesk.components.token.component import generate, is_valid_token, parse
from newsdesk.components.token.models import (
    TOKEN_ALPHABET,
    TOKEN_LENGTH,
    InvalidTokenShape,
    SubscriptionToken,
)

__all__ = [
    # Pure functions
    "parse",
    "generate",
    "is_valid_token",
    # Constants
    "TOKEN_ALPHABET",
    "TOKEN_LENGTH",
    # Models
    "SubscriptionToken",
    # Errors
    "InvalidTokenShape",
]
