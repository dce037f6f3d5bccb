"""
Subscription token models.

A subscription token is the credential embedded in a confirmation link.
Shape is exactly 25 ASCII alphanumeric characters; nothing else about the
value is meaningful.
"""

from __future__ import annotations

import string
from dataclasses import dataclass

TOKEN_LENGTH = 25

# ASCII only. str.isalnum() would also accept e.g. "é" or Arabic-Indic digits.
TOKEN_ALPHABET = string.ascii_letters + string.digits


@dataclass(frozen=True)
class SubscriptionToken:
    """Validated subscription token. Build with parse() or generate()."""

    value: str

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        # Keep tokens out of logs and tracebacks.
        return "SubscriptionToken(***)"


# --- Error Types ---


class InvalidTokenShape(ValueError):
    """Raised when a string is not a well-formed subscription token."""

    def __init__(self, raw: str) -> None:
        self.raw = raw
        super().__init__(f"{raw!r} is not a valid subscription token.")
