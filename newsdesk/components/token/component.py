"""
Subscription token component.

Pure functions for parsing and generating confirmation tokens.

Key behaviors:
- parse() accepts exactly 25 ASCII alphanumeric characters
- generate() draws from the OS CSPRNG (secrets), never a seeded generator
- generate() output always satisfies parse()
"""

from __future__ import annotations

import secrets

from newsdesk.components.token.models import (
    TOKEN_ALPHABET,
    TOKEN_LENGTH,
    InvalidTokenShape,
    SubscriptionToken,
)

_ALPHABET_SET = frozenset(TOKEN_ALPHABET)


def is_valid_token(raw: str) -> bool:
    """Check token shape without raising."""
    return len(raw) == TOKEN_LENGTH and all(c in _ALPHABET_SET for c in raw)


def parse(raw: str) -> SubscriptionToken:
    """
    Parse a raw string into a SubscriptionToken.

    Args:
        raw: Candidate token, usually from a query string

    Returns:
        SubscriptionToken wrapping the unchanged string

    Raises:
        InvalidTokenShape: Wrong length or a non-ASCII-alphanumeric character
    """
    if not isinstance(raw, str) or not is_valid_token(raw):
        raise InvalidTokenShape(raw)
    return SubscriptionToken(raw)


def generate() -> SubscriptionToken:
    """Generate a fresh unguessable token."""
    raw = "".join(secrets.choice(TOKEN_ALPHABET) for _ in range(TOKEN_LENGTH))
    return parse(raw)
