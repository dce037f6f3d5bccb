"""
Subscriber value types.

SubscriberEmail and SubscriberName can only be built through parse(), so a
NewSubscriber in hand is always valid input for the store.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

# RFC 5322 simplified
EMAIL_REGEX = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+@"
    r"[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)+$"
)

MAX_EMAIL_LENGTH = 254
DEFAULT_MAX_NAME_LENGTH = 256
DEFAULT_FORBIDDEN_NAME_CHARACTERS = frozenset('/()"<>\\{}')


@dataclass(frozen=True)
class SubscriberEmail:
    """Validated email address."""

    value: str

    @classmethod
    def parse(cls, raw: str) -> SubscriberEmail:
        """
        Validate an email address.

        Surrounding whitespace is stripped; case is preserved.

        Raises:
            ValueError: With a human-readable reason
        """
        candidate = raw.strip() if raw else ""
        if not candidate:
            raise ValueError("Email address is required.")
        if len(candidate) > MAX_EMAIL_LENGTH:
            raise ValueError("Email address is too long.")
        if not EMAIL_REGEX.match(candidate):
            raise ValueError(f"{candidate} is not a valid subscriber email.")
        return cls(candidate)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class SubscriberName:
    """Validated display name."""

    value: str

    @classmethod
    def parse(
        cls,
        raw: str,
        max_length: int = DEFAULT_MAX_NAME_LENGTH,
        forbidden_characters: frozenset[str] = DEFAULT_FORBIDDEN_NAME_CHARACTERS,
    ) -> SubscriberName:
        """
        Validate a display name.

        Raises:
            ValueError: Empty, too long, or containing a forbidden character
        """
        if raw is None or not raw.strip():
            raise ValueError("Subscriber name is required.")
        if len(raw) > max_length:
            raise ValueError(f"Subscriber name must be at most {max_length} characters.")
        bad = sorted({c for c in raw if c in forbidden_characters})
        if bad:
            raise ValueError(
                f"Subscriber name contains forbidden characters: {''.join(bad)}"
            )
        return cls(raw)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class NewSubscriber:
    """Validated subscribe request."""

    email: SubscriberEmail
    name: SubscriberName

    @classmethod
    def parse(
        cls,
        email: str,
        name: str,
        max_name_length: int = DEFAULT_MAX_NAME_LENGTH,
        forbidden_name_characters: frozenset[str] = DEFAULT_FORBIDDEN_NAME_CHARACTERS,
    ) -> NewSubscriber:
        """Validate both fields. Name is checked first, then email."""
        parsed_name = SubscriberName.parse(
            name,
            max_length=max_name_length,
            forbidden_characters=forbidden_name_characters,
        )
        return cls(email=SubscriberEmail.parse(email), name=parsed_name)
