"""
Workflow error taxonomy.

Every workflow raises only these. The HTTP shell maps them to status codes:
- ValidationError     → 400, reason shown to the caller
- AuthorizationError  → 401, reason shown to the caller
- UnexpectedError     → 500, opaque to the caller; cause chain is logged
"""

from __future__ import annotations


class NewsletterError(Exception):
    """Base workflow error."""

    pass


class ValidationError(NewsletterError):
    """Malformed input."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


class AuthorizationError(NewsletterError):
    """Well-formed but unknown or unauthorized credential."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


class UnexpectedError(NewsletterError):
    """
    Infrastructure failure.

    The message describes what was being attempted; the original exception
    is attached as __cause__ (raise UnexpectedError(...) from e).
    """

    pass


def format_error_chain(exc: BaseException) -> str:
    """
    Render an exception and its causes, outermost first.

    Example:
        Failed to send a confirmation email.

        Caused by:
            Failed to send email to a@b.com: HTTP 500
    """
    lines = [f"{exc}\n"]
    current = exc.__cause__ or exc.__context__
    seen: set[int] = {id(exc)}
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        lines.append(f"Caused by:\n\t{current}")
        current = current.__cause__ or current.__context__
    return "\n".join(lines)
