from newsdesk.core.errors import (
    AuthorizationError,
    NewsletterError,
    UnexpectedError,
    ValidationError,
    format_error_chain,
)
from newsdesk.core.ports.db import StorageError


def test_taxonomy_shares_a_base():
    for exc in (ValidationError("bad"), AuthorizationError("nope"), UnexpectedError("boom")):
        assert isinstance(exc, NewsletterError)


def test_reason_is_kept():
    assert ValidationError("Email address is required.").reason == "Email address is required."
    assert AuthorizationError("Subscription token not found.").reason == (
        "Subscription token not found."
    )


def test_chain_lists_causes_outermost_first():
    try:
        try:
            try:
                raise OSError("disk I/O error")
            except OSError as e:
                raise StorageError("Failed to store subscription token") from e
        except StorageError as e:
            raise UnexpectedError("Failed to store the confirmation token.") from e
    except UnexpectedError as e:
        rendered = format_error_chain(e)

    assert rendered == (
        "Failed to store the confirmation token.\n\n"
        "Caused by:\n\tFailed to store subscription token\n"
        "Caused by:\n\tdisk I/O error"
    )


def test_chain_without_cause_is_just_the_message():
    assert format_error_chain(UnexpectedError("boom")) == "boom\n"


def test_chain_survives_cycles():
    a = UnexpectedError("a")
    b = StorageError("b")
    a.__cause__ = b
    b.__cause__ = a

    assert format_error_chain(a) == "a\n\nCaused by:\n\tb"
