"""
Confirmation workflow.

pending_confirmation --[known token]--> confirmed

Key behaviors:
- Malformed token is a validation failure (client error)
- Well-formed but unknown token is an authorization failure
- Confirming twice is not an error
"""

from __future__ import annotations

import logging

from newsdesk.components.confirmation.models import ConfirmInput, ConfirmOutput
from newsdesk.components.confirmation.ports import ConfirmationStorePort
from newsdesk.components.token import InvalidTokenShape, parse
from newsdesk.core.errors import AuthorizationError, UnexpectedError, ValidationError
from newsdesk.core.ports.db import StorageError

logger = logging.getLogger(__name__)


def run_confirm(inp: ConfirmInput, *, store: ConfirmationStorePort) -> ConfirmOutput:
    """
    Handle a confirmation request.

    Raises:
        ValidationError: Token has the wrong shape
        AuthorizationError: Token is not known to the store
        UnexpectedError: Storage failure
    """
    try:
        token = parse(inp.subscription_token)
    except InvalidTokenShape as e:
        raise ValidationError(str(e)) from e

    try:
        subscriber_id = store.find_subscriber_by_token(token)
    except StorageError as e:
        raise UnexpectedError("Failed to get subscriber ID from token if it exists") from e

    if subscriber_id is None:
        raise AuthorizationError("Subscription token not found.")

    try:
        store.mark_confirmed(subscriber_id)
    except StorageError as e:
        raise UnexpectedError("Failed to confirm subscriber") from e

    logger.info("Subscriber %s confirmed", subscriber_id)
    return ConfirmOutput(subscriber_id=subscriber_id)
