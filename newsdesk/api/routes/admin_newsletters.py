"""
Admin newsletter endpoint.

POST /admin/newsletters - Publish an issue to every confirmed subscriber.
Requires an operator token (bearer header or access_token cookie).
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Form
from pydantic import BaseModel

from newsdesk.adapters.sqlite_db import SQLiteSubscriberStore
from newsdesk.api.deps import get_current_operator, get_email_sender, get_subscriber_store
from newsdesk.components.dispatch import PublishInput, run_publish
from newsdesk.core.ports.email import EmailPort

logger = logging.getLogger(__name__)

router = APIRouter()


class PublishResponse(BaseModel):
    success: bool
    message: str


@router.post(
    "/newsletters",
    response_model=PublishResponse,
    summary="Publish a newsletter issue",
)
def publish_newsletter(
    title: Annotated[str, Form()],
    text_content: Annotated[str, Form()],
    html_content: Annotated[str, Form()],
    operator_id: str = Depends(get_current_operator),
    store: SQLiteSubscriberStore = Depends(get_subscriber_store),
    email_sender: EmailPort = Depends(get_email_sender),
) -> PublishResponse:
    logger.info("Operator %s publishing newsletter '%s'", operator_id, title)
    run_publish(
        PublishInput(title=title, text_content=text_content, html_content=html_content),
        store=store,
        email_sender=email_sender,
    )
    return PublishResponse(success=True, message="The newsletter issue has been published.")
