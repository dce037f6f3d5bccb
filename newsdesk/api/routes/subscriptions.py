"""
Public subscription endpoints.

Endpoints:
- POST /subscriptions - Subscribe (form: email, name); sends a confirmation email
- GET /subscriptions/confirm - Confirm via the emailed token

Workflow errors propagate to the app-level handler, which maps them to
400 / 401 / 500.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Form, Query
from pydantic import BaseModel

from newsdesk.adapters.sqlite_db import SQLiteSubscriberStore
from newsdesk.api.deps import get_email_sender, get_subscriber_store, get_subscription_config
from newsdesk.components.confirmation import ConfirmInput, run_confirm
from newsdesk.components.subscription import (
    SubscribeInput,
    SubscriptionConfig,
    run_subscribe,
)
from newsdesk.core.ports.email import EmailPort

router = APIRouter()


class SubscribeResponse(BaseModel):
    """Response for a subscribe request. Never echoes the token."""

    success: bool
    message: str


class ConfirmResponse(BaseModel):
    """Response for a confirmation request."""

    success: bool
    message: str


class ErrorResponse(BaseModel):
    detail: str


@router.post(
    "/subscriptions",
    response_model=SubscribeResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid email or name"},
        500: {"model": ErrorResponse, "description": "Storage or email failure"},
    },
    summary="Subscribe to the newsletter",
)
def subscribe(
    email: Annotated[str, Form()],
    name: Annotated[str, Form()],
    store: SQLiteSubscriberStore = Depends(get_subscriber_store),
    email_sender: EmailPort = Depends(get_email_sender),
    config: SubscriptionConfig = Depends(get_subscription_config),
) -> SubscribeResponse:
    """
    Start double opt-in.

    Repeating the request while pending re-sends the same link; an address
    that is already confirmed gets a success response and no email.
    """
    run_subscribe(
        SubscribeInput(email=email, name=name),
        store=store,
        email_sender=email_sender,
        config=config,
    )
    return SubscribeResponse(
        success=True,
        message="Please check your inbox to confirm your subscription.",
    )


@router.get(
    "/subscriptions/confirm",
    response_model=ConfirmResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Malformed or missing token"},
        401: {"model": ErrorResponse, "description": "Unknown token"},
        500: {"model": ErrorResponse, "description": "Storage failure"},
    },
    summary="Confirm a subscription",
)
def confirm(
    subscription_token: Annotated[str, Query()],
    store: SQLiteSubscriberStore = Depends(get_subscriber_store),
) -> ConfirmResponse:
    run_confirm(ConfirmInput(subscription_token=subscription_token), store=store)
    return ConfirmResponse(success=True, message="Your subscription is confirmed.")
