"""
Subscription component.

Create-or-reuse-token workflow for subscribe requests.
"""

from newsdesk.components.subscription.component import (
    build_confirmation_url,
    parse_new_subscriber,
    render_confirmation_email,
    resolve_subscription_token,
    run_subscribe,
    send_confirmation_email,
)
from newsdesk.components.subscription.models import (
    SubscribeInput,
    SubscribeOutput,
    SubscriptionConfig,
)
from newsdesk.components.subscription.ports import (
    ConfirmationEmailSenderPort,
    SubscriptionStorePort,
)

__all__ = [
    # Component
    "run_subscribe",
    # Functions
    "build_confirmation_url",
    "parse_new_subscriber",
    "render_confirmation_email",
    "resolve_subscription_token",
    "send_confirmation_email",
    # Models
    "SubscribeInput",
    "SubscribeOutput",
    "SubscriptionConfig",
    # Ports
    "ConfirmationEmailSenderPort",
    "SubscriptionStorePort",
]
