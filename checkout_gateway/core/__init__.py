"""Core checkout and webhook logic."""
from .checkout import CheckoutSessionBuilder, build_line_items, to_minor_units
from .models import (
    LineItem,
    PaymentSessionRequest,
    PaymentSessionResult,
    PaymentSucceeded,
    WebhookResult,
)
from .webhooks import WebhookReceiver, WebhookSignatureError

__all__ = [
    "CheckoutSessionBuilder",
    "LineItem",
    "PaymentSessionRequest",
    "PaymentSessionResult",
    "PaymentSucceeded",
    "WebhookReceiver",
    "WebhookResult",
    "WebhookSignatureError",
    "build_line_items",
    "to_minor_units",
]
