"""
Checkout session builder.

Turns an order description into a Stripe-hosted checkout session and returns
the redirect URLs Stripe hands back.
"""
import time
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional, Sequence, Union

import stripe
import structlog

from checkout_gateway.config import Settings, get_settings
from checkout_gateway.integrations.stripe_client import StripeClient
from checkout_gateway.monitoring.metrics import metrics

from .models import LineItem, PaymentSessionRequest, PaymentSessionResult

logger = structlog.get_logger(__name__)

ORDER_ID_METADATA_KEY = "orderId"


def to_minor_units(price: Union[Decimal, int, float, str]) -> int:
    """
    Convert a major-unit price to Stripe's integer minor units.

    Rounds ``price * 100`` to the nearest integer, halves away from zero.
    ``to_minor_units(Decimal("10.005")) == 1001``.

    Raises:
        ValueError: If the price is negative
    """
    amount = price if isinstance(price, Decimal) else Decimal(str(price))
    if amount < 0:
        raise ValueError(f"Price must be non-negative, got {amount}")
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def build_line_items(currency: str, items: Sequence[LineItem]) -> List[Dict[str, Any]]:
    """Map request items to Stripe ``line_items`` with inline price data."""
    return [
        {
            "price_data": {
                "currency": currency,
                "product_data": {"name": item.name},
                "unit_amount": to_minor_units(item.price),
            },
            "quantity": item.quantity,
        }
        for item in items
    ]


class CheckoutSessionBuilder:
    """Creates one-time payment checkout sessions tagged with the order id."""

    def __init__(
        self,
        stripe_client: Optional[StripeClient] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.stripe_client = stripe_client or StripeClient(self.settings)

    def create_payment_session(self, request: PaymentSessionRequest) -> PaymentSessionResult:
        """
        Create a hosted checkout session for an order.

        The order id is attached both to the session and to the underlying
        PaymentIntent, so the resulting charge carries it back in
        ``charge.succeeded``.

        Args:
            request: Currency, line items and order id

        Returns:
            PaymentSessionResult: Stripe's cancel, success and checkout URLs

        Raises:
            stripe.StripeError: Propagated unchanged; nothing is retried
        """
        start_time = time.time()
        metadata = {ORDER_ID_METADATA_KEY: request.order_id}

        logger.info(
            "creating_payment_session",
            order_id=request.order_id,
            currency=request.currency,
            items=len(request.items),
        )

        try:
            session = self.stripe_client.create_checkout_session(
                line_items=build_line_items(request.currency, request.items),
                mode="payment",
                success_url=self.settings.stripe_success_url,
                cancel_url=self.settings.stripe_cancel_url,
                metadata=metadata,
                payment_intent_data={"metadata": metadata},
            )
        except stripe.StripeError:
            metrics.record_checkout_session(request.currency, "failed", len(request.items))
            raise

        metrics.record_checkout_session(request.currency, "created", len(request.items))
        logger.info(
            "payment_session_created",
            order_id=request.order_id,
            session_id=session.id,
            duration_seconds=time.time() - start_time,
        )

        return PaymentSessionResult(
            cancel_url=session.cancel_url,
            success_url=session.success_url,
            url=session.url,
        )
