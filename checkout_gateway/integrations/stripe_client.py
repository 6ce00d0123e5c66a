"""
Stripe API client.

Thin wrapper over the Stripe SDK that adds structured logging and metrics.
Errors raised by Stripe are logged and re-raised unchanged; there is no
retry layer.
"""
import time
from typing import Any, Dict, List, Optional

import stripe
import structlog

from checkout_gateway.config import Settings, get_settings
from checkout_gateway.monitoring.metrics import metrics

logger = structlog.get_logger(__name__)


class StripeClient:
    """Wrapper for the Stripe Checkout API."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        """
        Initialize Stripe client.

        Args:
            settings: Optional settings (loaded from the environment if omitted)
        """
        settings = settings or get_settings()
        stripe.api_key = settings.stripe_secret_key
        if settings.stripe_api_version:
            stripe.api_version = settings.stripe_api_version
        self.settings = settings

        logger.info(
            "stripe_client_initialized",
            api_version=settings.stripe_api_version,
            test_mode=settings.is_test_mode,
        )

    def create_checkout_session(
        self,
        line_items: List[Dict[str, Any]],
        success_url: str,
        cancel_url: str,
        mode: str = "payment",
        metadata: Optional[Dict[str, str]] = None,
        payment_intent_data: Optional[Dict[str, Any]] = None,
    ) -> stripe.checkout.Session:
        """
        Create a hosted Checkout Session.

        Args:
            line_items: Stripe line item dicts (price_data + quantity)
            success_url: Redirect target after a successful payment
            cancel_url: Redirect target when the customer cancels
            mode: Checkout mode ('payment' for one-time charges)
            metadata: Session metadata
            payment_intent_data: Extra data for the underlying PaymentIntent

        Returns:
            stripe.checkout.Session: Created session

        Raises:
            stripe.StripeError: Propagated unchanged from the SDK
        """
        logger.info(
            "creating_checkout_session",
            line_items=len(line_items),
            mode=mode,
        )

        params: Dict[str, Any] = {
            "line_items": line_items,
            "mode": mode,
            "success_url": success_url,
            "cancel_url": cancel_url,
        }
        if metadata:
            params["metadata"] = metadata
        if payment_intent_data:
            params["payment_intent_data"] = payment_intent_data

        start_time = time.time()
        try:
            session = stripe.checkout.Session.create(**params)
        except stripe.StripeError as e:
            metrics.record_stripe_api_call(
                "create_checkout_session", "error", time.time() - start_time
            )
            logger.error(
                "stripe_api_error",
                operation="create_checkout_session",
                error_type=type(e).__name__,
                error_code=getattr(e, "code", None),
                error_message=str(e),
            )
            raise

        metrics.record_stripe_api_call(
            "create_checkout_session", "success", time.time() - start_time
        )
        logger.info("checkout_session_created", session_id=session.id)

        return session
