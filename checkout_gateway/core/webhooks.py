"""
Stripe webhook receiver.

Verifies the ``Stripe-Signature`` header against the raw request body and
forwards ``charge.succeeded`` events to the injected event publisher. Every
other event type is acknowledged without side effects.

There is no deduplication: a replayed delivery with a valid signature is
dispatched again.
"""
import json
import time
from typing import Any, Dict, Optional

import stripe
import structlog

from checkout_gateway.config import Settings, get_settings
from checkout_gateway.integrations.publishers import EventPublisher
from checkout_gateway.monitoring.metrics import metrics

from .checkout import ORDER_ID_METADATA_KEY
from .models import PaymentSucceeded, WebhookResult

logger = structlog.get_logger(__name__)

CHARGE_SUCCEEDED = "charge.succeeded"


class WebhookSignatureError(Exception):
    """Raised when a webhook delivery fails signature verification."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class WebhookReceiver:
    """Verifies Stripe webhook deliveries and dispatches them."""

    def __init__(
        self,
        publisher: EventPublisher,
        settings: Optional[Settings] = None,
        endpoint_secret: Optional[str] = None,
    ) -> None:
        """
        Initialize webhook receiver.

        Args:
            publisher: Side-effect strategy for successful charges
            settings: Optional settings (loaded from the environment if omitted)
            endpoint_secret: Optional signing secret (uses config if not provided)
        """
        self.settings = settings or get_settings()
        self.publisher = publisher
        self.endpoint_secret = endpoint_secret or self.settings.stripe_endpoint_secret
        self.tolerance = self.settings.stripe_webhook_tolerance

    def verify_signature(self, payload: bytes, signature: Optional[str]) -> Dict[str, Any]:
        """
        Verify a delivery and decode its event.

        Args:
            payload: Raw request body as bytes
            signature: Stripe-Signature header value

        Returns:
            Dict[str, Any]: Decoded Stripe event

        Raises:
            WebhookSignatureError: If the header, signature, timestamp or body is invalid
        """
        try:
            body = payload.decode("utf-8")
            stripe.WebhookSignature.verify_header(
                body, signature or "", self.endpoint_secret, self.tolerance
            )
            event = json.loads(body)
        except stripe.SignatureVerificationError as e:
            metrics.record_webhook_signature_failure()
            logger.warning("webhook_signature_invalid", error=str(e))
            raise WebhookSignatureError(str(e)) from e
        except ValueError as e:
            metrics.record_webhook_signature_failure()
            logger.warning("webhook_payload_invalid", error=str(e))
            raise WebhookSignatureError(f"Invalid payload: {e}") from e

        if not isinstance(event, dict) or "type" not in event:
            metrics.record_webhook_signature_failure()
            logger.warning("webhook_payload_invalid", error="missing event type")
            raise WebhookSignatureError("Invalid payload: missing event type")

        return event

    def handle(self, payload: bytes, signature: Optional[str]) -> WebhookResult:
        """
        Verify and dispatch one webhook delivery.

        Args:
            payload: Raw request body as bytes
            signature: Stripe-Signature header value

        Returns:
            WebhookResult: Event id, type and whether anything was dispatched

        Raises:
            WebhookSignatureError: If verification fails; nothing is dispatched
        """
        start_time = time.time()
        event = self.verify_signature(payload, signature)
        event_id = event.get("id")
        event_type = event["type"]

        logger.info("webhook_event_received", event_id=event_id, event_type=event_type)

        dispatched = False
        if event_type == CHARGE_SUCCEEDED:
            data = event.get("data") or {}
            charge = data.get("object") if isinstance(data, dict) else None
            if isinstance(charge, dict) and isinstance(charge.get("id"), str):
                self.dispatch_charge_succeeded(charge)
                dispatched = True
            else:
                # No charge id: acknowledged without dispatch.
                logger.warning("webhook_charge_missing_id", event_id=event_id)
        else:
            logger.info("webhook_event_unhandled", event_id=event_id, event_type=event_type)

        metrics.record_webhook_event(
            event_type, "dispatched" if dispatched else "ignored", time.time() - start_time
        )

        return WebhookResult(event_id=event_id, event_type=event_type, dispatched=dispatched)

    def dispatch_charge_succeeded(self, charge: Dict[str, Any]) -> Dict[str, Any]:
        """
        Forward a succeeded charge to the publisher.

        Args:
            charge: Stripe Charge object data

        Returns:
            Dict[str, Any]: The payload handed to the publisher
        """
        metadata = charge.get("metadata")
        if not isinstance(metadata, dict):
            metadata = {}
        payload = PaymentSucceeded(
            stripe_payment_id=charge["id"],
            order_id=metadata.get(ORDER_ID_METADATA_KEY),
            receipt_url=charge.get("receipt_url"),
        ).model_dump(by_alias=True)

        topic = self.settings.payment_succeeded_topic
        logger.info(
            "charge_succeeded",
            stripe_payment_id=payload["stripePaymentId"],
            order_id=payload["orderId"],
            topic=topic,
        )
        self.publisher.publish(topic, payload)

        return payload
