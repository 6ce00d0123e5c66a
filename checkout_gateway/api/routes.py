"""
API routes for checkout sessions and Stripe webhooks.
"""
from typing import Any, Dict, Optional

import structlog
from fastapi import APIRouter, Depends, Header, HTTPException, Request, Response, status
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from checkout_gateway.config import get_settings
from checkout_gateway.core.checkout import CheckoutSessionBuilder
from checkout_gateway.core.models import PaymentSessionRequest, PaymentSessionResult
from checkout_gateway.core.webhooks import WebhookReceiver, WebhookSignatureError

from .dependencies import get_session_builder, get_webhook_receiver
from .schemas import HealthCheckResponse, RedirectLandingResponse, WebhookAckResponse

logger = structlog.get_logger(__name__)

payment_router = APIRouter(prefix="/payments", tags=["payments"])
monitoring_router = APIRouter(tags=["monitoring"])


@payment_router.post(
    "/create-payment-session",
    response_model=PaymentSessionResult,
    summary="Create a checkout session",
    description="Create a Stripe-hosted checkout session for an order",
)
def create_payment_session(
    request: PaymentSessionRequest,
    builder: CheckoutSessionBuilder = Depends(get_session_builder),
) -> PaymentSessionResult:
    """
    Create a checkout session.

    Stripe errors are not handled here and surface through the global
    exception handler.
    """
    logger.info(
        "api_create_payment_session_request",
        order_id=request.order_id,
        currency=request.currency,
    )
    return builder.create_payment_session(request)


@payment_router.get(
    "/success",
    response_model=RedirectLandingResponse,
    summary="Checkout success landing",
)
async def payment_success() -> Dict[str, Any]:
    return {"ok": True, "message": "Payment successful"}


@payment_router.get(
    "/cancel",
    response_model=RedirectLandingResponse,
    summary="Checkout cancel landing",
)
async def payment_cancel() -> Dict[str, Any]:
    return {"ok": False, "message": "Payment cancelled"}


@payment_router.post(
    "/webhook",
    response_model=WebhookAckResponse,
    summary="Stripe webhook endpoint",
    description="Verify and relay Stripe webhook events",
)
async def stripe_webhook(
    request: Request,
    stripe_signature: Optional[str] = Header(default=None, alias="stripe-signature"),
    receiver: WebhookReceiver = Depends(get_webhook_receiver),
) -> Dict[str, Any]:
    """
    Handle Stripe webhook events.

    Only signature verification failures return a non-200 status.
    """
    body = await request.body()

    try:
        result = receiver.handle(body, stripe_signature)
    except WebhookSignatureError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Webhook Error: {e.reason}",
        )

    logger.info(
        "api_webhook_handled",
        event_id=result.event_id,
        event_type=result.event_type,
        dispatched=result.dispatched,
    )

    return {"received": True}


@monitoring_router.get(
    "/health",
    response_model=HealthCheckResponse,
    summary="Health check",
    description="Liveness check for the gateway process",
)
async def health() -> Dict[str, Any]:
    """Health check endpoint for monitoring."""
    settings = get_settings()
    return {
        "status": "healthy",
        "checks": {
            "event_publisher": settings.event_publisher,
            "stripe_test_mode": settings.is_test_mode,
        },
    }


@monitoring_router.get(
    "/metrics",
    summary="Prometheus metrics",
    description="Expose Prometheus metrics",
    include_in_schema=False,
)
async def prometheus_metrics() -> Response:
    """Expose Prometheus metrics."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
