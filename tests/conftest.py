"""
Pytest configuration and fixtures.
"""
import hashlib
import hmac
import json
import os
import time
from typing import Any, AsyncGenerator, Callable, Dict, List, Optional, Tuple
from unittest.mock import MagicMock

# Settings are read at import time by the application module.
os.environ.setdefault("STRIPE_SECRET_KEY", "sk_test_fake_key_for_testing")
os.environ.setdefault("STRIPE_ENDPOINT_SECRET", "whsec_test_fake_secret")
os.environ.setdefault("STRIPE_SUCCESS_URL", "http://localhost:3003/payments/success")
os.environ.setdefault("STRIPE_CANCEL_URL", "http://localhost:3003/payments/cancel")
os.environ.setdefault("EVENT_PUBLISHER", "log")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from checkout_gateway.api.dependencies import get_session_builder, get_webhook_receiver
from checkout_gateway.api.main import app
from checkout_gateway.config import Settings
from checkout_gateway.core.checkout import CheckoutSessionBuilder
from checkout_gateway.core.webhooks import WebhookReceiver
from checkout_gateway.integrations.stripe_client import StripeClient

WEBHOOK_SECRET = "whsec_test_fake_secret"


def pytest_configure(config: Any) -> None:
    config.addinivalue_line("markers", "unit: fast tests without network access")
    config.addinivalue_line("markers", "integration: tests that exercise the HTTP app")


class RecordingPublisher:
    """Event publisher that keeps every published event in memory."""

    def __init__(self) -> None:
        self.events: List[Tuple[str, Dict[str, Any]]] = []
        self.closed = False

    def publish(self, topic: str, payload: Dict[str, Any]) -> None:
        self.events.append((topic, payload))

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings."""
    return Settings(
        stripe_secret_key="sk_test_fake_key_for_testing",
        stripe_endpoint_secret=WEBHOOK_SECRET,
        stripe_success_url="https://shop.test/payments/success",
        stripe_cancel_url="https://shop.test/payments/cancel",
        app_name="checkout-gateway-test",
        app_env="test",
        log_level="DEBUG",
        debug=True,
    )


@pytest.fixture
def stripe_session() -> MagicMock:
    """Checkout session as returned by the Stripe SDK."""
    session = MagicMock()
    session.id = "cs_test_123"
    session.url = "https://checkout.stripe.com/c/pay/cs_test_123"
    session.success_url = "https://shop.test/payments/success"
    session.cancel_url = "https://shop.test/payments/cancel"
    return session


@pytest.fixture
def mock_stripe_client(stripe_session: MagicMock) -> MagicMock:
    client = MagicMock(spec=StripeClient)
    client.create_checkout_session.return_value = stripe_session
    return client


@pytest.fixture
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture
def session_builder(mock_stripe_client: MagicMock, test_settings: Settings) -> CheckoutSessionBuilder:
    return CheckoutSessionBuilder(mock_stripe_client, test_settings)


@pytest.fixture
def webhook_receiver(publisher: RecordingPublisher, test_settings: Settings) -> WebhookReceiver:
    return WebhookReceiver(publisher, test_settings)


@pytest.fixture
def sign_payload() -> Callable[..., Tuple[bytes, str]]:
    """
    Serialize an event and sign it with Stripe's webhook scheme.

    Returns the raw body and the matching Stripe-Signature header.
    """

    def _sign(
        event: Dict[str, Any],
        secret: str = WEBHOOK_SECRET,
        timestamp: Optional[int] = None,
    ) -> Tuple[bytes, str]:
        body = json.dumps(event)
        ts = int(time.time()) if timestamp is None else timestamp
        signature = hmac.new(
            secret.encode("utf-8"),
            f"{ts}.{body}".encode("utf-8"),
            hashlib.sha256,
        ).hexdigest()
        return body.encode("utf-8"), f"t={ts},v1={signature}"

    return _sign


@pytest.fixture
def charge_succeeded_event() -> Dict[str, Any]:
    """Sample charge.succeeded event."""
    return {
        "id": "evt_test_1",
        "object": "event",
        "type": "charge.succeeded",
        "data": {
            "object": {
                "id": "ch_1",
                "object": "charge",
                "amount": 2000,
                "currency": "usd",
                "metadata": {"orderId": "X"},
                "receipt_url": "https://r",
            }
        },
    }


@pytest.fixture
def sample_session_request() -> Dict[str, Any]:
    """Sample create-payment-session body."""
    return {
        "currency": "usd",
        "items": [
            {"name": "Keyboard", "price": 49.99, "quantity": 1},
            {"name": "Mouse", "price": 19.5, "quantity": 2},
        ],
        "orderId": "order_123",
    }


@pytest_asyncio.fixture
async def client(
    session_builder: CheckoutSessionBuilder,
    webhook_receiver: WebhookReceiver,
) -> AsyncGenerator[AsyncClient, Any]:
    """Create test HTTP client with Stripe and the publisher replaced."""
    app.dependency_overrides[get_session_builder] = lambda: session_builder
    app.dependency_overrides[get_webhook_receiver] = lambda: webhook_receiver

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
