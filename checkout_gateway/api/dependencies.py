"""
FastAPI dependency providers.

Each provider is cached so the application shares one instance per process;
tests replace them through ``app.dependency_overrides``.
"""
from functools import lru_cache

from checkout_gateway.config import get_settings
from checkout_gateway.core.checkout import CheckoutSessionBuilder
from checkout_gateway.core.webhooks import WebhookReceiver
from checkout_gateway.integrations.publishers import EventPublisher, get_event_publisher
from checkout_gateway.integrations.stripe_client import StripeClient


@lru_cache()
def get_stripe_client() -> StripeClient:
    return StripeClient(get_settings())


@lru_cache()
def get_publisher() -> EventPublisher:
    return get_event_publisher(get_settings())


def get_session_builder() -> CheckoutSessionBuilder:
    return CheckoutSessionBuilder(get_stripe_client(), get_settings())


def get_webhook_receiver() -> WebhookReceiver:
    return WebhookReceiver(get_publisher(), get_settings())
