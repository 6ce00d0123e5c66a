"""External integrations for the checkout gateway."""
from .publishers import (
    AmqpEventPublisher,
    EventPublisher,
    LoggingEventPublisher,
    get_event_publisher,
)
from .stripe_client import StripeClient

__all__ = [
    "AmqpEventPublisher",
    "EventPublisher",
    "LoggingEventPublisher",
    "StripeClient",
    "get_event_publisher",
]
