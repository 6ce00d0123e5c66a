"""
Prometheus metrics for checkout gateway monitoring.

Tracks:
- Checkout sessions created by currency and outcome
- Stripe API call counts and durations
- Webhook deliveries by event type and outcome
- Published events by topic and outcome
"""
from prometheus_client import Counter, Histogram

# Checkout metrics
checkout_sessions_total = Counter(
    "checkout_sessions_total",
    "Total checkout session creation attempts",
    ["currency", "status"],  # status: created, failed
)

checkout_line_items = Histogram(
    "checkout_line_items",
    "Number of line items per checkout session",
    buckets=(1, 2, 3, 5, 10, 20, 50),
)

# Stripe API metrics
stripe_api_requests_total = Counter(
    "stripe_api_requests_total",
    "Total Stripe API requests",
    ["operation", "status"],
)

stripe_api_duration_seconds = Histogram(
    "stripe_api_duration_seconds",
    "Stripe API call duration in seconds",
    ["operation"],
    buckets=(0.1, 0.25, 0.5, 0.75, 1.0, 2.5, 5.0, 7.5, 10.0),
)

# Webhook metrics
webhook_events_received_total = Counter(
    "webhook_events_received_total",
    "Total verified webhook events received",
    ["event_type"],
)

webhook_events_processed_total = Counter(
    "webhook_events_processed_total",
    "Total webhook events processed",
    ["event_type", "status"],  # dispatched, ignored
)

webhook_signature_failures_total = Counter(
    "webhook_signature_failures_total",
    "Total webhook deliveries rejected by signature verification",
)

webhook_processing_duration_seconds = Histogram(
    "webhook_processing_duration_seconds",
    "Webhook processing duration in seconds",
    ["event_type"],
    buckets=(0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0),
)

# Event publishing metrics
events_published_total = Counter(
    "events_published_total",
    "Total events handed to the event publisher",
    ["topic", "status"],  # sent, failed
)


class MetricsCollector:
    """Helper class for collecting metrics."""

    @staticmethod
    def record_checkout_session(currency: str, status: str, line_items: int) -> None:
        """Record a checkout session creation attempt."""
        checkout_sessions_total.labels(currency=currency, status=status).inc()
        checkout_line_items.observe(line_items)

    @staticmethod
    def record_stripe_api_call(
        operation: str, status: str, duration_seconds: float
    ) -> None:
        """Record Stripe API call."""
        stripe_api_requests_total.labels(operation=operation, status=status).inc()
        stripe_api_duration_seconds.labels(operation=operation).observe(duration_seconds)

    @staticmethod
    def record_webhook_event(event_type: str, status: str, duration_seconds: float) -> None:
        """Record webhook event processing."""
        webhook_events_received_total.labels(event_type=event_type).inc()
        webhook_events_processed_total.labels(event_type=event_type, status=status).inc()
        webhook_processing_duration_seconds.labels(event_type=event_type).observe(
            duration_seconds
        )

    @staticmethod
    def record_webhook_signature_failure() -> None:
        """Record a rejected webhook delivery."""
        webhook_signature_failures_total.inc()

    @staticmethod
    def record_event_published(topic: str, status: str) -> None:
        """Record an event publish outcome."""
        events_published_total.labels(topic=topic, status=status).inc()


# Export singleton instance
metrics = MetricsCollector()
