"""FastAPI application and routes."""
from .main import app
from .schemas import HealthCheckResponse, RedirectLandingResponse, WebhookAckResponse

__all__ = [
    "app",
    "HealthCheckResponse",
    "RedirectLandingResponse",
    "WebhookAckResponse",
]
