"""
Pydantic schemas for API responses that have no counterpart in the core models.
"""
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class WebhookAckResponse(BaseModel):
    """Response schema for an accepted webhook delivery."""

    received: bool = Field(default=True, description="Delivery was verified and handled")


class RedirectLandingResponse(BaseModel):
    """Response schema for the checkout success/cancel landing endpoints."""

    ok: bool = Field(..., description="Whether the checkout completed")
    message: str = Field(..., description="Status message")


class HealthCheckResponse(BaseModel):
    """Response schema for health checks."""

    status: str = Field(..., description="Overall health status (healthy/unhealthy)")
    checks: Optional[Dict[str, Any]] = Field(default=None, description="Individual service checks")
