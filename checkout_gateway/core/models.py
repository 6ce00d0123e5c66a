"""
Pydantic models shared by the checkout and webhook flows.

Field aliases follow the camelCase wire format used by the order service.
"""
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LineItem(BaseModel):
    """A single product line in a checkout request."""

    name: str = Field(..., min_length=1, description="Product name shown on the checkout page")
    price: Decimal = Field(..., ge=0, description="Unit price in major currency units")
    quantity: int = Field(..., gt=0, description="Number of units")


class PaymentSessionRequest(BaseModel):
    """Request for a hosted checkout session."""

    currency: str = Field(..., min_length=3, max_length=3, description="Currency code (e.g., usd)")
    items: List[LineItem] = Field(..., min_length=1, description="Ordered line items")
    order_id: str = Field(..., alias="orderId", min_length=1, description="Order identifier")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "currency": "usd",
                    "items": [
                        {"name": "Keyboard", "price": 49.99, "quantity": 1},
                        {"name": "Mouse", "price": 19.5, "quantity": 2},
                    ],
                    "orderId": "0f8fad5b-d9cb-469f-a165-70867728950e",
                }
            ]
        },
    )

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, v: str) -> str:
        """Stripe expects lowercase ISO codes."""
        return v.lower()


class PaymentSessionResult(BaseModel):
    """URLs returned by Stripe for a created checkout session."""

    cancel_url: Optional[str] = Field(default=None, alias="cancelUrl")
    success_url: Optional[str] = Field(default=None, alias="successUrl")
    url: Optional[str] = Field(default=None, description="Hosted checkout page")

    model_config = ConfigDict(populate_by_name=True)


class PaymentSucceeded(BaseModel):
    """Payload forwarded downstream for a successful charge."""

    stripe_payment_id: str = Field(..., alias="stripePaymentId")
    order_id: Optional[str] = Field(default=None, alias="orderId")
    receipt_url: Optional[str] = Field(default=None, alias="receiptUrl")

    model_config = ConfigDict(populate_by_name=True)


class WebhookResult(BaseModel):
    """Outcome of handling one verified webhook delivery."""

    event_id: Optional[str] = None
    event_type: str
    dispatched: bool = False
