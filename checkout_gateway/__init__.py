"""
Checkout gateway.

Creates Stripe Checkout sessions for orders and relays verified Stripe
webhook notifications to the rest of the system.
"""

__version__ = "1.0.0"
