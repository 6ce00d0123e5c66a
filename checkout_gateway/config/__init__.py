"""Configuration package for the checkout gateway."""
from .settings import get_settings, Settings

__all__ = ["Settings", "get_settings"]
