"""
OTP Delivery
============
Delivery collaborator interface and built-in channels.
"""

from .base import DeliveryChannel, LoggingDeliveryChannel, CallableDeliveryChannel

__all__ = [
    "DeliveryChannel",
    "LoggingDeliveryChannel",
    "CallableDeliveryChannel",
]
