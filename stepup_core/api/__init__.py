"""
HTTP API
========
FastAPI boundary around the OTP lifecycle and primary authentication.
"""

from .app import create_app, create_app_from_config
from .routes import sms_router, user_router

__all__ = [
    "create_app",
    "create_app_from_config",
    "sms_router",
    "user_router",
]
