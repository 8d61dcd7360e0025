"""
OTP Record Storage
==================
Record store interface with in-memory and SQLAlchemy implementations.
"""

from .base import OTPRecordStore, OTPRecordNotFound
from .in_memory import InMemoryOTPRecordStore
from .sql import SqlAlchemyOTPRecordStore, SmsAuthorizationRow

__all__ = [
    "OTPRecordStore",
    "OTPRecordNotFound",
    "InMemoryOTPRecordStore",
    "SqlAlchemyOTPRecordStore",
    "SmsAuthorizationRow",
]
