"""
Error Codes
===========
Stable error identifiers surfaced to callers.
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Error codes returned in error responses."""
    AUTHENTICATION_FAILED = "AUTHENTICATION_FAILED"
    SMS_AUTHORIZATION_FAILED = "SMS_AUTHORIZATION_FAILED"
    OPERATION_CONTEXT_INVALID = "OPERATION_CONTEXT_INVALID"
    INPUT_INVALID = "INPUT_INVALID"
    REMOTE_ERROR = "REMOTE_ERROR"
    ERROR_GENERIC = "ERROR_GENERIC"
