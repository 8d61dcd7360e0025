"""
Adapter Exceptions
==================
Exception hierarchy for the step-up authentication adapter.
"""

from typing import Any, List, Optional

from .codes import ErrorCode


class DataAdapterError(Exception):
    """Base exception for all adapter errors."""

    code: ErrorCode = ErrorCode.ERROR_GENERIC
    retryable: bool = False

    def __init__(self, message: str, remaining_attempts: Optional[int] = None):
        self.message = message
        self.remaining_attempts = remaining_attempts
        super().__init__(message)


class InputValidationError(DataAdapterError):
    """Raised when request fields are missing or malformed."""

    code = ErrorCode.INPUT_INVALID

    def __init__(self, validation_errors: List[str], message: Optional[str] = None):
        self.validation_errors = list(validation_errors)
        super().__init__(message or " ".join(self.validation_errors))


class UserNotFoundError(DataAdapterError):
    """Raised when a user cannot be found."""

    code = ErrorCode.INPUT_INVALID


class InvalidOperationContextError(DataAdapterError):
    """Raised for unsupported operations or missing operation fields."""

    code = ErrorCode.OPERATION_CONTEXT_INVALID


class AuthenticationFailedError(DataAdapterError):
    """Raised when primary (or combined) authentication fails."""

    code = ErrorCode.AUTHENTICATION_FAILED


class SmsAuthorizationFailedError(DataAdapterError):
    """Raised when OTP verification fails."""

    code = ErrorCode.SMS_AUTHORIZATION_FAILED


class RemoteCommunicationError(DataAdapterError):
    """Raised when persistence, delivery or a backend is unavailable."""

    code = ErrorCode.REMOTE_ERROR
    retryable = True

    def __init__(self, message: str, service: str = "unknown", details: Any = None):
        self.service = service
        self.details = details
        super().__init__(message)

    def __str__(self) -> str:
        return f"[{self.service}] {self.message}"


class DeliveryFailedError(RemoteCommunicationError):
    """
    Raised when an OTP message could not be handed to the delivery channel.

    The OTP record is already persisted when this is raised and is
    available as ``record``.
    """

    def __init__(self, message: str, record: Any = None, details: Any = None):
        self.record = record
        super().__init__(message, service="delivery", details=details)
