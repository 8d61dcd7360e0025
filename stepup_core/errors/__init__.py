"""
Adapter Errors
==============
Error taxonomy, stable error codes and error-response mapping.
"""

from .codes import ErrorCode
from .exceptions import (
    DataAdapterError,
    InputValidationError,
    UserNotFoundError,
    InvalidOperationContextError,
    AuthenticationFailedError,
    SmsAuthorizationFailedError,
    RemoteCommunicationError,
    DeliveryFailedError,
)
from .responses import ErrorResponse, to_error_response, HTTP_STATUS_BY_CODE

__all__ = [
    # Codes
    "ErrorCode",
    # Exceptions
    "DataAdapterError",
    "InputValidationError",
    "UserNotFoundError",
    "InvalidOperationContextError",
    "AuthenticationFailedError",
    "SmsAuthorizationFailedError",
    "RemoteCommunicationError",
    "DeliveryFailedError",
    # Responses
    "ErrorResponse",
    "to_error_response",
    "HTTP_STATUS_BY_CODE",
]
