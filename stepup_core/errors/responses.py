"""
Error Responses
===============
Maps adapter exceptions to transport-neutral error responses.

CRITICAL: Never expose internal error details to callers. Unclassified
errors are logged with their traceback and reported as ERROR_GENERIC.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import structlog

from .codes import ErrorCode
from .exceptions import DataAdapterError, InputValidationError, RemoteCommunicationError

logger = structlog.get_logger(__name__)


GENERIC_MESSAGE = "error.unknown"
REMOTE_MESSAGE = "error.remote"

HTTP_STATUS_BY_CODE = {
    ErrorCode.INPUT_INVALID: 400,
    ErrorCode.OPERATION_CONTEXT_INVALID: 400,
    ErrorCode.AUTHENTICATION_FAILED: 401,
    ErrorCode.SMS_AUTHORIZATION_FAILED: 401,
    ErrorCode.REMOTE_ERROR: 500,
    ErrorCode.ERROR_GENERIC: 500,
}


@dataclass
class ErrorResponse:
    """Error returned to the caller."""
    code: ErrorCode
    message: str
    remaining_attempts: Optional[int] = None
    validation_errors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the wire representation."""
        data: Dict[str, Any] = {"code": self.code.value, "message": self.message}
        if self.remaining_attempts is not None:
            data["remainingAttempts"] = self.remaining_attempts
        if self.validation_errors:
            data["validationErrors"] = self.validation_errors
        return data


def to_error_response(exc: BaseException) -> Tuple[int, ErrorResponse]:
    """
    Build an error response for an exception.

    Args:
        exc: Exception raised while handling a request

    Returns:
        Tuple of (http_status, error_response)
    """
    if isinstance(exc, RemoteCommunicationError):
        logger.error(
            "Error occurred while communicating with remote system",
            service=exc.service,
            error=str(exc),
        )
        response = ErrorResponse(code=ErrorCode.REMOTE_ERROR, message=REMOTE_MESSAGE)
    elif isinstance(exc, InputValidationError):
        response = ErrorResponse(
            code=exc.code,
            message=exc.message,
            validation_errors=exc.validation_errors,
        )
    elif isinstance(exc, DataAdapterError):
        response = ErrorResponse(
            code=exc.code,
            message=exc.message,
            remaining_attempts=exc.remaining_attempts,
        )
    else:
        logger.error("Unexpected error", error_type=type(exc).__name__, exc_info=exc)
        response = ErrorResponse(code=ErrorCode.ERROR_GENERIC, message=GENERIC_MESSAGE)

    return HTTP_STATUS_BY_CODE[response.code], response
