"""
Step-up Core Library
====================
Operation-bound OTP issuance and verification with primary
authentication for step-up flows.
"""

__version__ = "0.1.0"

# Config
from stepup_core.config import AdapterConfig, get_config

# Errors
from stepup_core.errors import (
    ErrorCode,
    DataAdapterError,
    InputValidationError,
    UserNotFoundError,
    InvalidOperationContextError,
    AuthenticationFailedError,
    SmsAuthorizationFailedError,
    RemoteCommunicationError,
    DeliveryFailedError,
    ErrorResponse,
    to_error_response,
)

# Operation
from stepup_core.operation import (
    AmountAttribute,
    KeyValueAttribute,
    FormData,
    OperationContext,
    FieldSelector,
    OperationKind,
    OperationRegistry,
    OperationValueExtractor,
    validate_issuance_request,
)

# OTP
from stepup_core.otp import (
    AuthorizationCode,
    OTPRecord,
    VerificationFailureReason,
    VerificationResult,
    CodeGenerator,
    MessageCatalog,
    MessageComposer,
)
from stepup_core.otp.service import OTPLifecycleService

# Storage
from stepup_core.storage import (
    OTPRecordStore,
    OTPRecordNotFound,
    InMemoryOTPRecordStore,
    SqlAlchemyOTPRecordStore,
)

# Delivery
from stepup_core.delivery import (
    DeliveryChannel,
    LoggingDeliveryChannel,
    CallableDeliveryChannel,
)

# Authentication
from stepup_core.auth import (
    UserDetail,
    UserRecord,
    PrimaryAuthenticator,
    PasswordAuthenticator,
    InMemoryUserDirectory,
    StepUpAuthenticator,
)

__all__ = [
    # Config
    "AdapterConfig",
    "get_config",
    # Errors
    "ErrorCode",
    "DataAdapterError",
    "InputValidationError",
    "UserNotFoundError",
    "InvalidOperationContextError",
    "AuthenticationFailedError",
    "SmsAuthorizationFailedError",
    "RemoteCommunicationError",
    "DeliveryFailedError",
    "ErrorResponse",
    "to_error_response",
    # Operation
    "AmountAttribute",
    "KeyValueAttribute",
    "FormData",
    "OperationContext",
    "FieldSelector",
    "OperationKind",
    "OperationRegistry",
    "OperationValueExtractor",
    "validate_issuance_request",
    # OTP
    "AuthorizationCode",
    "OTPRecord",
    "VerificationFailureReason",
    "VerificationResult",
    "CodeGenerator",
    "MessageCatalog",
    "MessageComposer",
    "OTPLifecycleService",
    # Storage
    "OTPRecordStore",
    "OTPRecordNotFound",
    "InMemoryOTPRecordStore",
    "SqlAlchemyOTPRecordStore",
    # Delivery
    "DeliveryChannel",
    "LoggingDeliveryChannel",
    "CallableDeliveryChannel",
    # Authentication
    "UserDetail",
    "UserRecord",
    "PrimaryAuthenticator",
    "PasswordAuthenticator",
    "InMemoryUserDirectory",
    "StepUpAuthenticator",
]
