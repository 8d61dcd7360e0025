"""
OTP Models
==========
Authorization codes, persisted OTP records and verification outcomes.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from stepup_core.errors import AuthenticationFailedError, SmsAuthorizationFailedError


@dataclass(frozen=True)
class AuthorizationCode:
    """OTP code with the salt used to derive it."""
    code: str
    salt: bytes

    def __repr__(self) -> str:
        return f"AuthorizationCode(code='***', salt=<{len(self.salt)} bytes>)"


@dataclass
class OTPRecord:
    """A persisted OTP issuance."""
    message_id: str
    operation_id: str
    user_id: str
    organization_id: Optional[str]
    operation_name: str
    authorization_code: str
    salt: bytes
    message_text: str
    created_at: datetime
    expires_at: datetime
    verify_request_count: int = 0
    verified_at: Optional[datetime] = None
    verified: bool = False

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at

    def remaining_attempts(self, max_tries: int) -> int:
        return max_tries - self.verify_request_count


class VerificationFailureReason(str, Enum):
    """Why a verification attempt failed. Values are stable message keys."""
    INVALID_MESSAGE = "smsAuthorization.invalidMessage"
    INVALID_CODE = "smsAuthorization.invalidCode"
    EXPIRED = "smsAuthorization.expired"
    ALREADY_VERIFIED = "smsAuthorization.alreadyVerified"
    MAX_ATTEMPTS_EXCEEDED = "smsAuthorization.maxAttemptsExceeded"
    OTP_INVALID = "smsAuthorization.failed"
    AUTHENTICATION_FAILED = "login.authenticationFailed"


@dataclass(frozen=True)
class VerificationResult:
    """Outcome of a single verification attempt."""
    success: bool
    reason: Optional[VerificationFailureReason] = None
    remaining_attempts: Optional[int] = None

    @classmethod
    def succeeded(cls) -> "VerificationResult":
        return cls(success=True)

    @classmethod
    def failed(
        cls,
        reason: VerificationFailureReason,
        remaining_attempts: Optional[int] = None,
    ) -> "VerificationResult":
        return cls(success=False, reason=reason, remaining_attempts=remaining_attempts)

    def raise_for_failure(self) -> None:
        """
        Raise the matching exception if verification failed.

        Raises:
            AuthenticationFailedError: For the masked combined-mode failure
            SmsAuthorizationFailedError: For any other failure
        """
        if self.success:
            return
        if self.reason is VerificationFailureReason.AUTHENTICATION_FAILED:
            raise AuthenticationFailedError(self.reason.value, self.remaining_attempts)
        raise SmsAuthorizationFailedError(self.reason.value, self.remaining_attempts)
