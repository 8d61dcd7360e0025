"""
Combined Step-Up Authentication
===============================
Password and OTP submitted together, failing with one generic error.
"""

from typing import Any, Optional

import structlog

from stepup_core.errors import AuthenticationFailedError
from stepup_core.operation import OperationContext
from stepup_core.otp.service import OTPLifecycleService

from .authenticator import AUTHENTICATION_FAILED, PrimaryAuthenticator
from .models import UserDetail


class StepUpAuthenticator:
    """
    Checks both factors and reports any failure as AUTHENTICATION_FAILED.

    The OTP is always verified (consuming an attempt) before the password
    outcome is known, so brute force cannot be split per factor.
    """

    def __init__(
        self,
        authenticator: PrimaryAuthenticator,
        otp_service: OTPLifecycleService,
        logger: Optional[Any] = None,
    ):
        self.authenticator = authenticator
        self.otp_service = otp_service
        self.logger = logger or structlog.get_logger(__name__)

    async def authenticate_combined(
        self,
        username: str,
        password: str,
        message_id: str,
        authorization_code: str,
        context: Optional[OperationContext] = None,
    ) -> UserDetail:
        """
        Authenticate with password and OTP.

        Returns:
            UserDetail of the authenticated user

        Raises:
            AuthenticationFailedError: If either factor failed
        """
        otp_result = await self.otp_service.verify(
            message_id, authorization_code, combined_with_password=True
        )

        user: Optional[UserDetail] = None
        password_remaining: Optional[int] = None
        try:
            user = await self.authenticator.authenticate(username, password, context)
        except AuthenticationFailedError as e:
            password_remaining = e.remaining_attempts

        if user is not None and otp_result.success:
            return user

        hints = [
            value for value in (otp_result.remaining_attempts, password_remaining)
            if value is not None
        ]
        remaining = min(hints) if hints else None
        self.logger.warning(
            "Combined authentication failed",
            message_id=message_id,
            operation_id=context.id if context else None,
            remaining_attempts=remaining,
        )
        raise AuthenticationFailedError(AUTHENTICATION_FAILED, remaining_attempts=remaining)
