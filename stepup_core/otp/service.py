"""
OTP Lifecycle Service
=====================
Issuance and verification of operation-bound OTP codes.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional

import structlog

from stepup_core.config import AdapterConfig, get_config
from stepup_core.delivery import DeliveryChannel, LoggingDeliveryChannel
from stepup_core.errors import DeliveryFailedError
from stepup_core.operation import OperationContext
from stepup_core.storage.base import OTPRecordNotFound, OTPRecordStore

from .composer import MessageComposer
from .digest import codes_match
from .generator import CodeGenerator
from .models import OTPRecord, VerificationFailureReason, VerificationResult


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class OTPLifecycleService:
    """
    Issues OTP records and verifies submitted codes against them.

    Holds no mutable state besides its read-only configuration; all record
    changes go through the store's atomic ``update``.
    """

    def __init__(
        self,
        store: OTPRecordStore,
        delivery: Optional[DeliveryChannel] = None,
        generator: Optional[CodeGenerator] = None,
        composer: Optional[MessageComposer] = None,
        config: Optional[AdapterConfig] = None,
        clock: Callable[[], datetime] = utc_now,
        logger: Optional[Any] = None,
    ):
        self.store = store
        self.delivery = delivery or LoggingDeliveryChannel()
        self.generator = generator or CodeGenerator()
        self.composer = composer or MessageComposer()
        self.config = config or get_config()
        self.clock = clock
        self.logger = logger or structlog.get_logger(__name__)

    @property
    def ttl(self) -> timedelta:
        return timedelta(seconds=self.config.sms_otp_expiration_time)

    @property
    def max_tries(self) -> int:
        return self.config.sms_otp_max_verify_tries_per_message

    async def issue(
        self,
        user_id: str,
        organization_id: Optional[str],
        context: OperationContext,
        lang: Optional[str] = None,
    ) -> OTPRecord:
        """
        Issue an OTP for an operation and hand it to the delivery channel.

        Args:
            user_id: User the OTP is issued for
            organization_id: Organization of the user
            context: Operation the code is bound to
            lang: Language of the message text

        Returns:
            The persisted record

        Raises:
            InvalidOperationContextError: For unsupported or incomplete operations
            DeliveryFailedError: If delivery failed; the record stays persisted
                and is available as ``error.record``
            RemoteCommunicationError: If the store is unavailable
        """
        message_id = str(uuid.uuid4())
        authorization_code = self.generator.generate_for(context)
        message_text = self.composer.compose(
            context, authorization_code, lang or self.config.default_lang
        )

        now = self.clock()
        record = OTPRecord(
            message_id=message_id,
            operation_id=context.id,
            user_id=user_id,
            organization_id=organization_id,
            operation_name=context.name,
            authorization_code=authorization_code.code,
            salt=authorization_code.salt,
            message_text=message_text,
            created_at=now,
            expires_at=now + self.ttl,
        )
        await self.store.save(record)

        self.logger.info(
            "OTP issued",
            message_id=message_id,
            operation_id=context.id,
            operation_name=context.name,
            expires_at=record.expires_at.isoformat(),
        )

        try:
            await self.delivery.send(user_id, message_text, context)
        except DeliveryFailedError as e:
            e.record = record
            self.logger.warning(
                "OTP delivery failed",
                message_id=message_id,
                operation_id=context.id,
                error=str(e),
            )
            raise

        return record

    async def verify(
        self,
        message_id: str,
        authorization_code: Optional[str],
        combined_with_password: bool = False,
    ) -> VerificationResult:
        """
        Verify a submitted code.

        Every call against an existing record consumes one attempt, whatever
        the outcome.

        Args:
            message_id: Record to verify against
            authorization_code: Code submitted by the user
            combined_with_password: Code was submitted together with a
                password; a wrong code is then reported as a generic
                authentication failure

        Returns:
            VerificationResult

        Raises:
            RemoteCommunicationError: If the store is unavailable
        """
        def evaluate(record: OTPRecord) -> VerificationResult:
            return self._evaluate(record, authorization_code, combined_with_password)

        try:
            result = await self.store.update(message_id, evaluate)
        except OTPRecordNotFound:
            result = VerificationResult.failed(VerificationFailureReason.INVALID_MESSAGE)

        if result.success:
            self.logger.info("OTP verified", message_id=message_id)
        else:
            self.logger.warning(
                "OTP verification failed",
                message_id=message_id,
                reason=result.reason.value,
                remaining_attempts=result.remaining_attempts,
                combined=combined_with_password,
            )
        return result

    def _evaluate(
        self,
        record: OTPRecord,
        submitted_code: Optional[str],
        combined_with_password: bool,
    ) -> VerificationResult:
        record.verify_request_count += 1
        remaining = record.remaining_attempts(self.max_tries)

        if not record.authorization_code:
            return VerificationResult.failed(VerificationFailureReason.INVALID_CODE, remaining)

        now = self.clock()
        if record.is_expired(now):
            return VerificationResult.failed(VerificationFailureReason.EXPIRED)

        if record.verified and not combined_with_password:
            return VerificationResult.failed(VerificationFailureReason.ALREADY_VERIFIED)

        if record.verify_request_count > self.max_tries:
            return VerificationResult.failed(VerificationFailureReason.MAX_ATTEMPTS_EXCEEDED)

        if not codes_match(submitted_code or "", record.authorization_code):
            if combined_with_password:
                # Same failure as a wrong password: the caller must not learn which factor failed.
                return VerificationResult.failed(
                    VerificationFailureReason.AUTHENTICATION_FAILED, remaining
                )
            return VerificationResult.failed(VerificationFailureReason.OTP_INVALID, remaining)

        if not record.verified:
            record.verified = True
            record.verified_at = now
        return VerificationResult.succeeded()
