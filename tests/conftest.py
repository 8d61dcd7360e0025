"""
Shared fixtures for stepup-core tests.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from stepup_core.config import AdapterConfig
from stepup_core.delivery import CallableDeliveryChannel
from stepup_core.operation import (
    AmountAttribute,
    FormData,
    KeyValueAttribute,
    OperationContext,
)
from stepup_core.otp.service import OTPLifecycleService
from stepup_core.storage import InMemoryOTPRecordStore


class FakeClock:
    """Controllable UTC clock."""

    def __init__(self, start: datetime = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


def make_payment_context(
    amount="100.00",
    currency="CZK",
    account="CZ4012340000000012345678",
    operation_id="op-payment-1",
) -> OperationContext:
    return OperationContext(
        id=operation_id,
        name="authorize_payment",
        form_data=FormData(
            title="Payment",
            parameters=(
                AmountAttribute(
                    id="operation.amount",
                    amount=Decimal(amount) if amount is not None else None,
                    currency=currency,
                ),
                KeyValueAttribute(id="operation.account", value=account),
            ),
        ),
    )


@pytest.fixture
def payment_context() -> OperationContext:
    return make_payment_context()


@pytest.fixture
def login_context() -> OperationContext:
    return OperationContext(id="op-login-1", name="login")


@pytest.fixture
def config() -> AdapterConfig:
    return AdapterConfig(
        sms_otp_expiration_time=300,
        sms_otp_max_verify_tries_per_message=2,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> InMemoryOTPRecordStore:
    return InMemoryOTPRecordStore()


@pytest.fixture
def sent_messages() -> list:
    return []


@pytest.fixture
def delivery(sent_messages) -> CallableDeliveryChannel:
    async def _send(user_id, message_text, context):
        sent_messages.append((user_id, message_text, context.id))

    return CallableDeliveryChannel(_send)


@pytest.fixture
def service(store, delivery, config, clock) -> OTPLifecycleService:
    return OTPLifecycleService(store=store, delivery=delivery, config=config, clock=clock)


@pytest.fixture
def fast_hasher():
    from stepup_core.auth import build_hasher

    return build_hasher(time_cost=1, memory_cost=8, parallelism=1)
