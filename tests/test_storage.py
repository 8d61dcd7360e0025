"""
Tests for OTP record stores.
"""

from datetime import timedelta

import pytest

from stepup_core.database import (
    close_engine,
    create_async_engine,
    create_schema,
    create_session_factory,
)
from stepup_core.errors import RemoteCommunicationError
from stepup_core.otp import OTPRecord, VerificationFailureReason
from stepup_core.otp.service import OTPLifecycleService
from stepup_core.storage import (
    InMemoryOTPRecordStore,
    OTPRecordNotFound,
    SqlAlchemyOTPRecordStore,
)


def make_record(clock, message_id="msg-1") -> OTPRecord:
    return OTPRecord(
        message_id=message_id,
        operation_id="op-1",
        user_id="user-1",
        organization_id="RETAIL",
        operation_name="login",
        authorization_code="12345678",
        salt=b"\x01" * 16,
        message_text="Authorization code for login: 12345678",
        created_at=clock.now,
        expires_at=clock.now + timedelta(seconds=300),
    )


@pytest.fixture
async def sql_store(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'stepup.db'}")
    await create_schema(engine)
    yield SqlAlchemyOTPRecordStore(create_session_factory(engine))
    await close_engine(engine)


class TestInMemoryStore:
    """Tests for InMemoryOTPRecordStore."""

    async def test_returns_copies(self, clock):
        """Should not leak mutable references."""
        store = InMemoryOTPRecordStore()
        record = make_record(clock)
        await store.save(record)

        record.verify_request_count = 99
        found = await store.find_by_id("msg-1")
        found.verified = True

        stored = await store.find_by_id("msg-1")
        assert stored.verify_request_count == 0
        assert stored.verified is False

    async def test_update_unknown(self):
        """Should raise OTPRecordNotFound."""
        store = InMemoryOTPRecordStore()

        with pytest.raises(OTPRecordNotFound):
            await store.update("missing", lambda r: None)

        assert len(store) == 0


class TestSqlAlchemyStore:
    """Tests for SqlAlchemyOTPRecordStore on SQLite."""

    async def test_save_and_find(self, sql_store, clock):
        """Should round-trip all record fields."""
        record = make_record(clock)
        await sql_store.save(record)

        found = await sql_store.find_by_id("msg-1")

        assert found == record
        assert found.created_at.tzinfo is not None

    async def test_find_missing(self, sql_store):
        """Should return None for unknown IDs."""
        assert await sql_store.find_by_id("missing") is None

    async def test_update_persists_mutation(self, sql_store, clock):
        """Should persist changes and return the mutator result."""
        await sql_store.save(make_record(clock))

        def mutate(record):
            record.verify_request_count += 1
            record.verified = True
            record.verified_at = clock.now
            return "done"

        result = await sql_store.update("msg-1", mutate)

        assert result == "done"
        found = await sql_store.find_by_id("msg-1")
        assert found.verify_request_count == 1
        assert found.verified is True
        assert found.verified_at == clock.now

    async def test_update_unknown(self, sql_store):
        """Should raise OTPRecordNotFound, not a remote error."""
        with pytest.raises(OTPRecordNotFound):
            await sql_store.update("missing", lambda r: None)

    async def test_unavailable_database(self, tmp_path, clock):
        """Store failures surface as remote communication errors."""
        engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}")
        store = SqlAlchemyOTPRecordStore(create_session_factory(engine))

        with pytest.raises(RemoteCommunicationError) as exc_info:
            await store.find_by_id("msg-1")

        assert exc_info.value.service == "database"
        await close_engine(engine)

    async def test_lifecycle_on_sql_store(self, sql_store, config, clock, payment_context):
        """The lifecycle service works unchanged on the SQL store."""
        service = OTPLifecycleService(store=sql_store, config=config, clock=clock)
        record = await service.issue("user-1", "RETAIL", payment_context)

        wrong = await service.verify(record.message_id, "00000000")
        right = await service.verify(record.message_id, record.authorization_code)
        again = await service.verify(record.message_id, record.authorization_code)

        assert wrong.reason is VerificationFailureReason.OTP_INVALID
        assert right.success is True
        assert again.reason is VerificationFailureReason.ALREADY_VERIFIED
        stored = await sql_store.find_by_id(record.message_id)
        assert stored.verify_request_count == 3
        assert stored.verified_at == clock.now

    async def test_concurrent_verifications_on_sql_store(self, sql_store, clock, payment_context):
        """Concurrent attempts on one row are serialized: every one counts, one succeeds."""
        import asyncio

        from stepup_core.config import AdapterConfig

        service = OTPLifecycleService(
            store=sql_store,
            config=AdapterConfig(sms_otp_max_verify_tries_per_message=100),
            clock=clock,
        )
        record = await service.issue("user-1", "RETAIL", payment_context)

        results = await asyncio.gather(*[
            service.verify(record.message_id, record.authorization_code)
            for _ in range(20)
        ])

        stored = await sql_store.find_by_id(record.message_id)
        assert stored.verify_request_count == 20
        assert sum(1 for r in results if r.success) == 1
        assert sum(
            1 for r in results if r.reason is VerificationFailureReason.ALREADY_VERIFIED
        ) == 19

    async def test_timeout_maps_to_remote_error(self, clock):
        """Driver timeouts surface as remote communication errors."""
        import asyncio

        class TimingOutSession:
            async def __aenter__(self):
                raise asyncio.TimeoutError()

            async def __aexit__(self, *exc_info):
                return False

        store = SqlAlchemyOTPRecordStore(lambda: TimingOutSession())

        with pytest.raises(RemoteCommunicationError) as exc_info:
            await store.save(make_record(clock))

        assert exc_info.value.service == "database"
