"""
SQLAlchemy Record Store
=======================
Relational OTP record store with row-level locking.
"""

import asyncio
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncGenerator, Callable, Optional, TypeVar

from sqlalchemy import Boolean, DateTime, Integer, LargeBinary, String, Text, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import Mapped, mapped_column
import structlog

from stepup_core.database import Base, session_scope
from stepup_core.errors import RemoteCommunicationError
from stepup_core.otp.models import OTPRecord

from .base import OTPRecordNotFound, OTPRecordStore

logger = structlog.get_logger(__name__)

T = TypeVar("T")


def _aware(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite returns naive datetimes; all stored values are UTC.
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SmsAuthorizationRow(Base):
    """Database row of an OTP record."""

    __tablename__ = "da_sms_authorization"

    message_id: Mapped[str] = mapped_column(String(256), primary_key=True)
    operation_id: Mapped[str] = mapped_column(String(256), nullable=False, index=True)
    user_id: Mapped[str] = mapped_column(String(256), nullable=False)
    organization_id: Mapped[Optional[str]] = mapped_column(String(256), nullable=True)
    operation_name: Mapped[str] = mapped_column(String(32), nullable=False)
    authorization_code: Mapped[str] = mapped_column(String(32), nullable=False)
    salt: Mapped[bytes] = mapped_column(LargeBinary(16), nullable=False)
    message_text: Mapped[str] = mapped_column(Text, nullable=False)
    verify_request_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    timestamp_created: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    timestamp_expires: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    timestamp_verified: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    @classmethod
    def from_record(cls, record: OTPRecord) -> "SmsAuthorizationRow":
        row = cls(message_id=record.message_id)
        row.apply(record)
        return row

    def apply(self, record: OTPRecord) -> None:
        """Copy record state onto the row."""
        self.operation_id = record.operation_id
        self.user_id = record.user_id
        self.organization_id = record.organization_id
        self.operation_name = record.operation_name
        self.authorization_code = record.authorization_code
        self.salt = record.salt
        self.message_text = record.message_text
        self.verify_request_count = record.verify_request_count
        self.verified = record.verified
        self.timestamp_created = record.created_at
        self.timestamp_expires = record.expires_at
        self.timestamp_verified = record.verified_at

    def to_record(self) -> OTPRecord:
        return OTPRecord(
            message_id=self.message_id,
            operation_id=self.operation_id,
            user_id=self.user_id,
            organization_id=self.organization_id,
            operation_name=self.operation_name,
            authorization_code=self.authorization_code,
            salt=self.salt,
            message_text=self.message_text,
            verify_request_count=self.verify_request_count,
            verified=self.verified,
            created_at=_aware(self.timestamp_created),
            expires_at=_aware(self.timestamp_expires),
            verified_at=_aware(self.timestamp_verified),
        )


class SqlAlchemyOTPRecordStore(OTPRecordStore):
    """
    OTP record store backed by an async SQLAlchemy engine.

    ``update`` locks the row with SELECT ... FOR UPDATE for the duration
    of the transaction. On SQLite, engines from ``create_async_engine``
    take the write lock at BEGIN instead.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    @asynccontextmanager
    async def _session(self) -> AsyncGenerator[AsyncSession, None]:
        try:
            async with session_scope(self._session_factory) as session:
                yield session
        except (SQLAlchemyError, OSError, TimeoutError, asyncio.TimeoutError) as e:
            logger.error("OTP record store unavailable", error=str(e))
            raise RemoteCommunicationError(
                "OTP record store unavailable", service="database", details=str(e)
            ) from e

    async def save(self, record: OTPRecord) -> None:
        async with self._session() as session:
            await session.merge(SmsAuthorizationRow.from_record(record))

    async def find_by_id(self, message_id: str) -> Optional[OTPRecord]:
        async with self._session() as session:
            row = await session.get(SmsAuthorizationRow, message_id)
            return row.to_record() if row is not None else None

    async def update(self, message_id: str, mutate: Callable[[OTPRecord], T]) -> T:
        async with self._session() as session:
            statement = (
                select(SmsAuthorizationRow)
                .where(SmsAuthorizationRow.message_id == message_id)
                .with_for_update()
            )
            row = (await session.execute(statement)).scalar_one_or_none()
            if row is None:
                raise OTPRecordNotFound(message_id)

            record = row.to_record()
            result = mutate(record)
            row.apply(record)
            return result
