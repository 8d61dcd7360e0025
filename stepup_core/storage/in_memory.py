"""
In-Memory Record Store
======================
Process-local OTP record store for development and testing.
"""

import asyncio
from dataclasses import replace
from typing import Callable, Dict, Optional, TypeVar

from stepup_core.otp.models import OTPRecord

from .base import OTPRecordNotFound, OTPRecordStore

T = TypeVar("T")


class InMemoryOTPRecordStore(OTPRecordStore):
    """
    Dictionary-backed store with one lock per message ID.

    For development and testing only.
    Use SqlAlchemyOTPRecordStore in production.
    """

    def __init__(self):
        self._records: Dict[str, OTPRecord] = {}
        self._locks: Dict[str, asyncio.Lock] = {}

    def _lock(self, message_id: str) -> asyncio.Lock:
        lock = self._locks.get(message_id)
        if lock is None:
            lock = self._locks[message_id] = asyncio.Lock()
        return lock

    async def save(self, record: OTPRecord) -> None:
        async with self._lock(record.message_id):
            self._records[record.message_id] = replace(record)

    async def find_by_id(self, message_id: str) -> Optional[OTPRecord]:
        record = self._records.get(message_id)
        return replace(record) if record is not None else None

    async def update(self, message_id: str, mutate: Callable[[OTPRecord], T]) -> T:
        if message_id not in self._records:
            raise OTPRecordNotFound(message_id)

        async with self._lock(message_id):
            working = replace(self._records[message_id])
            result = mutate(working)
            self._records[message_id] = working
            return result

    def __len__(self) -> int:
        return len(self._records)
