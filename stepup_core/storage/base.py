"""
OTP Record Store
================
Persistence interface for OTP records.
"""

from abc import ABC, abstractmethod
from typing import Callable, Optional, TypeVar

from stepup_core.otp.models import OTPRecord

T = TypeVar("T")


class OTPRecordNotFound(LookupError):
    """Raised when no record exists for a message ID."""

    def __init__(self, message_id: str):
        self.message_id = message_id
        super().__init__(f"OTP record not found: {message_id}")


class OTPRecordStore(ABC):
    """
    Abstract OTP record store.

    After creation, records change only through ``update``, which must be
    atomic per message ID: concurrent updates of one record are serialized
    and never lose a change.
    """

    @abstractmethod
    async def save(self, record: OTPRecord) -> None:
        """Persist a new or replaced record."""

    @abstractmethod
    async def find_by_id(self, message_id: str) -> Optional[OTPRecord]:
        """Get a copy of a record, or None."""

    @abstractmethod
    async def update(self, message_id: str, mutate: Callable[[OTPRecord], T]) -> T:
        """
        Atomically load, mutate and persist a record.

        Args:
            message_id: Record key
            mutate: Called with the current record; changes it in place.
                Its return value is returned. The record is persisted even
                when the returned value describes a failure.

        Returns:
            Value returned by ``mutate``

        Raises:
            OTPRecordNotFound: If the record does not exist
        """
