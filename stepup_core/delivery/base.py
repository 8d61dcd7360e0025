"""
Delivery Channels
=================
Hands composed OTP messages to the out-of-band delivery system.
"""

from abc import ABC, abstractmethod
from typing import Awaitable, Callable

import structlog

from stepup_core.errors import DeliveryFailedError
from stepup_core.operation import OperationContext

logger = structlog.get_logger(__name__)


class DeliveryChannel(ABC):
    """
    Abstract delivery channel.

    Implementations raise DeliveryFailedError when the message could not
    be handed over.
    """

    name: str = "base"

    @abstractmethod
    async def send(self, user_id: str, message_text: str, context: OperationContext) -> None:
        """
        Deliver an OTP message to a user.

        Args:
            user_id: Recipient user
            message_text: Composed message including the code
            context: Operation the message belongs to
        """


class LoggingDeliveryChannel(DeliveryChannel):
    """Logs the hand-over without sending anything. For development."""

    name = "logging"

    async def send(self, user_id: str, message_text: str, context: OperationContext) -> None:
        logger.info(
            "OTP message handed over",
            channel=self.name,
            user_id=user_id,
            operation_id=context.id,
            message_length=len(message_text),
        )


class CallableDeliveryChannel(DeliveryChannel):
    """Adapts an async callable ``(user_id, message_text, context)``."""

    name = "callable"

    def __init__(self, func: Callable[[str, str, OperationContext], Awaitable[None]]):
        self.func = func

    async def send(self, user_id: str, message_text: str, context: OperationContext) -> None:
        try:
            await self.func(user_id, message_text, context)
        except DeliveryFailedError:
            raise
        except Exception as e:
            raise DeliveryFailedError(f"Message delivery failed: {e}") from e
