"""
Operation Registry
==================
Closed table of supported operation kinds.

Each kind declares the form fields its authorization code is bound to and
the message template its OTP text is rendered from. Adding an operation is
a single ``OperationKind`` entry.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Tuple

from stepup_core.errors import InvalidOperationContextError


class FieldSelector(str, Enum):
    """Fields that can be extracted from an operation."""
    AMOUNT = "amount"
    ACCOUNT = "account"


@dataclass(frozen=True)
class OperationKind:
    """A supported operation."""
    name: str
    fields: Tuple[FieldSelector, ...] = ()

    @property
    def template_key(self) -> str:
        return f"{self.name}.smsText"


LOGIN = OperationKind(name="login")
AUTHORIZE_PAYMENT = OperationKind(
    name="authorize_payment",
    fields=(FieldSelector.AMOUNT, FieldSelector.ACCOUNT),
)


class OperationRegistry:
    """Lookup of operation kinds by operation name."""

    def __init__(self, kinds: Iterable[OperationKind]):
        self._kinds: Dict[str, OperationKind] = {kind.name: kind for kind in kinds}

    def get(self, operation_name: str) -> OperationKind:
        """
        Get the kind for an operation name.

        Raises:
            InvalidOperationContextError: If the operation is not supported
        """
        kind = self._kinds.get(operation_name)
        if kind is None:
            raise InvalidOperationContextError(f"Unsupported operation: {operation_name}")
        return kind

    def __contains__(self, operation_name: str) -> bool:
        return operation_name in self._kinds

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(self._kinds)


DEFAULT_REGISTRY = OperationRegistry([LOGIN, AUTHORIZE_PAYMENT])
