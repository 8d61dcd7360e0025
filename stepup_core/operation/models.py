"""
Operation Models
================
Read-only view of the operation (transaction) an OTP is bound to.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple, Union

AMOUNT_ATTRIBUTE_ID = "operation.amount"
ACCOUNT_ATTRIBUTE_ID = "operation.account"


class AttributeType(str, Enum):
    """Form data attribute types."""
    AMOUNT = "AMOUNT"
    KEY_VALUE = "KEY_VALUE"


@dataclass(frozen=True)
class AmountAttribute:
    """Amount with currency."""
    id: str
    amount: Optional[Decimal]
    currency: Optional[str]
    label: Optional[str] = None
    type: AttributeType = field(default=AttributeType.AMOUNT, init=False)


@dataclass(frozen=True)
class KeyValueAttribute:
    """Plain string value, e.g. destination account."""
    id: str
    value: Optional[str]
    label: Optional[str] = None
    type: AttributeType = field(default=AttributeType.KEY_VALUE, init=False)


Attribute = Union[AmountAttribute, KeyValueAttribute]


@dataclass(frozen=True)
class FormData:
    """Ordered list of operation attributes."""
    title: Optional[str] = None
    summary: Optional[str] = None
    parameters: Tuple[Attribute, ...] = ()

    def find(self, attribute_id: str) -> Optional[Attribute]:
        """Get the first attribute with the given id."""
        for attribute in self.parameters:
            if attribute.id == attribute_id:
                return attribute
        return None


@dataclass(frozen=True)
class OperationContext:
    """An operation as created by the upstream workflow."""
    id: str
    name: str
    form_data: FormData = field(default_factory=FormData)
