"""
Operation Value Extraction
==========================
Reads typed values out of an operation's form data.
"""

from decimal import Decimal
from typing import List, Optional, Union

from stepup_core.errors import InvalidOperationContextError

from .models import (
    ACCOUNT_ATTRIBUTE_ID,
    AMOUNT_ATTRIBUTE_ID,
    AmountAttribute,
    KeyValueAttribute,
    OperationContext,
)
from .registry import DEFAULT_REGISTRY, FieldSelector, OperationRegistry


def plain_amount(amount: Decimal) -> str:
    """Render an amount without exponent, keeping its scale ("100.00")."""
    return format(amount, "f")


class OperationValueExtractor:
    """Extracts the fields an operation kind is bound to. Stateless."""

    def __init__(self, registry: Optional[OperationRegistry] = None):
        self.registry = registry or DEFAULT_REGISTRY

    def extract(
        self,
        context: OperationContext,
        selector: FieldSelector,
    ) -> Union[AmountAttribute, str]:
        """
        Extract a single field.

        Args:
            context: Operation context
            selector: Field to extract

        Returns:
            AmountAttribute for AMOUNT, account string for ACCOUNT

        Raises:
            InvalidOperationContextError: If the operation is unsupported, the
                selector is not declared for it, or the value is missing or
                malformed
        """
        kind = self.registry.get(context.name)
        if selector not in kind.fields:
            raise InvalidOperationContextError(
                f"Field {selector.value} is not supported for operation: {context.name}"
            )
        if selector is FieldSelector.AMOUNT:
            return self.get_amount(context)
        return self.get_account(context)

    def get_amount(self, context: OperationContext) -> AmountAttribute:
        attribute = context.form_data.find(AMOUNT_ATTRIBUTE_ID)
        if not isinstance(attribute, AmountAttribute):
            raise InvalidOperationContextError("Missing amount in operation form data")
        if not isinstance(attribute.amount, Decimal) or not attribute.amount.is_finite():
            raise InvalidOperationContextError("Invalid amount in operation form data")
        if not attribute.currency:
            raise InvalidOperationContextError("Missing currency in operation form data")
        return attribute

    def get_account(self, context: OperationContext) -> str:
        attribute = context.form_data.find(ACCOUNT_ATTRIBUTE_ID)
        if not isinstance(attribute, KeyValueAttribute) or not attribute.value:
            raise InvalidOperationContextError("Missing account in operation form data")
        return attribute.value

    def items(self, context: OperationContext) -> List[str]:
        """
        Render all fields of the operation kind in declaration order.

        Amount renders as two items: plain amount and currency.
        """
        kind = self.registry.get(context.name)
        rendered: List[str] = []
        for selector in kind.fields:
            value = self.extract(context, selector)
            if isinstance(value, AmountAttribute):
                rendered.append(plain_amount(value.amount))
                rendered.append(value.currency)
            else:
                rendered.append(value)
        return rendered
