"""
Operation Context
=================
Operation data model, supported operation kinds and value extraction.
"""

from .models import (
    AMOUNT_ATTRIBUTE_ID,
    ACCOUNT_ATTRIBUTE_ID,
    AttributeType,
    AmountAttribute,
    KeyValueAttribute,
    Attribute,
    FormData,
    OperationContext,
)
from .registry import (
    FieldSelector,
    OperationKind,
    OperationRegistry,
    LOGIN,
    AUTHORIZE_PAYMENT,
    DEFAULT_REGISTRY,
)
from .extraction import OperationValueExtractor, plain_amount
from .validation import validate_issuance_request

__all__ = [
    # Models
    "AMOUNT_ATTRIBUTE_ID",
    "ACCOUNT_ATTRIBUTE_ID",
    "AttributeType",
    "AmountAttribute",
    "KeyValueAttribute",
    "Attribute",
    "FormData",
    "OperationContext",
    # Registry
    "FieldSelector",
    "OperationKind",
    "OperationRegistry",
    "LOGIN",
    "AUTHORIZE_PAYMENT",
    "DEFAULT_REGISTRY",
    # Extraction
    "OperationValueExtractor",
    "plain_amount",
    # Validation
    "validate_issuance_request",
]
