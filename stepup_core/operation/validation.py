"""
Issuance Request Validation
===========================
Field-level validation of OTP issuance requests.
"""

from decimal import Decimal
from typing import List, Optional

from stepup_core.errors import InputValidationError, InvalidOperationContextError

from .extraction import OperationValueExtractor
from .models import AMOUNT_ATTRIBUTE_ID, OperationContext
from .registry import FieldSelector

MAX_USER_ID_LENGTH = 30
MAX_ORGANIZATION_ID_LENGTH = 256
MAX_OPERATION_NAME_LENGTH = 32


def _check_text(
    errors: List[str],
    value: Optional[str],
    prefix: str,
    max_length: int,
) -> None:
    if value is None or not value.strip():
        errors.append(f"{prefix}.empty")
    elif len(value) > max_length:
        errors.append(f"{prefix}.long")


def validate_issuance_request(
    user_id: Optional[str],
    organization_id: Optional[str],
    context: Optional[OperationContext],
    extractor: Optional[OperationValueExtractor] = None,
) -> None:
    """
    Validate an OTP issuance request.

    Args:
        user_id: User the OTP is issued for
        organization_id: Organization of the user
        context: Operation the OTP is bound to
        extractor: Extractor used for operation fields

    Raises:
        InputValidationError: With all collected validation error keys
        InvalidOperationContextError: If the operation is not supported
    """
    extractor = extractor or OperationValueExtractor()
    errors: List[str] = []

    if context is None:
        raise InputValidationError(["operationContext.missing"])

    _check_text(errors, user_id, "smsAuthorization.userId", MAX_USER_ID_LENGTH)
    _check_text(
        errors, organization_id, "smsAuthorization.organizationId", MAX_ORGANIZATION_ID_LENGTH
    )
    _check_text(
        errors, context.name, "smsAuthorization.operationName", MAX_OPERATION_NAME_LENGTH
    )

    if context.name and context.name.strip():
        kind = extractor.registry.get(context.name)
        if FieldSelector.AMOUNT in kind.fields:
            errors.extend(_amount_errors(context))
        if FieldSelector.ACCOUNT in kind.fields:
            errors.extend(_account_errors(context, extractor))

    if errors:
        raise InputValidationError(errors)


def _amount_errors(context: OperationContext) -> List[str]:
    errors: List[str] = []
    attribute = context.form_data.find(AMOUNT_ATTRIBUTE_ID)
    amount = getattr(attribute, "amount", None)

    if not isinstance(amount, Decimal):
        errors.append("smsAuthorization.amount.empty")
    elif not amount.is_finite() or amount <= 0:
        errors.append("smsAuthorization.amount.invalid")

    if attribute is not None and not getattr(attribute, "currency", None):
        errors.append("smsAuthorization.currency.empty")
    return errors


def _account_errors(context: OperationContext, extractor: OperationValueExtractor) -> List[str]:
    try:
        extractor.get_account(context)
    except InvalidOperationContextError:
        return ["smsAuthorization.account.empty"]
    return []
