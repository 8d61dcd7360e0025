"""
API Schemas
===========
Request and response models of the HTTP boundary.

Payloads are wrapped: ``{"requestObject": {...}}`` in, and
``{"status": "OK" | "ERROR", "responseObject": ...}`` out.
"""

from decimal import Decimal
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from stepup_core.operation import (
    AmountAttribute,
    Attribute,
    AttributeType,
    FormData,
    KeyValueAttribute,
    OperationContext,
)

T = TypeVar("T")


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AttributeModel(CamelModel):
    type: AttributeType
    id: str
    label: Optional[str] = None
    amount: Optional[Decimal] = None
    currency: Optional[str] = None
    value: Optional[str] = None

    def to_attribute(self) -> Attribute:
        if self.type is AttributeType.AMOUNT:
            return AmountAttribute(
                id=self.id, amount=self.amount, currency=self.currency, label=self.label
            )
        return KeyValueAttribute(id=self.id, value=self.value, label=self.label)


class FormDataModel(CamelModel):
    title: Optional[str] = None
    summary: Optional[str] = None
    parameters: List[AttributeModel] = Field(default_factory=list)


class OperationContextModel(CamelModel):
    id: str
    name: Optional[str] = None
    form_data: FormDataModel = Field(default_factory=FormDataModel)

    def to_context(self) -> OperationContext:
        return OperationContext(
            id=self.id,
            name=self.name or "",
            form_data=FormData(
                title=self.form_data.title,
                summary=self.form_data.summary,
                parameters=tuple(p.to_attribute() for p in self.form_data.parameters),
            ),
        )


class ObjectRequest(CamelModel, Generic[T]):
    request_object: T


class CreateSmsAuthorizationRequest(CamelModel):
    user_id: Optional[str] = None
    organization_id: Optional[str] = None
    operation_context: Optional[OperationContextModel] = None
    lang: Optional[str] = None


class VerifySmsAuthorizationRequest(CamelModel):
    message_id: str
    authorization_code: Optional[str] = None
    operation_context: Optional[OperationContextModel] = None
    sms_and_password_combined: bool = False


class AuthenticationRequest(CamelModel):
    username: str
    password: str
    operation_context: Optional[OperationContextModel] = None


class UserDetailRequest(CamelModel):
    id: str


def ok(response_object: Any = None) -> Dict[str, Any]:
    """Successful response envelope."""
    return {"status": "OK", "responseObject": response_object}


def error(response_object: Dict[str, Any]) -> Dict[str, Any]:
    """Error response envelope."""
    return {"status": "ERROR", "responseObject": response_object}
