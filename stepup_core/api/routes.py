"""
API Routes
==========
OTP issuance/verification and primary authentication endpoints.
"""

import json
from decimal import Decimal
from typing import Any, Callable, Coroutine, Dict

from fastapi import APIRouter, Request, Response
from fastapi.routing import APIRoute
import structlog

from stepup_core.operation import validate_issuance_request

from .schemas import (
    AuthenticationRequest,
    CreateSmsAuthorizationRequest,
    ObjectRequest,
    UserDetailRequest,
    VerifySmsAuthorizationRequest,
    ok,
)

logger = structlog.get_logger(__name__)


class DecimalJSONRequest(Request):
    """Request whose JSON numbers with a fraction parse as Decimal."""

    async def json(self) -> Any:
        if not hasattr(self, "_json"):
            self._json = json.loads(await self.body(), parse_float=Decimal)
        return self._json


class DecimalJSONRoute(APIRoute):
    """Route parsing request bodies with DecimalJSONRequest, keeping amount scale."""

    def get_route_handler(self) -> Callable[[Request], Coroutine[Any, Any, Response]]:
        handler = super().get_route_handler()

        async def decimal_route_handler(request: Request) -> Response:
            return await handler(DecimalJSONRequest(request.scope, request.receive))

        return decimal_route_handler


sms_router = APIRouter(prefix="/api/auth/sms", tags=["sms"], route_class=DecimalJSONRoute)
user_router = APIRouter(prefix="/api/auth/user", tags=["user"], route_class=DecimalJSONRoute)


@sms_router.post("/create")
async def create_authorization_sms(
    body: ObjectRequest[CreateSmsAuthorizationRequest],
    request: Request,
) -> Dict[str, Any]:
    """Issue an OTP for an operation and send it to the user."""
    payload = body.request_object
    context = payload.operation_context.to_context() if payload.operation_context else None
    logger.info(
        "Received createAuthorizationSms request",
        operation_id=context.id if context else None,
    )

    service = request.app.state.otp_service
    validate_issuance_request(
        payload.user_id, payload.organization_id, context, service.generator.extractor
    )
    record = await service.issue(
        payload.user_id, payload.organization_id, context, payload.lang
    )

    logger.info("The createAuthorizationSms request succeeded", operation_id=context.id)
    return ok({"messageId": record.message_id})


@sms_router.post("/verify")
async def verify_authorization_sms(
    body: ObjectRequest[VerifySmsAuthorizationRequest],
    request: Request,
) -> Dict[str, Any]:
    """Verify an OTP code."""
    payload = body.request_object
    logger.info("Received verifyAuthorizationSms request", message_id=payload.message_id)

    result = await request.app.state.otp_service.verify(
        payload.message_id,
        payload.authorization_code,
        combined_with_password=payload.sms_and_password_combined,
    )
    result.raise_for_failure()

    logger.info("The verifyAuthorizationSms request succeeded", message_id=payload.message_id)
    return ok()


@user_router.post("/authenticate")
async def authenticate(
    body: ObjectRequest[AuthenticationRequest],
    request: Request,
) -> Dict[str, Any]:
    """Authenticate a user with username and password."""
    payload = body.request_object
    context = payload.operation_context.to_context() if payload.operation_context else None
    logger.info(
        "Received authenticate request",
        username=payload.username,
        operation_id=context.id if context else None,
    )

    user = await request.app.state.authenticator.authenticate(
        payload.username, payload.password, context
    )
    return ok({"userId": user.id})


@user_router.post("/info")
async def fetch_user_detail(
    body: ObjectRequest[UserDetailRequest],
    request: Request,
) -> Dict[str, Any]:
    """Get details of a user."""
    user_id = body.request_object.id
    logger.info("Received fetchUserDetail request", user_id=user_id)

    user = await request.app.state.authenticator.fetch_user_detail(user_id)
    return ok({
        "id": user.id,
        "givenName": user.given_name,
        "familyName": user.family_name,
        "organizationId": user.organization_id,
    })
