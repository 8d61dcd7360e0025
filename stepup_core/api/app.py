"""
API Application
===============
FastAPI application factory with error mapping.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from stepup_core.auth import (
    InMemoryUserDirectory,
    PasswordAuthenticator,
    PrimaryAuthenticator,
    UserDirectory,
)
from stepup_core.config import AdapterConfig, get_config
from stepup_core.database import (
    close_engine,
    create_async_engine,
    create_schema,
    create_session_factory,
)
from stepup_core.delivery import DeliveryChannel
from stepup_core.errors import DataAdapterError, InputValidationError, to_error_response
from stepup_core.logging_config import configure_logging
from stepup_core.otp.service import OTPLifecycleService
from stepup_core.storage import SqlAlchemyOTPRecordStore

from .routes import sms_router, user_router
from .schemas import error


def _error_json(exc: BaseException) -> JSONResponse:
    status_code, response = to_error_response(exc)
    return JSONResponse(status_code=status_code, content=error(response.to_dict()))


async def handle_adapter_error(request: Request, exc: DataAdapterError) -> JSONResponse:
    return _error_json(exc)


async def handle_request_validation_error(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    keys = []
    for item in exc.errors():
        location = [str(part) for part in item.get("loc", ()) if part != "body"]
        keys.append(".".join(location + ["invalid"]))
    return _error_json(InputValidationError(keys))


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    return _error_json(exc)


def create_app(
    otp_service: OTPLifecycleService,
    authenticator: PrimaryAuthenticator,
    title: str = "Step-up Authentication Adapter",
    lifespan=None,
) -> FastAPI:
    """
    Create the HTTP application.

    Args:
        otp_service: OTP lifecycle service
        authenticator: Primary authentication backend
        title: OpenAPI title
        lifespan: Optional FastAPI lifespan context

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(title=title, lifespan=lifespan)
    app.state.otp_service = otp_service
    app.state.authenticator = authenticator

    app.include_router(sms_router)
    app.include_router(user_router)

    app.add_exception_handler(DataAdapterError, handle_adapter_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
    return app


def create_app_from_config(
    config: Optional[AdapterConfig] = None,
    directory: Optional[UserDirectory] = None,
    delivery: Optional[DeliveryChannel] = None,
) -> FastAPI:
    """
    Build the application with all collaborators wired from configuration.

    Configures logging, creates the database engine and the SQL record
    store, and applies the password failure budget. The schema is created
    on startup and the engine disposed on shutdown.

    Args:
        config: Adapter configuration (defaults to the environment)
        directory: User directory for password checks
        delivery: Delivery channel for OTP messages

    Returns:
        Configured FastAPI app
    """
    config = config or get_config()
    configure_logging(config.service_name, level=config.log_level, json_output=config.log_json)

    engine = create_async_engine(config.database_url)
    store = SqlAlchemyOTPRecordStore(create_session_factory(engine))
    otp_service = OTPLifecycleService(store=store, delivery=delivery, config=config)
    authenticator = PasswordAuthenticator(
        directory or InMemoryUserDirectory(),
        max_failed_attempts=config.auth_max_failed_attempts,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        await create_schema(engine)
        yield
        await close_engine(engine)

    app = create_app(otp_service, authenticator, title=config.service_name, lifespan=lifespan)
    app.state.engine = engine
    return app
