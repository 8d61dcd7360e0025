"""
Tests for the HTTP API.
"""

import pytest
from fastapi.testclient import TestClient

from stepup_core.api import create_app
from stepup_core.auth import (
    InMemoryUserDirectory,
    PasswordAuthenticator,
    PrimaryAuthenticator,
    UserRecord,
    hash_password_sync,
)


PAYMENT_CONTEXT = {
    "id": "op-payment-1",
    "name": "authorize_payment",
    "formData": {
        "title": "Payment",
        "parameters": [
            {"type": "AMOUNT", "id": "operation.amount", "amount": "100.00", "currency": "CZK"},
            {"type": "KEY_VALUE", "id": "operation.account", "value": "CZ4012340000000012345678"},
        ],
    },
}


def sent_code(sent_messages) -> str:
    return sent_messages[-1][1].rsplit(" ", 1)[-1]


@pytest.fixture
def authenticator(fast_hasher):
    directory = InMemoryUserDirectory([
        UserRecord(
            user_id="user-1",
            username="alice",
            password_hash=hash_password_sync("correct horse", fast_hasher),
            given_name="Alice",
            family_name="Novak",
            organization_id="RETAIL",
        ),
    ])
    return PasswordAuthenticator(directory, max_failed_attempts=0, hasher=fast_hasher)


@pytest.fixture
def client(service, authenticator):
    with TestClient(create_app(service, authenticator)) as client:
        yield client


def create(client, **overrides):
    payload = {
        "userId": "user-1",
        "organizationId": "RETAIL",
        "operationContext": PAYMENT_CONTEXT,
        "lang": "en",
    }
    payload.update(overrides)
    return client.post("/api/auth/sms/create", json={"requestObject": payload})


def verify(client, message_id, code, combined=False):
    return client.post("/api/auth/sms/verify", json={"requestObject": {
        "messageId": message_id,
        "authorizationCode": code,
        "operationContext": PAYMENT_CONTEXT,
        "smsAndPasswordCombined": combined,
    }})


class TestSmsEndpoints:
    """Tests for OTP issuance and verification endpoints."""

    def test_create_and_verify(self, client, sent_messages):
        """Should issue, deliver and verify a payment OTP."""
        response = create(client)

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "OK"
        message_id = body["responseObject"]["messageId"]
        assert "100.00 CZK" in sent_messages[-1][1]

        response = verify(client, message_id, sent_code(sent_messages))
        assert response.status_code == 200
        assert response.json() == {"status": "OK", "responseObject": None}

    def test_create_localized(self, client, sent_messages):
        """Should compose the message in the requested language."""
        create(client, lang="cs")

        assert sent_messages[-1][1].startswith("Platba 100.00 CZK")

    def test_create_validation_errors(self, client, sent_messages):
        """Should collect all field errors."""
        response = create(client, userId="", organizationId="x" * 257)

        assert response.status_code == 400
        error = response.json()["responseObject"]
        assert error["code"] == "INPUT_INVALID"
        assert "smsAuthorization.userId.empty" in error["validationErrors"]
        assert "smsAuthorization.organizationId.long" in error["validationErrors"]
        assert sent_messages == []

    def test_create_unsupported_operation(self, client):
        """Unknown operations are an operation context error."""
        response = create(client, operationContext={"id": "op-x", "name": "transfer_all"})

        assert response.status_code == 400
        assert response.json()["responseObject"]["code"] == "OPERATION_CONTEXT_INVALID"

    def test_verify_wrong_code(self, client):
        """Should report the failure with remaining attempts."""
        message_id = create(client).json()["responseObject"]["messageId"]

        response = verify(client, message_id, "00000000")

        assert response.status_code == 401
        body = response.json()
        assert body["status"] == "ERROR"
        assert body["responseObject"] == {
            "code": "SMS_AUTHORIZATION_FAILED",
            "message": "smsAuthorization.failed",
            "remainingAttempts": 1,
        }

    def test_verify_combined_masks_failure(self, client):
        """A wrong code in combined mode reads as an authentication failure."""
        message_id = create(client).json()["responseObject"]["messageId"]

        response = verify(client, message_id, "00000000", combined=True)

        assert response.status_code == 401
        error = response.json()["responseObject"]
        assert error["code"] == "AUTHENTICATION_FAILED"
        assert error["message"] == "login.authenticationFailed"

    def test_verify_unknown_message(self, client):
        """Should fail with invalid message."""
        response = verify(client, "does-not-exist", "12345678")

        assert response.status_code == 401
        assert response.json()["responseObject"]["message"] == "smsAuthorization.invalidMessage"

    def test_malformed_request(self, client):
        """Should map schema errors to validation errors."""
        response = client.post("/api/auth/sms/verify", json={"requestObject": {}})

        assert response.status_code == 400
        error = response.json()["responseObject"]
        assert error["code"] == "INPUT_INVALID"
        assert error["validationErrors"]


class TestUserEndpoints:
    """Tests for primary authentication endpoints."""

    def test_authenticate(self, client):
        """Should return the user ID."""
        response = client.post("/api/auth/user/authenticate", json={"requestObject": {
            "username": "alice",
            "password": "correct horse",
        }})

        assert response.status_code == 200
        assert response.json()["responseObject"] == {"userId": "user-1"}

    def test_authenticate_failure(self, client):
        """Should fail with the generic authentication error."""
        response = client.post("/api/auth/user/authenticate", json={"requestObject": {
            "username": "alice",
            "password": "wrong",
        }})

        assert response.status_code == 401
        assert response.json()["responseObject"] == {
            "code": "AUTHENTICATION_FAILED",
            "message": "login.authenticationFailed",
        }

    def test_user_info(self, client):
        """Should return user details."""
        response = client.post("/api/auth/user/info", json={"requestObject": {"id": "user-1"}})

        assert response.json()["responseObject"] == {
            "id": "user-1",
            "givenName": "Alice",
            "familyName": "Novak",
            "organizationId": "RETAIL",
        }

    def test_user_info_unknown(self, client):
        """Unknown users are an input error."""
        response = client.post("/api/auth/user/info", json={"requestObject": {"id": "nobody"}})

        assert response.status_code == 400
        assert response.json()["responseObject"]["code"] == "INPUT_INVALID"


class TestUnexpectedErrors:
    """Tests for unclassified failures."""

    def test_internal_details_not_exposed(self, service):
        """Should report ERROR_GENERIC without internal details."""
        class BrokenAuthenticator(PrimaryAuthenticator):
            async def authenticate(self, username, password, context=None):
                raise RuntimeError("connection string postgres://secret")

            async def fetch_user_detail(self, user_id):
                raise RuntimeError("connection string postgres://secret")

        app = create_app(service, BrokenAuthenticator())
        with TestClient(app, raise_server_exceptions=False) as client:
            response = client.post("/api/auth/user/info", json={"requestObject": {"id": "user-1"}})

        assert response.status_code == 500
        assert response.json() == {
            "status": "ERROR",
            "responseObject": {"code": "ERROR_GENERIC", "message": "error.unknown"},
        }
        assert "secret" not in response.text


class TestAmountPrecision:
    """Tests for decimal amounts sent as JSON numbers."""

    def raw_create(self, client, amount: str):
        body = (
            '{"requestObject": {"userId": "user-1", "organizationId": "RETAIL", '
            '"operationContext": {"id": "op-payment-1", "name": "authorize_payment", '
            '"formData": {"parameters": ['
            '{"type": "AMOUNT", "id": "operation.amount", "amount": ' + amount + ', '
            '"currency": "CZK"}, '
            '{"type": "KEY_VALUE", "id": "operation.account", "value": "CZ4012340000000012345678"}'
            ']}}}}'
        )
        return client.post(
            "/api/auth/sms/create",
            content=body,
            headers={"Content-Type": "application/json"},
        )

    def test_scale_kept(self, client, sent_messages):
        """Should keep trailing zeros of a JSON number."""
        response = self.raw_create(client, "100.00")

        assert response.status_code == 200
        assert sent_messages[-1][1].startswith("Payment of 100.00 CZK")

    def test_precision_kept(self, client, sent_messages):
        """Should not round amounts through float."""
        response = self.raw_create(client, "1234567890123456.78")

        assert response.status_code == 200
        assert sent_messages[-1][1].startswith("Payment of 1234567890123456.78 CZK")

    def test_malformed_json(self, client):
        """Invalid JSON is an input error."""
        response = client.post(
            "/api/auth/sms/create",
            content='{"requestObject": ',
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["responseObject"]["code"] == "INPUT_INVALID"


class TestDefaultLanguage:
    """Tests for the configured default message language."""

    def test_missing_lang_uses_default(self, store, delivery, clock, authenticator, sent_messages):
        """Should compose in the configured default language when lang is omitted."""
        from stepup_core.config import AdapterConfig
        from stepup_core.otp.service import OTPLifecycleService

        service = OTPLifecycleService(
            store=store,
            delivery=delivery,
            config=AdapterConfig(default_lang="cs"),
            clock=clock,
        )
        with TestClient(create_app(service, authenticator)) as client:
            response = client.post("/api/auth/sms/create", json={"requestObject": {
                "userId": "user-1",
                "organizationId": "RETAIL",
                "operationContext": PAYMENT_CONTEXT,
            }})

        assert response.status_code == 200
        assert sent_messages[-1][1].startswith("Platba 100.00 CZK")


@pytest.fixture
def reset_logging():
    import logging

    import structlog

    yield
    structlog.contextvars.clear_contextvars()
    structlog.reset_defaults()
    logging.getLogger().handlers.clear()


class TestCreateAppFromConfig:
    """Tests for the configuration-driven application."""

    def test_wired_from_config(self, tmp_path, fast_hasher, sent_messages, delivery, reset_logging):
        """Should apply store, failure budget and language from configuration."""
        from stepup_core.api import create_app_from_config
        from stepup_core.config import AdapterConfig
        from stepup_core.storage import SqlAlchemyOTPRecordStore

        config = AdapterConfig(
            service_name="stepup-test",
            database_url=f"sqlite+aiosqlite:///{tmp_path / 'app.db'}",
            auth_max_failed_attempts=1,
            default_lang="cs",
        )
        directory = InMemoryUserDirectory([
            UserRecord(
                user_id="user-1",
                username="alice",
                password_hash=hash_password_sync("correct horse", fast_hasher),
            ),
        ])
        app = create_app_from_config(config, directory=directory, delivery=delivery)

        assert isinstance(app.state.otp_service.store, SqlAlchemyOTPRecordStore)
        assert app.state.authenticator.max_failed_attempts == 1

        with TestClient(app) as client:
            created = client.post("/api/auth/sms/create", json={"requestObject": {
                "userId": "user-1",
                "organizationId": "RETAIL",
                "operationContext": {"id": "op-login-1", "name": "login"},
            }})
            message_id = created.json()["responseObject"]["messageId"]
            verified = client.post("/api/auth/sms/verify", json={"requestObject": {
                "messageId": message_id,
                "authorizationCode": sent_code(sent_messages),
            }})
            failed = client.post("/api/auth/user/authenticate", json={"requestObject": {
                "username": "alice",
                "password": "wrong",
            }})
            blocked = client.post("/api/auth/user/authenticate", json={"requestObject": {
                "username": "alice",
                "password": "correct horse",
            }})

        assert created.status_code == 200
        assert sent_messages[-1][1].startswith("Autorizační kód pro přihlášení")
        assert verified.status_code == 200
        assert failed.json()["responseObject"]["remainingAttempts"] == 0
        assert blocked.json()["responseObject"]["message"] == "login.authenticationBlocked"
