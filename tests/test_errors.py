"""
Tests for adapter errors and error responses.
"""

from stepup_core.errors import (
    AuthenticationFailedError,
    DeliveryFailedError,
    ErrorCode,
    InputValidationError,
    RemoteCommunicationError,
    SmsAuthorizationFailedError,
    to_error_response,
)


class TestExceptions:
    """Tests for the exception hierarchy."""

    def test_codes(self):
        """Each exception carries its error code."""
        assert InputValidationError(["x"]).code is ErrorCode.INPUT_INVALID
        assert AuthenticationFailedError("m").code is ErrorCode.AUTHENTICATION_FAILED
        assert SmsAuthorizationFailedError("m").code is ErrorCode.SMS_AUTHORIZATION_FAILED
        assert DeliveryFailedError("m").code is ErrorCode.REMOTE_ERROR

    def test_remote_errors_are_retryable(self):
        """Should mark remote failures as retryable."""
        assert RemoteCommunicationError("down").retryable is True
        assert DeliveryFailedError("down").retryable is True
        assert AuthenticationFailedError("m").retryable is False

    def test_remote_error_str(self):
        """Should include the failing service."""
        assert str(RemoteCommunicationError("down", service="database")) == "[database] down"
        assert DeliveryFailedError("down").service == "delivery"


class TestErrorResponses:
    """Tests for exception to response mapping."""

    def test_validation_error(self):
        """Should carry validation keys."""
        status, response = to_error_response(
            InputValidationError(["smsAuthorization.userId.empty"])
        )

        assert status == 400
        assert response.to_dict() == {
            "code": "INPUT_INVALID",
            "message": "smsAuthorization.userId.empty",
            "validationErrors": ["smsAuthorization.userId.empty"],
        }

    def test_remaining_attempts(self):
        """Should include remaining attempts when known."""
        status, response = to_error_response(
            SmsAuthorizationFailedError("smsAuthorization.failed", remaining_attempts=0)
        )

        assert status == 401
        assert response.to_dict()["remainingAttempts"] == 0

    def test_remote_error_hides_details(self):
        """Should not expose remote error details."""
        status, response = to_error_response(
            RemoteCommunicationError("db at 10.0.0.1 down", service="database")
        )

        assert status == 500
        assert response.to_dict() == {"code": "REMOTE_ERROR", "message": "error.remote"}

    def test_unknown_error(self):
        """Should map unclassified errors to ERROR_GENERIC."""
        status, response = to_error_response(KeyError("secret"))

        assert status == 500
        assert response.code is ErrorCode.ERROR_GENERIC
        assert "secret" not in response.message
