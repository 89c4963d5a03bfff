"""Tests for API error classes."""

import pytest

from codenote.core.errors import (
    APIError,
    CodeAlreadyUsedError,
    CodeExpiredError,
    EmailDeliveryError,
    InvalidCodeError,
    LoginCodeError,
    NotFoundError,
    UnauthorizedError,
    UserNotFoundError,
    ValidationError,
)


class TestAPIError:
    """Tests for base APIError class."""

    def test_api_error_has_required_attributes(self):
        error = APIError(
            code="TEST_ERROR",
            message="Test message",
            status_code=418,
            details=[{"field": "test"}],
        )
        assert error.code == "TEST_ERROR"
        assert error.message == "Test message"
        assert error.status_code == 418
        assert error.details == [{"field": "test"}]

    def test_api_error_defaults_to_500(self):
        error = APIError(code="TEST", message="Test")
        assert error.status_code == 500
        assert error.details is None
        assert str(error) == "Test"


class TestLoginCodeErrors:
    """Each verification failure kind has its own code and a 400 status."""

    @pytest.mark.parametrize(
        ("error_cls", "code"),
        [
            (UserNotFoundError, "USER_NOT_FOUND"),
            (InvalidCodeError, "INVALID_CODE"),
            (CodeAlreadyUsedError, "CODE_ALREADY_USED"),
            (CodeExpiredError, "CODE_EXPIRED"),
        ],
    )
    def test_code_and_status(self, error_cls, code):
        error = error_cls()

        assert isinstance(error, LoginCodeError)
        assert error.code == code
        assert error.status_code == 400
        assert error.message


class TestOtherErrors:
    """Tests for the remaining concrete errors."""

    def test_validation_error(self):
        error = ValidationError("bad", details=[{"loc": ["body"]}])
        assert (error.code, error.status_code) == ("VALIDATION_ERROR", 400)
        assert error.details == [{"loc": ["body"]}]

    def test_unauthorized_default_message(self):
        error = UnauthorizedError()
        assert (error.code, error.status_code) == ("UNAUTHORIZED", 401)
        assert error.message == "Authentication required"

    def test_not_found_with_id(self):
        error = NotFoundError("Note", "42")
        assert error.status_code == 404
        assert error.message == "Note with id '42' not found"

    def test_not_found_without_id(self):
        assert NotFoundError("Note").message == "Note not found"

    def test_email_delivery_is_502(self):
        error = EmailDeliveryError()
        assert (error.code, error.status_code) == ("EMAIL_DELIVERY_FAILED", 502)
