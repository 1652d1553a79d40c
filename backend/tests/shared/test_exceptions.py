"""Tests for shared/exceptions.py."""

from shared.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    ExternalServiceError,
    NotFoundError,
    TavernError,
    ValidationError,
)


class TestTavernError:
    def test_message(self):
        error = TavernError("Test error")
        assert error.message == "Test error"
        assert str(error) == "Test error"

    def test_default_code(self):
        """Code defaults to the class name."""
        assert TavernError("Test error").code == "TavernError"
        assert NotFoundError("missing").code == "NotFoundError"

    def test_custom_code_and_details(self):
        error = TavernError("Test error", code="CUSTOM_ERROR", details={"key": "value"})
        assert error.code == "CUSTOM_ERROR"
        assert error.details == {"key": "value"}

    def test_default_details(self):
        assert TavernError("Test error").details == {}

    def test_to_dict(self):
        error = TavernError("Test error", code="TEST_ERROR", details={"key": "value"})
        assert error.to_dict() == {
            "error": "TEST_ERROR",
            "message": "Test error",
            "details": {"key": "value"},
        }


class TestSubclasses:
    def test_all_inherit_base(self):
        for cls in (
            NotFoundError,
            ValidationError,
            ConflictError,
            AuthenticationError,
            AuthorizationError,
        ):
            assert isinstance(cls("x"), TavernError)


class TestExternalServiceError:
    def test_stores_service(self):
        error = ExternalServiceError("Connection failed", service="smtp")
        assert error.service == "smtp"
        assert isinstance(error, TavernError)

    def test_service_in_details(self):
        error = ExternalServiceError("Connection failed", service="smtp", details={"status_code": 500})
        result = error.to_dict()
        assert result["details"]["service"] == "smtp"
        assert result["details"]["status_code"] == 500
