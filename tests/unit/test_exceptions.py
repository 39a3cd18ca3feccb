"""
Unit tests for exception hierarchy and error normalization.
"""

import pytest
from apilink.exceptions import (
    ApiLinkError,
    ConfigurationError,
    InvalidConfigurationError,
    RequestError,
    TransportError,
    ValidationError,
    normalize_error,
)


class TestExceptionHierarchy:
    """Test that exception hierarchy is correctly defined."""

    def test_base_exception(self):
        error = ApiLinkError("test error")
        assert isinstance(error, Exception)
        assert str(error) == "test error"

    def test_request_errors_inherit_from_base(self):
        assert issubclass(RequestError, ApiLinkError)
        assert issubclass(TransportError, RequestError)
        assert issubclass(ValidationError, RequestError)

    def test_transport_and_validation_errors_are_distinct(self):
        assert not issubclass(ValidationError, TransportError)
        assert not issubclass(TransportError, ValidationError)

    def test_configuration_errors_inherit_from_base(self):
        assert issubclass(ConfigurationError, ApiLinkError)
        assert issubclass(InvalidConfigurationError, ConfigurationError)

    def test_validation_error_has_no_status(self):
        error = ValidationError("bad shape", errors=[{"loc": ("test",)}])
        assert not hasattr(error, "status")
        assert error.errors == [{"loc": ("test",)}]

    def test_catch_request_errors_with_base(self):
        with pytest.raises(RequestError):
            raise TransportError("boom", status=500)


class TestNormalizeError:
    def test_detail_becomes_message(self):
        error = normalize_error({"detail": "Not allowed"}, 403)
        assert str(error) == "Not allowed"
        assert error.status == 403
        assert error.payload == {"detail": "Not allowed"}

    def test_generic_message_names_status(self):
        error = normalize_error({"error": "nope"}, 400)
        assert str(error) == "HTTP error 400"
        assert error.payload == {"error": "nope"}

    def test_null_payload(self):
        error = normalize_error(None, 200)
        assert str(error) == "HTTP error 200"
        assert error.payload is None
        assert error.status == 200

    def test_no_response(self):
        error = normalize_error(None, None)
        assert error.status is None
        assert error.payload is None
        assert "no response" in str(error)

    def test_non_mapping_payload_uses_generic_message(self):
        error = normalize_error(["detail"], 422)
        assert str(error) == "HTTP error 422"
        assert error.payload == ["detail"]

    def test_repr(self):
        error = normalize_error(None, 502)
        assert repr(error) == "TransportError(status=502, payload=None)"
