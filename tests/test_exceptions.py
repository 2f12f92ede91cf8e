"""
Tests for exception classes.

Covers all exception types and their string representations.
"""

import pytest

from flowbridge.config import ConfigurationError
from flowbridge.exceptions import FlowApiError, FlowBridgeError, UserRecordError


class TestFlowBridgeError:
    """Tests for base FlowBridgeError."""

    def test_is_exception(self):
        """FlowBridgeError is a subclass of Exception."""
        assert issubclass(FlowBridgeError, Exception)

    def test_can_be_raised(self):
        """FlowBridgeError can be raised and caught."""
        with pytest.raises(FlowBridgeError):
            raise FlowBridgeError("test error")


class TestFlowApiError:
    """Tests for FlowApiError."""

    def test_attributes(self):
        """Exception has message and code attributes."""
        exc = FlowApiError("declined", 7)
        assert exc.message == "declined"
        assert exc.code == 7

    def test_message_format(self):
        """Exception message includes code and message."""
        assert str(FlowApiError("bad request", 42)) == "Flow API error 42: bad request"

    def test_is_flowbridge_error(self):
        """FlowApiError is a FlowBridgeError."""
        assert isinstance(FlowApiError("x", 500), FlowBridgeError)


class TestUserRecordError:
    """Tests for UserRecordError."""

    def test_attributes(self):
        """Exception has user_id and missing attributes."""
        exc = UserRecordError("u1", ["email"])
        assert exc.user_id == "u1"
        assert exc.missing == ["email"]

    def test_message_format(self):
        """Exception message lists missing fields."""
        assert "lastName, email" in str(UserRecordError("u1", ["lastName", "email"]))


class TestExceptionHierarchy:
    """Tests for exception inheritance."""

    @pytest.mark.parametrize("exc_class", [FlowApiError, UserRecordError])
    def test_caught_as_base(self, exc_class):
        """Domain errors are caught by FlowBridgeError."""
        exc = FlowApiError("x", 1) if exc_class is FlowApiError else UserRecordError("u", [])
        with pytest.raises(FlowBridgeError):
            raise exc

    def test_configuration_error_is_separate(self):
        """Configuration errors are raised before any client exists."""
        assert not issubclass(ConfigurationError, FlowBridgeError)
