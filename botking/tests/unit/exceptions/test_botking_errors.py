"""
Unit tests for the BotKing exception hierarchy and log_and_raise().
"""

import pytest

from botking.exceptions import (
    BotkingError,
    ConstructionError,
    ErrorContext,
    NotFoundError,
    PersistenceError,
    ValidationError,
    create_error_context,
)
from botking.utils.error_logging import log_and_raise


class TestBotkingErrors:
    """Test error construction and serialization."""

    def test_base_error_defaults(self):
        error = BotkingError("Something broke")

        assert error.message == "Something broke"
        assert error.user_friendly == "Something broke"
        assert isinstance(error.context, ErrorContext)
        assert error.details == {}

    def test_to_dict(self):
        context = create_error_context(user_id="user123", artifact_kind="bot")
        error = ConstructionError("Bad config", context, artifact_kind="bot")

        data = error.to_dict()

        assert data["error_type"] == "ConstructionError"
        assert data["context"]["user_id"] == "user123"
        assert data["details"] == {"artifact_kind": "bot"}

    def test_not_found_details(self):
        error = NotFoundError("No robot", resource_type="robots", resource_id=["bot-1"])

        assert error.details == {"resource_type": "robots", "resource_id": "['bot-1']"}

    def test_validation_error_keeps_errors(self):
        error = ValidationError("Invalid", errors=["name: Bot name is required"])

        assert error.details["errors"] == ["name: Bot name is required"]


class TestLogAndRaise:
    def test_raises_with_class_fields(self):
        with pytest.raises(PersistenceError) as exc_info:
            log_and_raise(PersistenceError, "Write failed", operation="create", table="robots")

        assert exc_info.value.operation == "create"
        assert exc_info.value.details == {"operation": "create", "table": "robots"}

    def test_context_is_kept(self):
        context = create_error_context(request_id="req-1")

        with pytest.raises(ConstructionError) as exc_info:
            log_and_raise(ConstructionError, "Bad", context=context, user_friendly="Try again")

        assert exc_info.value.context.request_id == "req-1"
        assert exc_info.value.user_friendly == "Try again"
