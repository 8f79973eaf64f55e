"""
Exception hierarchy and error handling utilities for BotKing.

Every error carries an ErrorContext and a details dictionary and logs itself
with structured context when raised. Validation and not-found conditions are
normally surfaced as Err results (see botking.validators.result); the matching
exception classes exist for callers that opt into raising.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from .structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class ErrorContext:
    """
    Contextual information for error handling.

    Provides structured context for error reporting and debugging.
    """

    user_id: str | None = None
    artifact_kind: str | None = None
    artifact_id: str | None = None
    request_id: str | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert context to dictionary for logging."""
        return {
            "user_id": self.user_id,
            "artifact_kind": self.artifact_kind,
            "artifact_id": self.artifact_id,
            "request_id": self.request_id,
            "timestamp": self.timestamp.isoformat(),
            "metadata": self.metadata,
        }


class BotkingError(Exception):
    """
    Base exception for all BotKing errors.

    Provides structured error handling with context and metadata
    for proper error categorization and debugging.
    """

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        details: dict[str, Any] | None = None,
        user_friendly: str | None = None,
    ):
        """
        Initialize BotKing error.

        Args:
            message: Technical error message
            context: Error context information
            details: Additional error details
            user_friendly: User-friendly error message
        """
        super().__init__(message)
        self.message = message
        self.context = context or ErrorContext()
        self.details = details or {}
        self.user_friendly = user_friendly or message
        self.timestamp = datetime.now(UTC)

        self._log_error()

    def _log_error(self):
        """Log the error with structured context."""
        logger.error(
            "BotKing error occurred",
            error_type=self.__class__.__name__,
            message=self.message,
            context=self.context.to_dict(),
            details=self.details,
            timestamp=self.timestamp.isoformat(),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert error to a plain dictionary."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "user_friendly": self.user_friendly,
            "context": self.context.to_dict(),
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
        }


class ValidationError(BotkingError):
    """Structural or domain validation failure."""

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        errors: list[Any] | None = None,
        **kwargs,
    ):
        super().__init__(message, context, **kwargs)
        self.errors = list(errors or [])
        if self.errors:
            self.details["errors"] = [str(error) for error in self.errors]


class NotFoundError(BotkingError):
    """A record expected to exist is absent."""

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        resource_type: str | None = None,
        resource_id: Any | None = None,
        **kwargs,
    ):
        super().__init__(message, context, **kwargs)
        self.resource_type = resource_type
        self.resource_id = resource_id
        if resource_type:
            self.details["resource_type"] = resource_type
        if resource_id is not None:
            self.details["resource_id"] = str(resource_id)


class PersistenceError(BotkingError):
    """The persistence collaborator rejected or failed an operation."""

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        operation: str = "unknown",
        table: str | None = None,
        **kwargs,
    ):
        super().__init__(message, context, **kwargs)
        self.operation = operation
        self.table = table
        self.details["operation"] = operation
        if table:
            self.details["table"] = table


class ConstructionError(BotkingError):
    """Malformed input handed to an artifact factory or constructor."""

    def __init__(self, message: str, context: ErrorContext | None = None, artifact_kind: str | None = None, **kwargs):
        super().__init__(message, context, **kwargs)
        self.artifact_kind = artifact_kind
        if artifact_kind:
            self.details["artifact_kind"] = artifact_kind


class GameLogicError(BotkingError):
    """Illegal game state transition."""

    def __init__(self, message: str, context: ErrorContext | None = None, game_action: str | None = None, **kwargs):
        super().__init__(message, context, **kwargs)
        self.game_action = game_action
        if game_action:
            self.details["game_action"] = game_action


class ConfigurationError(BotkingError):
    """Configuration and setup errors."""

    def __init__(self, message: str, context: ErrorContext | None = None, config_key: str | None = None, **kwargs):
        super().__init__(message, context, **kwargs)
        self.config_key = config_key
        if config_key:
            self.details["config_key"] = config_key


def create_error_context(**kwargs) -> ErrorContext:
    """
    Create an error context with the given parameters.

    Args:
        **kwargs: Context parameters

    Returns:
        ErrorContext object
    """
    return ErrorContext(**kwargs)

