"""
Error logging utilities for BotKing.

Provides log_and_raise() so that persistence and factory code log errors
with the same structured context before raising.
"""

from typing import Any, NoReturn

from ..exceptions import BotkingError, ErrorContext, create_error_context
from ..structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)


def log_and_raise(
    exception_class: type[BotkingError],
    message: str,
    context: ErrorContext | None = None,
    details: dict[str, Any] | None = None,
    user_friendly: str | None = None,
    logger_name: str | None = None,
    **error_fields: Any,
) -> NoReturn:
    """
    Log an error and raise a BotKing exception.

    Args:
        exception_class: The BotKing exception class to raise
        message: Technical error message
        context: Error context information
        details: Additional error details
        user_friendly: User-friendly error message
        logger_name: Specific logger name to use (defaults to current module)
        **error_fields: Class-specific keyword arguments (operation, table, resource_id, ...)

    Raises:
        The specified BotKing exception
    """
    error_logger = get_logger(logger_name) if logger_name else logger

    if context is None:
        context = create_error_context()

    error_logger.error(
        f"Error logged and exception raised: {message}",
        error_type=exception_class.__name__,
        details=details or {},
        user_friendly=user_friendly,
        **{key: str(value) for key, value in error_fields.items()},
    )

    raise exception_class(
        message,
        context,
        details=details,
        user_friendly=user_friendly,
        **error_fields,
    )
