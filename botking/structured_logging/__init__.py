"""Structured logging for BotKing, built on structlog."""

from .enhanced_logging_config import configure_structlog, get_logger, setup_logging
from .logging_processors import REDACTED_PLACEHOLDER, add_correlation_id, sanitize_sensitive_data

__all__ = [
    "REDACTED_PLACEHOLDER",
    "add_correlation_id",
    "configure_structlog",
    "get_logger",
    "sanitize_sensitive_data",
    "setup_logging",
]
