"""
Structlog configuration for the BotKing package.

All application code obtains loggers through get_logger() from this module.
setup_logging() wires the processor chain once per process; later calls are
skipped unless force_reconfigure is set.
"""

import json
import logging
import sys
from typing import Any

import structlog
from structlog.contextvars import merge_contextvars
from structlog.stdlib import BoundLogger, LoggerFactory

from .logging_processors import add_correlation_id, sanitize_sensitive_data

# Infrastructure logger; configured lazily by structlog on first use
logger = structlog.get_logger(__name__)


class _LoggingState:  # pylint: disable=too-few-public-methods
    """State container for logging initialization to avoid global statements."""

    initialized: bool = False
    signature: str | None = None


_logging_state = _LoggingState()


def configure_structlog(log_level: str = "INFO", log_format: str = "human", disable_logging: bool = False) -> None:
    """
    Configure structlog with sanitization and correlation processors.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: "json" for JSON lines, anything else for key=value output
        disable_logging: Drop every event below CRITICAL
    """
    level = logging.CRITICAL if disable_logging else getattr(logging, log_level.upper(), logging.INFO)

    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(handler)
    root.setLevel(level)

    renderer: Any
    if log_format == "json":
        renderer = structlog.processors.JSONRenderer(default=str)
    else:
        renderer = structlog.processors.KeyValueRenderer(key_order=["timestamp", "level", "event", "logger"])

    structlog.configure(
        processors=[
            # Security first
            sanitize_sensitive_data,
            add_correlation_id,
            merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=BoundLogger,
        cache_logger_on_first_use=False,
    )


def setup_logging(config: dict[str, Any], *, force_reconfigure: bool = False) -> None:
    """
    Set up logging from a configuration dictionary.

    Args:
        config: Dictionary with a "logging" section (see LoggingConfig.to_dict())
        force_reconfigure: Reconfigure even if logging was already initialized
    """
    config_signature = json.dumps(config, sort_keys=True, default=str)

    if _logging_state.initialized and not force_reconfigure:
        get_logger(__name__).debug(
            "setup_logging skipped; logging system already initialized",
            config_signature=_logging_state.signature,
        )
        return

    logging_config = config.get("logging", {})
    log_level = logging_config.get("level", "INFO")
    configure_structlog(
        log_level=log_level,
        log_format=logging_config.get("format", "human"),
        disable_logging=logging_config.get("disable_logging", False),
    )

    get_logger(__name__).info(
        "Logging system initialized",
        environment=logging_config.get("environment"),
        log_level=log_level,
        security_sanitization=True,
        correlation_ids=True,
    )

    _logging_state.initialized = True
    _logging_state.signature = config_signature


def get_logger(name: str) -> Any:  # Returns BoundLogger but typed as Any for flexibility
    """
    Get a structlog logger with the specified name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance
    """
    return structlog.get_logger(name)
