"""
Logging processors for structlog event processing.

This module provides processors for sanitizing sensitive data and adding
correlation IDs to every event.
"""

import re
import uuid
from typing import Any

REDACTED_PLACEHOLDER = "[REDACTED]"

# Matched against the lower-cased key of each event field
SENSITIVE_PATTERNS = [
    r"\bpassword\b",
    r"\btoken\b",
    r"_token\b",
    r"\bsecret\b",
    r"_key\b",
    r"^key$",
    r"\bcredential\b",
    r"\bauthorization\b",
]

# Field names that look sensitive but only carry identifiers or timestamps
SAFE_FIELDS = {
    "access_token_expires_at",
    "refresh_token_expires_at",
    "slot_key",
    "composite_key",
    "record_key",
}


def _is_sensitive(key: str) -> bool:
    key_lower = key.lower()
    if key_lower in SAFE_FIELDS:
        return False
    return any(re.search(pattern, key_lower) for pattern in SENSITIVE_PATTERNS)


def sanitize_sensitive_data(_logger: Any, _name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Remove sensitive data from log entries.

    Passwords, tokens and credentials are replaced with a fixed placeholder so
    account payloads can be logged without leaking secrets.

    Args:
        _logger: Logger instance (unused)
        _name: Logger name (unused)
        event_dict: Event dictionary to sanitize

    Returns:
        Sanitized event dictionary
    """

    def sanitize_dict(d: dict[str, Any]) -> dict[str, Any]:
        """Recursively sanitize dictionary values."""
        sanitized: dict[str, Any] = {}
        for key, value in d.items():
            if isinstance(value, dict):
                sanitized[key] = sanitize_dict(value)
            elif _is_sensitive(str(key)) and value is not None:
                sanitized[key] = REDACTED_PLACEHOLDER
            else:
                sanitized[key] = value
        return sanitized

    return sanitize_dict(event_dict)


def add_correlation_id(_logger: Any, _name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Add correlation ID to log entries if not already present.

    Args:
        _logger: Logger instance (unused)
        _name: Logger name (unused)
        event_dict: Event dictionary to enhance

    Returns:
        Enhanced event dictionary with correlation ID
    """
    if "correlation_id" not in event_dict:
        event_dict["correlation_id"] = str(uuid.uuid4())

    return event_dict
