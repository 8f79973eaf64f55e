"""
Configuration module for BotKing.

Type-safe, validated configuration built on pydantic-settings.

Usage:
    from botking.config import get_config

    config = get_config()
    logger.info("Persistence backend selected", backend=config.persistence.backend)
"""

import sys
import threading
from functools import lru_cache
from os import getenv

from .models import AppConfig, LoggingConfig, PersistenceConfig, SyncConfig

__all__ = ["get_config", "reset_config", "AppConfig", "LoggingConfig", "PersistenceConfig", "SyncConfig"]

_config_instance: AppConfig | None = None
_config_lock = threading.Lock()


def _is_test_mode() -> bool:
    """
    Detect if running in test environment.

    Returns:
        bool: True if pytest is loaded or has set its environment variables
    """
    if "pytest" in sys.modules:
        return True
    return bool(getenv("PYTEST_CURRENT_TEST"))


@lru_cache(maxsize=1)
def _get_config_cached() -> AppConfig:
    """
    Production config loader with caching.

    Returns:
        AppConfig: Cached application configuration
    """
    global _config_instance  # pylint: disable=global-statement
    with _config_lock:
        if _config_instance is None:
            _config_instance = AppConfig()
    return _config_instance


def get_config() -> AppConfig:
    """
    Get application configuration (singleton in production, fresh in tests).

    Configuration is loaded from environment variables and the .env file.

    Returns:
        AppConfig: The application configuration

    Raises:
        pydantic.ValidationError: If configuration values are invalid
    """
    if _is_test_mode():
        return AppConfig()
    return _get_config_cached()


def reset_config() -> None:
    """
    Reset the configuration cache so the next get_config() reloads from the environment.
    """
    global _config_instance  # pylint: disable=global-statement
    with _config_lock:
        _get_config_cached.cache_clear()
        _config_instance = None
