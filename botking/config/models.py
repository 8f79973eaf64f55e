"""
Pydantic-based configuration models for BotKing.

Each section reads its own environment prefix; AppConfig aggregates them and
also reads a local .env file.
"""

from typing import Any

from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings

from ..structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)


class LoggingConfig(BaseSettings):
    """Logging configuration."""

    environment: str = Field(default="local", description="Logging environment")
    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="human", description="Log format")
    disable_logging: bool = Field(default=False, description="Disable all logging")

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate logging environment."""
        valid_environments = ["local", "unit_test", "e2e_test", "production"]
        if v not in valid_environments:
            logger.error("Invalid logging environment", environment=v, valid_environments=valid_environments)
            raise ValueError(f"Environment must be one of {valid_environments}, got '{v}'")
        return v

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}, got '{v}'")
        return v_upper

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        """Validate log format."""
        valid_formats = ["json", "human"]
        if v not in valid_formats:
            raise ValueError(f"Log format must be one of {valid_formats}, got '{v}'")
        return v

    model_config = {"env_prefix": "LOGGING_", "case_sensitive": False, "extra": "ignore"}

    def to_dict(self) -> dict[str, Any]:
        """Return the dictionary shape expected by setup_logging()."""
        return {
            "environment": self.environment,
            "level": self.level,
            "format": self.format,
            "disable_logging": self.disable_logging,
        }


class PersistenceConfig(BaseSettings):
    """Persistence backend selection."""

    backend: str = Field(default="memory", description="Persistence backend: memory or sqlalchemy")
    url: str = Field(default="sqlite+aiosqlite:///:memory:", description="SQLAlchemy async database URL")
    echo: bool = Field(default=False, description="Echo SQL statements")

    @field_validator("backend")
    @classmethod
    def validate_backend(cls, v: str) -> str:
        """Validate persistence backend name."""
        valid_backends = ["memory", "sqlalchemy"]
        v_lower = v.lower()
        if v_lower not in valid_backends:
            raise ValueError(f"Persistence backend must be one of {valid_backends}, got '{v}'")
        return v_lower

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Only async drivers are usable by the SQLAlchemy adapter."""
        if "+" not in v.split("://", 1)[0]:
            logger.warning("Database URL has no explicit async driver", url_scheme=v.split("://", 1)[0])
            raise ValueError(
                "Database URL must name an async driver, e.g. 'postgresql+asyncpg://' or 'sqlite+aiosqlite://'"
            )
        return v

    model_config = {"env_prefix": "PERSISTENCE_", "case_sensitive": False, "extra": "ignore"}


class SyncConfig(BaseSettings):
    """Auto-sync orchestration settings."""

    batch_concurrency: int = Field(default=16, description="Maximum concurrent saves within one batch")
    tracker_capacity: int = Field(default=10_000, description="Maximum identities kept by the sync tracker")

    @field_validator("batch_concurrency", "tracker_capacity")
    @classmethod
    def validate_at_least_one(cls, v: int, info: ValidationInfo) -> int:
        """Validate that sync bounds are positive."""
        if v < 1:
            raise ValueError(f"{info.field_name} must be at least 1, got {v}")
        return v

    model_config = {"env_prefix": "SYNC_", "case_sensitive": False, "extra": "ignore"}


class AppConfig(BaseSettings):
    """
    Composite application configuration.

    Access via get_config().
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    persistence: PersistenceConfig = Field(default_factory=PersistenceConfig)
    sync: SyncConfig = Field(default_factory=SyncConfig)

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "case_sensitive": False, "extra": "ignore"}

    def to_logging_dict(self) -> dict[str, Any]:
        """Return the configuration dictionary consumed by setup_logging()."""
        return {"logging": self.logging.to_dict()}
