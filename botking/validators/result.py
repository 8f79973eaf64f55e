"""
Result values for validation, factory and sync operations.

Expected failures (shape mismatches, domain rule violations, missing records,
identity conflicts) come back as Err carrying an ordered list of FieldError
entries instead of being raised.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, Generic, NoReturn, TypeVar

from ..error_types import ErrorType
from ..exceptions import BotkingError, NotFoundError, PersistenceError, ValidationError

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class FieldError:
    """One violated constraint: where it happened and what went wrong."""

    path: str
    message: str
    code: str = ErrorType.VALIDATION_ERROR.value

    def __str__(self) -> str:
        return f"{self.path}: {self.message}" if self.path else self.message

    def to_dict(self) -> dict[str, str]:
        return {"path": self.path, "message": self.message, "code": self.code}


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful result wrapping the parsed or persisted value."""

    value: T

    @property
    def is_ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True, slots=True)
class Err:
    """Failed result carrying every collected error."""

    errors: tuple[FieldError, ...]
    error_type: ErrorType = ErrorType.VALIDATION_ERROR
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def is_ok(self) -> bool:
        return False

    @property
    def messages(self) -> list[str]:
        return [error.message for error in self.errors]

    def unwrap(self) -> NoReturn:
        """Raise the exception matching this result's error type."""
        self.raise_for_error()

    def raise_for_error(self) -> NoReturn:
        """
        Convert this result into the matching BotKing exception and raise it.

        Raises:
            NotFoundError: For RESOURCE_NOT_FOUND results
            PersistenceError: For PERSISTENCE_ERROR results
            ValidationError: For every other error type
        """
        message = "; ".join(str(error) for error in self.errors) or self.error_type.value
        exc: BotkingError
        if self.error_type is ErrorType.RESOURCE_NOT_FOUND:
            exc = NotFoundError(
                message,
                resource_type=self.details.get("resource_type"),
                resource_id=self.details.get("resource_id"),
            )
        elif self.error_type is ErrorType.PERSISTENCE_ERROR:
            exc = PersistenceError(message, operation=self.details.get("operation", "unknown"))
        else:
            exc = ValidationError(message, errors=list(self.errors), details={"error_type": self.error_type.value})
        raise exc

    @classmethod
    def single(
        cls,
        path: str,
        message: str,
        error_type: ErrorType = ErrorType.VALIDATION_ERROR,
        **details: Any,
    ) -> Err:
        """Build an Err from one error entry."""
        return cls((FieldError(path, message, error_type.value),), error_type, dict(details))

    @classmethod
    def from_messages(
        cls,
        messages: Iterable[str],
        error_type: ErrorType = ErrorType.BUSINESS_RULE_VIOLATION,
        path: str = "",
    ) -> Err:
        """Build an Err from plain rule-violation messages."""
        return cls(tuple(FieldError(path, message, error_type.value) for message in messages), error_type)


Result = Ok[T] | Err
