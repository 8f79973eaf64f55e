"""
Persistence collaborator protocol.

The sync orchestrator depends only on this protocol. Records are plain
dicts; keys are dicts holding the table's key fields.
"""

# pylint: disable=unnecessary-ellipsis

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Protocol

Record = dict[str, Any]


class OperationKind(StrEnum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True, slots=True)
class BatchOperation:
    """One write inside a transaction()."""

    kind: OperationKind
    table: str
    data: Mapping[str, Any] = field(default_factory=dict)
    key: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def create(cls, table: str, data: Mapping[str, Any]) -> BatchOperation:
        return cls(OperationKind.CREATE, table, data=data)

    @classmethod
    def update(cls, table: str, key: Mapping[str, Any], data: Mapping[str, Any]) -> BatchOperation:
        return cls(OperationKind.UPDATE, table, data=data, key=key)

    @classmethod
    def delete(cls, table: str, key: Mapping[str, Any]) -> BatchOperation:
        return cls(OperationKind.DELETE, table, key=key)


class PersistenceProtocol(Protocol):
    """
    Contract for record storage.

    Implementations assign generated ids and server timestamps, enforce key
    and unique constraints (raising PersistenceError) and raise NotFoundError
    when update or delete_record targets a missing key.
    """

    async def create(self, table: str, data: Mapping[str, Any]) -> Record:
        """Insert a record and return it with server-assigned fields."""
        ...

    async def find(self, table: str, key: Mapping[str, Any]) -> Record | None:
        """Return the record stored under key, or None."""
        ...

    async def find_many(self, table: str, filters: Mapping[str, Any]) -> list[Record]:
        """Return every record whose fields equal all filter values."""
        ...

    async def update(self, table: str, key: Mapping[str, Any], data: Mapping[str, Any]) -> Record:
        """Apply a partial update and return the stored record."""
        ...

    async def delete_record(self, table: str, key: Mapping[str, Any]) -> None:
        """Remove the record stored under key."""
        ...

    async def transaction(self, operations: Sequence[BatchOperation]) -> list[Record | None]:
        """Apply all operations atomically; results follow operation order (None for deletes)."""
        ...
