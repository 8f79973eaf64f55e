"""
In-memory persistence adapter.

Implements PersistenceProtocol over per-table dictionaries. It enforces the
same key and unique constraints as the relational schema, so it is used both
as a lightweight backend and as the test double for the sync layer.
"""

from __future__ import annotations

import asyncio
import copy
from collections.abc import Mapping, Sequence
from typing import Any, NoReturn

from ..exceptions import BotkingError, NotFoundError, PersistenceError, create_error_context
from ..structured_logging.enhanced_logging_config import get_logger
from ..utils.clock import Clock, IdGenerator, SystemClock, UuidIdGenerator
from ..utils.error_logging import log_and_raise
from .protocols import BatchOperation, OperationKind, Record
from .tables import TABLES, TableSpec

logger = get_logger(__name__)

_SERVER_TIMESTAMPS = ("created_at", "updated_at")


class InMemoryPersistence:
    """Dictionary-backed record store with server-assigned ids and timestamps."""

    def __init__(self, clock: Clock | None = None, ids: IdGenerator | None = None):
        self._clock = clock or SystemClock()
        self._ids = ids or UuidIdGenerator()
        self._tables: dict[str, dict[tuple[Any, ...], Record]] = {name: {} for name in TABLES}

    # Protocol surface

    async def create(self, table: str, data: Mapping[str, Any]) -> Record:
        await self._interleave()
        return copy.deepcopy(self._create(table, data))

    async def find(self, table: str, key: Mapping[str, Any]) -> Record | None:
        await self._interleave()
        spec = self._spec(table, "find")
        row = self._tables[table].get(self._key_tuple(spec, key, "find"))
        return copy.deepcopy(row) if row is not None else None

    async def find_many(self, table: str, filters: Mapping[str, Any]) -> list[Record]:
        await self._interleave()
        self._spec(table, "find_many")
        return [
            copy.deepcopy(row)
            for row in self._tables[table].values()
            if all(row.get(name) == value for name, value in filters.items())
        ]

    async def update(self, table: str, key: Mapping[str, Any], data: Mapping[str, Any]) -> Record:
        await self._interleave()
        return copy.deepcopy(self._update(table, key, data))

    async def delete_record(self, table: str, key: Mapping[str, Any]) -> None:
        await self._interleave()
        self._delete(table, key)

    async def transaction(self, operations: Sequence[BatchOperation]) -> list[Record | None]:
        """
        Apply operations in order; on any failure every table is restored.

        Raises:
            PersistenceError: A constraint was violated (nothing is applied)
            NotFoundError: An update or delete targeted a missing key (nothing is applied)
        """
        await self._interleave()
        snapshot = copy.deepcopy(self._tables)
        results: list[Record | None] = []
        try:
            for operation in operations:
                match operation.kind:
                    case OperationKind.CREATE:
                        results.append(copy.deepcopy(self._create(operation.table, operation.data)))
                    case OperationKind.UPDATE:
                        results.append(copy.deepcopy(self._update(operation.table, operation.key, operation.data)))
                    case OperationKind.DELETE:
                        self._delete(operation.table, operation.key)
                        results.append(None)
        except BotkingError:
            self._tables = snapshot
            logger.warning("Transaction rolled back", operation_count=len(operations), applied=len(results))
            raise
        logger.debug("Transaction committed", operation_count=len(operations))
        return results

    # Internals

    async def _interleave(self) -> None:
        # Let concurrent callers interleave as they would on real I/O
        await asyncio.sleep(0)

    def _fail(self, message: str, operation: str, table: str, **metadata: Any) -> NoReturn:
        context = create_error_context()
        context.metadata["operation"] = operation
        context.metadata.update(metadata)
        log_and_raise(PersistenceError, message, context=context, operation=operation, table=table)

    def _spec(self, table: str, operation: str) -> TableSpec:
        spec = TABLES.get(table)
        if spec is None:
            self._fail(f"Unknown table: {table}", operation, table)
        return spec

    def _key_tuple(self, spec: TableSpec, key: Mapping[str, Any], operation: str) -> tuple[Any, ...]:
        missing = [name for name in spec.key if key.get(name) is None]
        if missing:
            self._fail(f"Key for {spec.name} is missing {missing}", operation, spec.name, key=dict(key))
        return tuple(key[name] for name in spec.key)

    def _check_unique(self, spec: TableSpec, row: Record, operation: str, own_key: tuple[Any, ...] | None) -> None:
        for columns in spec.unique:
            values = tuple(row.get(name) for name in columns)
            if any(value is None for value in values):
                continue
            for existing_key, existing in self._tables[spec.name].items():
                if existing_key == own_key:
                    continue
                if tuple(existing.get(name) for name in columns) == values:
                    self._fail(
                        f"Unique constraint {columns} violated on {spec.name}",
                        operation,
                        spec.name,
                        columns=list(columns),
                    )

    def _create(self, table: str, data: Mapping[str, Any]) -> Record:
        spec = self._spec(table, "create")
        row = copy.deepcopy(dict(data))
        for name in _SERVER_TIMESTAMPS:
            row.pop(name, None)
        if spec.generated_id and row.get("id") is None:
            row["id"] = self._ids.new_id()

        key = self._key_tuple(spec, row, "create")
        rows = self._tables[table]
        if key in rows:
            self._fail(f"Duplicate key {key} on {table}", "create", table, key=list(key))
        self._check_unique(spec, row, "create", own_key=None)

        now = self._clock.now()
        row["created_at"] = now
        row["updated_at"] = now
        rows[key] = row
        logger.debug("Record created", table=table, record_key=list(key))
        return row

    def _update(self, table: str, key: Mapping[str, Any], data: Mapping[str, Any]) -> Record:
        spec = self._spec(table, "update")
        key_tuple = self._key_tuple(spec, key, "update")
        rows = self._tables[table]
        current = rows.get(key_tuple)
        if current is None:
            raise NotFoundError(
                f"No {table} record for key {list(key_tuple)}",
                resource_type=table,
                resource_id=list(key_tuple),
            )

        changes = {name: value for name, value in data.items() if name not in _SERVER_TIMESTAMPS}
        for name in spec.key:
            if name in changes and changes[name] != current[name]:
                self._fail(f"Key field {name} of {table} cannot change", "update", table)

        updated = {**current, **copy.deepcopy(changes)}
        self._check_unique(spec, updated, "update", own_key=key_tuple)
        updated["updated_at"] = max(self._clock.now(), current["created_at"])
        rows[key_tuple] = updated
        logger.debug("Record updated", table=table, record_key=list(key_tuple), fields=sorted(changes))
        return updated

    def _delete(self, table: str, key: Mapping[str, Any]) -> None:
        spec = self._spec(table, "delete_record")
        key_tuple = self._key_tuple(spec, key, "delete_record")
        if self._tables[table].pop(key_tuple, None) is None:
            raise NotFoundError(
                f"No {table} record for key {list(key_tuple)}",
                resource_type=table,
                resource_id=list(key_tuple),
            )
        logger.debug("Record deleted", table=table, record_key=list(key_tuple))
