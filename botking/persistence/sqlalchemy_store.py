"""
SQLAlchemy async persistence adapter.

Implements PersistenceProtocol on top of an AsyncEngine. Each protocol call
runs in its own session; transaction() runs every operation in one session
so the batch commits or rolls back as a unit.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Mapping, Sequence
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, NoReturn

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from ..exceptions import BotkingError, NotFoundError, PersistenceError, create_error_context
from ..structured_logging.enhanced_logging_config import get_logger
from ..utils.clock import Clock, IdGenerator, SystemClock, UuidIdGenerator, ensure_utc
from ..utils.error_logging import log_and_raise
from .models import MODEL_FOR_TABLE, Base
from .protocols import BatchOperation, OperationKind, Record
from .tables import TABLES, TableSpec

logger = get_logger(__name__)

_SERVER_TIMESTAMPS = ("created_at", "updated_at")


def _engine_kwargs(url: str, echo: bool) -> dict[str, Any]:
    kwargs: dict[str, Any] = {"echo": echo}
    if url.startswith("sqlite") and ":memory:" in url:
        # One shared connection, otherwise every session sees an empty database
        kwargs["poolclass"] = StaticPool
        kwargs["connect_args"] = {"check_same_thread": False}
    else:
        kwargs["pool_pre_ping"] = True
    return kwargs


def _plain(value: Any) -> Any:
    """Strip SQLAlchemy mutable wrappers and normalize datetimes to UTC."""
    if isinstance(value, dict):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_plain(item) for item in value]
    if isinstance(value, datetime):
        return ensure_utc(value)
    return value


class SqlAlchemyPersistence:
    """Record store backed by the BotKing SQLAlchemy models."""

    def __init__(
        self,
        engine: AsyncEngine | str,
        *,
        clock: Clock | None = None,
        ids: IdGenerator | None = None,
        echo: bool = False,
    ):
        if isinstance(engine, str):
            engine = create_async_engine(engine, **_engine_kwargs(engine, echo))
        self._engine = engine
        self._clock = clock or SystemClock()
        self._ids = ids or UuidIdGenerator()
        self._session_maker = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
        logger.info("SQLAlchemy persistence created", dialect=self._engine.dialect.name)

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    async def create_schema(self) -> None:
        """Create every BotKing table that does not exist yet."""
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema created", tables=sorted(Base.metadata.tables))

    async def dispose(self) -> None:
        await self._engine.dispose()

    # Protocol surface

    async def create(self, table: str, data: Mapping[str, Any]) -> Record:
        async with self._session("create", table) as session:
            return await self._create(session, table, data)

    async def find(self, table: str, key: Mapping[str, Any]) -> Record | None:
        async with self._session("find", table) as session:
            spec = self._spec(table, "find")
            row = await session.get(MODEL_FOR_TABLE[table], self._identity(spec, key, "find"))
            return self._to_record(table, row) if row is not None else None

    async def find_many(self, table: str, filters: Mapping[str, Any]) -> list[Record]:
        async with self._session("find_many", table) as session:
            self._spec(table, "find_many")
            self._check_columns(table, filters, "find_many")
            rows = await session.scalars(select(MODEL_FOR_TABLE[table]).filter_by(**filters))
            return [self._to_record(table, row) for row in rows]

    async def update(self, table: str, key: Mapping[str, Any], data: Mapping[str, Any]) -> Record:
        async with self._session("update", table) as session:
            return await self._update(session, table, key, data)

    async def delete_record(self, table: str, key: Mapping[str, Any]) -> None:
        async with self._session("delete_record", table) as session:
            await self._delete(session, table, key)

    async def transaction(self, operations: Sequence[BatchOperation]) -> list[Record | None]:
        """
        Apply every operation in one session; any failure rolls all of them back.

        Raises:
            PersistenceError: A constraint was violated or the database failed
            NotFoundError: An update or delete targeted a missing key
        """
        results: list[Record | None] = []
        tables = sorted({operation.table for operation in operations})
        async with self._session("transaction", ",".join(tables)) as session:
            for operation in operations:
                match operation.kind:
                    case OperationKind.CREATE:
                        results.append(await self._create(session, operation.table, operation.data))
                    case OperationKind.UPDATE:
                        results.append(await self._update(session, operation.table, operation.key, operation.data))
                    case OperationKind.DELETE:
                        await self._delete(session, operation.table, operation.key)
                        results.append(None)
        logger.debug("Transaction committed", operation_count=len(operations), tables=tables)
        return results

    # Internals

    @asynccontextmanager
    async def _session(self, operation: str, table: str) -> AsyncIterator[AsyncSession]:
        async with self._session_maker() as session:
            try:
                yield session
                await session.commit()
            except IntegrityError as exc:
                await session.rollback()
                self._fail(f"Constraint violated on {table}: {exc.orig}", operation, table)
            except SQLAlchemyError as exc:
                await session.rollback()
                self._fail(f"Database error during {operation} on {table}: {exc}", operation, table)
            except BotkingError:
                await session.rollback()
                raise

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

    def _check_columns(self, table: str, data: Mapping[str, Any], operation: str) -> None:
        unknown = set(data) - set(MODEL_FOR_TABLE[table].__table__.columns.keys())
        if unknown:
            self._fail(f"Unknown columns for {table}: {sorted(unknown)}", operation, table)

    def _identity(self, spec: TableSpec, key: Mapping[str, Any], operation: str) -> dict[str, Any]:
        missing = [name for name in spec.key if key.get(name) is None]
        if missing:
            self._fail(f"Key for {spec.name} is missing {missing}", operation, spec.name, key=dict(key))
        return {name: key[name] for name in spec.key}

    def _to_record(self, table: str, row: Base) -> Record:
        return {
            column: _plain(getattr(row, column)) for column in MODEL_FOR_TABLE[table].__table__.columns.keys()
        }

    async def _get_existing(self, session: AsyncSession, table: str, key: Mapping[str, Any], operation: str) -> Base:
        identity = self._identity(self._spec(table, operation), key, operation)
        row = await session.get(MODEL_FOR_TABLE[table], identity)
        if row is None:
            raise NotFoundError(
                f"No {table} record for key {list(identity.values())}",
                resource_type=table,
                resource_id=list(identity.values()),
            )
        return row

    async def _create(self, session: AsyncSession, table: str, data: Mapping[str, Any]) -> Record:
        spec = self._spec(table, "create")
        values = {name: value for name, value in data.items() if name not in _SERVER_TIMESTAMPS}
        self._check_columns(table, values, "create")
        if spec.generated_id and values.get("id") is None:
            values["id"] = self._ids.new_id()
        self._identity(spec, values, "create")

        now = self._clock.now()
        row = MODEL_FOR_TABLE[table](**values, created_at=now, updated_at=now)
        session.add(row)
        await session.flush()
        logger.debug("Record created", table=table, record_key=[values[name] for name in spec.key])
        return self._to_record(table, row)

    async def _update(
        self, session: AsyncSession, table: str, key: Mapping[str, Any], data: Mapping[str, Any]
    ) -> Record:
        spec = self._spec(table, "update")
        row = await self._get_existing(session, table, key, "update")
        changes = {name: value for name, value in data.items() if name not in _SERVER_TIMESTAMPS}
        self._check_columns(table, changes, "update")
        for name in spec.key:
            if name in changes and changes[name] != getattr(row, name):
                self._fail(f"Key field {name} of {table} cannot change", "update", table)

        for name, value in changes.items():
            setattr(row, name, value)
        row.updated_at = max(self._clock.now(), ensure_utc(row.created_at))
        await session.flush()
        logger.debug("Record updated", table=table, record_key=[key[name] for name in spec.key], fields=sorted(changes))
        return self._to_record(table, row)

    async def _delete(self, session: AsyncSession, table: str, key: Mapping[str, Any]) -> None:
        row = await self._get_existing(session, table, key, "delete_record")
        await session.delete(row)
        await session.flush()
        logger.debug("Record deleted", table=table)
