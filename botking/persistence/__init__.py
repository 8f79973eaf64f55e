"""
Persistence collaborator for BotKing.

The sync layer talks to storage only through PersistenceProtocol. Two
adapters are provided: InMemoryPersistence and SqlAlchemyPersistence.
"""

from __future__ import annotations

from ..config.models import AppConfig
from ..structured_logging.enhanced_logging_config import get_logger
from ..utils.clock import Clock, IdGenerator
from .memory_store import InMemoryPersistence
from .protocols import BatchOperation, OperationKind, PersistenceProtocol, Record
from .sqlalchemy_store import SqlAlchemyPersistence
from .tables import SLOT_TABLES, TABLE_FOR_ENTITY, TABLES, TableSpec, table_spec

logger = get_logger(__name__)


def build_persistence(
    config: AppConfig,
    clock: Clock | None = None,
    ids: IdGenerator | None = None,
) -> PersistenceProtocol:
    """
    Build the adapter selected by config.persistence.backend.

    The SQLAlchemy adapter is returned without its schema; call
    create_schema() on it when the tables do not exist yet.
    """
    settings = config.persistence
    if settings.backend == "sqlalchemy":
        logger.info("Using SQLAlchemy persistence", echo=settings.echo)
        return SqlAlchemyPersistence(settings.url, clock=clock, ids=ids, echo=settings.echo)
    logger.info("Using in-memory persistence")
    return InMemoryPersistence(clock=clock, ids=ids)


__all__ = [
    "BatchOperation",
    "InMemoryPersistence",
    "OperationKind",
    "PersistenceProtocol",
    "Record",
    "SLOT_TABLES",
    "SqlAlchemyPersistence",
    "TABLES",
    "TABLE_FOR_ENTITY",
    "TableSpec",
    "build_persistence",
    "table_spec",
]
