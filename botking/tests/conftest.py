"""
Test configuration and fixtures for the BotKing test suite.

Environment variables are set before any botking module reads configuration
so every test runs against the in-memory backend with quiet logging.
"""

import os

import pytest
import pytest_asyncio

os.environ.setdefault("LOGGING_ENVIRONMENT", "unit_test")
os.environ.setdefault("LOGGING_LEVEL", "WARNING")
os.environ.setdefault("PERSISTENCE_BACKEND", "memory")

from botking.config import AppConfig, reset_config  # noqa: E402
from botking.factories import AccountFactory, ArtifactContext, BotFactory, ItemFactory  # noqa: E402
from botking.persistence import InMemoryPersistence, SqlAlchemyPersistence  # noqa: E402
from botking.structured_logging import setup_logging  # noqa: E402
from botking.sync import AutoSyncOrchestrator  # noqa: E402
from botking.tests.fixtures import SequentialIdGenerator, StepClock  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def configure_test_logging():
    """Configure structlog once for the whole session."""
    setup_logging(AppConfig().to_logging_dict(), force_reconfigure=True)


@pytest.fixture(autouse=True)
def isolated_config():
    """Drop any cached configuration between tests."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def clock():
    return StepClock()


@pytest.fixture
def ids():
    return SequentialIdGenerator()


@pytest.fixture
def context(clock):
    """Artifact context with deterministic clock and ids."""
    return ArtifactContext(clock=clock, ids=SequentialIdGenerator("component"))


@pytest.fixture
def bot_factory(context):
    return BotFactory(context)


@pytest.fixture
def item_factory(context):
    return ItemFactory(context)


@pytest.fixture
def account_factory(context):
    return AccountFactory(context)


@pytest.fixture
def memory_store(clock, ids):
    return InMemoryPersistence(clock=clock, ids=ids)


@pytest.fixture
def app_config():
    return AppConfig()


@pytest.fixture
def orchestrator(memory_store, context, app_config):
    """Orchestrator wired to the in-memory store."""
    return AutoSyncOrchestrator(memory_store, context=context, config=app_config)


@pytest_asyncio.fixture
async def sqlalchemy_store(clock, ids):
    """SQLAlchemy adapter over a private in-memory SQLite database."""
    store = SqlAlchemyPersistence("sqlite+aiosqlite:///:memory:", clock=clock, ids=ids)
    await store.create_schema()
    yield store
    await store.dispose()
