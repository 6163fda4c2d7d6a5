"""
Test configuration and fixtures for the Polyglot test suite.

Environment defaults are set before any polyglot import so module-level
configuration (Argon2 parameters, settings) sees test values.
"""

import os
from collections.abc import AsyncIterator, Generator, Iterator
from pathlib import Path

import pytest
import pytest_asyncio

os.environ.setdefault("SERVER_PORT", "54731")
os.environ.setdefault("SERVER_HOST", "127.0.0.1")
os.environ.setdefault("POLYGLOT_COOKIE_SECRET", "test-cookie-secret-for-testing-only")
os.environ.setdefault("LOGGING_ENVIRONMENT", "unit_test")
os.environ.setdefault("LOGGING_DISABLE_LOGGING", "true")
# Cheap hashing keeps the login tests fast
os.environ.setdefault("ARGON2_TIME_COST", "1")
os.environ.setdefault("ARGON2_MEMORY_COST", "1024")
os.environ.setdefault("ARGON2_PARALLELISM", "1")

# Imports must come after environment variables to prevent config loading failures
from fastapi.testclient import TestClient  # noqa: E402

from polyglot.app.factory import create_app  # noqa: E402
from polyglot.config import reset_config  # noqa: E402
from polyglot.config.models import AppConfig, DatabaseConfig, LoggingConfig  # noqa: E402
from polyglot.database import DatabaseManager  # noqa: E402
from polyglot.persistence.repositories.user_repository import UserRepository  # noqa: E402
from polyglot.sessions.store import SqlSessionStore  # noqa: E402


@pytest.fixture(autouse=True)
def reset_config_singleton() -> Generator[None, None, None]:
    """Reset config singleton before and after each test."""
    reset_config()
    yield
    reset_config()


def _sqlite_url(path: Path) -> str:
    return f"sqlite+aiosqlite:///{path.as_posix()}"


@pytest_asyncio.fixture
async def database(tmp_path: Path) -> AsyncIterator[DatabaseManager]:
    """A fresh SQLite database with all tables created."""
    manager = DatabaseManager(_sqlite_url(tmp_path / "polyglot.sqlite"))
    await manager.create_tables()
    yield manager
    await manager.close()


@pytest_asyncio.fixture
async def user_repository(database: DatabaseManager) -> UserRepository:
    return UserRepository(database)


@pytest_asyncio.fixture
async def session_store(database: DatabaseManager) -> SqlSessionStore:
    return SqlSessionStore(database, max_age_seconds=8 * 60 * 60)


@pytest.fixture
def app_config(tmp_path: Path) -> AppConfig:
    """Application config pointing at a per-test SQLite file."""
    return AppConfig(
        database=DatabaseConfig(url=_sqlite_url(tmp_path / "app.sqlite")),
        logging=LoggingConfig(environment="unit_test", disable_logging=True),
    )


@pytest.fixture
def client(app_config: AppConfig) -> Iterator[TestClient]:
    """TestClient with the lifespan running, so the container is initialized."""
    with TestClient(create_app(app_config)) as test_client:
        yield test_client
