"""
Database configuration for the Polyglot server.

DatabaseManager owns the async SQLAlchemy engine and session maker. One
instance lives in the ApplicationContainer; nothing here is module-global.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from .exceptions import DatabaseError
from .models import Base
from .structured_logging.enhanced_logging_config import get_logger
from .utils.db_errors import parse_database_error
from .utils.error_logging import log_and_raise

logger = get_logger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, _connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class DatabaseManager:
    """
    Manages the async engine and session maker for one database URL.

    Engines are created lazily on first use so that constructing the manager
    never touches the database.
    """

    def __init__(self, database_url: str, echo: bool = False) -> None:
        self.database_url = database_url
        self.echo = echo
        self.engine: AsyncEngine | None = None
        self.session_maker: async_sessionmaker[AsyncSession] | None = None

    def _initialize(self) -> None:
        if self.engine is not None:
            return

        url = make_url(self.database_url)
        if url.drivername.startswith("sqlite") and url.database and url.database != ":memory:":
            Path(url.database).expanduser().resolve().parent.mkdir(parents=True, exist_ok=True)

        self.engine = create_async_engine(self.database_url, echo=self.echo, pool_pre_ping=True)
        if url.drivername.startswith("sqlite"):
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        self.session_maker = async_sessionmaker(self.engine, class_=AsyncSession, expire_on_commit=False)
        logger.info("Database engine created", driver=url.drivername, database=url.database)

    def get_engine(self) -> AsyncEngine:
        self._initialize()
        if self.engine is None:
            raise RuntimeError("Database engine was not created")
        return self.engine

    def get_session_maker(self) -> async_sessionmaker[AsyncSession]:
        self._initialize()
        if self.session_maker is None:
            raise RuntimeError("Database session maker was not created")
        return self.session_maker

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Yield a session; roll back if the body raises."""
        async with self.get_session_maker()() as db_session:
            try:
                yield db_session
            except BaseException:
                await db_session.rollback()
                raise

    async def create_tables(self) -> None:
        """Create every table registered on the shared metadata."""
        try:
            async with self.get_engine().begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as e:
            log_and_raise(
                DatabaseError,
                f"Failed to create database tables: {e}",
                details={"error_type": type(e).__name__},
                user_friendly=parse_database_error(e),
                operation="create_tables",
            )
        logger.info("Database tables ensured", tables=sorted(Base.metadata.tables))

    async def close(self) -> None:
        """Dispose of the engine and its pooled connections."""
        if self.engine is not None:
            await self.engine.dispose()
            logger.info("Database engine disposed")
        self.engine = None
        self.session_maker = None
