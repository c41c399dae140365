"""
Database engine and session management.

One process-wide :class:`Database` owns the async engine. It is connected in
the application lifespan before any request is served and disposed on
shutdown.
"""
import logging
from datetime import timezone
from typing import AsyncIterator, Optional

from sqlalchemy import DateTime, event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base
from sqlalchemy.types import TypeDecorator

from dealership.config import Settings

logger = logging.getLogger(__name__)

Base = declarative_base()


class UTCDateTime(TypeDecorator):
    """Timestamp stored as UTC on every backend.

    Aware values are converted to UTC and naive values are taken to be UTC.
    SQLite keeps no offset, so the UTC wall-clock time is written there.
    Values read back are always aware.
    """

    impl = DateTime
    cache_ok = True

    def __init__(self):
        super().__init__(timezone=True)

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        value = value.astimezone(timezone.utc)
        if dialect.name == "sqlite":
            return value.replace(tzinfo=None)
        return value

    def process_result_value(self, value, dialect):
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ships with foreign key enforcement off per connection.
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Owner of the async engine and its session factory."""

    def __init__(self):
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker] = None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("Database is not initialized")
        return self._engine

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    @property
    def is_sqlite(self) -> bool:
        return self.engine.dialect.name == "sqlite"

    @property
    def backend_name(self) -> str:
        return "SQLite" if self.is_sqlite else "PostgreSQL"

    def connect(self, settings: Settings) -> AsyncEngine:
        """Create the engine for the backend selected in ``settings``."""
        if self._engine is not None:
            return self._engine

        url = settings.resolved_database_url
        if settings.use_sqlite:
            engine = create_async_engine(url, echo=settings.debug)
            event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        else:
            engine = create_async_engine(
                url,
                echo=settings.debug,
                pool_pre_ping=True,
                pool_recycle=300,
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_timeout=settings.db_pool_timeout,
            )

        self._engine = engine
        self._session_factory = async_sessionmaker(
            engine, expire_on_commit=False, autoflush=False
        )
        logger.info("Connected %s engine", self.backend_name)
        return engine

    async def disconnect(self) -> None:
        if self._engine is None:
            return
        backend = self.backend_name
        await self._engine.dispose()
        self._engine = None
        self._session_factory = None
        logger.info("Disposed %s engine", backend)

    def session(self) -> AsyncSession:
        if self._session_factory is None:
            raise RuntimeError("Database is not initialized")
        return self._session_factory()


db = Database()


async def get_db() -> AsyncIterator[AsyncSession]:
    """FastAPI dependency yielding a request-scoped session."""
    async with db.session() as session:
        yield session


async def init_db(database: Database = db) -> list:
    """Create missing tables and apply additive column migrations."""
    # Models must be imported so their tables are registered on Base.metadata.
    from dealership import models  # noqa: F401
    from dealership.migrations import run_migrations

    async with database.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("%s tables initialized successfully", database.backend_name)

    return await run_migrations(database.engine)
