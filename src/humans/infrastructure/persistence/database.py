"""Async database access for humans.inc.

One ``DatabaseManager`` per process owns the SQLAlchemy engine and session
factory. Request handlers get a session through ``get_db_session``; the
CLI uses ``DatabaseManager.session`` directly. SQLite (aiosqlite) and
PostgreSQL (asyncpg) are supported.
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncGenerator

from sqlalchemy import event, text
from sqlalchemy.engine import URL, make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from humans.core.config import Settings, get_settings
from humans.core.logging import get_logger

logger = get_logger(__name__)


class Base(DeclarativeBase):
    """Declarative base of the users, profiles, blocks and collections tables."""


def _configure_sqlite_connection(dbapi_connection, connection_record) -> None:
    """Turn on foreign keys and hand transaction control to SQLAlchemy.

    The block to collection ON DELETE SET NULL and the per-profile
    cascades need foreign_keys on. With the driver's implicit
    transactions off, ``_begin_sqlite_transaction`` emits BEGIN itself
    and batch updates can nest SAVEPOINTs.
    """
    dbapi_connection.isolation_level = None
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _begin_sqlite_transaction(conn) -> None:
    conn.exec_driver_sql("BEGIN")


def register_sqlite_pragmas(engine: AsyncEngine) -> None:
    """Attach the SQLite connection listeners to an engine."""
    if engine.url.get_backend_name() == "sqlite":
        event.listen(engine.sync_engine, "connect", _configure_sqlite_connection)
        event.listen(engine.sync_engine, "begin", _begin_sqlite_transaction)


def _engine_options(url: URL, settings: Settings) -> dict[str, Any]:
    if url.get_backend_name() == "sqlite":
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_timeout": settings.db_pool_timeout,
        "pool_recycle": settings.db_pool_recycle,
        "pool_pre_ping": True,
    }


def ensure_sqlite_directory(url: URL) -> None:
    """Create the parent directory of a file-backed SQLite database."""
    if url.get_backend_name() != "sqlite":
        return
    database = url.database
    if database and database != ":memory:" and not database.startswith("file:"):
        Path(database).parent.mkdir(parents=True, exist_ok=True)


class DatabaseManager:
    """Lazily builds the engine and session factory for one database URL."""

    def __init__(self, database_url: str | None = None) -> None:
        self.settings = get_settings()
        self.url = make_url(database_url or self.settings.database_url)
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            self._engine = create_async_engine(
                self.url,
                echo=self.settings.db_echo,
                **_engine_options(self.url, self.settings),
            )
            register_sqlite_pragmas(self._engine)
            logger.info(
                "Database engine created",
                database_url=self.url.render_as_string(hide_password=True),
            )
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        if self._session_factory is None:
            self._session_factory = async_sessionmaker(
                bind=self.engine, expire_on_commit=False, autoflush=False
            )
        return self._session_factory

    async def create_tables(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created", tables=sorted(Base.metadata.tables))

    async def drop_tables(self) -> None:
        """Drop every table. Test and local use only."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        logger.warning("Database tables dropped")

    async def disconnect(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.info("Database engine disposed")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Open a session that rolls back whatever is uncommitted on error.

        Example:
            async with db.session() as session:
                profile = await ProfileRepository(session).get_by_username("alice")
        """
        async with self.session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    async def check_connection(self) -> bool:
        """Run ``SELECT 1``; used by startup and the readiness probe."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception as e:
            logger.error("Database connection check failed", error=str(e))
            return False
        return True


_db_manager: DatabaseManager | None = None


def get_db_manager() -> DatabaseManager:
    """Return the process-wide database manager."""
    global _db_manager
    if _db_manager is None:
        _db_manager = DatabaseManager()
    return _db_manager


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding one session per request."""
    async with get_db_manager().session() as session:
        yield session


async def init_database(create_tables: bool | None = None) -> None:
    """Check connectivity and create missing tables.

    Args:
        create_tables: Create tables even outside development (True) or
            never (False). Defaults to creating them only in development.

    Raises:
        RuntimeError: If the database cannot be reached.
    """
    # Registers the models on Base.metadata
    from humans.infrastructure.persistence import models  # noqa: F401

    db = get_db_manager()
    ensure_sqlite_directory(db.url)

    if not await db.check_connection():
        raise RuntimeError("Failed to connect to database")

    if create_tables is None:
        create_tables = db.settings.is_development
    if create_tables:
        await db.create_tables()
    else:
        logger.info("Skipping table creation outside development")


async def close_database() -> None:
    await get_db_manager().disconnect()
