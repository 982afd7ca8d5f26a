"""
SQLAlchemy async engine and session management

This module provides:
1. AsyncEngineManager: owns the engine for one database URL, rebuilt when the event loop changes
2. Base: declarative base for every ORM model
3. Database: the storage handle handed to units of work and registries through DI

SQLite:
- Each transaction starts with BEGIN IMMEDIATE, so concurrent writers are serialised
  by the database itself rather than failing at commit time
- busy_timeout makes a waiting writer block instead of raising "database is locked"

PostgreSQL (asyncpg) uses the default READ COMMITTED transactions; the unique constraint
on seat occupancy is the cross-process guard.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Optional

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from bus_reservation.platform.config.core_setting import settings
from bus_reservation.platform.logging.loguru_io import Logger


# =============================================================================
# Base Model
# =============================================================================


class Base(DeclarativeBase):
    pass


# =============================================================================
# Event-loop-aware Engine Manager
# =============================================================================


def _install_sqlite_transaction_hooks(engine: AsyncEngine, *, busy_timeout: float) -> None:
    """Take over transaction control from pysqlite so BEGIN IMMEDIATE can be issued."""

    @event.listens_for(engine.sync_engine, 'connect')
    def _on_connect(dbapi_connection: Any, connection_record: Any) -> None:
        # Disable pysqlite's implicit BEGIN; we emit our own below
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute(f'PRAGMA busy_timeout = {int(busy_timeout * 1000)}')
        cursor.close()

    @event.listens_for(engine.sync_engine, 'begin')
    def _on_begin(conn: Any) -> None:
        conn.exec_driver_sql('BEGIN IMMEDIATE')


class AsyncEngineManager:
    """
    Manages one SQLAlchemy async engine with event loop awareness.

    Ensures the engine is always bound to the current event loop to prevent
    "Task got Future attached to a different loop" errors (pytest creates a loop per test).
    """

    def __init__(self, *, database_url: str, echo: bool = False) -> None:
        self._database_url = database_url
        self._echo = echo
        self._engine: Optional[AsyncEngine] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._session_maker: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def is_sqlite(self) -> bool:
        return make_url(self._database_url).get_backend_name() == 'sqlite'

    def get_engine(self) -> AsyncEngine:
        try:
            current_loop = asyncio.get_running_loop()
        except RuntimeError:
            # No event loop running, create engine without loop tracking
            if self._engine is None:
                self._engine = self._create_engine()
            return self._engine

        if self._loop is not current_loop:
            if self._engine is not None:
                Logger.base.warning('🔄 [DB] Event loop changed, recreating engine')
                # dispose() is async; the old pool is garbage collected with the loop
                self._session_maker = None
            Logger.base.info(f'🔗 [DB] Creating engine for event loop {id(current_loop)}')
            self._engine = self._create_engine()
            self._loop = current_loop

        assert self._engine is not None
        return self._engine

    def get_session_maker(self) -> async_sessionmaker[AsyncSession]:
        engine = self.get_engine()
        if self._session_maker is None:
            self._session_maker = async_sessionmaker(
                engine,
                class_=AsyncSession,
                expire_on_commit=False,
            )
        return self._session_maker

    async def dispose(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
        self._engine = None
        self._session_maker = None
        self._loop = None

    def _create_engine(self) -> AsyncEngine:
        if self.is_sqlite:
            engine = create_async_engine(
                self._database_url,
                echo=self._echo,
                connect_args={'timeout': settings.SQLITE_BUSY_TIMEOUT_SECONDS},
            )
            _install_sqlite_transaction_hooks(
                engine, busy_timeout=settings.SQLITE_BUSY_TIMEOUT_SECONDS
            )
            return engine

        return create_async_engine(
            self._database_url,
            echo=self._echo,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_POOL_MAX_OVERFLOW,
            pool_timeout=settings.DB_POOL_TIMEOUT,
            pool_recycle=settings.DB_POOL_RECYCLE,
            pool_pre_ping=settings.DB_POOL_PRE_PING,
        )


# =============================================================================
# Database Class (storage handle for DI)
# =============================================================================


class Database:
    """
    Storage handle passed to units of work and repositories at startup.

    There is no module-level engine: every Database owns its own AsyncEngineManager,
    so tests can point a fresh instance at a temporary SQLite file.
    """

    def __init__(self, *, database_url: str | None = None, echo: bool | None = None) -> None:
        self._engine_manager = AsyncEngineManager(
            database_url=database_url or settings.DATABASE_URL,
            echo=settings.DB_ECHO if echo is None else echo,
        )

    @property
    def engine(self) -> AsyncEngine:
        return self._engine_manager.get_engine()

    def new_session(self) -> AsyncSession:
        """Open a session the caller is responsible for closing (used by units of work)."""
        return self._engine_manager.get_session_maker()()

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Context manager for database sessions

        Note: Automatically handles rollback on exception
        """
        session_maker = self._engine_manager.get_session_maker()
        async with session_maker() as session:
            yield session

    async def create_db_and_tables(self) -> None:
        """Create database tables if they don't exist"""
        # Import models so they register on Base.metadata
        import bus_reservation.service.reservation.driven_adapter.model  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all, checkfirst=True)
        Logger.base.info('🗄️ [DB] Tables ready')

    async def drop_tables(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def dispose(self) -> None:
        await self._engine_manager.dispose()
