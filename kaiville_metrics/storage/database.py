# Copyright (c) 2026 Kaiville Contributors. All Rights Reserved.

"""
Database Connection Manager — Async SQLAlchemy engine and session factory.

A Database is built once by the process (app lifespan, worker startup or a
test fixture) and handed to the repositories. Nothing in this package opens
its own connection behind the caller's back.
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from kaiville_metrics.core.config import MetricsSettings, get_settings
from kaiville_metrics.storage.models import Base, ContentBase

logger = logging.getLogger("kaiville.database")

# Seconds a SQLite writer waits for the database lock before failing
SQLITE_BUSY_TIMEOUT = 30


class Database:
    """
    Manages the async SQLAlchemy engine and session factory.

    Usage:
        db = Database("postgresql+asyncpg://...")
        await db.init()        # Verify connection (and create tables in dev)
        session = db.session() # Get a new AsyncSession
        await db.close()       # Dispose engine on shutdown
    """

    def __init__(
        self,
        database_url: str,
        pool_size: int = 10,
        max_overflow: int = 20,
        echo: bool = False,
    ) -> None:
        self.url = database_url
        if database_url.startswith("sqlite"):
            self.engine: AsyncEngine = create_async_engine(
                database_url,
                echo=echo,
                connect_args={"timeout": SQLITE_BUSY_TIMEOUT},
            )
            event.listen(self.engine.sync_engine, "connect", _sqlite_on_connect)
        else:
            self.engine = create_async_engine(
                database_url,
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_pre_ping=True,
                echo=echo,
            )
        self.session_factory: async_sessionmaker[AsyncSession] = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @classmethod
    def from_settings(cls, settings: MetricsSettings) -> "Database":
        return cls(
            settings.DATABASE_URL,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
        )

    @property
    def dialect(self) -> str:
        return self.engine.dialect.name

    def session(self) -> AsyncSession:
        """Create a new async session."""
        return self.session_factory()

    async def init(self, create_tables: bool = False) -> None:
        """
        Verify the connection; optionally create the metric table.

        NOTE: For production, apply migrations instead of create_tables.
        """
        async with self.engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
        if create_tables:
            await self.create_tables()
        logger.info("Metrics database ready (dialect=%s)", self.dialect)

    async def ping(self) -> bool:
        """Return True when the store answers a trivial query."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning("Metrics database ping failed: %s", e)
            return False

    async def create_tables(self, include_content: bool = False) -> None:
        """Create engine-owned tables; content tables only for dev/test."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
            if include_content:
                await conn.run_sync(ContentBase.metadata.create_all)

    async def drop_tables(self, include_content: bool = False) -> None:
        """Drop engine-owned tables (test cleanup only)."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
            if include_content:
                await conn.run_sync(ContentBase.metadata.drop_all)

    async def close(self) -> None:
        """Dispose the engine and release all connections."""
        logger.info("Closing metrics database connections...")
        await self.engine.dispose()


def _sqlite_on_connect(dbapi_connection, connection_record) -> None:
    # WAL lets readers proceed while an upsert holds the write lock
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()


def create_database(settings: Optional[MetricsSettings] = None) -> Database:
    """Build a Database from settings (defaults to the environment)."""
    return Database.from_settings(settings or get_settings())
