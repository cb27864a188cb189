"""
Database Client

Async SQLAlchemy engine and session management for the custody store.
"""

import logging
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from custody_service.infrastructure.database.models import Base

logger = logging.getLogger(__name__)


def _enforce_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite ignores REFERENCES clauses unless asked per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class DatabaseClient:
    """Owns the engine and hands out sessions.

    One instance is created at application startup and kept on
    ``app.state.db_client``; scripts create their own.
    """

    def __init__(self, database_url: str):
        self.database_url = database_url
        self.engine: AsyncEngine = None
        self.session_maker: async_sessionmaker = None

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    async def initialize(self, create_schema: bool = True):
        """Create the engine, check connectivity and (optionally) create missing tables

        Args:
            create_schema: Run ``create_all`` for tables Alembic has not created yet
        """
        logger.info(f"Initializing database: {self.database_url}")

        if self.is_sqlite:
            self.engine = create_async_engine(self.database_url, echo=False, poolclass=NullPool)
            event.listen(self.engine.sync_engine, "connect", _enforce_sqlite_foreign_keys)
        else:
            self.engine = create_async_engine(self.database_url, echo=False, pool_pre_ping=True)

        self.session_maker = async_sessionmaker(self.engine, class_=AsyncSession, expire_on_commit=False)

        async with self.engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
            if create_schema:
                await conn.run_sync(Base.metadata.create_all)

        logger.info("Database initialized successfully")

    async def close(self):
        if self.engine:
            await self.engine.dispose()
            logger.info("Database connections closed")

    def get_session(self) -> AsyncSession:
        if not self.session_maker:
            raise RuntimeError("Database not initialized. Call initialize() first.")
        return self.session_maker()

    async def health_check(self) -> bool:
        try:
            async with self.get_session() as session:
                await session.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return False


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Dependency for one request-scoped session

    Services commit their own unit of work; anything left uncommitted when a
    handler raises is rolled back here.
    """
    db_client: DatabaseClient = request.app.state.db_client
    async with db_client.get_session() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
