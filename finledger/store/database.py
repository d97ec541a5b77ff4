"""
Embedded SQLite store access.

The ``Database`` object owns the async engine and hands out sessions.
Every balance-affecting operation runs inside ``unit_of_work()``: one
store transaction that commits when the block exits cleanly and rolls
back on any exception. SQLAlchemy errors surface as ``StoreFailure``
only after the rollback has happened.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy import event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from finledger.config import get_settings
from finledger.errors import StoreFailure
from finledger.store.schema import Base


def _set_sqlite_pragmas(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()


class Database:
    """
    Async SQLAlchemy engine wrapper for the local ledger file.
    
    Usage:
        db = Database("sqlite+aiosqlite:///ledger.db")
        await db.create_all()
        async with db.unit_of_work() as session:
            ...
    """
    
    def __init__(self, url: Optional[str] = None, echo: Optional[bool] = None):
        if url is None or echo is None:
            settings = get_settings().database
            url = url or settings.url
            echo = settings.echo if echo is None else echo
        
        self._url = url
        self._engine: AsyncEngine = create_async_engine(url, echo=echo)
        event.listen(self._engine.sync_engine, "connect", _set_sqlite_pragmas)
        self._sessionmaker = async_sessionmaker(
            self._engine,
            expire_on_commit=False,
        )
    
    @property
    def url(self) -> str:
        return self._url
    
    @property
    def engine(self) -> AsyncEngine:
        return self._engine
    
    async def create_all(self) -> None:
        """Create any missing tables. Existing data is left untouched."""
        try:
            async with self._engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as e:
            raise StoreFailure(f"Could not initialize database: {e}") from e
    
    async def dispose(self) -> None:
        await self._engine.dispose()
    
    @asynccontextmanager
    async def unit_of_work(self) -> AsyncIterator[AsyncSession]:
        """
        One atomic unit: commit on clean exit, roll back on any exception.
        
        Raises:
            StoreFailure: the store reported an error, or a value did not fit
                its column; nothing was committed.
        """
        try:
            async with self._sessionmaker() as session:
                async with session.begin():
                    yield session
        except (SQLAlchemyError, OverflowError) as e:
            raise StoreFailure(str(e)) from e
    
    @asynccontextmanager
    async def reader(self) -> AsyncIterator[AsyncSession]:
        """Session for read-only queries; nothing is committed."""
        try:
            async with self._sessionmaker() as session:
                yield session
        except (SQLAlchemyError, OverflowError) as e:
            raise StoreFailure(str(e)) from e
