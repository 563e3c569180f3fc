"""Async SQLite unit of work binding the collection and event repositories."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from types import TracebackType
from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from mintledger.persistence.interfaces import UnitOfWork

from .migrations import apply_migrations
from .repositories import SQLiteCollectionRepository, SQLiteEventRepository


def _enable_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class _SchemaState:
    """Runs migrations once per engine."""

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine
        self._lock = asyncio.Lock()
        self._ready = False

    async def ensure(self) -> None:
        if self._ready:
            return
        async with self._lock:
            if not self._ready:
                await apply_migrations(self._engine)
                self._ready = True


class SQLiteUnitOfWork(UnitOfWork):
    """One session per ``async with`` block.

    Leaving the block normally commits; leaving it with an exception rolls back,
    so a failed controller operation writes neither state nor events.
    """

    collection_repository: SQLiteCollectionRepository
    event_repository: SQLiteEventRepository

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        schema: _SchemaState,
    ) -> None:
        self._session_factory = session_factory
        self._schema = schema
        self._session: AsyncSession | None = None

    async def __aenter__(self) -> SQLiteUnitOfWork:
        await self._schema.ensure()
        self._session = self._session_factory()
        self.collection_repository = SQLiteCollectionRepository(self._session)
        self.event_repository = SQLiteEventRepository(self._session)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        session = self._session
        if session is None:
            return
        self._session = None
        try:
            if exc_type is None:
                await session.commit()
            else:
                await session.rollback()
        finally:
            await session.close()

    def _require_session(self) -> AsyncSession:
        if self._session is None:
            msg = "Unit of work used outside of its 'async with' block"
            raise RuntimeError(msg)
        return self._session

    async def commit(self) -> None:
        await self._require_session().commit()

    async def rollback(self) -> None:
        await self._require_session().rollback()


def create_sqlite_unit_of_work_factory(database_url: str) -> Callable[[], SQLiteUnitOfWork]:
    """Build a factory producing units of work that share one engine."""

    engine = create_async_engine(database_url, future=True)
    event.listen(engine.sync_engine, "connect", _enable_foreign_keys)
    session_factory = async_sessionmaker(engine, expire_on_commit=False)
    schema = _SchemaState(engine)

    def factory() -> SQLiteUnitOfWork:
        return SQLiteUnitOfWork(session_factory, schema)

    return factory


__all__ = ["SQLiteUnitOfWork", "create_sqlite_unit_of_work_factory"]
