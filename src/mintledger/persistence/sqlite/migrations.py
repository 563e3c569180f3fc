"""Versioned schema migrations for the mintledger SQLite store."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine

from .models import Base

logger = logging.getLogger(__name__)

Migration = Callable[[AsyncConnection], Awaitable[None]]

VERSION_TABLE = "mintledger_schema_migrations"


async def _create_tables(conn: AsyncConnection) -> None:
    await conn.run_sync(Base.metadata.create_all)


async def _index_event_types(conn: AsyncConnection) -> None:
    # Backs the event_type filter on list_for_collection.
    await conn.execute(
        text(
            "CREATE INDEX IF NOT EXISTS ix_mint_events_collection_type "
            "ON mint_events (collection_id, event_type)"
        )
    )


MIGRATIONS: tuple[tuple[int, Migration], ...] = (
    (1, _create_tables),
    (2, _index_event_types),
)


async def _current_version(conn: AsyncConnection) -> int:
    await conn.execute(
        text(f"CREATE TABLE IF NOT EXISTS {VERSION_TABLE} (version INTEGER PRIMARY KEY)")
    )
    result = await conn.execute(text(f"SELECT MAX(version) FROM {VERSION_TABLE}"))
    return result.scalar() or 0


async def apply_migrations(engine: AsyncEngine) -> int:
    """Run every migration newer than the recorded version; return the final version."""

    async with engine.begin() as conn:
        version = await _current_version(conn)
        for target, migration in MIGRATIONS:
            if target <= version:
                continue
            await migration(conn)
            await conn.execute(
                text(f"INSERT INTO {VERSION_TABLE} (version) VALUES (:version)"),
                {"version": target},
            )
            logger.debug("Applied schema migration %s", target)
            version = target
    return version


__all__ = ["MIGRATIONS", "apply_migrations"]
