"""SQLite repository implementations."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from mintledger.domain import (
    CollectionId,
    CollectionState,
    EventType,
    MintEvent,
    parse_event,
)
from mintledger.persistence.errors import ConcurrencyError, NotFoundError
from mintledger.persistence.interfaces import CollectionRepository, EventRepository

from .models import CollectionRecord, EventRecord


class SQLiteCollectionRepository(CollectionRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, collection_id: CollectionId) -> CollectionState | None:
        record = await self._session.get(CollectionRecord, str(collection_id))
        if record is None:
            return None
        return CollectionState.model_validate(record.payload)

    async def add(self, state: CollectionState) -> None:
        existing = await self._session.get(CollectionRecord, str(state.collection_id))
        if existing is not None:
            msg = f"Collection {state.collection_id} already exists"
            raise ConcurrencyError(msg)
        self._session.add(
            CollectionRecord(
                id=str(state.collection_id),
                name=state.config.name,
                revision=state.revision,
                total_issued=state.total_issued,
                payload=state.to_payload(),
            )
        )

    async def update(self, state: CollectionState) -> None:
        record = await self._session.get(CollectionRecord, str(state.collection_id))
        if record is None:
            msg = f"Collection {state.collection_id} not found"
            raise NotFoundError(msg)
        if record.revision != state.revision - 1:
            msg = (
                f"Collection {state.collection_id} is at revision {record.revision}, "
                f"cannot write revision {state.revision}"
            )
            raise ConcurrencyError(msg)
        record.name = state.config.name
        record.revision = state.revision
        record.total_issued = state.total_issued
        record.payload = state.to_payload()

    async def list_ids(self) -> Sequence[CollectionId]:
        stmt: Select[tuple[str]] = select(CollectionRecord.id).order_by(CollectionRecord.id)
        result = await self._session.execute(stmt)
        return [CollectionId(value) for value in result.scalars().all()]


class SQLiteEventRepository(EventRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add_many(self, collection_id: CollectionId, events: Sequence[MintEvent]) -> None:
        for event in events:
            self._session.add(
                EventRecord(
                    collection_id=str(collection_id),
                    sequence=event.sequence,
                    event_type=str(event.event_type),
                    emitted_at=event.emitted_at,
                    payload=event.to_payload(),
                )
            )

    async def list_for_collection(
        self,
        collection_id: CollectionId,
        *,
        event_type: EventType | None = None,
    ) -> Sequence[MintEvent]:
        stmt: Select[tuple[EventRecord]] = select(EventRecord).where(
            EventRecord.collection_id == str(collection_id)
        )
        if event_type is not None:
            stmt = stmt.where(EventRecord.event_type == event_type.value)
        stmt = stmt.order_by(EventRecord.sequence)
        result = await self._session.execute(stmt)
        return [parse_event(record.payload) for record in result.scalars().all()]

    async def count(self, collection_id: CollectionId) -> int:
        stmt = select(func.count()).select_from(EventRecord).where(
            EventRecord.collection_id == str(collection_id)
        )
        result = await self._session.execute(stmt)
        return int(result.scalar_one())


__all__ = ["SQLiteCollectionRepository", "SQLiteEventRepository"]
