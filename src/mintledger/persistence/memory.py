"""In-memory repository implementations for unit testing."""

from __future__ import annotations

import asyncio
from collections import defaultdict
from collections.abc import Sequence
from dataclasses import dataclass, field
from types import TracebackType

from mintledger.domain import CollectionId, CollectionState, EventType, MintEvent
from mintledger.persistence.errors import ConcurrencyError, NotFoundError
from mintledger.persistence.interfaces import (
    CollectionRepository,
    EventRepository,
    UnitOfWork,
)


@dataclass
class InMemoryCollectionRepository(CollectionRepository):
    _states: dict[CollectionId, CollectionState] = field(default_factory=dict)

    async def get(self, collection_id: CollectionId) -> CollectionState | None:
        return self._states.get(collection_id)

    async def add(self, state: CollectionState) -> None:
        if state.collection_id in self._states:
            msg = f"Collection {state.collection_id} already exists"
            raise ConcurrencyError(msg)
        self._states[state.collection_id] = state

    async def update(self, state: CollectionState) -> None:
        current = self._states.get(state.collection_id)
        if current is None:
            msg = f"Collection {state.collection_id} not found"
            raise NotFoundError(msg)
        if current.revision != state.revision - 1:
            msg = (
                f"Collection {state.collection_id} is at revision {current.revision}, "
                f"cannot write revision {state.revision}"
            )
            raise ConcurrencyError(msg)
        self._states[state.collection_id] = state

    async def list_ids(self) -> Sequence[CollectionId]:
        return sorted(self._states)


@dataclass
class InMemoryEventRepository(EventRepository):
    _events: dict[CollectionId, list[MintEvent]] = field(
        default_factory=lambda: defaultdict(list)
    )

    async def add_many(self, collection_id: CollectionId, events: Sequence[MintEvent]) -> None:
        self._events[collection_id].extend(events)

    async def list_for_collection(
        self,
        collection_id: CollectionId,
        *,
        event_type: EventType | None = None,
    ) -> Sequence[MintEvent]:
        return [
            event
            for event in self._events.get(collection_id, [])
            if event_type is None or event.event_type == event_type
        ]

    async def count(self, collection_id: CollectionId) -> int:
        return len(self._events.get(collection_id, []))


@dataclass
class InMemoryUnitOfWork(UnitOfWork):
    collection_repository: InMemoryCollectionRepository = field(
        default_factory=InMemoryCollectionRepository
    )
    event_repository: InMemoryEventRepository = field(default_factory=InMemoryEventRepository)
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    async def __aenter__(self) -> InMemoryUnitOfWork:
        await self._lock.acquire()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self._lock.release()

    async def commit(self) -> None:
        return None

    async def rollback(self) -> None:
        return None
