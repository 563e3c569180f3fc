"""Persistence layer abstractions for repositories and unit of work."""

from __future__ import annotations

from collections.abc import Sequence
from types import TracebackType
from typing import Protocol

from mintledger.domain import CollectionId, CollectionState, EventType, MintEvent


class CollectionRepository(Protocol):
    """Snapshots of minting controller state keyed by collection."""

    async def get(self, collection_id: CollectionId) -> CollectionState | None: ...

    async def add(self, state: CollectionState) -> None: ...

    async def update(self, state: CollectionState) -> None: ...

    async def list_ids(self) -> Sequence[CollectionId]: ...


class EventRepository(Protocol):
    """Append-only notification history per collection."""

    async def add_many(self, collection_id: CollectionId, events: Sequence[MintEvent]) -> None: ...

    async def list_for_collection(
        self,
        collection_id: CollectionId,
        *,
        event_type: EventType | None = None,
    ) -> Sequence[MintEvent]: ...

    async def count(self, collection_id: CollectionId) -> int: ...


class UnitOfWork(Protocol):
    """Transactional boundary for repository operations."""

    collection_repository: CollectionRepository
    event_repository: EventRepository

    async def __aenter__(self) -> UnitOfWork: ...

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...
