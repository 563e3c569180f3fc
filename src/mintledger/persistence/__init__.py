"""Persistence layer exports."""

from .errors import ConcurrencyError, NotFoundError, RepositoryError
from .interfaces import CollectionRepository, EventRepository, UnitOfWork
from .memory import InMemoryCollectionRepository, InMemoryEventRepository, InMemoryUnitOfWork

__all__ = [
    "CollectionRepository",
    "ConcurrencyError",
    "EventRepository",
    "InMemoryCollectionRepository",
    "InMemoryEventRepository",
    "InMemoryUnitOfWork",
    "NotFoundError",
    "RepositoryError",
    "UnitOfWork",
]
