"""Orchestration layer exports."""

from .service import CollectionService, Operation, UnitOfWorkFactory

__all__ = ["CollectionService", "Operation", "UnitOfWorkFactory"]
