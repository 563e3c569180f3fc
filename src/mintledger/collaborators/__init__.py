"""Collaborators consumed by the minting core."""

from .exceptions import CollaboratorError, DuplicateItemError, ItemNotFoundError
from .interfaces import AccessControl, FundsTransfer, ItemRegistry
from .memory import (
    InMemoryFundsTransfer,
    InMemoryItemRegistry,
    SingleAdministrator,
    TransferHook,
)

__all__ = [
    "AccessControl",
    "CollaboratorError",
    "DuplicateItemError",
    "FundsTransfer",
    "InMemoryFundsTransfer",
    "InMemoryItemRegistry",
    "ItemNotFoundError",
    "ItemRegistry",
    "SingleAdministrator",
    "TransferHook",
]
