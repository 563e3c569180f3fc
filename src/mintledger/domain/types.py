"""Shared type aliases for the domain layer."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, NewType

Address = NewType("Address", str)
TokenId = NewType("TokenId", int)
CollectionId = NewType("CollectionId", str)
Amount = int
JsonMapping = Mapping[str, Any]

# Largest amount representable by the settlement layer (unsigned 256-bit).
MAX_AMOUNT: Amount = 2**256 - 1

__all__ = [
    "MAX_AMOUNT",
    "Address",
    "Amount",
    "CollectionId",
    "JsonMapping",
    "TokenId",
]
