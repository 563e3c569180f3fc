"""Collaborator interfaces consumed by the minting core."""

from __future__ import annotations

from typing import Protocol

from mintledger.domain import Address, Amount, TokenId


class ItemRegistry(Protocol):
    """Ownership and enumeration bookkeeping for issued items."""

    def create(self, owner: Address, identifier: TokenId) -> None: ...

    def set_metadata_reference(self, identifier: TokenId, reference: str) -> None: ...

    def metadata_reference_of(self, identifier: TokenId) -> str: ...

    def owner_of(self, identifier: TokenId) -> Address: ...

    def count_owned_by(self, owner: Address) -> int: ...

    def identifier_at_index_for_owner(self, owner: Address, index: int) -> TokenId: ...


class FundsTransfer(Protocol):
    """Native-currency transfer primitive used by treasury withdrawals."""

    def transfer(self, to_address: Address, amount: Amount) -> bool: ...


class AccessControl(Protocol):
    """Administrator gate for privileged operations."""

    def is_administrator(self, identity: Address) -> bool: ...


__all__ = ["AccessControl", "FundsTransfer", "ItemRegistry"]
