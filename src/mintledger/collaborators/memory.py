"""In-memory collaborator implementations."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from mintledger.domain import Address, Amount, IssuedToken, TokenId

from .exceptions import DuplicateItemError, ItemNotFoundError
from .interfaces import AccessControl, FundsTransfer, ItemRegistry

TransferHook = Callable[[Address, Amount], None]


@dataclass
class InMemoryItemRegistry(ItemRegistry):
    _owners: dict[TokenId, Address] = field(default_factory=dict)
    _references: dict[TokenId, str] = field(default_factory=dict)
    _owned: dict[Address, list[TokenId]] = field(default_factory=lambda: defaultdict(list))

    @classmethod
    def from_tokens(cls, tokens: Iterable[IssuedToken]) -> InMemoryItemRegistry:
        registry = cls()
        for token in sorted(tokens, key=lambda item: item.token_id):
            registry.create(token.owner, token.token_id)
            registry.set_metadata_reference(token.token_id, token.metadata_reference)
        return registry

    def create(self, owner: Address, identifier: TokenId) -> None:
        if identifier in self._owners:
            msg = f"Item {identifier} already exists"
            raise DuplicateItemError(msg)
        self._owners[identifier] = owner
        self._owned[owner].append(identifier)

    def set_metadata_reference(self, identifier: TokenId, reference: str) -> None:
        if identifier not in self._owners:
            msg = f"Item {identifier} not found"
            raise ItemNotFoundError(msg)
        self._references[identifier] = reference

    def metadata_reference_of(self, identifier: TokenId) -> str:
        try:
            return self._references[identifier]
        except KeyError as exc:
            msg = f"Item {identifier} has no metadata reference"
            raise ItemNotFoundError(msg) from exc

    def owner_of(self, identifier: TokenId) -> Address:
        try:
            return self._owners[identifier]
        except KeyError as exc:
            msg = f"Item {identifier} not found"
            raise ItemNotFoundError(msg) from exc

    def count_owned_by(self, owner: Address) -> int:
        return len(self._owned.get(owner, ()))

    def identifier_at_index_for_owner(self, owner: Address, index: int) -> TokenId:
        owned = self._owned.get(owner, [])
        if not 0 <= index < len(owned):
            msg = f"Owner {owner} has no item at index {index}"
            raise IndexError(msg)
        return owned[index]


@dataclass
class InMemoryFundsTransfer(FundsTransfer):
    """Credits payee balances; payees listed in ``rejecting`` refuse funds."""

    balances: dict[Address, Amount] = field(default_factory=lambda: defaultdict(int))
    rejecting: set[Address] = field(default_factory=set)
    on_transfer: TransferHook | None = None

    def transfer(self, to_address: Address, amount: Amount) -> bool:
        if to_address in self.rejecting:
            return False
        if self.on_transfer is not None:
            self.on_transfer(to_address, amount)
        self.balances[to_address] += amount
        return True

    def balance_of(self, address: Address) -> Amount:
        return self.balances.get(address, 0)


@dataclass(frozen=True, slots=True)
class SingleAdministrator(AccessControl):
    administrator: Address

    def is_administrator(self, identity: Address) -> bool:
        return identity == self.administrator


__all__ = [
    "InMemoryFundsTransfer",
    "InMemoryItemRegistry",
    "SingleAdministrator",
    "TransferHook",
]
