"""Collection configuration and persisted controller state."""

from __future__ import annotations

from typing import Annotated

from pydantic import Field, NonNegativeInt, PositiveInt, field_validator, model_validator

from .base import DomainModel, MutableDomainModel
from .types import MAX_AMOUNT, Address, CollectionId, TokenId


class CollectionConfig(MutableDomainModel):
    """Issuance rules for one collection.

    ``max_supply``, ``max_mint_per_address`` and ``administrator`` are fixed at
    creation; the remaining fields are changed only through administrator
    operations on the controller.
    """

    name: Annotated[str, Field(min_length=1)]
    symbol: Annotated[str, Field(min_length=1)]
    max_supply: PositiveInt = Field(frozen=True)
    mint_price: Annotated[int, Field(ge=0, le=MAX_AMOUNT)] = 0
    max_mint_per_address: PositiveInt = Field(frozen=True)
    public_mint_enabled: bool = False
    whitelist_mint_enabled: bool = False
    base_path: str = ""
    administrator: Address = Field(frozen=True)

    @field_validator("administrator")
    @classmethod
    def validate_administrator(cls, value: str) -> str:
        if not value.strip():
            msg = "Administrator address must not be blank"
            raise ValueError(msg)
        return value


class IssuedToken(DomainModel):
    """Ownership record for one issued identifier."""

    token_id: Annotated[TokenId, Field(ge=1)]
    owner: Address
    metadata_reference: str


class CollectionState(DomainModel):
    """Complete snapshot of a minting controller, used for persistence."""

    collection_id: CollectionId
    config: CollectionConfig
    revision: NonNegativeInt = 0
    total_issued: NonNegativeInt = 0
    minted_counts: dict[Address, NonNegativeInt] = Field(default_factory=dict)
    allow_list: dict[Address, bool] = Field(default_factory=dict)
    treasury_balance: NonNegativeInt = 0
    tokens: tuple[IssuedToken, ...] = ()

    @model_validator(mode="after")
    def check_supply(self) -> CollectionState:
        if self.total_issued > self.config.max_supply:
            msg = (
                f"Collection {self.collection_id} has {self.total_issued} issued tokens, "
                f"above max supply {self.config.max_supply}"
            )
            raise ValueError(msg)
        if len(self.tokens) != self.total_issued:
            msg = (
                f"Collection {self.collection_id} lists {len(self.tokens)} tokens "
                f"but reports {self.total_issued} issued"
            )
            raise ValueError(msg)
        expected = list(range(1, self.total_issued + 1))
        if sorted(token.token_id for token in self.tokens) != expected:
            msg = f"Collection {self.collection_id} token identifiers are not contiguous"
            raise ValueError(msg)
        return self


__all__ = ["CollectionConfig", "CollectionState", "IssuedToken"]
