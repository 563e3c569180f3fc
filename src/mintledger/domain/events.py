"""Notifications emitted by the minting controller."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated, Literal

from pydantic import Field, TypeAdapter

from .base import DomainModel
from .types import Address, Amount, TokenId


def utc_now() -> datetime:
    return datetime.now(UTC)


class DomainEvent(DomainModel):
    """Common envelope for every notification."""

    sequence: int = 0
    emitted_at: datetime = Field(default_factory=utc_now)


class TokenMinted(DomainEvent):
    event_type: Literal["token_minted"] = "token_minted"
    recipient: Address
    token_id: TokenId
    metadata_reference: str


class WhitelistUpdated(DomainEvent):
    event_type: Literal["whitelist_updated"] = "whitelist_updated"
    address: Address
    enabled: bool


class PublicMintToggled(DomainEvent):
    event_type: Literal["public_mint_toggled"] = "public_mint_toggled"
    enabled: bool


class WhitelistMintToggled(DomainEvent):
    event_type: Literal["whitelist_mint_toggled"] = "whitelist_mint_toggled"
    enabled: bool


class BasePathUpdated(DomainEvent):
    event_type: Literal["base_path_updated"] = "base_path_updated"
    base_path: str


class MintPriceUpdated(DomainEvent):
    event_type: Literal["mint_price_updated"] = "mint_price_updated"
    mint_price: Amount


MintEvent = Annotated[
    TokenMinted
    | WhitelistUpdated
    | PublicMintToggled
    | WhitelistMintToggled
    | BasePathUpdated
    | MintPriceUpdated,
    Field(discriminator="event_type"),
]

_EVENT_ADAPTER: TypeAdapter[MintEvent] = TypeAdapter(MintEvent)


def parse_event(payload: object) -> MintEvent:
    """Rebuild a typed event from its JSON-compatible payload."""

    return _EVENT_ADAPTER.validate_python(payload)


__all__ = [
    "BasePathUpdated",
    "DomainEvent",
    "MintEvent",
    "MintPriceUpdated",
    "PublicMintToggled",
    "TokenMinted",
    "WhitelistMintToggled",
    "WhitelistUpdated",
    "parse_event",
]
