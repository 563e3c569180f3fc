"""Domain models for mintledger."""

from .base import DomainModel, MutableDomainModel
from .collection import CollectionConfig, CollectionState, IssuedToken
from .enums import EventType, MintMode, RejectionReason
from .events import (
    BasePathUpdated,
    DomainEvent,
    MintEvent,
    MintPriceUpdated,
    PublicMintToggled,
    TokenMinted,
    WhitelistMintToggled,
    WhitelistUpdated,
    parse_event,
)
from .minting import AdmissionDecision, MintReceipt, MintRequest
from .types import MAX_AMOUNT, Address, Amount, CollectionId, JsonMapping, TokenId

__all__ = [
    "MAX_AMOUNT",
    "Address",
    "AdmissionDecision",
    "Amount",
    "BasePathUpdated",
    "CollectionConfig",
    "CollectionId",
    "CollectionState",
    "DomainEvent",
    "DomainModel",
    "EventType",
    "IssuedToken",
    "JsonMapping",
    "MintEvent",
    "MintMode",
    "MintPriceUpdated",
    "MintReceipt",
    "MintRequest",
    "MutableDomainModel",
    "PublicMintToggled",
    "RejectionReason",
    "TokenId",
    "TokenMinted",
    "WhitelistMintToggled",
    "WhitelistUpdated",
    "parse_event",
]
