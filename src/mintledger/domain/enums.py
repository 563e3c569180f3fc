"""Enumerations used across the mintledger domain layer."""

from __future__ import annotations

from enum import StrEnum


class MintMode(StrEnum):
    """Issuance channel a mint request arrives through."""

    PUBLIC = "public"
    WHITELISTED = "whitelisted"
    ADMINISTRATIVE = "administrative"


class RejectionReason(StrEnum):
    """Admission failures, listed in evaluation order."""

    MINT_MODE_DISABLED = "mint_mode_disabled"
    NOT_WHITELISTED = "not_whitelisted"
    INVALID_QUANTITY = "invalid_quantity"
    SUPPLY_EXCEEDED = "supply_exceeded"
    PER_ADDRESS_CAP_EXCEEDED = "per_address_cap_exceeded"
    INSUFFICIENT_PAYMENT = "insufficient_payment"


class EventType(StrEnum):
    """Notification kinds emitted by the minting controller."""

    TOKEN_MINTED = "token_minted"
    WHITELIST_UPDATED = "whitelist_updated"
    PUBLIC_MINT_TOGGLED = "public_mint_toggled"
    WHITELIST_MINT_TOGGLED = "whitelist_mint_toggled"
    BASE_PATH_UPDATED = "base_path_updated"
    MINT_PRICE_UPDATED = "mint_price_updated"
