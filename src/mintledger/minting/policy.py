"""Issuance policy: ordered admission checks for mint requests."""

from __future__ import annotations

from dataclasses import dataclass

from mintledger.domain import (
    MAX_AMOUNT,
    AdmissionDecision,
    CollectionConfig,
    MintMode,
    MintRequest,
    RejectionReason,
)


@dataclass(frozen=True, slots=True)
class AdmissionContext:
    """Read-only view of controller state consulted by the policy."""

    config: CollectionConfig
    remaining_capacity: int
    minted_count: int
    allow_listed: bool


class IssuancePolicy:
    """Stateless admission rules.

    Checks run in a fixed order and the first failure wins:
    mode flag (and allow-list for whitelisted mints), quantity, supply,
    per-address cap, payment. Administrative requests skip the mode,
    per-address and payment checks.
    """

    def evaluate(self, request: MintRequest, context: AdmissionContext) -> AdmissionDecision:
        config = context.config

        if request.mode is MintMode.PUBLIC:
            if not config.public_mint_enabled:
                return AdmissionDecision.reject(RejectionReason.MINT_MODE_DISABLED)
        elif request.mode is MintMode.WHITELISTED:
            if not config.whitelist_mint_enabled:
                return AdmissionDecision.reject(RejectionReason.MINT_MODE_DISABLED)
            if not context.allow_listed:
                return AdmissionDecision.reject(RejectionReason.NOT_WHITELISTED)

        if request.quantity <= 0:
            return AdmissionDecision.reject(RejectionReason.INVALID_QUANTITY)

        if request.quantity > context.remaining_capacity:
            return AdmissionDecision.reject(RejectionReason.SUPPLY_EXCEEDED)

        if request.mode is MintMode.ADMINISTRATIVE:
            return AdmissionDecision.admit(required_payment=0)

        if context.minted_count + request.quantity > config.max_mint_per_address:
            return AdmissionDecision.reject(RejectionReason.PER_ADDRESS_CAP_EXCEEDED)

        required = config.mint_price * request.quantity
        # Totals above MAX_AMOUNT count as overflow.
        if required > MAX_AMOUNT or request.payment < required:
            return AdmissionDecision.reject(RejectionReason.INSUFFICIENT_PAYMENT)

        return AdmissionDecision.admit(required_payment=required)


__all__ = ["AdmissionContext", "IssuancePolicy"]
