"""Mint request, admission and receipt models."""

from __future__ import annotations

from typing import Annotated

from pydantic import Field

from .base import DomainModel
from .enums import MintMode, RejectionReason
from .types import MAX_AMOUNT, Address, Amount, TokenId


class MintRequest(DomainModel):
    """One issuance request as seen by the issuance policy.

    ``quantity`` is deliberately unconstrained here; non-positive values are
    reported by the policy as ``RejectionReason.INVALID_QUANTITY``.
    """

    mode: MintMode
    caller: Address
    recipient: Address
    quantity: int
    payment: Annotated[Amount, Field(ge=0, le=MAX_AMOUNT)] = 0


class AdmissionDecision(DomainModel):
    """Outcome of evaluating a mint request."""

    admitted: bool
    reason: RejectionReason | None = None
    required_payment: Amount | None = None

    @classmethod
    def admit(cls, *, required_payment: Amount = 0) -> AdmissionDecision:
        return cls(admitted=True, required_payment=required_payment)

    @classmethod
    def reject(cls, reason: RejectionReason) -> AdmissionDecision:
        return cls(admitted=False, reason=reason)


class MintReceipt(DomainModel):
    """Result of a completed mint."""

    mode: MintMode
    recipient: Address
    token_ids: tuple[TokenId, ...]
    payment: Amount = 0

    @property
    def quantity(self) -> int:
        return len(self.token_ids)


__all__ = ["AdmissionDecision", "MintReceipt", "MintRequest"]
