"""Exceptions raised by the minting core."""

from __future__ import annotations

from mintledger.domain import MintRequest, RejectionReason


class MintError(RuntimeError):
    """Base class for minting failures."""


class AdmissionError(MintError):
    """Raised when the issuance policy rejects a mint request."""

    reason: RejectionReason

    def __init__(self, message: str, *, request: MintRequest | None = None) -> None:
        super().__init__(message)
        self.request = request


class MintModeDisabledError(AdmissionError):
    reason = RejectionReason.MINT_MODE_DISABLED


class NotWhitelistedError(AdmissionError):
    reason = RejectionReason.NOT_WHITELISTED


class InvalidQuantityError(AdmissionError):
    reason = RejectionReason.INVALID_QUANTITY


class SupplyExceededError(AdmissionError):
    reason = RejectionReason.SUPPLY_EXCEEDED


class PerAddressCapExceededError(AdmissionError):
    reason = RejectionReason.PER_ADDRESS_CAP_EXCEEDED


class InsufficientPaymentError(AdmissionError):
    reason = RejectionReason.INSUFFICIENT_PAYMENT


class ReentrantCallError(MintError):
    """Raised when a guarded entry point is entered while another is in flight."""


class NotAdministratorError(MintError):
    """Raised when a non-administrator calls an administrator-only operation."""


class NothingToWithdrawError(MintError):
    """Raised when a withdrawal is requested against an empty treasury."""


class TransferFailedError(MintError):
    """Raised when the payee refuses a treasury transfer."""


class CapacityExceededError(MintError):
    """Raised when the supply ledger cannot reserve the requested identifiers."""


_ADMISSION_ERRORS: dict[RejectionReason, type[AdmissionError]] = {
    error.reason: error
    for error in (
        MintModeDisabledError,
        NotWhitelistedError,
        InvalidQuantityError,
        SupplyExceededError,
        PerAddressCapExceededError,
        InsufficientPaymentError,
    )
}


def admission_error_for(
    reason: RejectionReason,
    request: MintRequest | None = None,
) -> AdmissionError:
    """Build the admission error matching a rejection reason."""

    error_cls = _ADMISSION_ERRORS[reason]
    if request is None:
        msg = f"Mint rejected: {reason.value}"
    else:
        msg = (
            f"{request.mode.value} mint of {request.quantity} for {request.recipient} "
            f"rejected: {reason.value}"
        )
    return error_cls(msg, request=request)


__all__ = [
    "AdmissionError",
    "CapacityExceededError",
    "InsufficientPaymentError",
    "InvalidQuantityError",
    "MintError",
    "MintModeDisabledError",
    "NotAdministratorError",
    "NotWhitelistedError",
    "NothingToWithdrawError",
    "PerAddressCapExceededError",
    "ReentrantCallError",
    "SupplyExceededError",
    "TransferFailedError",
    "admission_error_for",
]
