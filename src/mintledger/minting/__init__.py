"""Minting core: supply ledger, allow-list, policy, treasury and controller."""

from .allowlist import AllowListRegistry
from .controller import MintingController, metadata_reference
from .events import EventHandler, EventLog
from .exceptions import (
    AdmissionError,
    CapacityExceededError,
    InsufficientPaymentError,
    InvalidQuantityError,
    MintError,
    MintModeDisabledError,
    NotAdministratorError,
    NothingToWithdrawError,
    NotWhitelistedError,
    PerAddressCapExceededError,
    ReentrantCallError,
    SupplyExceededError,
    TransferFailedError,
    admission_error_for,
)
from .guard import ReentrancyGuard
from .ledger import SupplyLedger
from .policy import AdmissionContext, IssuancePolicy
from .treasury import Treasury

__all__ = [
    "AdmissionContext",
    "AdmissionError",
    "AllowListRegistry",
    "CapacityExceededError",
    "EventHandler",
    "EventLog",
    "InsufficientPaymentError",
    "InvalidQuantityError",
    "IssuancePolicy",
    "MintError",
    "MintModeDisabledError",
    "MintingController",
    "NotAdministratorError",
    "NotWhitelistedError",
    "NothingToWithdrawError",
    "PerAddressCapExceededError",
    "ReentrancyGuard",
    "ReentrantCallError",
    "SupplyExceededError",
    "SupplyLedger",
    "TransferFailedError",
    "Treasury",
    "admission_error_for",
    "metadata_reference",
]
