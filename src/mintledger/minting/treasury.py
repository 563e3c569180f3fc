"""Treasury holding payment accepted by successful mints."""

from __future__ import annotations

import logging

from mintledger.collaborators import FundsTransfer
from mintledger.domain import MAX_AMOUNT, Address, Amount

from .exceptions import NothingToWithdrawError, TransferFailedError

logger = logging.getLogger(__name__)


class Treasury:
    """Accumulated native-currency balance with a single withdrawal path."""

    def __init__(self, funds_transfer: FundsTransfer, *, balance: Amount = 0) -> None:
        if not 0 <= balance <= MAX_AMOUNT:
            msg = f"Treasury balance {balance} out of range"
            raise ValueError(msg)
        self._funds_transfer = funds_transfer
        self._balance = balance

    @property
    def balance(self) -> Amount:
        return self._balance

    def ensure_can_accrue(self, amount: Amount) -> None:
        if amount < 0:
            msg = "Cannot accrue a negative amount"
            raise ValueError(msg)
        if self._balance + amount > MAX_AMOUNT:
            msg = "Treasury balance would exceed the representable amount"
            raise OverflowError(msg)

    def accrue(self, amount: Amount) -> None:
        self.ensure_can_accrue(amount)
        self._balance += amount

    def withdraw_all(self, payee: Address) -> Amount:
        """Send the whole balance to ``payee``.

        The balance is zeroed before the transfer runs and restored if the
        payee refuses it, so a failed withdrawal leaves it unchanged.
        """

        amount = self._balance
        if amount == 0:
            msg = "Treasury balance is zero"
            raise NothingToWithdrawError(msg)
        self._balance = 0
        try:
            delivered = self._funds_transfer.transfer(payee, amount)
        except BaseException:
            self._balance = amount
            raise
        if not delivered:
            self._balance = amount
            msg = f"Transfer of {amount} to {payee} was rejected"
            raise TransferFailedError(msg)
        logger.info("Withdrew %s from treasury to %s", amount, payee)
        return amount


__all__ = ["Treasury"]
