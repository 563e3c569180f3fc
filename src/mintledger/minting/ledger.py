"""Supply ledger: the single source of truth for issued identifiers."""

from __future__ import annotations

from mintledger.domain import TokenId

from .exceptions import CapacityExceededError


class SupplyLedger:
    """Sequential, gap-free identifier allocation bounded by ``max_supply``.

    Identifiers are 1-based. Each reservation advances the counter by the full
    batch before returning, so two reservations can never overlap.
    """

    def __init__(self, max_supply: int, *, issued: int = 0) -> None:
        if max_supply <= 0:
            msg = "max_supply must be positive"
            raise ValueError(msg)
        if not 0 <= issued <= max_supply:
            msg = f"issued count {issued} outside [0, {max_supply}]"
            raise ValueError(msg)
        self._max_supply = max_supply
        self._counter = issued

    @property
    def max_supply(self) -> int:
        return self._max_supply

    @property
    def total_issued(self) -> int:
        return self._counter

    def remaining_capacity(self) -> int:
        return self._max_supply - self._counter

    def reserve_next(self, n: int) -> tuple[TokenId, ...]:
        if n <= 0:
            msg = f"Reservation size must be positive, got {n}"
            raise ValueError(msg)
        if self._counter + n > self._max_supply:
            msg = (
                f"Cannot reserve {n} identifiers: {self._counter} of "
                f"{self._max_supply} already issued"
            )
            raise CapacityExceededError(msg)
        start = self._counter + 1
        self._counter += n
        return tuple(TokenId(identifier) for identifier in range(start, start + n))


__all__ = ["SupplyLedger"]
