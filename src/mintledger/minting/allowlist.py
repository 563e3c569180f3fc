"""Allow-list registry for the whitelisted mint channel."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping

from mintledger.domain import Address

ChangeListener = Callable[[Address, bool], None]


class AllowListRegistry:
    """Address to membership mapping; unknown addresses are not members."""

    def __init__(self, entries: Mapping[Address, bool] | None = None) -> None:
        self._entries: dict[Address, bool] = dict(entries or {})

    def is_member(self, address: Address) -> bool:
        return self._entries.get(address, False)

    def set_many(
        self,
        addresses: Iterable[Address],
        enabled: bool,
        *,
        on_change: ChangeListener | None = None,
    ) -> int:
        """Set membership for every address and report each one to ``on_change``.

        The listener fires once per input address, including addresses whose
        membership already matched ``enabled``. Returns the number of
        addresses processed.
        """

        processed = 0
        for address in addresses:
            self._entries[address] = enabled
            processed += 1
            if on_change is not None:
                on_change(address, enabled)
        return processed

    def entries(self) -> dict[Address, bool]:
        return dict(self._entries)


__all__ = ["AllowListRegistry", "ChangeListener"]
