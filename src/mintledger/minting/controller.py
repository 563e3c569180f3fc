"""Minting controller orchestrating policy, ledger, allow-list and treasury."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from mintledger.collaborators import (
    AccessControl,
    FundsTransfer,
    InMemoryItemRegistry,
    ItemRegistry,
    SingleAdministrator,
)
from mintledger.domain import (
    Address,
    Amount,
    BasePathUpdated,
    CollectionConfig,
    CollectionId,
    CollectionState,
    IssuedToken,
    MintMode,
    MintPriceUpdated,
    MintReceipt,
    MintRequest,
    PublicMintToggled,
    TokenId,
    TokenMinted,
    WhitelistMintToggled,
    WhitelistUpdated,
)

from .allowlist import AllowListRegistry
from .events import EventLog
from .exceptions import NotAdministratorError, admission_error_for
from .guard import ReentrancyGuard
from .ledger import SupplyLedger
from .policy import AdmissionContext, IssuancePolicy
from .treasury import Treasury

logger = logging.getLogger(__name__)


def metadata_reference(base_path: str, token_id: TokenId) -> str:
    return f"{base_path}{token_id}.json"


class MintingController:
    """Single owner of the supply counter, minted counts, allow-list and treasury.

    Every mutating entry point runs inside one reentrancy guard, so a callback
    from the item registry, an event subscriber or a payee cannot re-enter any
    of them while another is in flight.
    """

    def __init__(
        self,
        config: CollectionConfig,
        *,
        item_registry: ItemRegistry,
        funds_transfer: FundsTransfer,
        access_control: AccessControl | None = None,
        event_log: EventLog | None = None,
        policy: IssuancePolicy | None = None,
        total_issued: int = 0,
        minted_counts: dict[Address, int] | None = None,
        allow_list: AllowListRegistry | None = None,
        treasury_balance: Amount = 0,
    ) -> None:
        self._config = config.model_copy()
        self._item_registry = item_registry
        self._access_control = (
            access_control
            if access_control is not None
            else SingleAdministrator(config.administrator)
        )
        self._events = event_log if event_log is not None else EventLog()
        self._policy = policy if policy is not None else IssuancePolicy()
        self._ledger = SupplyLedger(config.max_supply, issued=total_issued)
        self._minted_counts: dict[Address, int] = dict(minted_counts or {})
        self._allow_list = allow_list if allow_list is not None else AllowListRegistry()
        self._treasury = Treasury(funds_transfer, balance=treasury_balance)
        self._guard = ReentrancyGuard()

    @classmethod
    def from_state(
        cls,
        state: CollectionState,
        *,
        funds_transfer: FundsTransfer,
        item_registry: ItemRegistry | None = None,
        access_control: AccessControl | None = None,
        event_log: EventLog | None = None,
    ) -> MintingController:
        """Rebuild a controller from a persisted snapshot."""

        return cls(
            state.config,
            item_registry=(
                item_registry
                if item_registry is not None
                else InMemoryItemRegistry.from_tokens(state.tokens)
            ),
            funds_transfer=funds_transfer,
            access_control=access_control,
            event_log=event_log,
            total_issued=state.total_issued,
            minted_counts=dict(state.minted_counts),
            allow_list=AllowListRegistry(state.allow_list),
            treasury_balance=state.treasury_balance,
        )

    def snapshot(self, collection_id: CollectionId) -> CollectionState:
        tokens = tuple(
            IssuedToken(
                token_id=TokenId(identifier),
                owner=self._item_registry.owner_of(TokenId(identifier)),
                metadata_reference=self._item_registry.metadata_reference_of(
                    TokenId(identifier)
                ),
            )
            for identifier in range(1, self._ledger.total_issued + 1)
        )
        return CollectionState(
            collection_id=collection_id,
            config=self._config.model_copy(),
            total_issued=self._ledger.total_issued,
            minted_counts=dict(self._minted_counts),
            allow_list=self._allow_list.entries(),
            treasury_balance=self._treasury.balance,
            tokens=tokens,
        )

    # ------------------------------------------------------------------
    # Mint entry points
    # ------------------------------------------------------------------

    def mint_public(self, caller: Address, quantity: int, payment: Amount) -> MintReceipt:
        request = MintRequest(
            mode=MintMode.PUBLIC,
            caller=caller,
            recipient=caller,
            quantity=quantity,
            payment=payment,
        )
        return self._mint(request)

    def mint_whitelisted(self, caller: Address, quantity: int, payment: Amount) -> MintReceipt:
        request = MintRequest(
            mode=MintMode.WHITELISTED,
            caller=caller,
            recipient=caller,
            quantity=quantity,
            payment=payment,
        )
        return self._mint(request)

    def mint_administrative(
        self,
        caller: Address,
        recipient: Address,
        quantity: int,
    ) -> MintReceipt:
        request = MintRequest(
            mode=MintMode.ADMINISTRATIVE,
            caller=caller,
            recipient=recipient,
            quantity=quantity,
        )
        return self._mint(request)

    def _mint(self, request: MintRequest) -> MintReceipt:
        with self._guard.enter(f"mint_{request.mode.value}"):
            if request.mode is MintMode.ADMINISTRATIVE:
                self._require_administrator(request.caller)

            decision = self._policy.evaluate(request, self._admission_context(request))
            if decision.reason is not None:
                logger.info(
                    "Rejected %s mint of %s for %s: %s",
                    request.mode.value,
                    request.quantity,
                    request.recipient,
                    decision.reason.value,
                )
                raise admission_error_for(decision.reason, request)

            if request.mode is not MintMode.ADMINISTRATIVE:
                self._treasury.ensure_can_accrue(request.payment)

            accepted = 0
            # Subscribers are notified only once counters and treasury are settled.
            with self._events.deferred():
                token_ids = self._ledger.reserve_next(request.quantity)
                for token_id in token_ids:
                    reference = metadata_reference(self._config.base_path, token_id)
                    self._item_registry.create(request.recipient, token_id)
                    self._item_registry.set_metadata_reference(token_id, reference)
                    self._events.emit(
                        TokenMinted(
                            recipient=request.recipient,
                            token_id=token_id,
                            metadata_reference=reference,
                        )
                    )

                self._minted_counts[request.recipient] = (
                    self._minted_counts.get(request.recipient, 0) + request.quantity
                )

                if request.mode is not MintMode.ADMINISTRATIVE:
                    accepted = request.payment
                    self._treasury.accrue(accepted)

                logger.info(
                    "Minted %s via %s to %s (ids %s-%s)",
                    request.quantity,
                    request.mode.value,
                    request.recipient,
                    token_ids[0],
                    token_ids[-1],
                )

            return MintReceipt(
                mode=request.mode,
                recipient=request.recipient,
                token_ids=token_ids,
                payment=accepted,
            )

    def _admission_context(self, request: MintRequest) -> AdmissionContext:
        return AdmissionContext(
            config=self._config,
            remaining_capacity=self._ledger.remaining_capacity(),
            minted_count=self._minted_counts.get(request.recipient, 0),
            allow_listed=self._allow_list.is_member(request.caller),
        )

    # ------------------------------------------------------------------
    # Administrator operations
    # ------------------------------------------------------------------

    def set_allow_list(
        self,
        caller: Address,
        addresses: Iterable[Address],
        enabled: bool,
    ) -> int:
        with self._guard.enter("set_allow_list"):
            self._require_administrator(caller)
            with self._events.deferred():
                return self._allow_list.set_many(
                    list(addresses),
                    enabled,
                    on_change=lambda address, value: self._events.emit(
                        WhitelistUpdated(address=address, enabled=value)
                    ),
                )

    def toggle_public_mint(self, caller: Address) -> bool:
        with self._guard.enter("toggle_public_mint"):
            self._require_administrator(caller)
            self._config.public_mint_enabled = not self._config.public_mint_enabled
            self._events.emit(PublicMintToggled(enabled=self._config.public_mint_enabled))
            return self._config.public_mint_enabled

    def toggle_whitelist_mint(self, caller: Address) -> bool:
        with self._guard.enter("toggle_whitelist_mint"):
            self._require_administrator(caller)
            self._config.whitelist_mint_enabled = not self._config.whitelist_mint_enabled
            self._events.emit(
                WhitelistMintToggled(enabled=self._config.whitelist_mint_enabled)
            )
            return self._config.whitelist_mint_enabled

    def set_base_path(self, caller: Address, base_path: str) -> None:
        with self._guard.enter("set_base_path"):
            self._require_administrator(caller)
            self._config.base_path = base_path
            self._events.emit(BasePathUpdated(base_path=base_path))

    def set_mint_price(self, caller: Address, price: Amount) -> None:
        with self._guard.enter("set_mint_price"):
            self._require_administrator(caller)
            self._config.mint_price = price
            self._events.emit(MintPriceUpdated(mint_price=price))

    def withdraw_all(self, caller: Address) -> Amount:
        with self._guard.enter("withdraw_all"):
            self._require_administrator(caller)
            return self._treasury.withdraw_all(caller)

    def _require_administrator(self, caller: Address) -> None:
        if not self._access_control.is_administrator(caller):
            msg = f"{caller} is not the collection administrator"
            raise NotAdministratorError(msg)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def config(self) -> CollectionConfig:
        return self._config.model_copy()

    @property
    def events(self) -> EventLog:
        return self._events

    @property
    def treasury_balance(self) -> Amount:
        return self._treasury.balance

    @property
    def in_flight(self) -> bool:
        return self._guard.entered

    def remaining_capacity(self) -> int:
        return self._ledger.remaining_capacity()

    def total_issued(self) -> int:
        return self._ledger.total_issued

    def minted_count_of(self, address: Address) -> int:
        return self._minted_counts.get(address, 0)

    def is_allow_listed(self, address: Address) -> bool:
        return self._allow_list.is_member(address)

    def owner_of(self, token_id: TokenId) -> Address:
        return self._item_registry.owner_of(token_id)

    def metadata_reference_of(self, token_id: TokenId) -> str:
        return self._item_registry.metadata_reference_of(token_id)

    def tokens_of_owner(self, owner: Address) -> Sequence[TokenId]:
        count = self._item_registry.count_owned_by(owner)
        return tuple(
            self._item_registry.identifier_at_index_for_owner(owner, index)
            for index in range(count)
        )


__all__ = ["MintingController", "metadata_reference"]
