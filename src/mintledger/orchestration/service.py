"""Collection service running controller operations against persisted state."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import TypeVar

from mintledger.collaborators import FundsTransfer
from mintledger.domain import (
    Address,
    Amount,
    CollectionConfig,
    CollectionId,
    CollectionState,
    EventType,
    MintEvent,
)
from mintledger.minting import EventLog, MintingController, TransferFailedError
from mintledger.persistence import NotFoundError, UnitOfWork

UnitOfWorkFactory = Callable[[], UnitOfWork]
T = TypeVar("T")
Operation = Callable[[MintingController], T]


@dataclass
class _StagedFundsTransfer:
    """Accepts every transfer and records it for settlement after commit."""

    pending: list[tuple[Address, Amount]] = field(default_factory=list)

    def transfer(self, to_address: Address, amount: Amount) -> bool:
        self.pending.append((to_address, amount))
        return True


class CollectionService:
    """Loads a collection, runs one controller operation and persists the outcome.

    State and newly emitted events are written in the same unit of work and
    only when the operation returns normally. Treasury transfers requested by
    the operation are paid out after that commit; a refused or failing payout
    puts the amount back into the stored balance.
    """

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        funds_transfer: FundsTransfer,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._funds_transfer = funds_transfer
        self._logger = logger or logging.getLogger(__name__)

    async def create_collection(
        self,
        collection_id: CollectionId,
        config: CollectionConfig,
    ) -> CollectionState:
        state = CollectionState(collection_id=collection_id, config=config)
        async with self._uow_factory() as uow:
            await uow.collection_repository.add(state)
            await uow.commit()
        self._logger.info(
            "Created collection %s (max supply %s)", collection_id, config.max_supply
        )
        return state

    async def load(self, collection_id: CollectionId) -> CollectionState:
        async with self._uow_factory() as uow:
            state = await uow.collection_repository.get(collection_id)
        if state is None:
            msg = f"Collection {collection_id} not found"
            raise NotFoundError(msg)
        return state

    async def list_collections(self) -> Sequence[CollectionId]:
        async with self._uow_factory() as uow:
            return await uow.collection_repository.list_ids()

    async def list_events(
        self,
        collection_id: CollectionId,
        *,
        event_type: EventType | None = None,
    ) -> Sequence[MintEvent]:
        async with self._uow_factory() as uow:
            return await uow.event_repository.list_for_collection(
                collection_id, event_type=event_type
            )

    async def execute(self, collection_id: CollectionId, operation: Operation[T]) -> T:
        async with self._uow_factory() as uow:
            state = await uow.collection_repository.get(collection_id)
            if state is None:
                msg = f"Collection {collection_id} not found"
                raise NotFoundError(msg)
            event_log = EventLog(start_sequence=await uow.event_repository.count(collection_id))
            staged = _StagedFundsTransfer()
            controller = MintingController.from_state(
                state,
                funds_transfer=staged,
                event_log=event_log,
            )

            result = operation(controller)

            updated = controller.snapshot(collection_id).model_copy(
                update={"revision": state.revision + 1}
            )
            await uow.collection_repository.update(updated)
            await uow.event_repository.add_many(collection_id, event_log.events)
            await uow.commit()
            self._logger.debug(
                "Collection %s advanced to revision %s with %s new events",
                collection_id,
                updated.revision,
                len(event_log),
            )

        for to_address, amount in staged.pending:
            await self._settle(collection_id, to_address, amount)
        return result

    async def _settle(
        self,
        collection_id: CollectionId,
        to_address: Address,
        amount: Amount,
    ) -> None:
        try:
            delivered = self._funds_transfer.transfer(to_address, amount)
        except Exception:
            await self._restore_treasury(collection_id, amount)
            raise
        if not delivered:
            await self._restore_treasury(collection_id, amount)
            msg = f"Transfer of {amount} to {to_address} was rejected"
            raise TransferFailedError(msg)
        self._logger.info("Paid %s from collection %s to %s", amount, collection_id, to_address)

    async def _restore_treasury(self, collection_id: CollectionId, amount: Amount) -> None:
        async with self._uow_factory() as uow:
            state = await uow.collection_repository.get(collection_id)
            if state is None:
                msg = f"Collection {collection_id} not found"
                raise NotFoundError(msg)
            restored = state.model_copy(
                update={
                    "treasury_balance": state.treasury_balance + amount,
                    "revision": state.revision + 1,
                }
            )
            await uow.collection_repository.update(restored)
            await uow.commit()
        self._logger.warning(
            "Payout of %s from collection %s failed; treasury restored", amount, collection_id
        )


__all__ = ["CollectionService", "Operation", "UnitOfWorkFactory"]
