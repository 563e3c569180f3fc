"""Ordered, synchronous notification log owned by a minting controller."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager

from mintledger.domain import EventType, MintEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[MintEvent], None]


class EventLog:
    """Append-only record of emitted notifications with synchronous delivery.

    Each event is stamped with the next sequence number, appended, then handed
    to subscribers in subscription order. Handler exceptions propagate to the
    emitting operation.
    """

    def __init__(self, *, start_sequence: int = 0) -> None:
        self._events: list[MintEvent] = []
        self._handlers: list[EventHandler] = []
        self._next_sequence = start_sequence + 1
        self._held: list[MintEvent] | None = None

    def subscribe(self, handler: EventHandler) -> None:
        self._handlers.append(handler)

    def unsubscribe(self, handler: EventHandler) -> None:
        try:
            self._handlers.remove(handler)
        except ValueError:
            logger.warning("Handler %s was not subscribed", handler)

    def emit(self, event: MintEvent) -> MintEvent:
        stamped = event.model_copy(update={"sequence": self._next_sequence})
        self._next_sequence += 1
        self._events.append(stamped)
        logger.debug("Emitted %s #%s", stamped.event_type, stamped.sequence)
        if self._held is not None:
            self._held.append(stamped)
        else:
            self._deliver(stamped)
        return stamped

    @contextmanager
    def deferred(self) -> Iterator[None]:
        """Hold delivery of events emitted inside the block until it exits cleanly.

        Events are recorded in emission order as usual. If the block raises,
        the events it emitted are discarded without reaching any subscriber.
        Nested blocks defer to the outermost one.
        """

        if self._held is not None:
            yield
            return

        mark = len(self._events)
        next_sequence = self._next_sequence
        self._held = []
        try:
            yield
        except BaseException:
            del self._events[mark:]
            self._next_sequence = next_sequence
            raise
        finally:
            held, self._held = self._held, None
        for event in held:
            self._deliver(event)

    def _deliver(self, event: MintEvent) -> None:
        for handler in tuple(self._handlers):
            handler(event)

    @property
    def events(self) -> Sequence[MintEvent]:
        return tuple(self._events)

    def events_of_type(self, event_type: EventType) -> Sequence[MintEvent]:
        return tuple(event for event in self._events if event.event_type == event_type)

    def __len__(self) -> int:
        return len(self._events)


__all__ = ["EventHandler", "EventLog"]
