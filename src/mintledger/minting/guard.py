"""Reentrancy guard shared by every mutating controller entry point."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from .exceptions import ReentrantCallError


class ReentrancyGuard:
    """Single "currently executing" flag per controller instance."""

    def __init__(self) -> None:
        self._entered = False
        self._operation: str | None = None

    @property
    def entered(self) -> bool:
        return self._entered

    @contextmanager
    def enter(self, operation: str) -> Iterator[None]:
        if self._entered:
            msg = f"Reentrant call to {operation} while {self._operation} is in flight"
            raise ReentrantCallError(msg)
        self._entered = True
        self._operation = operation
        try:
            yield
        finally:
            self._entered = False
            self._operation = None


__all__ = ["ReentrancyGuard"]
