"""Errors raised by collaborator implementations."""

from __future__ import annotations


class CollaboratorError(RuntimeError):
    """Base class for item registry and funds transfer failures."""


class ItemNotFoundError(CollaboratorError):
    """Raised when an identifier has no recorded owner."""


class DuplicateItemError(CollaboratorError):
    """Raised when an identifier is created twice."""
