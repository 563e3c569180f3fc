"""Pydantic bases shared by every mintledger domain model."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class _Model(BaseModel):
    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    def to_payload(self) -> dict[str, Any]:
        """JSON-compatible form used for persisted records."""

        return self.model_dump(mode="json")


class DomainModel(_Model):
    """Immutable value with strict validation."""

    model_config = ConfigDict(frozen=True)


class MutableDomainModel(_Model):
    """Validated model whose non-frozen fields may be reassigned."""
