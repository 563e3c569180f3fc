"""Lightweight application configuration loader."""

from __future__ import annotations

import os
from dataclasses import dataclass

from mintledger.domain import Address, CollectionConfig


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError as exc:
        msg = f"{name} must be an integer, got {raw!r}"
        raise ValueError(msg) from exc


@dataclass(frozen=True)
class AppSettings:
    """Immutable configuration sourced from environment variables."""

    environment: str = "development"
    database_url: str = "sqlite+aiosqlite:///mintledger.db"
    log_level: str = "WARNING"
    collection_name: str = "Collection"
    collection_symbol: str = "ITEM"
    max_supply: int = 10_000
    mint_price: int = 0
    max_mint_per_address: int = 5
    base_path: str = ""
    administrator: str | None = None

    @classmethod
    def from_env(cls) -> AppSettings:
        return cls(
            environment=os.getenv("MINTLEDGER_ENV", cls.environment),
            database_url=os.getenv("MINTLEDGER_DATABASE_URL", cls.database_url),
            log_level=os.getenv("MINTLEDGER_LOG_LEVEL", cls.log_level).upper(),
            collection_name=os.getenv("MINTLEDGER_COLLECTION_NAME", cls.collection_name),
            collection_symbol=os.getenv("MINTLEDGER_COLLECTION_SYMBOL", cls.collection_symbol),
            max_supply=_env_int("MINTLEDGER_MAX_SUPPLY", cls.max_supply),
            mint_price=_env_int("MINTLEDGER_MINT_PRICE", cls.mint_price),
            max_mint_per_address=_env_int(
                "MINTLEDGER_MAX_MINT_PER_ADDRESS", cls.max_mint_per_address
            ),
            base_path=os.getenv("MINTLEDGER_BASE_PATH", cls.base_path),
            administrator=os.getenv("MINTLEDGER_ADMINISTRATOR") or None,
        )

    def default_collection_config(self, *, administrator: str | None = None) -> CollectionConfig:
        """Build a collection configuration from the configured defaults."""

        owner = administrator or self.administrator
        if owner is None:
            msg = "An administrator address is required (set MINTLEDGER_ADMINISTRATOR)"
            raise ValueError(msg)
        return CollectionConfig(
            name=self.collection_name,
            symbol=self.collection_symbol,
            max_supply=self.max_supply,
            mint_price=self.mint_price,
            max_mint_per_address=self.max_mint_per_address,
            base_path=self.base_path,
            administrator=Address(owner),
        )


__all__ = ["AppSettings"]
