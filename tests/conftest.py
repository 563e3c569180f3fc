from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure the src/ directory is importable when tests run without an install.
sys.path.append(str(Path(__file__).resolve().parents[1] / "src"))

from mintledger.collaborators import InMemoryFundsTransfer, InMemoryItemRegistry  # noqa: E402
from mintledger.domain import Address, CollectionConfig  # noqa: E402
from mintledger.minting import MintingController  # noqa: E402

ADMIN = Address("admin")
ALICE = Address("alice")
BOB = Address("bob")


def make_config(**overrides: object) -> CollectionConfig:
    values: dict[str, object] = {
        "name": "Test Items",
        "symbol": "TST",
        "max_supply": 10,
        "mint_price": 1,
        "max_mint_per_address": 3,
        "public_mint_enabled": True,
        "whitelist_mint_enabled": False,
        "base_path": "ipfs://cid/",
        "administrator": ADMIN,
    }
    values.update(overrides)
    return CollectionConfig.model_validate(values)


@pytest.fixture
def registry() -> InMemoryItemRegistry:
    return InMemoryItemRegistry()


@pytest.fixture
def funds() -> InMemoryFundsTransfer:
    return InMemoryFundsTransfer()


@pytest.fixture
def controller(
    registry: InMemoryItemRegistry,
    funds: InMemoryFundsTransfer,
) -> MintingController:
    return MintingController(make_config(), item_registry=registry, funds_transfer=funds)
