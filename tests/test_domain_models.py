from __future__ import annotations

import pytest
from conftest import ADMIN, ALICE, make_config
from pydantic import ValidationError

from mintledger.domain import (
    MAX_AMOUNT,
    CollectionId,
    CollectionState,
    IssuedToken,
    MintReceipt,
    MintMode,
    TokenId,
    TokenMinted,
    WhitelistUpdated,
    parse_event,
)


def test_fixed_config_fields_are_frozen() -> None:
    config = make_config()

    with pytest.raises(ValidationError):
        config.max_supply = 20
    with pytest.raises(ValidationError):
        config.administrator = ALICE

    config.mint_price = 7
    assert config.mint_price == 7


def test_config_rejects_invalid_values() -> None:
    with pytest.raises(ValidationError):
        make_config(max_supply=0)
    with pytest.raises(ValidationError):
        make_config(administrator="  ")
    with pytest.raises(ValidationError):
        make_config(mint_price=MAX_AMOUNT + 1)
    with pytest.raises(ValidationError):
        make_config(unexpected=True)


def _token(token_id: int) -> IssuedToken:
    return IssuedToken(token_id=TokenId(token_id), owner=ALICE, metadata_reference="x.json")


def test_state_requires_contiguous_tokens_within_supply() -> None:
    config = make_config(max_supply=2)

    state = CollectionState(
        collection_id=CollectionId("c"),
        config=config,
        total_issued=2,
        tokens=(_token(2), _token(1)),
    )
    assert state.total_issued == 2

    with pytest.raises(ValidationError):
        CollectionState(collection_id=CollectionId("c"), config=config, total_issued=1)
    with pytest.raises(ValidationError):
        CollectionState(
            collection_id=CollectionId("c"),
            config=config,
            total_issued=2,
            tokens=(_token(1), _token(3)),
        )
    with pytest.raises(ValidationError):
        CollectionState(
            collection_id=CollectionId("c"),
            config=config,
            total_issued=3,
            tokens=(_token(1), _token(2), _token(3)),
        )


def test_state_survives_json_round_trip() -> None:
    state = CollectionState(
        collection_id=CollectionId("c"),
        config=make_config(),
        total_issued=1,
        minted_counts={ALICE: 1},
        allow_list={ADMIN: True},
        treasury_balance=MAX_AMOUNT,
        tokens=(_token(1),),
    )

    assert CollectionState.model_validate(state.model_dump(mode="json")) == state


def test_parse_event_selects_concrete_type() -> None:
    minted = TokenMinted(
        sequence=3, recipient=ALICE, token_id=TokenId(4), metadata_reference="4.json"
    )
    updated = WhitelistUpdated(sequence=4, address=ALICE, enabled=False)

    assert parse_event(minted.model_dump(mode="json")) == minted
    parsed = parse_event(updated.model_dump(mode="json"))
    assert isinstance(parsed, WhitelistUpdated)
    assert parsed.enabled is False

    with pytest.raises(ValidationError):
        parse_event({"event_type": "unknown", "sequence": 1})


def test_receipt_quantity_counts_identifiers() -> None:
    receipt = MintReceipt(
        mode=MintMode.PUBLIC,
        recipient=ALICE,
        token_ids=(TokenId(1), TokenId(2)),
        payment=2,
    )

    assert receipt.quantity == 2
