from __future__ import annotations

import random

import pytest
from conftest import ADMIN, ALICE, BOB, make_config
from pydantic import ValidationError

from mintledger.collaborators import InMemoryFundsTransfer, InMemoryItemRegistry
from mintledger.domain import (
    MAX_AMOUNT,
    Address,
    CollectionId,
    EventType,
    MintEvent,
    MintMode,
    RejectionReason,
    TokenId,
    TokenMinted,
)
from mintledger.minting import (
    AdmissionError,
    EventLog,
    InsufficientPaymentError,
    InvalidQuantityError,
    MintingController,
    MintModeDisabledError,
    NotAdministratorError,
    NotWhitelistedError,
    PerAddressCapExceededError,
    SupplyExceededError,
)

COLLECTION = CollectionId("test")


def _controller(**config: object) -> MintingController:
    return MintingController(
        make_config(**config),
        item_registry=InMemoryItemRegistry(),
        funds_transfer=InMemoryFundsTransfer(),
    )


def test_public_mint_assigns_items_counts_and_payment(controller: MintingController) -> None:
    receipt = controller.mint_public(ALICE, 2, 2)

    assert receipt.token_ids == (1, 2)
    assert receipt.mode is MintMode.PUBLIC
    assert receipt.payment == 2
    assert controller.total_issued() == 2
    assert controller.remaining_capacity() == 8
    assert controller.minted_count_of(ALICE) == 2
    assert controller.treasury_balance == 2
    assert controller.owner_of(1) == ALICE
    assert controller.tokens_of_owner(ALICE) == (1, 2)
    assert controller.metadata_reference_of(2) == "ipfs://cid/2.json"


def test_token_minted_events_follow_identifier_order(controller: MintingController) -> None:
    controller.mint_public(ALICE, 3, 3)

    minted = controller.events.events_of_type(EventType.TOKEN_MINTED)
    assert [event.token_id for event in minted] == [1, 2, 3]
    assert [event.sequence for event in minted] == [1, 2, 3]
    assert all(event.recipient == ALICE for event in minted)
    assert minted[0].metadata_reference == "ipfs://cid/1.json"


def test_subscribers_observe_the_settled_batch(controller: MintingController) -> None:
    observed: list[tuple[int, int, int, int]] = []

    def _record(event: MintEvent) -> None:
        if isinstance(event, TokenMinted):
            observed.append(
                (
                    event.token_id,
                    controller.minted_count_of(event.recipient),
                    controller.total_issued(),
                    controller.treasury_balance,
                )
            )

    controller.events.subscribe(_record)
    controller.mint_public(ALICE, 3, 3)

    # Events arrive in identifier order, after the count and payment have moved.
    assert observed == [(1, 3, 3, 3), (2, 3, 3, 3), (3, 3, 3, 3)]
    assert controller.minted_count_of(ALICE) == 3


def test_overpayment_is_kept_in_full(controller: MintingController) -> None:
    receipt = controller.mint_public(ALICE, 1, 5)

    assert receipt.payment == 5
    assert controller.treasury_balance == 5


def test_base_path_change_applies_to_later_mints(controller: MintingController) -> None:
    controller.mint_public(ALICE, 1, 1)
    controller.set_base_path(ADMIN, "https://example.test/meta/")
    controller.mint_public(BOB, 1, 1)

    assert controller.metadata_reference_of(1) == "ipfs://cid/1.json"
    assert controller.metadata_reference_of(2) == "https://example.test/meta/2.json"


@pytest.mark.parametrize(
    ("call", "error"),
    [
        (lambda c: c.mint_public(ALICE, 0, 0), InvalidQuantityError),
        (lambda c: c.mint_public(ALICE, 11, 11), SupplyExceededError),
        (lambda c: c.mint_public(ALICE, 4, 4), PerAddressCapExceededError),
        (lambda c: c.mint_public(ALICE, 2, 1), InsufficientPaymentError),
        (lambda c: c.mint_whitelisted(ALICE, 1, 1), MintModeDisabledError),
        (lambda c: c.mint_administrative(ALICE, ALICE, 1), NotAdministratorError),
    ],
)
def test_rejections_leave_state_unchanged(call, error) -> None:  # type: ignore[no-untyped-def]
    controller = _controller()
    controller.set_allow_list(ADMIN, [BOB], True)
    controller.mint_public(BOB, 1, 1)
    before = controller.snapshot(COLLECTION)
    events_before = len(controller.events)

    with pytest.raises(error):
        call(controller)

    assert controller.snapshot(COLLECTION) == before
    assert len(controller.events) == events_before
    assert controller.in_flight is False


def test_admission_errors_carry_reason_and_request(controller: MintingController) -> None:
    with pytest.raises(AdmissionError) as excinfo:
        controller.mint_public(ALICE, 2, 1)

    assert excinfo.value.reason is RejectionReason.INSUFFICIENT_PAYMENT
    assert excinfo.value.request is not None
    assert excinfo.value.request.quantity == 2


def test_whitelisted_mint_requires_membership() -> None:
    controller = _controller(whitelist_mint_enabled=True, public_mint_enabled=False)

    with pytest.raises(NotWhitelistedError):
        controller.mint_whitelisted(BOB, 1, 1)

    controller.set_allow_list(ADMIN, [BOB], True)
    receipt = controller.mint_whitelisted(BOB, 1, 1)
    assert receipt.mode is MintMode.WHITELISTED
    assert controller.minted_count_of(BOB) == 1


def test_whitelisted_and_public_share_the_per_address_cap() -> None:
    controller = _controller(whitelist_mint_enabled=True)
    controller.set_allow_list(ADMIN, [ALICE], True)
    controller.mint_whitelisted(ALICE, 2, 2)

    with pytest.raises(PerAddressCapExceededError):
        controller.mint_public(ALICE, 2, 2)


def test_administrative_mint_is_free_and_exempt_from_cap(controller: MintingController) -> None:
    controller.toggle_public_mint(ADMIN)
    receipt = controller.mint_administrative(ADMIN, BOB, 5)

    assert receipt.token_ids == (1, 2, 3, 4, 5)
    assert receipt.payment == 0
    assert controller.minted_count_of(BOB) == 5
    assert controller.treasury_balance == 0
    assert controller.tokens_of_owner(BOB) == (1, 2, 3, 4, 5)


def test_administrative_mint_counts_against_later_public_mints(
    controller: MintingController,
) -> None:
    controller.mint_administrative(ADMIN, ALICE, 3)

    with pytest.raises(PerAddressCapExceededError):
        controller.mint_public(ALICE, 1, 1)


def test_toggles_flip_flags_and_emit(controller: MintingController) -> None:
    assert controller.toggle_public_mint(ADMIN) is False
    assert controller.toggle_public_mint(ADMIN) is True
    assert controller.toggle_whitelist_mint(ADMIN) is True

    public = controller.events.events_of_type(EventType.PUBLIC_MINT_TOGGLED)
    whitelist = controller.events.events_of_type(EventType.WHITELIST_MINT_TOGGLED)
    assert [event.enabled for event in public] == [False, True]
    assert [event.enabled for event in whitelist] == [True]
    assert controller.config.whitelist_mint_enabled is True


def test_set_allow_list_emits_once_per_input_address(controller: MintingController) -> None:
    controller.set_allow_list(ADMIN, [ALICE, BOB], True)
    controller.set_allow_list(ADMIN, [ALICE], True)

    updates = controller.events.events_of_type(EventType.WHITELIST_UPDATED)
    assert [(event.address, event.enabled) for event in updates] == [
        (ALICE, True),
        (BOB, True),
        (ALICE, True),
    ]
    assert controller.is_allow_listed(ALICE)


def test_set_mint_price_applies_to_next_request(controller: MintingController) -> None:
    controller.set_mint_price(ADMIN, 4)

    with pytest.raises(InsufficientPaymentError):
        controller.mint_public(ALICE, 1, 3)
    controller.mint_public(ALICE, 1, 4)

    (event,) = controller.events.events_of_type(EventType.MINT_PRICE_UPDATED)
    assert event.mint_price == 4
    assert controller.config.mint_price == 4


def test_price_update_rejects_negative_values(controller: MintingController) -> None:
    with pytest.raises(ValueError):
        controller.set_mint_price(ADMIN, -1)

    assert controller.config.mint_price == 1
    assert controller.events.events_of_type(EventType.MINT_PRICE_UPDATED) == ()


@pytest.mark.parametrize(
    "call",
    [
        lambda c: c.toggle_public_mint(BOB),
        lambda c: c.toggle_whitelist_mint(BOB),
        lambda c: c.set_base_path(BOB, "x"),
        lambda c: c.set_mint_price(BOB, 0),
        lambda c: c.set_allow_list(BOB, [BOB], True),
        lambda c: c.withdraw_all(BOB),
    ],
)
def test_administrator_only_operations(call) -> None:  # type: ignore[no-untyped-def]
    controller = _controller()
    before = controller.snapshot(COLLECTION)

    with pytest.raises(NotAdministratorError):
        call(controller)

    assert controller.snapshot(COLLECTION) == before
    assert len(controller.events) == 0


def test_config_property_is_a_copy(controller: MintingController) -> None:
    config = controller.config
    config.public_mint_enabled = False

    assert controller.config.public_mint_enabled is True


def test_snapshot_round_trip_preserves_state(controller: MintingController) -> None:
    controller.set_allow_list(ADMIN, [BOB], True)
    controller.mint_public(ALICE, 2, 3)
    controller.mint_administrative(ADMIN, BOB, 1)
    state = controller.snapshot(COLLECTION)

    restored = MintingController.from_state(state, funds_transfer=InMemoryFundsTransfer())

    assert restored.snapshot(COLLECTION) == state
    assert restored.total_issued() == 3
    assert restored.tokens_of_owner(ALICE) == (1, 2)
    assert restored.is_allow_listed(BOB)
    assert restored.treasury_balance == 3
    assert restored.mint_public(BOB, 1, 1).token_ids == (4,)


def test_scenario_per_address_cap() -> None:
    controller = _controller(max_supply=10, mint_price=1, max_mint_per_address=3)

    receipt = controller.mint_public(ALICE, 2, 2)
    assert set(receipt.token_ids) == {1, 2}
    assert controller.minted_count_of(ALICE) == 2
    before = controller.snapshot(COLLECTION)

    with pytest.raises(PerAddressCapExceededError):
        controller.mint_public(ALICE, 2, 2)
    assert controller.snapshot(COLLECTION) == before


def test_scenario_not_whitelisted() -> None:
    controller = _controller(whitelist_mint_enabled=True)

    with pytest.raises(NotWhitelistedError):
        controller.mint_whitelisted(BOB, 1, 1)


def test_scenario_administrative_mint_beyond_supply() -> None:
    controller = _controller(max_supply=5)

    with pytest.raises(SupplyExceededError):
        controller.mint_administrative(ADMIN, BOB, 6)
    assert controller.total_issued() == 0


def test_random_sequences_preserve_supply_and_cap_invariants() -> None:
    rng = random.Random(1337)
    controller = _controller(max_supply=40, mint_price=2, max_mint_per_address=4)
    controller.toggle_whitelist_mint(ADMIN)
    participants = [Address(f"user-{index}") for index in range(8)]
    controller.set_allow_list(ADMIN, participants[:4], True)

    admitted_total = 0
    admin_touched: set[Address] = set()
    for _ in range(200):
        who = rng.choice(participants)
        quantity = rng.randint(-1, 5)
        payment = rng.randint(0, 12)
        mode = rng.choice(list(MintMode))
        before = controller.snapshot(COLLECTION)
        try:
            if mode is MintMode.PUBLIC:
                receipt = controller.mint_public(who, quantity, payment)
            elif mode is MintMode.WHITELISTED:
                receipt = controller.mint_whitelisted(who, quantity, payment)
            else:
                receipt = controller.mint_administrative(ADMIN, who, quantity)
        except AdmissionError:
            assert controller.snapshot(COLLECTION) == before
            continue
        admitted_total += receipt.quantity
        if mode is MintMode.ADMINISTRATIVE:
            admin_touched.add(who)

        assert controller.total_issued() == admitted_total
        assert controller.total_issued() <= 40

    issued = sorted(
        token_id for address in participants for token_id in controller.tokens_of_owner(address)
    )
    assert issued == list(range(1, controller.total_issued() + 1))
    for address in participants:
        if address not in admin_touched:
            assert controller.minted_count_of(address) <= 4


def test_injected_event_log_records_notifications() -> None:
    log = EventLog(start_sequence=7)
    controller = MintingController(
        make_config(),
        item_registry=InMemoryItemRegistry(),
        funds_transfer=InMemoryFundsTransfer(),
        event_log=log,
    )

    controller.mint_public(ALICE, 2, 2)

    assert controller.events is log
    assert [event.sequence for event in log.events] == [8, 9]


def test_failing_subscriber_leaves_a_complete_batch(controller: MintingController) -> None:
    def _fail(event: MintEvent) -> None:
        raise RuntimeError("subscriber failed")

    controller.events.subscribe(_fail)
    with pytest.raises(RuntimeError, match="subscriber failed"):
        controller.mint_public(ALICE, 3, 3)
    controller.events.unsubscribe(_fail)

    assert controller.in_flight is False
    assert controller.total_issued() == 3
    assert controller.minted_count_of(ALICE) == 3
    assert controller.treasury_balance == 3
    assert controller.tokens_of_owner(ALICE) == (1, 2, 3)
    assert [token.token_id for token in controller.snapshot(COLLECTION).tokens] == [1, 2, 3]

    with pytest.raises(PerAddressCapExceededError):
        controller.mint_public(ALICE, 3, 3)
    assert controller.tokens_of_owner(ALICE) == (1, 2, 3)


def test_registry_failure_discards_undelivered_events() -> None:
    delivered: list[MintEvent] = []

    class _BrokenRegistry(InMemoryItemRegistry):
        def create(self, owner: Address, identifier: TokenId) -> None:
            if identifier == 2:
                raise RuntimeError("registry unavailable")
            super().create(owner, identifier)

    controller = MintingController(
        make_config(),
        item_registry=_BrokenRegistry(),
        funds_transfer=InMemoryFundsTransfer(),
    )
    controller.events.subscribe(delivered.append)

    with pytest.raises(RuntimeError, match="registry unavailable"):
        controller.mint_public(ALICE, 3, 3)

    assert delivered == []
    assert len(controller.events) == 0
    assert controller.minted_count_of(ALICE) == 0
    assert controller.treasury_balance == 0
    assert controller.in_flight is False


def test_failing_subscriber_does_not_split_allow_list_update(
    controller: MintingController,
) -> None:
    seen: list[str] = []

    def _fail_on_second(event: MintEvent) -> None:
        seen.append(event.event_type)
        if len(seen) == 2:
            raise RuntimeError("subscriber failed")

    controller.events.subscribe(_fail_on_second)
    with pytest.raises(RuntimeError):
        controller.set_allow_list(ADMIN, [ALICE, BOB], True)

    assert controller.is_allow_listed(ALICE)
    assert controller.is_allow_listed(BOB)
    assert len(controller.events) == 2


def test_unrepresentable_payment_is_invalid_input(controller: MintingController) -> None:
    before = controller.snapshot(COLLECTION)

    with pytest.raises(ValidationError):
        controller.mint_public(ALICE, 1, MAX_AMOUNT + 1)

    assert controller.snapshot(COLLECTION) == before
    assert len(controller.events) == 0
