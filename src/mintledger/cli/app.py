"""Typer CLI wiring mintledger services."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any, TypeVar

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from mintledger.domain import Address, CollectionConfig, CollectionId, EventType, MintReceipt
from mintledger.minting import MintError, MintingController
from mintledger.persistence import RepositoryError

from .deps import get_container

T = TypeVar("T")

DEFAULT_COLLECTION = "default"

app = typer.Typer(help="mintledger command-line interface")
allowlist_app = typer.Typer(help="Allow-list administration")
app.add_typer(allowlist_app, name="allowlist")

console = Console()


@app.callback()
def main() -> None:
    """Configure logging from the resolved settings."""

    try:
        container = get_container()
    except ValueError as exc:
        typer.echo(f"Invalid settings: {exc}")
        raise typer.Exit(code=1) from exc
    logging.basicConfig(
        level=getattr(logging, container.settings.log_level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _run(coro: Coroutine[Any, Any, T]) -> T:
    try:
        return asyncio.run(coro)
    except MintError as exc:
        typer.echo(f"Error: {exc}")
        raise typer.Exit(code=1) from exc
    except RepositoryError as exc:
        typer.echo(str(exc))
        raise typer.Exit(code=1) from exc
    except ValidationError as exc:
        typer.echo(f"Invalid input: {exc.errors()[0]['msg']}")
        raise typer.Exit(code=1) from exc


def _echo_receipt(receipt: MintReceipt) -> None:
    ids = ", ".join(str(token_id) for token_id in receipt.token_ids)
    typer.echo(f"Minted {receipt.quantity} to {receipt.recipient}: {ids}")
    if receipt.payment:
        typer.echo(f"Payment accepted: {receipt.payment}")


@app.command("show-settings")
def show_settings() -> None:
    """Print the resolved application settings."""

    settings = get_container().settings
    typer.echo("Environment:\t" + settings.environment)
    typer.echo("Database URL:\t" + settings.database_url)
    typer.echo("Log level:\t" + settings.log_level)
    typer.echo("Administrator:\t" + (settings.administrator or "(unset)"))


@app.command("init")
def init_collection(
    collection: str = typer.Option(DEFAULT_COLLECTION, "--collection", "-c"),
    administrator: str | None = typer.Option(None, help="Administrator address"),
    name: str | None = typer.Option(None, help="Collection name"),
    symbol: str | None = typer.Option(None, help="Collection symbol"),
    max_supply: int | None = typer.Option(None, min=1),
    price: int | None = typer.Option(None, min=0, help="Mint price per item"),
    max_per_address: int | None = typer.Option(None, min=1),
    base_path: str | None = typer.Option(None, help="Metadata base path"),
) -> None:
    """Create a collection from the configured defaults and overrides."""

    container = get_container()
    try:
        config = container.settings.default_collection_config(administrator=administrator)
    except ValueError as exc:
        typer.echo(str(exc))
        raise typer.Exit(code=1) from exc

    overrides: dict[str, object] = {}
    if name is not None:
        overrides["name"] = name
    if symbol is not None:
        overrides["symbol"] = symbol
    if max_supply is not None:
        overrides["max_supply"] = max_supply
    if price is not None:
        overrides["mint_price"] = price
    if max_per_address is not None:
        overrides["max_mint_per_address"] = max_per_address
    if base_path is not None:
        overrides["base_path"] = base_path
    if overrides:
        try:
            config = CollectionConfig.model_validate({**config.model_dump(), **overrides})
        except ValidationError as exc:
            typer.echo(f"Invalid configuration: {exc.errors()[0]['msg']}")
            raise typer.Exit(code=1) from exc

    state = _run(
        container.collection_service.create_collection(CollectionId(collection), config)
    )
    typer.echo(f"Created collection {state.collection_id} ({state.config.max_supply} max supply)")


@app.command("status")
def status(collection: str = typer.Option(DEFAULT_COLLECTION, "--collection", "-c")) -> None:
    """Show configuration and counters for a collection."""

    container = get_container()
    state = _run(container.collection_service.load(CollectionId(collection)))
    config = state.config

    table = Table(title=f"Collection {state.collection_id}")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Name", f"{config.name} ({config.symbol})")
    table.add_row("Administrator", config.administrator)
    table.add_row("Issued", f"{state.total_issued} / {config.max_supply}")
    table.add_row("Remaining", str(config.max_supply - state.total_issued))
    table.add_row("Mint price", str(config.mint_price))
    table.add_row("Max per address", str(config.max_mint_per_address))
    table.add_row("Public mint", "enabled" if config.public_mint_enabled else "disabled")
    table.add_row("Whitelist mint", "enabled" if config.whitelist_mint_enabled else "disabled")
    table.add_row("Base path", config.base_path or "(empty)")
    table.add_row("Treasury", str(state.treasury_balance))
    table.add_row("Allow-listed", str(sum(1 for value in state.allow_list.values() if value)))
    console.print(table)


@app.command("mint-public")
def mint_public(
    caller: str,
    quantity: int = typer.Option(1, "--quantity", "-q"),
    payment: int = typer.Option(0, "--payment", "-p"),
    collection: str = typer.Option(DEFAULT_COLLECTION, "--collection", "-c"),
) -> None:
    """Mint through the public channel."""

    service = get_container().collection_service

    def _operation(controller: MintingController) -> MintReceipt:
        return controller.mint_public(Address(caller), quantity, payment)

    _echo_receipt(_run(service.execute(CollectionId(collection), _operation)))


@app.command("mint-whitelisted")
def mint_whitelisted(
    caller: str,
    quantity: int = typer.Option(1, "--quantity", "-q"),
    payment: int = typer.Option(0, "--payment", "-p"),
    collection: str = typer.Option(DEFAULT_COLLECTION, "--collection", "-c"),
) -> None:
    """Mint through the allow-listed channel."""

    service = get_container().collection_service

    def _operation(controller: MintingController) -> MintReceipt:
        return controller.mint_whitelisted(Address(caller), quantity, payment)

    _echo_receipt(_run(service.execute(CollectionId(collection), _operation)))


@app.command("mint-admin")
def mint_admin(
    caller: str,
    recipient: str,
    quantity: int = typer.Option(1, "--quantity", "-q"),
    collection: str = typer.Option(DEFAULT_COLLECTION, "--collection", "-c"),
) -> None:
    """Issue items free of charge to a recipient (administrator only)."""

    service = get_container().collection_service

    def _operation(controller: MintingController) -> MintReceipt:
        return controller.mint_administrative(Address(caller), Address(recipient), quantity)

    _echo_receipt(_run(service.execute(CollectionId(collection), _operation)))


def _set_allow_list(caller: str, addresses: list[str], enabled: bool, collection: str) -> None:
    service = get_container().collection_service

    def _operation(controller: MintingController) -> int:
        return controller.set_allow_list(
            Address(caller), [Address(address) for address in addresses], enabled
        )

    processed = _run(service.execute(CollectionId(collection), _operation))
    verb = "Added" if enabled else "Removed"
    typer.echo(f"{verb} {processed} address(es)")


@allowlist_app.command("add")
def allowlist_add(
    caller: str,
    addresses: list[str],
    collection: str = typer.Option(DEFAULT_COLLECTION, "--collection", "-c"),
) -> None:
    """Allow-list one or more addresses."""

    _set_allow_list(caller, addresses, True, collection)


@allowlist_app.command("remove")
def allowlist_remove(
    caller: str,
    addresses: list[str],
    collection: str = typer.Option(DEFAULT_COLLECTION, "--collection", "-c"),
) -> None:
    """Remove one or more addresses from the allow-list."""

    _set_allow_list(caller, addresses, False, collection)


@app.command("toggle-public")
def toggle_public(
    caller: str,
    collection: str = typer.Option(DEFAULT_COLLECTION, "--collection", "-c"),
) -> None:
    """Flip the public mint flag."""

    service = get_container().collection_service
    enabled = _run(
        service.execute(
            CollectionId(collection),
            lambda controller: controller.toggle_public_mint(Address(caller)),
        )
    )
    typer.echo(f"Public mint {'enabled' if enabled else 'disabled'}")


@app.command("toggle-whitelist")
def toggle_whitelist(
    caller: str,
    collection: str = typer.Option(DEFAULT_COLLECTION, "--collection", "-c"),
) -> None:
    """Flip the allow-listed mint flag."""

    service = get_container().collection_service
    enabled = _run(
        service.execute(
            CollectionId(collection),
            lambda controller: controller.toggle_whitelist_mint(Address(caller)),
        )
    )
    typer.echo(f"Whitelist mint {'enabled' if enabled else 'disabled'}")


@app.command("set-base-path")
def set_base_path(
    caller: str,
    base_path: str,
    collection: str = typer.Option(DEFAULT_COLLECTION, "--collection", "-c"),
) -> None:
    """Change the metadata base path used for future mints."""

    service = get_container().collection_service
    _run(
        service.execute(
            CollectionId(collection),
            lambda controller: controller.set_base_path(Address(caller), base_path),
        )
    )
    typer.echo(f"Base path set to {base_path}")


@app.command("set-price")
def set_price(
    caller: str,
    price: int,
    collection: str = typer.Option(DEFAULT_COLLECTION, "--collection", "-c"),
) -> None:
    """Change the per-item mint price."""

    service = get_container().collection_service
    _run(
        service.execute(
            CollectionId(collection),
            lambda controller: controller.set_mint_price(Address(caller), price),
        )
    )
    typer.echo(f"Mint price set to {price}")


@app.command("withdraw")
def withdraw(
    caller: str,
    collection: str = typer.Option(DEFAULT_COLLECTION, "--collection", "-c"),
) -> None:
    """Transfer the whole treasury balance to the administrator."""

    service = get_container().collection_service
    amount = _run(
        service.execute(
            CollectionId(collection),
            lambda controller: controller.withdraw_all(Address(caller)),
        )
    )
    typer.echo(f"Withdrew {amount} to {caller}")


@app.command("tokens")
def tokens(
    owner: str,
    collection: str = typer.Option(DEFAULT_COLLECTION, "--collection", "-c"),
) -> None:
    """List the identifiers owned by an address."""

    container = get_container()
    state = _run(container.collection_service.load(CollectionId(collection)))
    controller = MintingController.from_state(state, funds_transfer=container.funds_transfer)
    owned = controller.tokens_of_owner(Address(owner))
    if not owned:
        typer.echo(f"{owner} owns no items")
        return
    for token_id in owned:
        typer.echo(f"{token_id}\t{controller.metadata_reference_of(token_id)}")


@app.command("events")
def events(
    collection: str = typer.Option(DEFAULT_COLLECTION, "--collection", "-c"),
    event_type: str | None = typer.Option(None, "--type", help="Filter by event type"),
) -> None:
    """Print the notification history of a collection."""

    selected: EventType | None = None
    if event_type is not None:
        try:
            selected = EventType(event_type.lower())
        except ValueError as exc:
            choices = ", ".join(item.value for item in EventType)
            typer.echo(f"Unsupported event type '{event_type}'. Available: {choices}")
            raise typer.Exit(code=1) from exc

    service = get_container().collection_service
    history = _run(service.list_events(CollectionId(collection), event_type=selected))
    if not history:
        typer.echo("No events recorded")
        return
    for event in history:
        details = event.model_dump(mode="json", exclude={"sequence", "emitted_at", "event_type"})
        rendered = " ".join(f"{key}={value}" for key, value in details.items())
        typer.echo(f"{event.sequence}\t{event.event_type}\t{rendered}")
