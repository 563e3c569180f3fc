"""Service container wiring application components."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from mintledger.collaborators import FundsTransfer, InMemoryFundsTransfer
from mintledger.config import AppSettings
from mintledger.orchestration import CollectionService
from mintledger.persistence import UnitOfWork
from mintledger.persistence.sqlite import create_sqlite_unit_of_work_factory

UnitOfWorkFactory = Callable[[], UnitOfWork]


logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ServiceContainer:
    """Aggregates constructed services with shared configuration."""

    settings: AppSettings
    unit_of_work_factory: UnitOfWorkFactory
    funds_transfer: FundsTransfer
    collection_service: CollectionService


def _ensure_sqlite_directory(database_url: str) -> None:
    if not database_url.startswith("sqlite"):
        return
    try:
        _, path = database_url.split(":///", maxsplit=1)
    except ValueError:
        return
    if not path or path == ":memory:":
        return
    db_path = Path(path).expanduser()
    db_path.parent.mkdir(parents=True, exist_ok=True)


def build_container(
    settings: AppSettings | None = None,
    *,
    funds_transfer: FundsTransfer | None = None,
) -> ServiceContainer:
    """Construct the primary service container."""

    resolved_settings = settings or AppSettings.from_env()
    _ensure_sqlite_directory(resolved_settings.database_url)
    unit_of_work_factory = create_sqlite_unit_of_work_factory(resolved_settings.database_url)

    if funds_transfer is None:
        logger.debug("No funds transfer configured; withdrawals settle in memory")
        funds_transfer = InMemoryFundsTransfer()

    collection_service = CollectionService(
        unit_of_work_factory,
        funds_transfer,
        logger=logger,
    )

    return ServiceContainer(
        settings=resolved_settings,
        unit_of_work_factory=unit_of_work_factory,
        funds_transfer=funds_transfer,
        collection_service=collection_service,
    )


__all__ = ["ServiceContainer", "build_container"]
