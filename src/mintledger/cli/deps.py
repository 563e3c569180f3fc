"""Shared CLI dependency helpers."""

from __future__ import annotations

from functools import lru_cache

from dotenv import find_dotenv, load_dotenv

from mintledger.config import AppSettings
from mintledger.container import ServiceContainer, build_container


@lru_cache(maxsize=1)
def get_container() -> ServiceContainer:
    """Return a cached service container for CLI commands."""

    load_dotenv(find_dotenv(usecwd=True))
    settings = AppSettings.from_env()
    return build_container(settings)


def reset_container() -> None:
    """Clear the cached container (useful for tests)."""

    get_container.cache_clear()
