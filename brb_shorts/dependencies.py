from __future__ import annotations

from functools import lru_cache

from brb_shorts.config import AppSettings, load_settings
from brb_shorts.services.catalog_cache import CatalogCache
from brb_shorts.services.catalog_fetcher import CatalogFetcher
from brb_shorts.services.config_store import EnvironmentConfigStore
from brb_shorts.state import AppState
from brb_shorts.telemetry import TelemetryClient, build_telemetry_client


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    return load_settings()


@lru_cache(maxsize=1)
def get_app_state() -> AppState:
    settings = get_settings()
    fetcher = CatalogFetcher(max_pages=settings.catalog_max_pages)
    return AppState(
        config_store=EnvironmentConfigStore(),
        fetcher=fetcher,
        cache=CatalogCache(fetcher, ttl_seconds=settings.catalog_cache_ttl_seconds),
        telemetry=get_telemetry(),
    )


@lru_cache(maxsize=1)
def get_telemetry() -> TelemetryClient:
    settings = get_settings()
    return build_telemetry_client(
        enabled=settings.telemetry_enabled,
        sink=settings.telemetry_sink,
    )


def reset_cached_dependencies() -> None:
    get_app_state.cache_clear()
    get_telemetry.cache_clear()
    get_settings.cache_clear()
