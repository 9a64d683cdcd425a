from __future__ import annotations

import logging

from brb_shorts.errors import NotConfiguredError, YouTubeCatalogError
from brb_shorts.models.channel import ChannelConfiguration
from brb_shorts.services.catalog_cache import CatalogCache, CatalogResult
from brb_shorts.services.catalog_fetcher import CatalogFetcher
from brb_shorts.services.config_store import ConfigStore
from brb_shorts.telemetry import TelemetryClient

LOGGER = logging.getLogger("brb_shorts.state")


class AppState:
    """Process-wide state: the channel configuration and the catalog built from it.

    Any configuration change invalidates the cache so the next read refetches.
    """

    def __init__(
        self,
        *,
        config_store: ConfigStore,
        fetcher: CatalogFetcher,
        cache: CatalogCache,
        telemetry: TelemetryClient | None = None,
    ) -> None:
        self.config_store = config_store
        self.fetcher = fetcher
        self.cache = cache
        self.telemetry = telemetry or TelemetryClient.disabled()

    def current_config(self) -> ChannelConfiguration | None:
        return self.config_store.load()

    def is_configured(self) -> bool:
        return self.current_config() is not None

    def configure(self, config: ChannelConfiguration) -> None:
        self.config_store.save(config)
        self.cache.invalidate()
        LOGGER.info(
            "config saved channel_id=%s filter_mode=%s",
            config.channel_id,
            config.filter_mode,
        )
        self.telemetry.emit(
            "config.saved",
            channel_id=config.channel_id,
            filter_mode=config.filter_mode,
        )

    def reset(self) -> None:
        self.config_store.clear()
        self.cache.invalidate()
        LOGGER.info("config cleared")
        self.telemetry.emit("config.cleared")

    def verify_channel(self, api_key: str, channel_id: str) -> bool:
        return self.fetcher.client_for(api_key).channel_exists(channel_id)

    def read_catalog(self) -> CatalogResult:
        config = self.current_config()
        if config is None:
            raise NotConfiguredError()

        try:
            result = self.cache.get_catalog(config)
        except YouTubeCatalogError as exc:
            self.telemetry.emit(
                "catalog.refresh.error",
                channel_id=config.channel_id,
                error_type=type(exc).__name__,
                stage=getattr(exc, "stage", None),
            )
            raise

        if result.cached:
            self.telemetry.emit("catalog.read.cache_hit", count=result.count)
        else:
            self.telemetry.emit(
                "catalog.refresh.finish",
                channel_id=config.channel_id,
                filter_mode=config.filter_mode,
                count=result.count,
            )
        return result
