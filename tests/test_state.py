from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import pytest
from conftest import Harness, build_harness
from youtube_fakes import FakeYouTubeApi, http_error, playlist_item

from brb_shorts.errors import NOT_CONFIGURED_MESSAGE, CatalogFetchError, NotConfiguredError
from brb_shorts.models.channel import ChannelConfiguration
from brb_shorts.telemetry import TelemetryClient


class _CaptureSink:
    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, Any]]] = []

    def emit(self, *, event_name: str, attributes: Mapping[str, Any]) -> None:
        self.events.append((event_name, dict(attributes)))


def _with_telemetry(harness: Harness) -> _CaptureSink:
    sink = _CaptureSink()
    harness.state.telemetry = TelemetryClient(enabled=True, sink=sink)
    return sink


def test_read_catalog_requires_configuration(unconfigured_harness: Harness) -> None:
    with pytest.raises(NotConfiguredError) as exc_info:
        unconfigured_harness.state.read_catalog()

    assert str(exc_info.value) == NOT_CONFIGURED_MESSAGE
    assert unconfigured_harness.api.calls == []


def test_read_catalog_emits_refresh_then_cache_hit(harness: Harness) -> None:
    sink = _with_telemetry(harness)

    first = harness.state.read_catalog()
    second = harness.state.read_catalog()

    assert first.video_ids == ["short_a", "short_b"]
    assert second.cached is True
    assert [name for name, _ in sink.events] == ["catalog.refresh.finish", "catalog.read.cache_hit"]
    assert sink.events[0][1]["count"] == 2


def test_read_catalog_failure_emits_error_with_stage(channel_config: ChannelConfiguration) -> None:
    api = FakeYouTubeApi(failures={("channels", 0): http_error(403, "quotaExceeded")})
    harness = build_harness(api, config=channel_config)
    sink = _with_telemetry(harness)

    with pytest.raises(CatalogFetchError):
        harness.state.read_catalog()

    assert sink.events == [
        (
            "catalog.refresh.error",
            {
                "channel_id": "UC_test",
                "error_type": "CatalogFetchError",
                "stage": "fetching_channel",
            },
        )
    ]


def test_configure_invalidates_cache_and_uses_new_channel(harness: Harness) -> None:
    harness.state.read_catalog()
    assert harness.state.cache.is_fresh() is True

    harness.state.configure(
        ChannelConfiguration(api_key="other-key", channel_id="UC_other", filter_mode="duration")
    )

    assert harness.state.cache.is_fresh() is False
    harness.state.read_catalog()
    assert harness.api_keys_used[-1] == "other-key"
    assert harness.api.calls_to("channels")[-1]["id"] == "UC_other"


def test_reset_clears_store_and_cache(harness: Harness) -> None:
    sink = _with_telemetry(harness)
    harness.state.read_catalog()

    harness.state.reset()

    assert harness.state.is_configured() is False
    assert harness.state.cache.entry.populated is False
    assert sink.events[-1] == ("config.cleared", {})


def test_verify_channel_uses_supplied_key() -> None:
    harness = build_harness(FakeYouTubeApi(pages=[([playlist_item("x")], None)]))

    assert harness.state.verify_channel("fresh-key", "UC_new") is True
    assert harness.api_keys_used == ["fresh-key"]
    assert harness.api.calls_to("channels") == [{"part": "id", "id": "UC_new"}]
