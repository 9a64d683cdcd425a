from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from youtube_fakes import FakeClock, FakeYouTubeApi, playlist_item

from brb_shorts.dependencies import get_app_state, reset_cached_dependencies
from brb_shorts.main import create_app
from brb_shorts.models.channel import ChannelConfiguration
from brb_shorts.services.catalog_cache import CatalogCache
from brb_shorts.services.catalog_fetcher import CatalogFetcher
from brb_shorts.services.config_store import InMemoryConfigStore
from brb_shorts.services.youtube_client import YouTubeCatalogClient
from brb_shorts.state import AppState


@dataclass
class Harness:
    api: FakeYouTubeApi
    clock: FakeClock
    store: InMemoryConfigStore
    state: AppState
    api_keys_used: list[str]


def build_harness(
    api: FakeYouTubeApi,
    *,
    config: ChannelConfiguration | None = None,
) -> Harness:
    clock = FakeClock()
    api_keys_used: list[str] = []

    def _client_factory(api_key: str) -> YouTubeCatalogClient:
        api_keys_used.append(api_key)
        return YouTubeCatalogClient(api)

    fetcher = CatalogFetcher(client_factory=_client_factory)
    store = InMemoryConfigStore(config)
    state = AppState(
        config_store=store,
        fetcher=fetcher,
        cache=CatalogCache(fetcher, ttl_seconds=6 * 60 * 60, clock=clock),
    )
    return Harness(api=api, clock=clock, store=store, state=state, api_keys_used=api_keys_used)


@pytest.fixture
def channel_config() -> ChannelConfiguration:
    return ChannelConfiguration(api_key="test-api-key", channel_id="UC_test", filter_mode="hashtag")


@pytest.fixture
def shorts_api() -> FakeYouTubeApi:
    return FakeYouTubeApi(
        pages=[
            (
                [
                    playlist_item("short_a", "Quick tip #shorts"),
                    playlist_item("long_talk", "Full conference talk"),
                ],
                "page-2",
            ),
            ([playlist_item("short_b", "Behind the scenes", "#Shorts #gaming")], None),
        ],
        durations={"short_a": "PT45S", "long_talk": "PT45M", "short_b": "PT59S"},
    )


@pytest.fixture
def harness(shorts_api: FakeYouTubeApi, channel_config: ChannelConfiguration) -> Harness:
    return build_harness(shorts_api, config=channel_config)


@pytest.fixture
def unconfigured_harness(shorts_api: FakeYouTubeApi) -> Harness:
    return build_harness(shorts_api)


def _client_for(
    harness: Harness,
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> Iterator[TestClient]:
    monkeypatch.setenv("BRB_SHORTS_DATA_DIR", str(tmp_path / "runtime-data"))
    monkeypatch.setenv("BRB_SHORTS_TELEMETRY_SINK", "none")
    reset_cached_dependencies()

    app = create_app()
    app.dependency_overrides[get_app_state] = lambda: harness.state
    with TestClient(app) as test_client:
        yield test_client

    reset_cached_dependencies()


@pytest.fixture
def client(
    harness: Harness,
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> Iterator[TestClient]:
    yield from _client_for(harness, tmp_path, monkeypatch)


@pytest.fixture
def unconfigured_client(
    unconfigured_harness: Harness,
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> Iterator[TestClient]:
    yield from _client_for(unconfigured_harness, tmp_path, monkeypatch)
