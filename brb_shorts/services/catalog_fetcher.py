from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal, TypeVar

from brb_shorts.errors import CatalogFetchError, FetchStage, YouTubeCatalogError
from brb_shorts.models.channel import ChannelConfiguration, FilterMode
from brb_shorts.services.duration import parse_duration_seconds
from brb_shorts.services.youtube_client import (
    MAX_PAGE_SIZE,
    VideoCandidate,
    YouTubeCatalogClient,
)

LOGGER = logging.getLogger("brb_shorts.catalog")

RefreshState = Literal["fetching_channel", "paging", "fetching_details", "done", "failed"]

SHORTS_MARKER = "#shorts"
MAX_DURATION_SECONDS: dict[FilterMode, int] = {
    "hashtag": 60,
    "duration": 90,
}
DEFAULT_MAX_PAGES = 1_000

_T = TypeVar("_T")

ClientFactory = Callable[[str], YouTubeCatalogClient]


@dataclass(frozen=True)
class CatalogFetchResult:
    video_ids: list[str]
    state: RefreshState
    pages_fetched: int
    candidates_seen: int
    estimated_api_units: int


def matches_filter(candidate: VideoCandidate, filter_mode: FilterMode) -> bool:
    if filter_mode == "duration":
        return True
    text = f"{candidate.title} {candidate.description}".lower()
    return SHORTS_MARKER in text


def within_duration_cap(seconds: int, filter_mode: FilterMode) -> bool:
    return 0 < seconds <= MAX_DURATION_SECONDS[filter_mode]


class CatalogRefresh:
    """One pass over a channel's uploads.

    Moves through fetching_channel -> paging -> fetching_details -> done, or
    to failed from any stage. Instances are single use.
    """

    def __init__(
        self,
        config: ChannelConfiguration,
        client: YouTubeCatalogClient,
        *,
        max_pages: int = DEFAULT_MAX_PAGES,
    ) -> None:
        self._config = config
        self._client = client
        self._max_pages = max_pages
        self.state: RefreshState = "fetching_channel"
        self.pages_fetched = 0
        self.candidates_seen = 0

    def run(self) -> CatalogFetchResult:
        if self.state != "fetching_channel":
            raise RuntimeError("CatalogRefresh instances cannot be reused")

        uploads_playlist_id = self._step(
            "fetching_channel",
            lambda: self._client.find_uploads_playlist(self._config.channel_id),
        )
        if uploads_playlist_id is None:
            LOGGER.info(
                "catalog uploads_playlist_missing channel_id=%s",
                self._config.channel_id,
            )
            return self._finish([])

        self.state = "paging"
        candidate_ids = self._step("paging", lambda: self._collect_candidates(uploads_playlist_id))
        if not candidate_ids:
            return self._finish([])

        self.state = "fetching_details"
        video_ids = self._step("fetching_details", lambda: self._filter_by_duration(candidate_ids))
        return self._finish(video_ids)

    def _step(self, stage: FetchStage, action: Callable[[], _T]) -> _T:
        try:
            return action()
        except CatalogFetchError:
            self.state = "failed"
            raise
        except YouTubeCatalogError as exc:
            self.state = "failed"
            raise CatalogFetchError(str(exc), stage=stage) from exc

    def _collect_candidates(self, playlist_id: str) -> list[str]:
        filter_mode = self._config.filter_mode
        candidate_ids: list[str] = []
        seen_ids: set[str] = set()
        seen_tokens: set[str] = set()
        page_token: str | None = None

        while True:
            if self.pages_fetched >= self._max_pages:
                raise CatalogFetchError(
                    f"Uploads playlist exceeded {self._max_pages} pages; refusing to continue.",
                    stage="paging",
                )

            page = self._client.list_playlist_page(
                playlist_id,
                page_token=page_token,
                page_size=MAX_PAGE_SIZE,
            )
            self.pages_fetched += 1
            self.candidates_seen += len(page.candidates)

            for candidate in page.candidates:
                if candidate.video_id in seen_ids:
                    continue
                if matches_filter(candidate, filter_mode):
                    seen_ids.add(candidate.video_id)
                    candidate_ids.append(candidate.video_id)

            if page.next_page_token is None:
                return candidate_ids
            if page.next_page_token in seen_tokens:
                raise CatalogFetchError(
                    "YouTube returned a repeated page token while listing uploads.",
                    stage="paging",
                )
            seen_tokens.add(page.next_page_token)
            page_token = page.next_page_token

    def _filter_by_duration(self, candidate_ids: list[str]) -> list[str]:
        filter_mode = self._config.filter_mode
        durations: dict[str, str] = {}
        for index in range(0, len(candidate_ids), MAX_PAGE_SIZE):
            chunk = candidate_ids[index : index + MAX_PAGE_SIZE]
            durations.update(self._client.list_video_durations(chunk))

        return [
            video_id
            for video_id in candidate_ids
            if video_id in durations
            and within_duration_cap(parse_duration_seconds(durations[video_id]), filter_mode)
        ]

    def _finish(self, video_ids: list[str]) -> CatalogFetchResult:
        self.state = "done"
        return CatalogFetchResult(
            video_ids=video_ids,
            state=self.state,
            pages_fetched=self.pages_fetched,
            candidates_seen=self.candidates_seen,
            estimated_api_units=self._client.calls_made,
        )


class CatalogFetcher:
    def __init__(
        self,
        *,
        client_factory: ClientFactory = YouTubeCatalogClient.from_api_key,
        max_pages: int = DEFAULT_MAX_PAGES,
    ) -> None:
        self._client_factory = client_factory
        self._max_pages = max_pages

    def client_for(self, api_key: str) -> YouTubeCatalogClient:
        try:
            return self._client_factory(api_key)
        except YouTubeCatalogError:
            raise
        except Exception as exc:
            raise YouTubeCatalogError(f"Could not create YouTube client: {exc}") from exc

    def refresh_catalog(self, config: ChannelConfiguration) -> CatalogFetchResult:
        try:
            client = self.client_for(config.api_key)
        except YouTubeCatalogError as exc:
            raise CatalogFetchError(str(exc), stage="fetching_channel") from exc

        refresh = CatalogRefresh(config, client, max_pages=self._max_pages)
        try:
            result = refresh.run()
        except CatalogFetchError as exc:
            LOGGER.warning(
                "catalog refresh_failed channel_id=%s stage=%s pages=%s error=%s",
                config.channel_id,
                exc.stage,
                refresh.pages_fetched,
                exc,
            )
            raise

        LOGGER.info(
            "catalog refresh_complete channel_id=%s filter_mode=%s pages=%s candidates=%s "
            "matched=%s api_units=%s",
            config.channel_id,
            config.filter_mode,
            result.pages_fetched,
            result.candidates_seen,
            len(result.video_ids),
            result.estimated_api_units,
        )
        return result
