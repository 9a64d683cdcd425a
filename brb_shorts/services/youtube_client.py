from __future__ import annotations

import json
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, cast

import httplib2
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from brb_shorts.errors import YouTubeCatalogError, YouTubeConnectionError

LOGGER = logging.getLogger("brb_shorts.youtube")

MAX_PAGE_SIZE = 50


@dataclass(frozen=True)
class VideoCandidate:
    video_id: str
    title: str
    description: str


@dataclass(frozen=True)
class PlaylistPage:
    candidates: list[VideoCandidate]
    next_page_token: str | None
    raw_item_count: int


class YouTubeCatalogClient:
    """Read-only YouTube Data API v3 calls used by the catalog refresh.

    `client` is a `googleapiclient` resource (or anything shaped like one:
    `channels()`, `playlistItems()` and `videos()` returning objects whose
    `list(**kwargs).execute()` yields the decoded JSON body).
    """

    def __init__(self, client: Any) -> None:
        self._client = client
        self.calls_made = 0

    @classmethod
    def from_api_key(cls, api_key: str) -> YouTubeCatalogClient:
        return cls(build_youtube_client(api_key))

    def channel_exists(self, channel_id: str) -> bool:
        response = self._execute(
            "channels.list",
            lambda: self._client.channels().list(part="id", id=channel_id),
        )
        return bool(_as_list(response.get("items")))

    def find_uploads_playlist(self, channel_id: str) -> str | None:
        response = self._execute(
            "channels.list",
            lambda: self._client.channels().list(part="contentDetails", id=channel_id),
        )
        items = _as_list(response.get("items"))
        if not items:
            return None

        content_details = _as_dict(_as_dict(items[0]).get("contentDetails"))
        related = _as_dict(content_details.get("relatedPlaylists"))
        uploads = related.get("uploads")
        if isinstance(uploads, str) and uploads.strip():
            return uploads
        return None

    def list_playlist_page(
        self,
        playlist_id: str,
        *,
        page_token: str | None = None,
        page_size: int = MAX_PAGE_SIZE,
    ) -> PlaylistPage:
        query_kwargs: dict[str, object] = {
            "part": "snippet",
            "playlistId": playlist_id,
            "maxResults": max(1, min(MAX_PAGE_SIZE, page_size)),
        }
        if page_token is not None:
            query_kwargs["pageToken"] = page_token

        response = self._execute(
            "playlistItems.list",
            lambda: self._client.playlistItems().list(**query_kwargs),
        )

        raw_items = _as_list(response.get("items"))
        candidates: list[VideoCandidate] = []
        for item in raw_items:
            snippet = _as_dict(_as_dict(item).get("snippet"))
            video_id = _as_dict(snippet.get("resourceId")).get("videoId")
            if not isinstance(video_id, str) or not video_id:
                continue
            title = snippet.get("title")
            description = snippet.get("description")
            candidates.append(
                VideoCandidate(
                    video_id=video_id,
                    title=title if isinstance(title, str) else "",
                    description=description if isinstance(description, str) else "",
                )
            )

        raw_next = response.get("nextPageToken")
        next_page_token = raw_next if isinstance(raw_next, str) and raw_next.strip() else None
        return PlaylistPage(
            candidates=candidates,
            next_page_token=next_page_token,
            raw_item_count=len(raw_items),
        )

    def list_video_durations(self, video_ids: Sequence[str]) -> dict[str, str]:
        if not video_ids:
            return {}
        if len(video_ids) > MAX_PAGE_SIZE:
            raise ValueError(f"videos.list accepts at most {MAX_PAGE_SIZE} ids per call")

        response = self._execute(
            "videos.list",
            lambda: self._client.videos().list(
                part="contentDetails",
                id=",".join(video_ids),
                maxResults=len(video_ids),
            ),
        )

        durations: dict[str, str] = {}
        for item in _as_list(response.get("items")):
            item_dict = _as_dict(item)
            raw_video_id = item_dict.get("id")
            if not isinstance(raw_video_id, str):
                continue
            raw_duration = _as_dict(item_dict.get("contentDetails")).get("duration")
            durations[raw_video_id] = raw_duration if isinstance(raw_duration, str) else "PT0S"
        return durations

    def _execute(self, operation: str, build_request: Callable[[], Any]) -> dict[str, Any]:
        self.calls_made += 1
        try:
            response = build_request().execute()
        except HttpError as exc:
            LOGGER.warning(
                "youtube request_failed operation=%s status=%s",
                operation,
                getattr(exc.resp, "status", None),
            )
            raise YouTubeCatalogError(_http_error_message(exc)) from exc
        except (OSError, httplib2.HttpLib2Error) as exc:
            LOGGER.warning("youtube connection_failed operation=%s error=%s", operation, exc)
            raise YouTubeConnectionError(_summarize_exception_message(exc)) from exc
        except Exception as exc:
            LOGGER.warning("youtube request_failed operation=%s", operation, exc_info=True)
            raise YouTubeCatalogError(_summarize_exception_message(exc)) from exc

        if not isinstance(response, dict):
            raise YouTubeCatalogError(f"Malformed response from YouTube for {operation}")
        return cast(dict[str, Any], response)


def build_youtube_client(api_key: str) -> Any:
    return build("youtube", "v3", developerKey=api_key, cache_discovery=False)


def _http_error_message(exc: HttpError) -> str:
    content = getattr(exc, "content", None)
    if isinstance(content, bytes):
        try:
            payload = json.loads(content.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError):
            payload = None
        message = _as_dict(_as_dict(payload).get("error")).get("message")
        if isinstance(message, str) and message.strip():
            return message.strip()

    reason = getattr(exc, "reason", None)
    if isinstance(reason, str) and reason.strip():
        return reason.strip()
    return _summarize_exception_message(exc)


def _summarize_exception_message(exc: Exception, *, max_length: int = 400) -> str:
    raw = str(exc).strip()
    if not raw:
        raw = repr(exc)
    if len(raw) <= max_length:
        return raw
    return f"{raw[: max_length - 3]}..."


def _as_dict(value: Any) -> dict[str, Any]:
    if isinstance(value, dict):
        raw_dict = cast(dict[object, object], value)
        converted: dict[str, Any] = {}
        for key, item in raw_dict.items():
            if isinstance(key, str):
                converted[key] = item
        return converted
    return {}


def _as_list(value: Any) -> list[Any]:
    if isinstance(value, list):
        return list(cast(list[Any], value))
    return []
