from __future__ import annotations

import socket

import httplib2
import pytest
from youtube_fakes import FakeYouTubeApi, http_error, playlist_item

from brb_shorts.errors import YouTubeCatalogError, YouTubeConnectionError
from brb_shorts.services.youtube_client import YouTubeCatalogClient


def test_channel_exists_reflects_items_returned() -> None:
    assert YouTubeCatalogClient(FakeYouTubeApi()).channel_exists("UC_test") is True
    assert YouTubeCatalogClient(FakeYouTubeApi(channel_found=False)).channel_exists("UC_x") is False


def test_channel_exists_requests_only_the_id_part() -> None:
    api = FakeYouTubeApi()
    YouTubeCatalogClient(api).channel_exists("UC_test")

    assert api.calls_to("channels") == [{"part": "id", "id": "UC_test"}]


def test_find_uploads_playlist_reads_related_playlists() -> None:
    api = FakeYouTubeApi(uploads_playlist="UU_abc")
    client = YouTubeCatalogClient(api)

    assert client.find_uploads_playlist("UC_abc") == "UU_abc"
    assert api.calls_to("channels")[0]["part"] == "contentDetails"
    assert client.calls_made == 1


def test_find_uploads_playlist_returns_none_when_channel_or_playlist_missing() -> None:
    assert YouTubeCatalogClient(FakeYouTubeApi(channel_found=False)).find_uploads_playlist("x") is None
    assert YouTubeCatalogClient(FakeYouTubeApi(uploads_playlist=None)).find_uploads_playlist("x") is None


def test_list_playlist_page_skips_items_without_video_id() -> None:
    api = FakeYouTubeApi(
        pages=[
            (
                [
                    playlist_item("vid_1", "First #shorts", "desc"),
                    playlist_item(None, "Deleted video"),
                    {"snippet": "not-a-dict"},
                ],
                "next-token",
            ),
            ([], None),
        ]
    )
    page = YouTubeCatalogClient(api).list_playlist_page("UU_uploads")

    assert [candidate.video_id for candidate in page.candidates] == ["vid_1"]
    assert page.candidates[0].title == "First #shorts"
    assert page.candidates[0].description == "desc"
    assert page.next_page_token == "next-token"
    assert page.raw_item_count == 3
    assert api.calls_to("playlistItems") == [
        {"part": "snippet", "playlistId": "UU_uploads", "maxResults": 50}
    ]


def test_list_playlist_page_forwards_page_token() -> None:
    api = FakeYouTubeApi(pages=[([], "tok-1"), ([playlist_item("vid_2")], None)])
    page = YouTubeCatalogClient(api).list_playlist_page("UU_uploads", page_token="tok-1")

    assert [candidate.video_id for candidate in page.candidates] == ["vid_2"]
    assert page.next_page_token is None
    assert api.calls_to("playlistItems")[0]["pageToken"] == "tok-1"


def test_list_video_durations_joins_ids_and_defaults_missing_duration() -> None:
    class _NoDurationApi(FakeYouTubeApi):
        def _videos(self, kwargs: dict[str, object]) -> dict[str, object]:
            return {
                "items": [
                    {"id": "a", "contentDetails": {"duration": "PT30S"}},
                    {"id": "b", "contentDetails": {}},
                ]
            }

    api = _NoDurationApi()
    durations = YouTubeCatalogClient(api).list_video_durations(["a", "b", "c"])

    assert durations == {"a": "PT30S", "b": "PT0S"}
    assert api.calls_to("videos") == [{"part": "contentDetails", "id": "a,b,c", "maxResults": 3}]


def test_list_video_durations_skips_call_for_empty_input() -> None:
    api = FakeYouTubeApi()
    assert YouTubeCatalogClient(api).list_video_durations([]) == {}
    assert api.calls == []


def test_list_video_durations_rejects_oversized_batch() -> None:
    with pytest.raises(ValueError):
        YouTubeCatalogClient(FakeYouTubeApi()).list_video_durations([f"id{i}" for i in range(51)])


def test_http_error_surfaces_provider_message() -> None:
    api = FakeYouTubeApi(failures={("channels", 0): http_error(403, "API key not valid.")})

    with pytest.raises(YouTubeCatalogError) as exc_info:
        YouTubeCatalogClient(api).channel_exists("UC_test")

    assert str(exc_info.value) == "API key not valid."
    assert not isinstance(exc_info.value, YouTubeConnectionError)


@pytest.mark.parametrize(
    "failure",
    [socket.timeout("timed out"), ConnectionResetError("reset"), httplib2.ServerNotFoundError("dns")],
)
def test_transport_failures_become_connection_errors(failure: Exception) -> None:
    api = FakeYouTubeApi(failures={("playlistItems", 0): failure})

    with pytest.raises(YouTubeConnectionError):
        YouTubeCatalogClient(api).list_playlist_page("UU_uploads")


def test_non_dict_response_is_rejected() -> None:
    class _BrokenApi(FakeYouTubeApi):
        def handle(self, resource: str, kwargs: dict[str, object]) -> object:  # type: ignore[override]
            return ["not", "a", "dict"]

    with pytest.raises(YouTubeCatalogError, match="Malformed response"):
        YouTubeCatalogClient(_BrokenApi()).channel_exists("UC_test")
