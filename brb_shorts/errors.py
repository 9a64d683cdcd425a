from __future__ import annotations

from typing import Literal

FetchStage = Literal["fetching_channel", "paging", "fetching_details"]

NOT_CONFIGURED_MESSAGE = "Not configured. Visit /setup to configure."


class BrbShortsError(Exception):
    pass


class NotConfiguredError(BrbShortsError):
    def __init__(self, message: str = NOT_CONFIGURED_MESSAGE) -> None:
        super().__init__(message)


class YouTubeCatalogError(BrbShortsError):
    """A YouTube Data API call failed or returned something unusable."""


class CatalogFetchError(YouTubeCatalogError):
    def __init__(self, message: str, *, stage: FetchStage) -> None:
        super().__init__(message)
        self.stage: FetchStage = stage


class YouTubeConnectionError(YouTubeCatalogError):
    """The request never got an answer from YouTube (DNS, TLS, socket, timeout)."""
