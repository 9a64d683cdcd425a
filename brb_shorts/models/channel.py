from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

FilterMode = Literal["hashtag", "duration"]
FILTER_MODES: frozenset[str] = frozenset({"hashtag", "duration"})
DEFAULT_FILTER_MODE: FilterMode = "hashtag"


def normalize_filter_mode(value: Any) -> FilterMode:
    """Map anything that is not exactly a known mode back to `hashtag`."""
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized == "duration":
            return "duration"
    return DEFAULT_FILTER_MODE


class ChannelConfiguration(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    api_key: str = Field(min_length=1)
    channel_id: str = Field(min_length=1)
    filter_mode: FilterMode = DEFAULT_FILTER_MODE

    @field_validator("api_key", "channel_id", mode="before")
    @classmethod
    def _strip_text(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("filter_mode", mode="before")
    @classmethod
    def _normalize_filter_mode(cls, value: Any) -> FilterMode:
        return normalize_filter_mode(value)
