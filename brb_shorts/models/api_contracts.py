from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


def _default_ids() -> list[str]:
    return []


class _CamelModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class SetupRequest(_CamelModel):
    api_key: str = Field(default="", alias="apiKey")
    channel_id: str = Field(default="", alias="channelId")
    filter_mode: str | None = Field(default=None, alias="filterMode")


class ActionResponse(_CamelModel):
    success: bool
    error: str | None = None


class ConfigStatusResponse(_CamelModel):
    configured: bool
    channel_id: str | None = Field(default=None, alias="channelId")
    api_key_set: bool | None = Field(default=None, alias="apiKeySet")
    filter_mode: str | None = Field(default=None, alias="filterMode")


class ShortsResponse(_CamelModel):
    ids: list[str] = Field(default_factory=_default_ids)
    cached: bool
    count: int


class ErrorResponse(_CamelModel):
    error: str


class NetworkInfoResponse(_CamelModel):
    local_ip: str = Field(alias="localIP")
