from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from structlog.contextvars import bind_contextvars, reset_contextvars

from brb_shorts.dependencies import get_app_state
from brb_shorts.errors import (
    BrbShortsError,
    NotConfiguredError,
    YouTubeCatalogError,
    YouTubeConnectionError,
)
from brb_shorts.models.api_contracts import (
    ActionResponse,
    ConfigStatusResponse,
    ErrorResponse,
    NetworkInfoResponse,
    SetupRequest,
    ShortsResponse,
)
from brb_shorts.models.channel import ChannelConfiguration, normalize_filter_mode
from brb_shorts.services.network import get_local_ip
from brb_shorts.state import AppState

LOGGER = logging.getLogger("brb_shorts.api")

router = APIRouter()


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(by_alias=True),
    )


@router.post(
    "/api/setup",
    response_model=ActionResponse,
    response_model_exclude_none=True,
    tags=["config"],
    operation_id="setup_channel",
)
def setup_channel(
    request: SetupRequest,
    state: Annotated[AppState, Depends(get_app_state)],
) -> ActionResponse:
    api_key = request.api_key.strip()
    channel_id = request.channel_id.strip()
    if not api_key or not channel_id:
        return ActionResponse(success=False, error="Missing API key or Channel ID")

    config = ChannelConfiguration(
        api_key=api_key,
        channel_id=channel_id,
        filter_mode=normalize_filter_mode(request.filter_mode),
    )

    context_tokens = bind_contextvars(channel_id=channel_id)
    try:
        if not state.verify_channel(api_key, channel_id):
            return ActionResponse(
                success=False,
                error="Channel not found. Check your Channel ID.",
            )
        state.configure(config)
    except YouTubeConnectionError as exc:
        return ActionResponse(success=False, error=f"Connection error: {exc}")
    except YouTubeCatalogError as exc:
        LOGGER.warning("setup verification_failed error=%s", exc)
        return ActionResponse(success=False, error=f"API Error: {exc}")
    finally:
        reset_contextvars(**context_tokens)

    return ActionResponse(success=True)


@router.get(
    "/api/config",
    response_model=ConfigStatusResponse,
    response_model_exclude_none=True,
    tags=["config"],
    operation_id="get_config_status",
)
def get_config_status(
    state: Annotated[AppState, Depends(get_app_state)],
) -> ConfigStatusResponse:
    config = state.current_config()
    if config is None:
        return ConfigStatusResponse(configured=False)
    return ConfigStatusResponse(
        configured=True,
        channel_id=config.channel_id,
        api_key_set=bool(config.api_key),
        filter_mode=config.filter_mode,
    )


@router.post(
    "/api/clear-config",
    response_model=ActionResponse,
    response_model_exclude_none=True,
    tags=["config"],
    operation_id="clear_config",
)
def clear_config(
    state: Annotated[AppState, Depends(get_app_state)],
) -> ActionResponse:
    try:
        state.reset()
    except (OSError, BrbShortsError) as exc:
        LOGGER.exception("config clear_failed")
        return ActionResponse(success=False, error=str(exc))
    return ActionResponse(success=True)


@router.get(
    "/api/shorts",
    response_model=ShortsResponse,
    responses={500: {"model": ErrorResponse}},
    tags=["catalog"],
    operation_id="list_shorts",
)
def list_shorts(
    state: Annotated[AppState, Depends(get_app_state)],
) -> ShortsResponse | JSONResponse:
    try:
        result = state.read_catalog()
    except (NotConfiguredError, YouTubeCatalogError) as exc:
        return _error_response(500, str(exc))

    return ShortsResponse(ids=result.video_ids, cached=result.cached, count=result.count)


@router.get(
    "/api/network-info",
    response_model=NetworkInfoResponse,
    tags=["system"],
    operation_id="network_info",
)
def network_info() -> NetworkInfoResponse:
    return NetworkInfoResponse(local_ip=get_local_ip())
