from __future__ import annotations

import html
from functools import lru_cache
from pathlib import Path
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse, HTMLResponse, RedirectResponse, Response

from brb_shorts.dependencies import get_app_state
from brb_shorts.models.channel import DEFAULT_FILTER_MODE, FilterMode
from brb_shorts.state import AppState

WEB_DIR = Path(__file__).resolve().parent.parent / "web"
_NO_CACHE_HEADERS = {"Cache-Control": "no-cache, no-store, must-revalidate"}

SETUP_HEADING = "🎬 OBS BRB Shorts"
SETUP_INTRO = (
    "Let's get you set up in just a few minutes. After setup, check the "
    '<a href="/obs-guide">OBS Setup Guide</a>.'
)
SETTINGS_HEADING = "🎬 OBS BRB Shorts - Settings"
SETTINGS_INTRO = 'Update your configuration below. <a href="/player">&larr; Back to player</a>'

router = APIRouter(include_in_schema=False)


@lru_cache(maxsize=8)
def _load_template(name: str) -> str:
    return (WEB_DIR / name).read_text(encoding="utf-8")


def render_setup_page(
    *,
    settings_mode: bool = False,
    filter_mode: FilterMode = DEFAULT_FILTER_MODE,
    channel_id: str = "",
) -> str:
    replacements = {
        "__PAGE_TITLE__": "BRB Shorts - Settings" if settings_mode else "BRB Shorts - Setup",
        "__PAGE_HEADING__": SETTINGS_HEADING if settings_mode else SETUP_HEADING,
        "__PAGE_INTRO__": SETTINGS_INTRO if settings_mode else SETUP_INTRO,
        "__CHANNEL_ID__": html.escape(channel_id, quote=True),
        "__HASHTAG_CHECKED__": "checked " if filter_mode == "hashtag" else "",
        "__DURATION_CHECKED__": "checked " if filter_mode == "duration" else "",
        "__DANGER_ZONE__": _load_template("settings_danger_zone.html") if settings_mode else "",
    }
    page = _load_template("setup.html")
    for placeholder, value in replacements.items():
        page = page.replace(placeholder, value)
    return page


def _static_page(name: str) -> FileResponse:
    return FileResponse(WEB_DIR / name, media_type="text/html", headers=_NO_CACHE_HEADERS)


@router.get("/")
def index(state: Annotated[AppState, Depends(get_app_state)]) -> Response:
    if state.is_configured():
        return RedirectResponse("/player")
    return RedirectResponse("/setup")


@router.get("/setup")
def setup_page() -> HTMLResponse:
    return HTMLResponse(render_setup_page(), headers=_NO_CACHE_HEADERS)


@router.get("/settings")
def settings_page(state: Annotated[AppState, Depends(get_app_state)]) -> HTMLResponse:
    config = state.current_config()
    return HTMLResponse(
        render_setup_page(
            settings_mode=True,
            filter_mode=config.filter_mode if config else DEFAULT_FILTER_MODE,
            channel_id=config.channel_id if config else "",
        ),
        headers=_NO_CACHE_HEADERS,
    )


@router.get("/player")
def player_page(state: Annotated[AppState, Depends(get_app_state)]) -> Response:
    if not state.is_configured():
        return RedirectResponse("/setup")
    return _static_page("player.html")


@router.get("/obs-guide")
def obs_guide_page() -> FileResponse:
    return _static_page("obs_guide.html")
