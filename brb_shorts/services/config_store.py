from __future__ import annotations

import logging
import os
import subprocess
import sys
from collections.abc import Callable, MutableMapping
from typing import Protocol

from brb_shorts.models.channel import ChannelConfiguration, normalize_filter_mode

LOGGER = logging.getLogger("brb_shorts.config_store")

API_KEY_ENV = "OBS_BRB_YT_API_KEY"
CHANNEL_ID_ENV = "OBS_BRB_YT_CHANNEL_ID"
FILTER_MODE_ENV = "OBS_BRB_FILTER_MODE"
CONFIG_ENV_NAMES: tuple[str, ...] = (API_KEY_ENV, CHANNEL_ID_ENV, FILTER_MODE_ENV)

CommandRunner = Callable[[list[str]], object]


class ConfigStore(Protocol):
    def load(self) -> ChannelConfiguration | None:
        ...

    def save(self, config: ChannelConfiguration) -> None:
        ...

    def clear(self) -> None:
        ...


class InMemoryConfigStore:
    def __init__(self, config: ChannelConfiguration | None = None) -> None:
        self._config = config

    def load(self) -> ChannelConfiguration | None:
        return self._config

    def save(self, config: ChannelConfiguration) -> None:
        self._config = config

    def clear(self) -> None:
        self._config = None


class EnvironmentConfigStore:
    """Channel configuration kept in `OBS_BRB_*` environment variables.

    Writes always go to the process environment. On Windows they are also
    persisted as user-level variables with `setx`, so the next server start
    picks them up; failures there are logged and otherwise ignored.
    """

    def __init__(
        self,
        environ: MutableMapping[str, str] | None = None,
        *,
        persist: bool | None = None,
        run_command: CommandRunner | None = None,
    ) -> None:
        self._environ = os.environ if environ is None else environ
        self._persist = sys.platform == "win32" if persist is None else persist
        self._run_command = run_command or _run_setx

    def load(self) -> ChannelConfiguration | None:
        api_key = (self._environ.get(API_KEY_ENV) or "").strip()
        channel_id = (self._environ.get(CHANNEL_ID_ENV) or "").strip()
        if not api_key or not channel_id:
            return None
        return ChannelConfiguration(
            api_key=api_key,
            channel_id=channel_id,
            filter_mode=normalize_filter_mode(self._environ.get(FILTER_MODE_ENV)),
        )

    def save(self, config: ChannelConfiguration) -> None:
        values = {
            API_KEY_ENV: config.api_key,
            CHANNEL_ID_ENV: config.channel_id,
            FILTER_MODE_ENV: config.filter_mode,
        }
        self._environ.update(values)
        self._persist_values(values)

    def clear(self) -> None:
        for name in CONFIG_ENV_NAMES:
            self._environ.pop(name, None)
        self._persist_values({name: "" for name in CONFIG_ENV_NAMES})

    def _persist_values(self, values: dict[str, str]) -> None:
        if not self._persist:
            return
        for name, value in values.items():
            try:
                self._run_command(["setx", name, value.replace('"', "")])
            except (OSError, subprocess.SubprocessError):
                LOGGER.warning(
                    "config_store persist_failed variable=%s",
                    name,
                    exc_info=True,
                )
                return


def _run_setx(command: list[str]) -> object:
    return subprocess.run(
        command,
        check=True,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
    )
