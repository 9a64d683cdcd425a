from __future__ import annotations

import random
from collections.abc import Iterator, Sequence


def shuffle_in_place(items: list[str], rng: random.Random) -> list[str]:
    """Fisher-Yates: walk from the end, swapping each slot with a uniform pick at or before it."""
    for index in range(len(items) - 1, 0, -1):
        swap_with = rng.randint(0, index)
        items[index], items[swap_with] = items[swap_with], items[index]
    return items


class PlaybackSequencer:
    """Endless play order over a fixed id list.

    Every cycle is an independent permutation of the full list, so each id
    plays exactly once per cycle. An empty list yields nothing.
    """

    def __init__(self, video_ids: Sequence[str], *, rng: random.Random | None = None) -> None:
        self._video_ids = list(video_ids)
        self._rng = rng or random.Random()
        self._queue: list[str] = []
        self._index = 0
        self.cycles_started = 0

    def __iter__(self) -> Iterator[str]:
        return self

    def __next__(self) -> str:
        if not self._video_ids:
            raise StopIteration
        if self._index >= len(self._queue):
            self._queue = shuffle_in_place(list(self._video_ids), self._rng)
            self._index = 0
            self.cycles_started += 1
        video_id = self._queue[self._index]
        self._index += 1
        return video_id

    def take(self, count: int) -> list[str]:
        if not self._video_ids:
            return []
        return [next(self) for _ in range(max(0, count))]

    def reload(self, video_ids: Sequence[str]) -> None:
        self._video_ids = list(video_ids)
        self._queue = []
        self._index = 0
