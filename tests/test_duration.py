from __future__ import annotations

import pytest

from brb_shorts.services.duration import parse_duration_seconds


@pytest.mark.parametrize(
    ("raw_value", "expected"),
    [
        ("PT45S", 45),
        ("PT1M", 60),
        ("PT1M30S", 90),
        ("PT1M31S", 91),
        ("PT1H2M3S", 3723),
        ("PT2H", 7200),
        ("P1DT1S", 86_401),
        ("PT59.5S", 59),
        ("pt30s", 30),
        ("  PT10S  ", 10),
        ("P0D", 0),
    ],
)
def test_parse_duration_seconds_handles_youtube_formats(raw_value: str, expected: int) -> None:
    assert parse_duration_seconds(raw_value) == expected


@pytest.mark.parametrize("raw_value", ["", "45", "PT", "garbage", "1M30S", "PT-5S", None, 45])
def test_parse_duration_seconds_returns_zero_for_unparseable_values(raw_value: object) -> None:
    assert parse_duration_seconds(raw_value) == 0
