from __future__ import annotations

import re

# YouTube reports contentDetails.duration as PT#H#M#S, with a leading #D for
# anything over a day. Fractional seconds are tolerated and dropped.
ISO8601_DURATION_PATTERN = re.compile(
    r"^P(?:(?P<days>\d+)D)?"
    r"(?:T(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?(?:(?P<seconds>\d+)(?:[.,]\d+)?S)?)?$"
)


def parse_duration_seconds(raw_value: object) -> int:
    """Return the total whole seconds of an ISO-8601 duration, or 0 if unparseable."""
    if not isinstance(raw_value, str):
        return 0
    matched = ISO8601_DURATION_PATTERN.match(raw_value.strip().upper())
    if matched is None:
        return 0

    days = int(matched.group("days") or 0)
    hours = int(matched.group("hours") or 0)
    minutes = int(matched.group("minutes") or 0)
    seconds = int(matched.group("seconds") or 0)
    return days * 86_400 + hours * 3_600 + minutes * 60 + seconds
