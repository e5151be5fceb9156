"""Timestamp normalization for chat_archive.

Exports encode time as Unix seconds (ChatGPT, simple lists), ISO-8601
strings (Claude, DeepSeek) or leave it out entirely. Everything is reduced
to float epoch seconds here.
"""

import math
import time
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

__all__ = [
    "TimestampNormalizer",
    "parse_timestamp",
]


def parse_timestamp(value: Any) -> float | None:
    """Parse a timestamp to epoch seconds.

    Numbers are taken as Unix seconds, strings are tried as numbers and then
    as ISO-8601 (naive values are read as UTC). Missing, zero, negative or
    unparsable values return None.

    Args:
        value: Raw timestamp value from an export

    Returns:
        Epoch seconds, or None if the value carries no usable time
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        try:
            seconds = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            seconds = float(text)
        except ValueError:
            try:
                dt = datetime.fromisoformat(text.replace("Z", "+00:00"))
                if dt.tzinfo is None:
                    dt = dt.replace(tzinfo=UTC)
                seconds = dt.timestamp()
            except (ValueError, OverflowError):
                return None
    else:
        return None

    if not math.isfinite(seconds) or seconds <= 0:
        return None
    return seconds


class TimestampNormalizer:
    """Converts raw timestamps, falling back to "now" when none is usable.

    The clock is injectable so a whole batch can share one notion of now and
    tests can pin it.

    Example:
        normalizer = TimestampNormalizer()
        created = normalizer.first(conv.get("create_time"), conv.get("timestamp"))
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock

    def now(self) -> float:
        """Return the current time in epoch seconds."""
        return self._clock()

    def normalize(self, value: Any) -> float:
        """Parse a single value, defaulting to now."""
        parsed = parse_timestamp(value)
        return parsed if parsed is not None else self.now()

    def first(self, *candidates: Any) -> float:
        """Return the first candidate that parses, defaulting to now."""
        for candidate in candidates:
            parsed = parse_timestamp(candidate)
            if parsed is not None:
                return parsed
        return self.now()
