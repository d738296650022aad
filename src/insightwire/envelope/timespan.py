# src/insightwire/envelope/timespan.py
"""Millisecond durations rendered as ``[d.]hh:mm:ss[.fffffff]`` text."""

import math
from typing import Any

# One tick is 100 ns, the resolution of the 7-digit fraction
_TICKS_PER_MS = 10_000
_TICKS_PER_SECOND = 1000 * _TICKS_PER_MS
_TICKS_PER_MINUTE = 60 * _TICKS_PER_SECOND
_TICKS_PER_HOUR = 60 * _TICKS_PER_MINUTE
_TICKS_PER_DAY = 24 * _TICKS_PER_HOUR


def ms_to_timespan(total_ms: Any) -> str:
    """Render a millisecond count as a timespan string.

    Negative, non-numeric and non-finite input is clamped to zero. The value
    is rounded to whole ticks before it is split into fields, so rounding
    carries into minutes, hours and days. Seconds keep at most 7 fractional
    digits with trailing zeros trimmed. The day segment is omitted when zero.

    Example:
        >>> ms_to_timespan(90_000)
        '00:01:30'
        >>> ms_to_timespan(90_000_000)
        '1.01:00:00'
        >>> ms_to_timespan(1_500)
        '00:00:01.5'
    """
    if isinstance(total_ms, bool) or not isinstance(total_ms, int | float):
        total_ms = 0
    elif not math.isfinite(total_ms) or total_ms < 0:
        total_ms = 0

    ticks = round(total_ms * _TICKS_PER_MS)
    days, ticks = divmod(ticks, _TICKS_PER_DAY)
    hours, ticks = divmod(ticks, _TICKS_PER_HOUR)
    minutes, ticks = divmod(ticks, _TICKS_PER_MINUTE)
    seconds, fraction = divmod(ticks, _TICKS_PER_SECOND)

    fraction_text = f"{fraction:07d}".rstrip("0")
    seconds_text = f"{seconds:02d}" + (f".{fraction_text}" if fraction_text else "")
    days_text = f"{days}." if days > 0 else ""
    return f"{days_text}{hours:02d}:{minutes:02d}:{seconds_text}"
