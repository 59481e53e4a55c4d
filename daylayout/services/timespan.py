"""Minute-of-day arithmetic shared by the clustering, packing and geometry stages."""

from __future__ import annotations

from datetime import time, timedelta

from daylayout.domain.models import CalendarEvent

MINUTES_A_DAY = 24 * 60


def total_minutes(value: time) -> int:
    return value.hour * 60 + value.minute


def end_minutes(value: time) -> int:
    """Minutes since midnight for an end time; midnight is the end of the day."""
    minutes = total_minutes(value)
    return MINUTES_A_DAY if minutes == 0 else minutes


def whole_minutes(duration: timedelta) -> int:
    return max(int(duration.total_seconds() // 60), 0)


def padded_span(start: int, end: int, minimum: int) -> tuple[int, int]:
    """Stretch ``[start, end)`` around its midpoint to at least *minimum* minutes.

    The deficit is split with integer halves, so the stretched span is exactly
    *minimum* long and its midpoint moves by at most half a minute.
    """
    if end - start >= minimum:
        return start, end
    deficit = minimum - (end - start)
    padded_start = start - deficit // 2
    return padded_start, padded_start + minimum


def event_span(event: CalendarEvent, minimum: int = 0) -> tuple[int, int]:
    """Return the (possibly padded) ``(start, end)`` minutes of a well-formed event."""
    return padded_span(
        total_minutes(event.start_time), end_minutes(event.end_time), minimum
    )
