"""Service for resolving the day named in a request."""

from __future__ import annotations

from datetime import date, datetime, time

import dateparser


def resolve_day(raw: str, today: date | None = None) -> date:
    """Resolve an ISO date or a phrase such as "tomorrow" to a calendar date.

    Relative phrases are read against *today* (defaults to the current date).
    Raises ``ValueError`` when nothing sensible can be parsed.
    """
    text = raw.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass

    base = today or date.today()
    settings = {
        "PREFER_DATES_FROM": "future",
        "RELATIVE_BASE": datetime.combine(base, time(12, 0)),
        "RETURN_AS_TIMEZONE_AWARE": False,
    }
    result = dateparser.parse(text, settings=settings)
    if result is None:
        raise ValueError(f"Cannot resolve a day from '{raw}'")
    return result.date()
