"""Domain models for the day timeline layout engine."""

from __future__ import annotations

import uuid
from datetime import date as Date, time as Time
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, model_validator

try:
    from enum import StrEnum
except ImportError:  # pragma: no cover - fallback for older Python runtimes

    class StrEnum(str, Enum):
        pass


class ArrangerKind(StrEnum):
    SIDE = "side"
    MERGE = "merge"


def _new_id() -> str:
    return str(uuid.uuid4())


def _check_range(
    day: Date, end_date: Date | None, start_time: Time | None, end_time: Time | None
) -> None:
    if end_date is not None and end_date < day:
        raise ValueError("end_date must be on or after date")
    if start_time is None or end_time is None:
        return
    if end_date is not None and end_date != day:
        return
    # midnight as an end time closes the day
    end = end_time.hour * 60 + end_time.minute or 24 * 60
    if end <= start_time.hour * 60 + start_time.minute:
        raise ValueError("end_time must be after start_time")


# ---------------------------------------------------------------------------
# Core domain models
# ---------------------------------------------------------------------------


class CalendarEvent(BaseModel):
    """A single calendar entry as held by the event store.

    ``start_time`` / ``end_time`` are optional so that incomplete entries can be
    stored; the layout engine skips them.  An ``end_time`` of midnight means the
    end of the day.
    """

    id: str = Field(default_factory=_new_id)
    title: str = ""
    description: str | None = None
    date: Date
    end_date: Date | None = None
    start_time: Time | None = None
    end_time: Time | None = None
    payload: Any = None

    @model_validator(mode="after")
    def _valid_range(self) -> CalendarEvent:
        _check_range(self.date, self.end_date, self.start_time, self.end_time)
        return self

    @property
    def last_date(self) -> Date:
        return self.end_date or self.date

    @property
    def is_multi_day(self) -> bool:
        return self.last_date > self.date

    @property
    def is_full_day(self) -> bool:
        midnight = Time(0, 0)
        return (
            self.is_multi_day
            and self.start_time == midnight
            and self.end_time == midnight
        )

    @property
    def is_well_formed(self) -> bool:
        return self.start_time is not None and self.end_time is not None


class Cluster(BaseModel):
    """Events whose padded spans overlap transitively, in start order.

    ``start`` and ``end`` are the envelope of the members, in minutes.
    """

    events: list[CalendarEvent] = Field(default_factory=list)
    start: int
    end: int

    @property
    def size(self) -> int:
        return len(self.events)


class ColumnSlot(BaseModel):
    event: CalendarEvent
    column: int = Field(ge=1)


class ColumnAssignment(BaseModel):
    slots: list[ColumnSlot] = Field(default_factory=list)
    column_count: int = 0


class PositionedEvent(BaseModel):
    """A rectangle on the day canvas plus the event(s) it represents.

    ``left``/``right`` are insets from the horizontal canvas edges and
    ``top``/``bottom`` insets from the top and bottom edges.
    """

    left: float
    right: float
    top: float
    bottom: float
    start_minutes: int
    end_minutes: int
    column: int = 1
    column_count: int = 1
    events: list[CalendarEvent] = Field(min_length=1)

    @property
    def event(self) -> CalendarEvent:
        return self.events[0]

    @property
    def payload(self) -> Any:
        return self.events[0].payload


# ---------------------------------------------------------------------------
# Request / Response DTOs
# ---------------------------------------------------------------------------


class EventIn(BaseModel):
    title: str = ""
    description: str | None = None
    date: Date
    end_date: Date | None = None
    start_time: Time | None = None
    end_time: Time | None = None
    payload: Any = None

    @model_validator(mode="after")
    def _valid_range(self) -> EventIn:
        _check_range(self.date, self.end_date, self.start_time, self.end_time)
        return self

    def to_event(self, event_id: str | None = None) -> CalendarEvent:
        data = self.model_dump()
        if event_id is not None:
            data["id"] = event_id
        return CalendarEvent(**data)


class DayLayoutResponse(BaseModel):
    date: Date
    width: float
    height: float
    pixels_per_minute: float
    arranger: ArrangerKind
    events: list[PositionedEvent] = Field(default_factory=list)
