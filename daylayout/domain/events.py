"""Change notifications published by the event store."""

from __future__ import annotations

from pydantic import BaseModel


class StoreChange(BaseModel):
    """Base for every store change; ``version`` is the store version after it."""

    version: int


class EventsAdded(StoreChange):
    """Fired when one or more events are indexed."""

    event_ids: list[str]


class EventsRemoved(StoreChange):
    """Fired when one or more events are dropped from the store."""

    event_ids: list[str]


class EventReplaced(StoreChange):
    """Fired when an event is swapped for a new one."""

    old_event_id: str
    new_event_id: str


class EventSelected(StoreChange):
    event_id: str


class EventDeselected(StoreChange):
    pass


class FilterUpdated(StoreChange):
    """Fired when the day-query strategy is swapped out."""

    filter_name: str
