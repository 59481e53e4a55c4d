"""In-memory event store and layout cache."""

from __future__ import annotations

from collections import OrderedDict, defaultdict
from datetime import date
from typing import Any, Callable, Protocol

from loguru import logger

from daylayout.domain.bus import EventBus
from daylayout.domain.events import (
    EventDeselected,
    EventReplaced,
    EventsAdded,
    EventSelected,
    EventsRemoved,
    FilterUpdated,
)
from daylayout.domain.models import CalendarEvent, PositionedEvent

EventComparison = Callable[[CalendarEvent, CalendarEvent], bool]


class DayFilter(Protocol):
    """Strategy deciding which stored events show up on a given day."""

    def events_for_day(self, day: date, store: EventStore) -> list[CalendarEvent]:
        ...


class IndexedDayFilter:
    """Default lookup through the store's day, ranging and full-day indexes."""

    def events_for_day(self, day: date, store: EventStore) -> list[CalendarEvent]:
        events = list(store.get_timed_events_on_day(day))
        events.extend(
            e for e in store.ranging_events if e.date <= day <= e.last_date
        )
        events.extend(store.get_full_day_events(day))
        return events


class EventStore:
    """Owns every calendar event and indexes them by day.

    Each successful mutation bumps ``version`` and publishes a change on the
    bus once the indexes are up to date.
    """

    def __init__(
        self,
        bus: EventBus | None = None,
        day_filter: DayFilter | None = None,
        event_comparison: EventComparison | None = None,
    ) -> None:
        self.bus = bus or EventBus()
        self.event_comparison = event_comparison
        self.version = 0
        self._day_filter: DayFilter = day_filter or IndexedDayFilter()
        self._selected: CalendarEvent | None = None
        self._by_day: dict[date, list[CalendarEvent]] = defaultdict(list)
        self._ranging: list[CalendarEvent] = []
        self._full_day: list[CalendarEvent] = []
        self._events: list[CalendarEvent] = []

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def events(self) -> tuple[CalendarEvent, ...]:
        return tuple(self._events)

    @property
    def ranging_events(self) -> tuple[CalendarEvent, ...]:
        return tuple(self._ranging)

    @property
    def day_filter(self) -> DayFilter:
        return self._day_filter

    @property
    def selected(self) -> CalendarEvent | None:
        return self._selected

    def get(self, event_id: str) -> CalendarEvent | None:
        for event in self._events:
            if event.id == event_id:
                return event
        return None

    def get_events_on_day(self, day: date) -> list[CalendarEvent]:
        return self._day_filter.events_for_day(day, self)

    def get_timed_events_on_day(self, day: date) -> list[CalendarEvent]:
        """Single-day events only; this is what the layout engine consumes."""
        return list(self._by_day.get(day, []))

    def get_full_day_events(self, day: date) -> list[CalendarEvent]:
        return [e for e in self._full_day if e.date <= day < e.last_date]

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add(self, event: CalendarEvent) -> bool:
        if not self._index(event):
            return False
        self._publish(EventsAdded, event_ids=[event.id])
        return True

    def add_all(self, events: list[CalendarEvent]) -> list[str]:
        added = [event.id for event in events if self._index(event)]
        if added:
            self._publish(EventsAdded, event_ids=added)
        return added

    def remove(self, event: CalendarEvent) -> bool:
        if not self._unindex(event):
            return False
        self._publish(EventsRemoved, event_ids=[event.id])
        return True

    def remove_where(self, predicate: Callable[[CalendarEvent], bool]) -> list[str]:
        removed = [e for e in self._events if predicate(e)]
        for event in removed:
            self._unindex(event)
        if removed:
            self._publish(EventsRemoved, event_ids=[e.id for e in removed])
        return [e.id for e in removed]

    def replace(self, old: CalendarEvent, new: CalendarEvent) -> bool:
        """Swap the stored event matching *old* for *new*.

        Matching uses ``event_comparison`` when configured, equality otherwise.
        """
        if self.event_comparison is not None:
            match = next(
                (e for e in self._events if self.event_comparison(e, old)), None
            )
        else:
            match = next((e for e in self._events if e == old), None)
        if match is None:
            return False

        self._unindex(match)
        self._index(new)
        self._publish(EventReplaced, old_event_id=match.id, new_event_id=new.id)
        return True

    def select(self, event: CalendarEvent) -> None:
        self._selected = event
        self._publish(EventSelected, event_id=event.id)

    def deselect(self) -> None:
        self._selected = None
        self._publish(EventDeselected)

    def update_filter(self, new_filter: DayFilter) -> bool:
        if new_filter is self._day_filter:
            return False
        self._day_filter = new_filter
        self._publish(FilterUpdated, filter_name=type(new_filter).__name__)
        return True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _index(self, event: CalendarEvent) -> bool:
        if event in self._events:
            logger.debug("Event {} already stored, skipping.", event.id)
            return False
        if event.is_full_day:
            self._full_day.append(event)
        elif event.is_multi_day:
            self._ranging.append(event)
        else:
            self._by_day[event.date].append(event)
        self._events.append(event)
        return True

    def _unindex(self, event: CalendarEvent) -> bool:
        if event not in self._events:
            return False
        day_events = self._by_day.get(event.date)
        if day_events is not None and event in day_events:
            day_events.remove(event)
            if not day_events:
                del self._by_day[event.date]
        elif event in self._ranging:
            self._ranging.remove(event)
        elif event in self._full_day:
            self._full_day.remove(event)
        self._events.remove(event)
        if self._selected is not None and self._selected == event:
            self._selected = None
        return True

    def _publish(self, change_type: type, **fields: Any) -> None:
        self.version += 1
        self.bus.publish(change_type(version=self.version, **fields))


LayoutKey = tuple[int, date, float, float, float, int, str]


class LayoutCache:
    """Bounded LRU store of computed day layouts, keyed by store version and canvas.

    Once ``maxsize`` layouts are held, each new one evicts the least recently used.
    """

    def __init__(self, maxsize: int = 128) -> None:
        if maxsize < 1:
            raise ValueError("maxsize must be at least 1")
        self.maxsize = maxsize
        self._store: OrderedDict[LayoutKey, list[PositionedEvent]] = OrderedDict()

    def get(self, key: LayoutKey) -> list[PositionedEvent] | None:
        layout = self._store.get(key)
        if layout is not None:
            self._store.move_to_end(key)
        return layout

    def put(self, key: LayoutKey, layout: list[PositionedEvent]) -> None:
        self._store[key] = layout
        self._store.move_to_end(key)
        while len(self._store) > self.maxsize:
            self._store.popitem(last=False)

    def clear(self) -> None:
        self._store.clear()

    def __contains__(self, key: LayoutKey) -> bool:
        return key in self._store

    def __len__(self) -> int:
        return len(self._store)
