"""Tests for the in-memory event store, its change notifications and the layout cache."""

from __future__ import annotations

from datetime import date, time

import pytest
from pydantic import ValidationError

from daylayout.domain.bus import EventBus
from daylayout.domain.events import (
    EventDeselected,
    EventReplaced,
    EventsAdded,
    EventSelected,
    EventsRemoved,
    FilterUpdated,
)
from daylayout.domain.handlers import HandlerRegistry
from daylayout.domain.models import CalendarEvent
from daylayout.repos.memory import EventStore, IndexedDayFilter, LayoutCache

_MONDAY = date(2025, 6, 2)


def _make_event(**overrides) -> CalendarEvent:
    defaults = dict(
        title="Test event",
        date=_MONDAY,
        start_time=time(9, 0),
        end_time=time(10, 0),
    )
    defaults.update(overrides)
    return CalendarEvent(**defaults)


@pytest.fixture()
def env():
    """Fresh bus + store + recorded changes for each test."""
    bus = EventBus()
    store = EventStore(bus=bus)
    changes: list = []
    bus.subscribe_all(changes.append)

    class Env:
        pass

    e = Env()
    e.bus = bus
    e.store = store
    e.changes = changes
    return e


def test_add_indexes_event_by_day(env):
    event = _make_event()

    assert env.store.add(event) is True

    assert env.store.get(event.id) is event
    assert env.store.get_timed_events_on_day(_MONDAY) == [event]
    assert env.store.get_events_on_day(_MONDAY) == [event]
    assert env.store.get_timed_events_on_day(date(2025, 6, 3)) == []
    assert [type(c) for c in env.changes] == [EventsAdded]
    assert env.changes[0].event_ids == [event.id]
    assert env.changes[0].version == env.store.version == 1


def test_duplicate_add_is_ignored(env):
    event = _make_event()
    env.store.add(event)

    assert env.store.add(event) is False
    assert env.store.add_all([event]) == []

    assert len(env.store.events) == 1
    assert len(env.changes) == 1


def test_add_all_notifies_once(env):
    events = [_make_event(title=f"E{i}") for i in range(3)]

    added = env.store.add_all(events)

    assert added == [e.id for e in events]
    assert len(env.changes) == 1
    assert env.changes[0].event_ids == added


def test_subscribers_see_the_updated_index(env):
    event = _make_event()
    seen: list[list[CalendarEvent]] = []
    env.bus.subscribe(
        EventsAdded, lambda _: seen.append(env.store.get_timed_events_on_day(_MONDAY))
    )

    env.store.add(event)

    assert seen == [[event]]


def test_ranging_event_shows_on_every_covered_day(env):
    conference = _make_event(
        title="Conference",
        end_date=date(2025, 6, 4),
        start_time=time(9, 0),
        end_time=time(17, 0),
    )
    env.store.add(conference)

    for day in (date(2025, 6, 2), date(2025, 6, 3), date(2025, 6, 4)):
        assert env.store.get_events_on_day(day) == [conference]
        assert env.store.get_timed_events_on_day(day) == []
    assert env.store.get_events_on_day(date(2025, 6, 5)) == []


def test_full_day_event_excludes_its_end_date(env):
    holiday = _make_event(
        title="Holiday",
        end_date=date(2025, 6, 4),
        start_time=time(0, 0),
        end_time=time(0, 0),
    )
    env.store.add(holiday)

    assert holiday.is_full_day
    assert env.store.get_full_day_events(date(2025, 6, 2)) == [holiday]
    assert env.store.get_events_on_day(date(2025, 6, 3)) == [holiday]
    assert env.store.get_events_on_day(date(2025, 6, 4)) == []


def test_end_date_before_date_is_rejected():
    with pytest.raises(ValidationError):
        _make_event(end_date=date(2025, 6, 1))


def test_remove_event(env):
    event = _make_event()
    env.store.add(event)

    assert env.store.remove(event) is True

    assert env.store.events == ()
    assert env.store.get_timed_events_on_day(_MONDAY) == []
    assert isinstance(env.changes[-1], EventsRemoved)


def test_remove_unknown_event_does_not_notify(env):
    assert env.store.remove(_make_event()) is False
    assert env.changes == []


def test_remove_where(env):
    keep = _make_event(title="keep")
    drop = _make_event(title="drop", end_date=date(2025, 6, 3))
    env.store.add_all([keep, drop])

    removed = env.store.remove_where(lambda e: e.title == "drop")

    assert removed == [drop.id]
    assert env.store.events == (keep,)
    assert env.store.ranging_events == ()


def test_replace_by_equality(env):
    old = _make_event(title="old")
    new = _make_event(title="new", start_time=time(11, 0), end_time=time(12, 0))
    env.store.add(old)

    assert env.store.replace(old, new) is True

    assert env.store.events == (new,)
    change = env.changes[-1]
    assert isinstance(change, EventReplaced)
    assert (change.old_event_id, change.new_event_id) == (old.id, new.id)


def test_replace_with_custom_comparison():
    store = EventStore(event_comparison=lambda e, other: e.title == other.title)
    stored = _make_event(title="Standup")
    store.add(stored)

    lookalike = _make_event(title="Standup")
    replacement = _make_event(title="Standup", start_time=time(9, 15), end_time=time(9, 30))

    assert store.replace(lookalike, replacement) is True
    assert store.events == (replacement,)


def test_replace_missing_event_is_a_no_op(env):
    env.store.add(_make_event())

    assert env.store.replace(_make_event(), _make_event()) is False
    assert len(env.changes) == 1


def test_custom_day_filter_is_used():
    class WeekdayOnly:
        def events_for_day(self, day, store):
            if day.weekday() >= 5:
                return []
            return IndexedDayFilter().events_for_day(day, store)

    saturday = date(2025, 6, 7)
    store = EventStore(day_filter=WeekdayOnly())
    store.add(_make_event(date=saturday))

    assert store.get_events_on_day(saturday) == []
    assert len(store.get_timed_events_on_day(saturday)) == 1


def test_update_filter_notifies_only_on_change(env):
    new_filter = IndexedDayFilter()

    assert env.store.update_filter(new_filter) is True
    assert env.store.update_filter(new_filter) is False

    assert [type(c) for c in env.changes] == [FilterUpdated]
    assert env.changes[0].filter_name == "IndexedDayFilter"


def test_select_and_deselect(env):
    event = _make_event()
    env.store.add(event)

    env.store.select(event)
    assert env.store.selected is event

    env.store.deselect()
    assert env.store.selected is None
    assert [type(c) for c in env.changes] == [EventsAdded, EventSelected, EventDeselected]


def test_removing_selected_event_clears_selection(env):
    event = _make_event()
    env.store.add(event)
    env.store.select(event)

    env.store.remove(event)

    assert env.store.selected is None


def test_unsubscribed_handler_is_not_called(env):
    calls: list = []
    env.bus.subscribe(EventsAdded, calls.append)
    env.bus.unsubscribe(calls.append)

    env.store.add(_make_event())

    assert calls == []


def test_store_changes_clear_layout_cache(env):
    cache = LayoutCache()
    HandlerRegistry(bus=env.bus, layout_cache=cache)
    cache.put((0, _MONDAY, 300.0, 1440.0, 1.0, 30, "side"), [])

    env.store.add(_make_event())

    assert len(cache) == 0


def test_end_time_before_start_time_is_rejected():
    with pytest.raises(ValidationError):
        _make_event(start_time=time(22, 0), end_time=time(1, 0))
    with pytest.raises(ValidationError):
        _make_event(start_time=time(9, 0), end_time=time(9, 0))


def test_midnight_end_and_multi_day_wrap_are_accepted():
    late = _make_event(start_time=time(23, 0), end_time=time(0, 0))
    overnight = _make_event(
        end_date=date(2025, 6, 3), start_time=time(22, 0), end_time=time(1, 0)
    )

    assert not late.is_multi_day
    assert overnight.is_multi_day


def test_layout_cache_evicts_least_recently_used():
    cache = LayoutCache(maxsize=2)
    first = (0, _MONDAY, 100.0, 1440.0, 1.0, 30, "side")
    second = (0, _MONDAY, 200.0, 1440.0, 1.0, 30, "side")
    third = (0, _MONDAY, 300.0, 1440.0, 1.0, 30, "side")
    cache.put(first, [])
    cache.put(second, [])

    assert cache.get(first) == []
    cache.put(third, [])

    assert len(cache) == 2
    assert first in cache
    assert second not in cache
    assert third in cache


def test_layout_cache_needs_room_for_one_layout():
    with pytest.raises(ValueError):
        LayoutCache(maxsize=0)
