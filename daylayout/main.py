"""FastAPI application — entry point for the day timeline layout service."""

from __future__ import annotations

from datetime import date

from fastapi import FastAPI, HTTPException, Query
from loguru import logger

import daylayout.settings as settings
from daylayout.domain.bus import EventBus
from daylayout.domain.handlers import HandlerRegistry
from daylayout.domain.models import (
    ArrangerKind,
    CalendarEvent,
    DayLayoutResponse,
    EventIn,
)
from daylayout.logger import configure_logging
from daylayout.repos.memory import EventStore, LayoutCache
from daylayout.services.arrangers import get_arranger
from daylayout.services.dates import resolve_day
from daylayout.services.timespan import MINUTES_A_DAY

configure_logging()

app = FastAPI(title="Day Timeline Layout Service")

# ── Singletons (created at import time for simplicity) ────────────────
event_bus = EventBus()
event_store = EventStore(bus=event_bus)
layout_cache = LayoutCache(maxsize=settings.CACHE_SIZE)

handler_registry = HandlerRegistry(bus=event_bus, layout_cache=layout_cache)


def _get_or_404(event_id: str) -> CalendarEvent:
    event = event_store.get(event_id)
    if event is None:
        raise HTTPException(status_code=404, detail="Event not found")
    return event


def _resolve_day_or_400(raw: str) -> date:
    try:
        return resolve_day(raw)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


# ── Routes ────────────────────────────────────────────────────────────


@app.post("/events", response_model=CalendarEvent, status_code=201)
def create_event(payload: EventIn) -> CalendarEvent:
    """Store a new event."""
    event = payload.to_event()
    event_store.add(event)
    logger.info("Stored event {} on {}", event.id, event.date)
    return event


@app.get("/events", response_model=list[CalendarEvent])
def list_events() -> list[CalendarEvent]:
    """Return all stored events."""
    return list(event_store.events)


@app.get("/events/{event_id}", response_model=CalendarEvent)
def get_event(event_id: str) -> CalendarEvent:
    """Return a single event by id."""
    return _get_or_404(event_id)


@app.put("/events/{event_id}", response_model=CalendarEvent)
def replace_event(event_id: str, payload: EventIn) -> CalendarEvent:
    """Replace a stored event, keeping its id."""
    existing = _get_or_404(event_id)
    replacement = payload.to_event(event_id=event_id)
    event_store.replace(existing, replacement)
    return replacement


@app.delete("/events/{event_id}", status_code=204)
def delete_event(event_id: str) -> None:
    """Remove an event from the store."""
    event_store.remove(_get_or_404(event_id))


@app.post("/events/{event_id}/select", response_model=CalendarEvent)
def select_event(event_id: str) -> CalendarEvent:
    """Mark an event as the current selection."""
    event = _get_or_404(event_id)
    event_store.select(event)
    return event


@app.get("/selection", response_model=CalendarEvent | None)
def get_selection() -> CalendarEvent | None:
    return event_store.selected


@app.delete("/selection", status_code=204)
def clear_selection() -> None:
    event_store.deselect()


@app.get("/days/{day}/events", response_model=list[CalendarEvent])
def list_day_events(day: str) -> list[CalendarEvent]:
    """Return every event shown on *day*, as chosen by the store's day filter."""
    return event_store.get_events_on_day(_resolve_day_or_400(day))


@app.get("/days/{day}/layout", response_model=DayLayoutResponse)
def get_day_layout(
    day: str,
    width: float = Query(..., ge=0, allow_inf_nan=False),
    height: float | None = Query(None, ge=0, allow_inf_nan=False),
    pixels_per_minute: float = Query(settings.PIXELS_PER_MINUTE, gt=0, allow_inf_nan=False),
    arranger: ArrangerKind = Query(ArrangerKind(settings.ARRANGER)),
) -> DayLayoutResponse:
    """Lay out the timed events of *day* on a ``width`` x ``height`` canvas.

    ``height`` defaults to a full day at the requested scale.
    """
    target = _resolve_day_or_400(day)
    if height is None:
        height = MINUTES_A_DAY * pixels_per_minute

    key = (
        event_store.version,
        target,
        width,
        height,
        pixels_per_minute,
        settings.MIN_DURATION_MINUTES,
        arranger.value,
    )
    positioned = layout_cache.get(key) if settings.CACHE_ENABLED else None
    if positioned is None:
        positioned = get_arranger(arranger, settings.MIN_DURATION).arrange(
            event_store.get_timed_events_on_day(target),
            width=width,
            height=height,
            pixels_per_minute=pixels_per_minute,
        )
        if settings.CACHE_ENABLED:
            layout_cache.put(key, positioned)

    return DayLayoutResponse(
        date=target,
        width=width,
        height=height,
        pixels_per_minute=pixels_per_minute,
        arranger=arranger,
        events=positioned,
    )
