"""Service for turning clusters into rectangles on the day canvas."""

from __future__ import annotations

from datetime import timedelta

from loguru import logger

from daylayout.domain.models import CalendarEvent, Cluster, PositionedEvent
from daylayout.services.packing import pack
from daylayout.services.timespan import event_span, whole_minutes


def split_malformed(
    events: list[CalendarEvent],
) -> tuple[list[CalendarEvent], list[CalendarEvent]]:
    """Separate events that can be laid out from those missing a start or end."""
    kept: list[CalendarEvent] = []
    dropped: list[CalendarEvent] = []
    for event in events:
        if event.is_well_formed:
            kept.append(event)
            continue
        logger.warning(
            "Start or end time of event {!r} ({}) is missing; it will be ignored.",
            event.title,
            event.id,
        )
        dropped.append(event)
    return kept, dropped


def clamp_canvas(width: float, height: float) -> tuple[float, float]:
    if width < 0 or height < 0:
        logger.warning(
            "Negative canvas {}x{} clamped to zero.", width, height
        )
    return max(width, 0.0), max(height, 0.0)


def position(
    event: CalendarEvent,
    column: int,
    column_count: int,
    canvas_width: float,
    canvas_height: float,
    pixels_per_minute: float,
    minimum: int,
) -> PositionedEvent:
    slot_width = canvas_width / column_count
    start, end = event_span(event, minimum)
    return PositionedEvent(
        left=slot_width * (column - 1),
        right=slot_width * (column_count - column),
        top=start * pixels_per_minute,
        bottom=canvas_height - end * pixels_per_minute,
        start_minutes=start,
        end_minutes=end,
        column=column,
        column_count=column_count,
        events=[event],
    )


def layout(
    cluster: Cluster,
    canvas_width: float,
    canvas_height: float,
    pixels_per_minute: float,
    minimum_duration: timedelta = timedelta(0),
) -> list[PositionedEvent]:
    """Lay out one cluster.

    A singleton spans the full width.  Larger clusters are packed into columns
    and each event gets ``canvas_width / column_count`` of horizontal room.
    Malformed members are skipped with a warning.
    """
    canvas_width, canvas_height = clamp_canvas(canvas_width, canvas_height)
    minimum = whole_minutes(minimum_duration)
    events, _ = split_malformed(cluster.events)
    if not events:
        return []

    if len(events) == 1:
        return [
            position(events[0], 1, 1, canvas_width, canvas_height, pixels_per_minute, minimum)
        ]

    if len(events) != cluster.size:
        cluster = cluster.model_copy(update={"events": events})
    assignment = pack(cluster, minimum_duration)

    positioned = []
    for slot in assignment.slots:
        logger.trace(
            "Event {!r} -> column {}/{}", slot.event.title, slot.column, assignment.column_count
        )
        positioned.append(
            position(
                slot.event,
                slot.column,
                assignment.column_count,
                canvas_width,
                canvas_height,
                pixels_per_minute,
                minimum,
            )
        )
    return positioned
