"""Service for assigning the events of a cluster to side-by-side columns."""

from __future__ import annotations

from datetime import timedelta

from daylayout.domain.models import CalendarEvent, Cluster, ColumnAssignment, ColumnSlot
from daylayout.services.timespan import event_span, whole_minutes


def pack(
    cluster: Cluster,
    minimum_duration: timedelta = timedelta(0),
) -> ColumnAssignment:
    """Fill columns left to right, one greedy pass per column.

    The earliest remaining event anchors each column.  Walking forward, every
    event that starts at or after the current anchor's end joins the column and
    becomes the new anchor; the rest wait for the next column.  This is not an
    optimal interval colouring and can use more columns than the true overlap
    depth for some orderings.

    With the default zero *minimum_duration* raw spans are compared; callers
    pass the rendering minimum so padded rectangles sharing a column never meet.
    """
    minimum = whole_minutes(minimum_duration)
    remaining: list[CalendarEvent] = list(cluster.events)
    assignment = ColumnAssignment()

    column = 0
    while remaining:
        column += 1
        pending: list[CalendarEvent] = []
        cursor_end: int | None = None
        for event in remaining:
            start, end = event_span(event, minimum)
            if cursor_end is None or start >= cursor_end:
                assignment.slots.append(ColumnSlot(event=event, column=column))
                cursor_end = end
            else:
                pending.append(event)
        remaining = pending

    assignment.column_count = column
    return assignment
