"""Layout engine entry points: turn a day's events into positioned rectangles."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import timedelta

from loguru import logger

from daylayout.domain.models import ArrangerKind, CalendarEvent, PositionedEvent
from daylayout.services.clustering import cluster
from daylayout.services.geometry import clamp_canvas, layout, split_malformed


class EventArranger(ABC):
    """Lays out the timed events of one day on a ``width`` x ``height`` canvas.

    Implementations are stateless apart from their configuration, so a single
    instance can be shared between threads.
    """

    kind: ArrangerKind

    def __init__(self, minimum_duration: timedelta = timedelta(minutes=30)) -> None:
        self.minimum_duration = minimum_duration

    @abstractmethod
    def arrange(
        self,
        events: list[CalendarEvent],
        width: float,
        height: float,
        pixels_per_minute: float,
    ) -> list[PositionedEvent]:
        ...


class SideEventArranger(EventArranger):
    """Places overlapping events next to each other in equal-width columns."""

    kind = ArrangerKind.SIDE

    def arrange(
        self,
        events: list[CalendarEvent],
        width: float,
        height: float,
        pixels_per_minute: float,
    ) -> list[PositionedEvent]:
        events, _ = split_malformed(events)
        clusters = cluster(events, self.minimum_duration)

        arranged: list[PositionedEvent] = []
        for group in clusters:
            arranged.extend(
                layout(group, width, height, pixels_per_minute, self.minimum_duration)
            )

        logger.debug(
            "Arranged {} events in {} clusters side by side", len(arranged), len(clusters)
        )
        return arranged


class MergeEventArranger(EventArranger):
    """Draws each overlap cluster as one full-width block holding all its events."""

    kind = ArrangerKind.MERGE

    def arrange(
        self,
        events: list[CalendarEvent],
        width: float,
        height: float,
        pixels_per_minute: float,
    ) -> list[PositionedEvent]:
        events, _ = split_malformed(events)
        width, height = clamp_canvas(width, height)

        arranged = [
            PositionedEvent(
                left=0.0,
                right=0.0,
                top=group.start * pixels_per_minute,
                bottom=height - group.end * pixels_per_minute,
                start_minutes=group.start,
                end_minutes=group.end,
                events=group.events,
            )
            for group in cluster(events, self.minimum_duration)
        ]

        logger.debug("Merged {} events into {} blocks", len(events), len(arranged))
        return arranged


_ARRANGERS: dict[ArrangerKind, type[EventArranger]] = {
    ArrangerKind.SIDE: SideEventArranger,
    ArrangerKind.MERGE: MergeEventArranger,
}


def get_arranger(
    kind: ArrangerKind | str,
    minimum_duration: timedelta = timedelta(minutes=30),
) -> EventArranger:
    """Return the arranger for *kind*; raises ``ValueError`` for unknown kinds."""
    return _ARRANGERS[ArrangerKind(kind)](minimum_duration=minimum_duration)
