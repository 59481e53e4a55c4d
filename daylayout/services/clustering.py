"""Service for grouping a day's events into overlap clusters."""

from __future__ import annotations

from datetime import timedelta

from loguru import logger

from daylayout.domain.models import CalendarEvent, Cluster
from daylayout.services.timespan import event_span, whole_minutes


def cluster(
    events: list[CalendarEvent],
    minimum_duration: timedelta = timedelta(0),
) -> list[Cluster]:
    """Group events whose padded spans overlap, directly or through others.

    Events are walked in order of padded start (input order breaks ties).  An
    event joins the running cluster when it starts at or before the cluster's
    current end; otherwise it opens a new one.  Spans shorter than
    *minimum_duration* are padded before comparing, so two very short events
    sitting next to each other still end up together.
    """
    minimum = whole_minutes(minimum_duration)
    spans = [event_span(event, minimum) for event in events]
    order = sorted(range(len(events)), key=lambda i: (spans[i][0], i))

    clusters: list[Cluster] = []
    current: Cluster | None = None
    for i in order:
        start, end = spans[i]
        if current is not None and start <= current.end:
            current.events.append(events[i])
            current.end = max(current.end, end)
            continue
        current = Cluster(events=[events[i]], start=start, end=end)
        clusters.append(current)

    logger.trace(
        "Clustered {} events into {} clusters", len(events), len(clusters)
    )
    return clusters
