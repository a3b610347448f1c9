from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import List

from domain.models import ActivityCluster, ActivitySpan, ColumnAssignment


def assign_columns(cluster: ActivityCluster) -> ColumnAssignment:
    # End instant of the latest occupant per column, by column index.
    column_ends: List[datetime] = []
    column_indexes: List[int] = []

    for span in cluster.spans:
        chosen = _first_free_column(column_ends, span.start)
        if chosen is None:
            chosen = len(column_ends)
            column_ends.append(span.end)
        else:
            column_ends[chosen] = span.end
        column_indexes.append(chosen)

    return ColumnAssignment(column_indexes=column_indexes, total_columns=len(column_ends) or 1)


def _first_free_column(column_ends: List[datetime], start: datetime) -> int | None:
    for index, end in enumerate(column_ends):
        if end <= start:
            return index
    return None


def peak_concurrency(spans: Iterable[ActivitySpan]) -> int:
    events: List[tuple[datetime, int]] = []
    for span in spans:
        events.append((span.start, 1))
        events.append((span.end, -1))
    # Ends sort before starts at the same instant: [start, end) never touches.
    events.sort(key=lambda event: (event[0], event[1]))

    active = 0
    peak = 0
    for _, delta in events:
        active += delta
        peak = max(peak, active)
    return peak
