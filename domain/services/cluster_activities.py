from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import List

from domain.models import DEFAULT_DURATION_MINUTES, Activity, ActivityCluster, ActivitySpan


def build_spans(
    activities: Iterable[Activity], default_duration: int = DEFAULT_DURATION_MINUTES
) -> List[ActivitySpan]:
    spans = [ActivitySpan.from_activity(activity, default_duration) for activity in activities]
    # sorted() is stable, equal starts keep caller order.
    return sorted(spans, key=lambda span: span.start)


def cluster_activities(
    activities: Iterable[Activity], default_duration: int = DEFAULT_DURATION_MINUTES
) -> List[ActivityCluster]:
    return cluster_spans(build_spans(activities, default_duration))


def cluster_spans(spans: Iterable[ActivitySpan]) -> List[ActivityCluster]:
    clusters: List[ActivityCluster] = []
    current: List[ActivitySpan] = []
    cluster_end: datetime | None = None

    for span in spans:
        if current and cluster_end is not None and span.start < cluster_end:
            current.append(span)
            cluster_end = max(cluster_end, span.end)
            continue
        if current and cluster_end is not None:
            clusters.append(ActivityCluster(spans=current, cluster_end=cluster_end))
        current = [span]
        cluster_end = span.end

    if current and cluster_end is not None:
        clusters.append(ActivityCluster(spans=current, cluster_end=cluster_end))
    return clusters
