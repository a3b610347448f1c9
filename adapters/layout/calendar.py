from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from typing import Dict, List

from domain.models import (
    DAY_MINUTES,
    DEFAULT_BASE_Z_INDEX,
    DEFAULT_DURATION_MINUTES,
    Activity,
    DayLayout,
    PositionedActivity,
    WeekPlacement,
)
from domain.ports.layout import ActivityLayoutEngine
from domain.services.assign_columns import assign_columns
from domain.services.calendar_range import SUNDAY, WEEK_DAYS, bucket_by_day, visible_days
from domain.services.cluster_activities import cluster_activities
from domain.services.compose_layout import compose_layout
from domain.services.grid_mapping import height_fraction, top_fraction

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CalendarLayoutConfig:
    default_duration_minutes: int = DEFAULT_DURATION_MINUTES
    base_z_index: int = DEFAULT_BASE_Z_INDEX
    day_minutes: int = DAY_MINUTES
    first_weekday: int = SUNDAY


class CalendarLayoutEngine(ActivityLayoutEngine):
    def __init__(self, config: CalendarLayoutConfig | None = None) -> None:
        self.config = config or CalendarLayoutConfig()

    def layout_day(self, activities: Iterable[Activity]) -> DayLayout:
        clusters = cluster_activities(activities, self.config.default_duration_minutes)
        items: List[PositionedActivity] = []
        for cluster in clusters:
            assignment = assign_columns(cluster)
            items.extend(compose_layout(cluster, assignment, self.config.base_z_index))

        day = items[0].start.date() if items else None
        logger.debug(
            "Laid out %s activities in %s clusters for %s", len(items), len(clusters), day
        )
        return DayLayout(day=day, cluster_count=len(clusters), items=items)

    def layout_days(self, activities: Iterable[Activity]) -> Dict[date, DayLayout]:
        buckets = bucket_by_day(activities)
        return {day: self.layout_day(buckets[day]) for day in sorted(buckets)}

    def layout_week(self, activities: Iterable[Activity], anchor: date) -> List[WeekPlacement]:
        days = visible_days("week", anchor, self.config.first_weekday)
        layouts = self.layout_days(activities)
        placements: List[WeekPlacement] = []
        for day_index, day in enumerate(days):
            layout = layouts.get(day)
            if layout is None:
                continue
            for item in layout.items:
                placements.append(
                    WeekPlacement(
                        day_index=day_index,
                        placement=item,
                        left_fraction=(day_index + item.left_fraction) / WEEK_DAYS,
                        width_fraction=item.width_fraction / WEEK_DAYS,
                    )
                )
        return placements

    def top_fraction(self, item: PositionedActivity) -> float:
        return top_fraction(item.start, self.config.day_minutes)

    def height_fraction(self, item: PositionedActivity) -> float:
        return height_fraction(item.span.duration_minutes, self.config.day_minutes)
