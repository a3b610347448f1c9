from __future__ import annotations

from datetime import datetime, timedelta
from typing import List

from domain.models import DAY_MINUTES, HourLine


def minutes_from_midnight(moment: datetime) -> int:
    return moment.hour * 60 + moment.minute


def top_fraction(start: datetime, day_minutes: int = DAY_MINUTES) -> float:
    return minutes_from_midnight(start) / day_minutes


def height_fraction(duration_minutes: int, day_minutes: int = DAY_MINUTES) -> float:
    return min(max(duration_minutes, 0), day_minutes) / day_minutes


def activity_end(start: datetime, duration_minutes: int) -> datetime:
    return start + timedelta(minutes=duration_minutes)


def time_range_label(start: datetime, duration_minutes: int) -> str:
    end = activity_end(start, duration_minutes)
    return f"{start:%H:%M} - {end:%H:%M}"


def hour_lines(hours: int = 24) -> List[HourLine]:
    return [
        HourLine(
            hour=hour,
            label=f"{hour:02d}:00",
            top_fraction=hour / hours,
            height_fraction=1 / hours,
        )
        for hour in range(hours)
    ]
