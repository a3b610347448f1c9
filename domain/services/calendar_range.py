from __future__ import annotations

import calendar
from collections.abc import Iterable
from datetime import date, datetime, time, timedelta
from typing import Dict, List, Literal

from domain.models import Activity

ViewType = Literal["day", "week", "month"]
VIEW_TYPES: tuple[ViewType, ...] = ("day", "week", "month")

SUNDAY = 6
WEEK_DAYS = 7
MONTH_FETCH_PADDING = timedelta(days=7)


def week_start(anchor: date, first_weekday: int = SUNDAY) -> date:
    offset = (anchor.weekday() - first_weekday) % WEEK_DAYS
    return anchor - timedelta(days=offset)


def week_end(anchor: date, first_weekday: int = SUNDAY) -> date:
    return week_start(anchor, first_weekday) + timedelta(days=WEEK_DAYS - 1)


def month_bounds(anchor: date) -> tuple[date, date]:
    last_day = calendar.monthrange(anchor.year, anchor.month)[1]
    return anchor.replace(day=1), anchor.replace(day=last_day)


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min)


def end_of_day(day: date) -> datetime:
    return datetime.combine(day, time.max)


def visible_days(view: ViewType, anchor: date, first_weekday: int = SUNDAY) -> List[date]:
    if view == "day":
        return [anchor]
    if view == "week":
        first = week_start(anchor, first_weekday)
        return [first + timedelta(days=offset) for offset in range(WEEK_DAYS)]
    if view == "month":
        month_first, month_last = month_bounds(anchor)
        first = week_start(month_first, first_weekday)
        last = week_end(month_last, first_weekday)
        return [first + timedelta(days=offset) for offset in range((last - first).days + 1)]
    msg = f"Unknown calendar view: {view}"
    raise ValueError(msg)


def fetch_window(
    view: ViewType, anchor: date, first_weekday: int = SUNDAY
) -> tuple[datetime, datetime]:
    if view == "day":
        return start_of_day(anchor), end_of_day(anchor)
    if view == "week":
        return (
            start_of_day(week_start(anchor, first_weekday)),
            end_of_day(week_end(anchor, first_weekday)),
        )
    if view == "month":
        month_first, month_last = month_bounds(anchor)
        return (
            start_of_day(month_first - MONTH_FETCH_PADDING),
            end_of_day(month_last + MONTH_FETCH_PADDING),
        )
    msg = f"Unknown calendar view: {view}"
    raise ValueError(msg)


def shift_anchor(view: ViewType, anchor: date, step: int) -> date:
    if view == "day":
        return anchor + timedelta(days=step)
    if view == "week":
        return anchor + timedelta(weeks=step)
    if view == "month":
        return _add_months(anchor, step)
    msg = f"Unknown calendar view: {view}"
    raise ValueError(msg)


def _add_months(anchor: date, months: int) -> date:
    month_index = anchor.month - 1 + months
    year = anchor.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(anchor.day, last_day))


def bucket_by_day(activities: Iterable[Activity]) -> Dict[date, List[Activity]]:
    buckets: Dict[date, List[Activity]] = {}
    for activity in activities:
        buckets.setdefault(activity.start_time.date(), []).append(activity)
    return buckets
