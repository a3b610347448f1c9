from __future__ import annotations

from collections.abc import Iterable
from datetime import date
from typing import Protocol

from domain.models import Activity, DayLayout, WeekPlacement


class ActivityLayoutEngine(Protocol):
    def layout_day(self, activities: Iterable[Activity]) -> DayLayout:
        ...

    def layout_days(self, activities: Iterable[Activity]) -> dict[date, DayLayout]:
        ...

    def layout_week(self, activities: Iterable[Activity], anchor: date) -> list[WeekPlacement]:
        ...
