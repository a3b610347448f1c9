from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Iterable, List

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

DEFAULT_DURATION_MINUTES = 60
DEFAULT_BASE_Z_INDEX = 10
DAY_MINUTES = 24 * 60
MAX_DURATION_MINUTES = 7 * DAY_MINUTES


def normalize_duration(value: int | None, default: int = DEFAULT_DURATION_MINUTES) -> int:
    if value is None or value <= 0:
        return default
    return int(value)


class Activity(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    activity_id: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("id", "activity_id"),
    )
    start_time: datetime = Field(
        ...,
        validation_alias=AliasChoices("startTime", "start_time", "scheduled_for"),
    )
    duration_minutes: int | None = Field(
        default=None,
        le=MAX_DURATION_MINUTES,
        validation_alias=AliasChoices("durationMinutes", "duration_minutes"),
    )

    @field_validator("activity_id", mode="before")
    @classmethod
    def coerce_activity_id(cls, value: object) -> object:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @model_validator(mode="after")
    def ensure_end_is_representable(self) -> Activity:
        try:
            self.start_time + timedelta(minutes=MAX_DURATION_MINUTES)
        except OverflowError as exc:
            msg = f"startTime {self.start_time.isoformat()} is too close to the end of the calendar"
            raise ValueError(msg) from exc
        return self

    @property
    def is_timezone_aware(self) -> bool:
        return self.start_time.utcoffset() is not None


def ensure_consistent_timezones(activities: Iterable[Activity]) -> None:
    kinds = {activity.is_timezone_aware for activity in activities}
    if len(kinds) > 1:
        msg = "Activities mix timestamps with and without a UTC offset"
        raise ValueError(msg)


@dataclass(frozen=True)
class ActivitySpan:
    activity: Activity
    start: datetime
    end: datetime
    duration_minutes: int

    @property
    def activity_id(self) -> str:
        return self.activity.activity_id

    @classmethod
    def from_activity(
        cls, activity: Activity, default_duration: int = DEFAULT_DURATION_MINUTES
    ) -> ActivitySpan:
        duration = normalize_duration(activity.duration_minutes, default_duration)
        return cls(
            activity=activity,
            start=activity.start_time,
            end=activity.start_time + timedelta(minutes=duration),
            duration_minutes=duration,
        )

    def overlaps(self, other: ActivitySpan) -> bool:
        return self.start < other.end and other.start < self.end


@dataclass(frozen=True)
class ActivityCluster:
    spans: List[ActivitySpan]
    cluster_end: datetime


@dataclass(frozen=True)
class ColumnAssignment:
    column_indexes: List[int]
    total_columns: int

    def by_activity_id(self, cluster: ActivityCluster) -> dict[str, int]:
        mapping: dict[str, int] = {}
        for span, column in zip(cluster.spans, self.column_indexes):
            mapping.setdefault(span.activity_id, column)
        return mapping


@dataclass(frozen=True)
class PositionedActivity:
    span: ActivitySpan
    column_index: int
    total_columns: int
    left_fraction: float
    width_fraction: float
    z_index: int
    is_last_in_column_set: bool

    @property
    def activity_id(self) -> str:
        return self.span.activity_id

    @property
    def start(self) -> datetime:
        return self.span.start

    @property
    def end(self) -> datetime:
        return self.span.end

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.activity_id,
            "startTime": self.start.isoformat(),
            "durationMinutes": self.span.duration_minutes,
            "columnIndex": self.column_index,
            "totalColumns": self.total_columns,
            "leftFraction": self.left_fraction,
            "widthFraction": self.width_fraction,
            "zIndex": self.z_index,
            "isLastInColumnSet": self.is_last_in_column_set,
        }


@dataclass(frozen=True)
class DayLayout:
    day: date | None
    cluster_count: int
    items: List[PositionedActivity]

    def to_dict(self) -> dict[str, Any]:
        return {
            "day": self.day.isoformat() if self.day else None,
            "clusters": self.cluster_count,
            "items": [item.to_dict() for item in self.items],
        }


@dataclass(frozen=True)
class WeekPlacement:
    day_index: int
    placement: PositionedActivity
    left_fraction: float
    width_fraction: float

    def to_dict(self) -> dict[str, Any]:
        payload = self.placement.to_dict()
        payload["dayIndex"] = self.day_index
        payload["weekLeftFraction"] = self.left_fraction
        payload["weekWidthFraction"] = self.width_fraction
        return payload


@dataclass(frozen=True)
class HourLine:
    hour: int
    label: str
    top_fraction: float
    height_fraction: float
