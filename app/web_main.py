from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, List

from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import ORJSONResponse
from pydantic import AliasChoices, BaseModel, Field, model_validator

from adapters.layout.calendar import CalendarLayoutEngine
from app.config import AppSettings, load_settings
from domain.models import Activity, DayLayout, PositionedActivity, ensure_consistent_timezones
from domain.services.calendar_range import (
    ViewType,
    bucket_by_day,
    fetch_window,
    shift_anchor,
    visible_days,
)
from domain.services.grid_mapping import activity_end, hour_lines

logger = logging.getLogger(__name__)


class DayLayoutRequest(BaseModel):
    activities: List[Activity] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_timezones(self) -> DayLayoutRequest:
        ensure_consistent_timezones(self.activities)
        return self


class RangeLayoutRequest(BaseModel):
    view: ViewType = "day"
    anchor: date = Field(..., validation_alias=AliasChoices("date", "anchor"))
    activities: List[Activity] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_timezones(self) -> RangeLayoutRequest:
        ensure_consistent_timezones(self.activities)
        return self


@dataclass(frozen=True)
class LayoutContext:
    settings: AppSettings
    engine: CalendarLayoutEngine


def create_app(settings: AppSettings) -> FastAPI:
    app = FastAPI(title=settings.calendar.title, default_response_class=ORJSONResponse)
    context = LayoutContext(
        settings=settings,
        engine=CalendarLayoutEngine(settings.calendar.to_layout_config()),
    )

    @app.get("/api/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/api/calendar/range")
    def calendar_range(
        view: ViewType | None = Query(default=None),
        anchor: date | None = Query(default=None, alias="date"),
    ) -> dict[str, Any]:
        resolved_view = view or settings.calendar.default_view
        resolved_anchor = anchor or date.today()
        return build_range_payload(context, resolved_view, resolved_anchor)

    @app.get("/api/calendar/hours")
    def calendar_hours() -> list[dict[str, Any]]:
        return [
            {
                "hour": line.hour,
                "label": line.label,
                "topFraction": line.top_fraction,
                "heightFraction": line.height_fraction,
            }
            for line in hour_lines()
        ]

    @app.post("/api/layout/day")
    def layout_day(request: DayLayoutRequest) -> dict[str, Any]:
        ensure_within_limit(context, request.activities)
        days = bucket_by_day(request.activities)
        if len(days) > 1:
            raise HTTPException(
                status_code=400,
                detail="Activities must fall on a single calendar day",
            )
        layout = context.engine.layout_day(request.activities)
        return day_layout_payload(context, layout)

    @app.post("/api/layout/range")
    def layout_range(request: RangeLayoutRequest) -> dict[str, Any]:
        ensure_within_limit(context, request.activities)
        payload = build_range_payload(context, request.view, request.anchor)
        days = visible_days(request.view, request.anchor, settings.calendar.first_weekday)
        visible = set(days)
        activities = [
            activity for activity in request.activities if activity.start_time.date() in visible
        ]
        skipped = len(request.activities) - len(activities)
        if skipped:
            logger.info("Ignored %s activities outside the visible %s range", skipped, request.view)
        layouts = context.engine.layout_days(activities)
        payload["days"] = {
            day.isoformat(): day_layout_payload(context, layout) for day, layout in layouts.items()
        }
        if request.view == "week":
            placements = context.engine.layout_week(activities, request.anchor)
            payload["week"] = [placement.to_dict() for placement in placements]
        return payload

    return app


def ensure_within_limit(context: LayoutContext, activities: List[Activity]) -> None:
    limit = context.settings.calendar.max_activities
    if len(activities) > limit:
        raise HTTPException(
            status_code=413,
            detail=f"Too many activities: {len(activities)} (limit {limit})",
        )


def build_range_payload(context: LayoutContext, view: ViewType, anchor: date) -> dict[str, Any]:
    first_weekday = context.settings.calendar.first_weekday
    window_start, window_end = fetch_window(view, anchor, first_weekday)
    return {
        "view": view,
        "date": anchor.isoformat(),
        "visibleDays": [day.isoformat() for day in visible_days(view, anchor, first_weekday)],
        "fetchWindow": {
            "start": window_start.isoformat(),
            "end": window_end.isoformat(),
        },
        "previous": shift_anchor(view, anchor, -1).isoformat(),
        "next": shift_anchor(view, anchor, 1).isoformat(),
    }


def day_layout_payload(context: LayoutContext, layout: DayLayout) -> dict[str, Any]:
    payload = layout.to_dict()
    payload["items"] = [positioned_payload(context, item) for item in layout.items]
    return payload


def positioned_payload(context: LayoutContext, item: PositionedActivity) -> dict[str, Any]:
    payload = item.to_dict()
    payload["topFraction"] = context.engine.top_fraction(item)
    payload["heightFraction"] = context.engine.height_fraction(item)
    payload["endTime"] = activity_end(item.start, item.span.duration_minutes).isoformat()
    return payload


app = create_app(load_settings())
