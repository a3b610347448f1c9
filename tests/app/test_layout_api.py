from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest
from fastapi.testclient import TestClient

from app.config import AppSettings
from app.web_main import create_app


def _activities() -> list[dict[str, Any]]:
    return [
        {"id": "first", "startTime": "2024-05-06T09:00:00", "durationMinutes": 60},
        {"id": "second", "startTime": "2024-05-06T09:15:00", "durationMinutes": 60},
        {"id": "late", "startTime": "2024-05-06T10:30:00", "durationMinutes": 30},
    ]


@pytest.fixture
def client(app_settings: AppSettings) -> TestClient:
    return TestClient(create_app(app_settings))


def test_health(client: TestClient) -> None:
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_layout_day(client: TestClient) -> None:
    response = client.post("/api/layout/day", json={"activities": _activities()})
    assert response.status_code == 200
    payload = response.json()
    assert payload["day"] == "2024-05-06"
    assert payload["clusters"] == 2
    items = {item["id"]: item for item in payload["items"]}
    assert items["first"]["columnIndex"] == 0
    assert items["second"]["leftFraction"] == 0.5
    assert items["second"]["widthFraction"] == 0.5
    assert items["second"]["isLastInColumnSet"] is True
    assert items["late"]["widthFraction"] == 1.0
    assert items["first"]["topFraction"] == pytest.approx(9 / 24)
    assert items["late"]["endTime"] == "2024-05-06T11:00:00"


def test_layout_day_empty(client: TestClient) -> None:
    response = client.post("/api/layout/day", json={"activities": []})
    assert response.status_code == 200
    assert response.json() == {"day": None, "clusters": 0, "items": []}


def test_layout_day_rejects_multiple_days(client: TestClient) -> None:
    activities = _activities() + [{"id": "tue", "startTime": "2024-05-07T09:00:00"}]
    response = client.post("/api/layout/day", json={"activities": activities})
    assert response.status_code == 400


def test_layout_day_rejects_malformed_timestamp(client: TestClient) -> None:
    response = client.post(
        "/api/layout/day",
        json={"activities": [{"id": "x", "startTime": "half past nine"}]},
    )
    assert response.status_code == 422


def test_layout_day_rejects_oversized_duration(client: TestClient) -> None:
    response = client.post(
        "/api/layout/day",
        json={
            "activities": [
                {"id": "x", "startTime": "2024-05-06T09:00:00", "durationMinutes": 10**10}
            ]
        },
    )
    assert response.status_code == 422


def test_layout_day_rejects_mixed_timezone_awareness(client: TestClient) -> None:
    activities = [
        {"id": "naive", "startTime": "2024-05-06T09:00:00"},
        {"id": "aware", "startTime": "2024-05-06T09:30:00Z"},
    ]
    response = client.post("/api/layout/day", json={"activities": activities})
    assert response.status_code == 422
    response = client.post(
        "/api/layout/range",
        json={"view": "week", "date": "2024-05-06", "activities": activities},
    )
    assert response.status_code == 422


def test_layout_day_accepts_aware_timestamps(client: TestClient) -> None:
    activities = [
        {"id": "a", "startTime": "2024-05-06T09:00:00Z"},
        {"id": "b", "startTime": "2024-05-06T09:30:00+00:00"},
    ]
    response = client.post("/api/layout/day", json={"activities": activities})
    assert response.status_code == 200
    assert [item["totalColumns"] for item in response.json()["items"]] == [2, 2]


def test_layout_day_enforces_activity_limit(
    app_settings_factory: Callable[..., AppSettings],
) -> None:
    client = TestClient(create_app(app_settings_factory(max_activities=2)))
    response = client.post("/api/layout/day", json={"activities": _activities()})
    assert response.status_code == 413


def test_layout_range_week(client: TestClient) -> None:
    activities = _activities() + [
        {"id": "sat", "startTime": "2024-05-11T08:00:00"},
        {"id": "outside", "startTime": "2024-05-20T08:00:00"},
    ]
    response = client.post(
        "/api/layout/range",
        json={"view": "week", "date": "2024-05-08", "activities": activities},
    )
    assert response.status_code == 200
    payload = response.json()
    assert payload["visibleDays"][0] == "2024-05-05"
    assert payload["previous"] == "2024-05-01"
    assert payload["next"] == "2024-05-15"
    assert set(payload["days"]) == {"2024-05-06", "2024-05-11"}
    week = {item["id"]: item for item in payload["week"]}
    assert set(week) == {"first", "second", "late", "sat"}
    assert week["sat"]["dayIndex"] == 6
    assert week["second"]["weekWidthFraction"] == pytest.approx(0.5 / 7)


def test_layout_range_month_has_no_week_strip(client: TestClient) -> None:
    response = client.post(
        "/api/layout/range",
        json={"view": "month", "date": "2024-05-20", "activities": _activities()},
    )
    assert response.status_code == 200
    payload = response.json()
    assert "week" not in payload
    assert payload["fetchWindow"]["start"] == "2024-04-24T00:00:00"


def test_calendar_range_uses_default_view(client: TestClient) -> None:
    response = client.get("/api/calendar/range", params={"date": "2024-05-08"})
    assert response.status_code == 200
    payload = response.json()
    assert payload["view"] == "week"
    assert len(payload["visibleDays"]) == 7


def test_calendar_hours(client: TestClient) -> None:
    response = client.get("/api/calendar/hours")
    assert response.status_code == 200
    hours = response.json()
    assert len(hours) == 24
    assert hours[9]["label"] == "09:00"
