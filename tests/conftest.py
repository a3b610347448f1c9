from __future__ import annotations

import os
from collections.abc import Callable, Generator
from datetime import datetime

import pytest

from app.config import AppSettings, CalendarSettings
from domain.models import Activity


def _clear_agenda_env() -> None:
    for key in list(os.environ):
        if key.startswith("AGENDA_"):
            os.environ.pop(key, None)


_clear_agenda_env()


@pytest.fixture(autouse=True)
def clear_agenda_env() -> Generator[None, None, None]:
    _clear_agenda_env()
    yield
    _clear_agenda_env()


@pytest.fixture
def activity_factory() -> Callable[..., Activity]:
    def _factory(
        activity_id: str,
        start: str,
        duration: int | None = 60,
        day: str = "2024-05-06",
    ) -> Activity:
        return Activity(
            activity_id=activity_id,
            start_time=datetime.fromisoformat(f"{day}T{start}"),
            duration_minutes=duration,
        )

    return _factory


@pytest.fixture
def calendar_settings() -> CalendarSettings:
    return CalendarSettings(
        title="Test Agenda",
        default_view="week",
        default_duration_minutes=60,
        base_z_index=10,
        first_weekday=6,
        max_activities=50,
    )


@pytest.fixture
def calendar_settings_factory(
    calendar_settings: CalendarSettings,
) -> Callable[..., CalendarSettings]:
    def _factory(**overrides: object) -> CalendarSettings:
        return calendar_settings.model_copy(update=overrides)

    return _factory


@pytest.fixture
def app_settings(calendar_settings: CalendarSettings) -> AppSettings:
    return AppSettings(calendar=calendar_settings)


@pytest.fixture
def app_settings_factory(
    calendar_settings_factory: Callable[..., CalendarSettings],
) -> Callable[..., AppSettings]:
    def _factory(**overrides: object) -> AppSettings:
        return AppSettings(calendar=calendar_settings_factory(**overrides))

    return _factory
