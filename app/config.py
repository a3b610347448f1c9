from __future__ import annotations

import os
from pathlib import Path
from typing import ClassVar

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings.sources import PydanticBaseSettingsSource, YamlConfigSettingsSource

from adapters.layout.calendar import CalendarLayoutConfig
from domain.models import (
    DAY_MINUTES,
    DEFAULT_BASE_Z_INDEX,
    DEFAULT_DURATION_MINUTES,
    MAX_DURATION_MINUTES,
)
from domain.services.calendar_range import SUNDAY, VIEW_TYPES, ViewType

DEFAULT_CONFIG_PATH = Path("config/agenda.yaml")

_WEEKDAY_NAMES = {
    "monday": 0,
    "tuesday": 1,
    "wednesday": 2,
    "thursday": 3,
    "friday": 4,
    "saturday": 5,
    "sunday": 6,
}


class CalendarSettings(BaseModel):
    title: str = "Agenda Layout"
    default_view: ViewType = "month"
    default_duration_minutes: int = Field(
        default=DEFAULT_DURATION_MINUTES, gt=0, le=MAX_DURATION_MINUTES
    )
    base_z_index: int = DEFAULT_BASE_Z_INDEX
    first_weekday: int = Field(default=SUNDAY, ge=0, le=6)
    max_activities: int = Field(default=2000, gt=0)

    @field_validator("default_view", mode="before")
    @classmethod
    def normalize_default_view(cls, value: object) -> str:
        text = str(value or "month").strip().lower()
        if text not in VIEW_TYPES:
            msg = f"calendar.default_view must be one of {', '.join(VIEW_TYPES)}"
            raise ValueError(msg)
        return text

    @field_validator("first_weekday", mode="before")
    @classmethod
    def normalize_first_weekday(cls, value: object) -> object:
        if isinstance(value, str):
            text = value.strip().lower()
            if text in _WEEKDAY_NAMES:
                return _WEEKDAY_NAMES[text]
        return value

    def to_layout_config(self) -> CalendarLayoutConfig:
        return CalendarLayoutConfig(
            default_duration_minutes=self.default_duration_minutes,
            base_z_index=self.base_z_index,
            day_minutes=DAY_MINUTES,
            first_weekday=self.first_weekday,
        )


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="AGENDA_", env_nested_delimiter="__")

    calendar: CalendarSettings = CalendarSettings()

    _yaml_path: ClassVar[Path | None] = None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        sources: list[PydanticBaseSettingsSource] = [
            init_settings,
            env_settings,
            dotenv_settings,
            file_secret_settings,
        ]
        if cls._yaml_path:
            sources.append(YamlConfigSettingsSource(settings_cls, yaml_file=cls._yaml_path))
        return tuple(sources)


def load_settings(config_path: Path | None = None) -> AppSettings:
    env_path = os.getenv("AGENDA_CONFIG_PATH")
    resolved_path: Path | None = None

    if config_path is not None:
        resolved_path = config_path
    elif env_path:
        resolved_path = Path(env_path)
    elif DEFAULT_CONFIG_PATH.exists():
        resolved_path = DEFAULT_CONFIG_PATH

    previous = AppSettings._yaml_path
    try:
        if resolved_path is not None:
            if not resolved_path.exists():
                msg = f"Config file not found: {resolved_path}"
                raise FileNotFoundError(msg)
            AppSettings._yaml_path = resolved_path
        return AppSettings()
    finally:
        AppSettings._yaml_path = previous
