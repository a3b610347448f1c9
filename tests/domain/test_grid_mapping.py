from __future__ import annotations

from datetime import datetime

import pytest

from domain.services.grid_mapping import (
    activity_end,
    height_fraction,
    hour_lines,
    minutes_from_midnight,
    time_range_label,
    top_fraction,
)


def test_top_fraction_uses_minutes_from_midnight() -> None:
    assert minutes_from_midnight(datetime(2024, 5, 6, 9, 30)) == 570
    assert top_fraction(datetime(2024, 5, 6, 0, 0)) == 0.0
    assert top_fraction(datetime(2024, 5, 6, 12, 0)) == pytest.approx(0.5)
    assert top_fraction(datetime(2024, 5, 6, 23, 59)) == pytest.approx(1439 / 1440)


def test_top_fraction_ignores_seconds() -> None:
    assert top_fraction(datetime(2024, 5, 6, 6, 0, 59)) == pytest.approx(0.25)


def test_height_fraction_is_clamped_to_the_day() -> None:
    assert height_fraction(60) == pytest.approx(1 / 24)
    assert height_fraction(3000) == 1.0
    assert height_fraction(-5) == 0.0


def test_end_label_spans_midnight() -> None:
    start = datetime(2024, 5, 6, 23, 30)
    assert activity_end(start, 60) == datetime(2024, 5, 7, 0, 30)
    assert time_range_label(start, 60) == "23:30 - 00:30"


def test_hour_lines_cover_the_day() -> None:
    lines = hour_lines()
    assert len(lines) == 24
    assert lines[0].label == "00:00"
    assert lines[13].label == "13:00"
    assert lines[6].top_fraction == pytest.approx(0.25)
    assert all(line.height_fraction == pytest.approx(1 / 24) for line in lines)
