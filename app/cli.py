from __future__ import annotations

from datetime import date, datetime
from pathlib import Path
from typing import Optional

import orjson
import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from adapters.filesystem.activity_repository import FileSystemActivityRepository
from adapters.layout.calendar import CalendarLayoutEngine
from app.config import load_settings
from domain.models import DayLayout
from domain.services.calendar_range import VIEW_TYPES, fetch_window, visible_days
from domain.services.grid_mapping import time_range_label

app = typer.Typer(no_args_is_help=True)
console = Console()


def _parse_day(value: str | None) -> date | None:
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        console.print(f"[red]Invalid date:[/] {value} (expected YYYY-MM-DD)")
        raise typer.Exit(code=1) from exc


def _render_day(layout: DayLayout) -> Table:
    title = layout.day.isoformat() if layout.day else "empty"
    table = Table(title=f"{title} ({layout.cluster_count} clusters)")
    table.add_column("id")
    table.add_column("time")
    table.add_column("column", justify="right")
    table.add_column("left", justify="right")
    table.add_column("width", justify="right")
    table.add_column("z", justify="right")
    for item in layout.items:
        table.add_row(
            item.activity_id,
            time_range_label(item.start, item.span.duration_minutes),
            f"{item.column_index + 1}/{item.total_columns}",
            f"{item.left_fraction:.3f}",
            f"{item.width_fraction:.3f}",
            str(item.z_index),
        )
    return table


@app.command("layout")
def layout(
    input_path: Path = typer.Argument(..., help="JSON file with activity records."),
    day: Optional[str] = typer.Option(None, help="Only lay out this day (YYYY-MM-DD)."),
    output: Optional[Path] = typer.Option(None, help="Write the layout JSON to this path."),
    config: Optional[Path] = typer.Option(None, help="YAML settings file."),
) -> None:
    if not input_path.exists():
        console.print(f"[red]File not found:[/] {input_path}")
        raise typer.Exit(code=1)

    settings = load_settings(config)
    repo = FileSystemActivityRepository()
    engine = CalendarLayoutEngine(settings.calendar.to_layout_config())

    try:
        activities = repo.load_all(input_path)
    except orjson.JSONDecodeError as exc:
        console.print(f"[red]Invalid JSON:[/] {exc}")
        raise typer.Exit(code=1) from exc
    selected_day = _parse_day(day)
    if selected_day is not None:
        activities = [item for item in activities if item.start_time.date() == selected_day]
    if not activities:
        console.print(f"[yellow]No activities to lay out in {input_path}[/]")
        raise typer.Exit(code=0)

    layouts = engine.layout_days(activities)
    for layout_result in layouts.values():
        console.print(_render_day(layout_result))

    if output is not None:
        payload = {day_key.isoformat(): result.to_dict() for day_key, result in layouts.items()}
        repo.save_layout({"days": payload}, output)
        console.print(f"[green]Wrote[/] {output}")


@app.command("range")
def show_range(
    view: str = typer.Option("week", help="Calendar view: day, week or month."),
    anchor: Optional[str] = typer.Option(None, "--date", help="Anchor date (YYYY-MM-DD)."),
    config: Optional[Path] = typer.Option(None, help="YAML settings file."),
) -> None:
    if view not in VIEW_TYPES:
        console.print(f"[red]Unknown view:[/] {view}")
        raise typer.Exit(code=1)
    settings = load_settings(config)
    resolved = _parse_day(anchor) or date.today()
    first_weekday = settings.calendar.first_weekday

    start, end = fetch_window(view, resolved, first_weekday)  # type: ignore[arg-type]
    days = visible_days(view, resolved, first_weekday)  # type: ignore[arg-type]
    console.print(f"[bold]{view}[/] view for {resolved.isoformat()}")
    console.print(f"Fetch window: {_format_moment(start)} .. {_format_moment(end)}")
    console.print(f"Visible days: {days[0].isoformat()} .. {days[-1].isoformat()} ({len(days)})")


@app.command("validate")
def validate(
    input_path: Path = typer.Argument(..., help="JSON file with activity records."),
) -> None:
    if not input_path.exists():
        console.print(f"[red]File not found:[/] {input_path}")
        raise typer.Exit(code=1)

    try:
        activities, rejected = FileSystemActivityRepository().load_with_rejects(input_path)
    except orjson.JSONDecodeError as exc:
        console.print(f"[red]Invalid JSON:[/] {exc}")
        raise typer.Exit(code=1) from exc

    for position, reason in rejected:
        console.print(f"[red]Record {position}:[/] {escape(reason)}")
    if rejected:
        total = len(activities) + len(rejected)
        console.print(f"[red]Validation failed:[/] {len(rejected)} of {total} records invalid")
        raise typer.Exit(code=1)
    console.print(f"[green]Valid activities file:[/] {input_path} ({len(activities)} records)")


def _format_moment(moment: datetime) -> str:
    return moment.strftime("%Y-%m-%d %H:%M")


if __name__ == "__main__":
    app()
