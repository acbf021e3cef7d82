"""
Main CLI application using Typer.
"""

import logging
from pathlib import Path
from typing import List, Optional, Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..adapters.schedule_store import SAMPLE_SCHEDULES_PATH, YamlScheduleStore
from ..config import CalendarConfig, SchedulerConfig, get_default_config_path
from ..domain.calendar import is_weekend
from ..domain.exceptions import SchedulerError
from ..domain.models import TimeRange, to_date
from ..services.scheduler import TimeSchedulerService

app = typer.Typer(
    name="timescheduler",
    help="Show slot availability and manage bookings for a day",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml"),
]
SchedulesOption = Annotated[
    Optional[Path],
    typer.Option("--schedules", "-s", help="YAML schedule file. Defaults to the configured file or the sample week."),
]


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
):
    """
    Availability scheduling for a single resource and day.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _load_config(config_file: Optional[Path]) -> SchedulerConfig:
    """Load the given config file, or the default one if present, else defaults."""
    if config_file is not None:
        return SchedulerConfig.load_from_yaml(config_file)

    default_path = get_default_config_path()
    if default_path.exists():
        return SchedulerConfig.load_from_yaml(default_path)
    return SchedulerConfig()


def _build_service(
    config: SchedulerConfig,
    schedules_file: Optional[Path],
    *,
    writable: bool = False,
) -> TimeSchedulerService:
    """
    Create the scheduler service backed by the chosen schedule file.

    The bundled sample week is only used read-only.
    """
    path = schedules_file or config.schedules_file
    default_hours = config.defaults.get_operating_hours()
    engine = config.build_engine()

    if path is None:
        if writable:
            console.print(
                "[bold red]Error:[/bold red] No schedule file configured. "
                "Pass --schedules or set schedules_file in the config."
            )
            raise typer.Exit(1)
        store = YamlScheduleStore(SAMPLE_SCHEDULES_PATH, default_hours)
        return TimeSchedulerService(store.load(), engine, default_hours)

    return TimeSchedulerService.from_store(YamlScheduleStore(path, default_hours), engine, default_hours)


def _fail(error: Exception) -> None:
    console.print(f"[bold red]Error:[/bold red] {escape(str(error))}")
    raise typer.Exit(1)


@app.command()
def dates(
    config_file: ConfigOption = None,
    schedules_file: SchedulesOption = None,
):
    """
    List all stored day schedules.
    """
    try:
        config = _load_config(config_file)
        service = _build_service(config, schedules_file)
    except (FileNotFoundError, ValueError, SchedulerError) as e:
        _fail(e)

    book = service.schedules
    if not len(book):
        console.print("[yellow]No schedules stored.[/yellow]")
        return

    table = Table(title="Schedules", show_header=True, header_style="bold cyan")
    table.add_column("Date", style="bold yellow")
    table.add_column("Weekday")
    table.add_column("Operating hours")
    table.add_column("Unavailable", justify="right")
    table.add_column("Bookings", justify="right")

    for schedule in book.schedules():
        table.add_row(
            schedule.date,
            schedule.day.format("dddd"),
            str(schedule.operating_hours),
            str(len(schedule.unavailable_ranges)),
            str(len(schedule.bookings)),
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def slots(
    date: Annotated[str, typer.Argument(help="Day to show (YYYY-MM-DD)")],
    config_file: ConfigOption = None,
    schedules_file: SchedulesOption = None,
    free_only: Annotated[bool, typer.Option("--free", help="Only list free slots.")] = False,
):
    """
    Show the slot grid for a day.

    Days without a stored schedule use the configured default operating hours.
    """
    try:
        config = _load_config(config_file)
        service = _build_service(config, schedules_file)
        service.select_date(date)
        day_slots = service.available_time_slots()
    except (FileNotFoundError, ValueError, SchedulerError) as e:
        _fail(e)

    schedule = service.schedule_for(date)
    stored = date in service.schedules

    table = Table(
        title=f"{schedule.day.format('dddd, YYYY-MM-DD')} ({schedule.operating_hours})",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Start", style="bold")
    table.add_column("End")
    table.add_column("Status")

    free_count = 0
    for slot in day_slots:
        if not slot.is_booked:
            free_count += 1
        elif free_only:
            continue
        status = "[red]booked[/red]" if slot.is_booked else "[green]free[/green]"
        table.add_row(str(slot.start_time), str(slot.end_time), status)

    console.print()
    if not stored:
        console.print("[yellow]⚠ No stored schedule for this date, using default hours.[/yellow]")
    console.print(table)
    console.print(f"[bold green]✓ {free_count} of {len(day_slots)} slot(s) free[/bold green]\n")


@app.command()
def book(
    date: Annotated[str, typer.Argument(help="Day to book (YYYY-MM-DD)")],
    start: Annotated[str, typer.Argument(help="Start time (HH:MM)")],
    end: Annotated[str, typer.Argument(help="End time (HH:MM)")],
    config_file: ConfigOption = None,
    schedules_file: SchedulesOption = None,
    create: Annotated[bool, typer.Option("--create", help="Create a default schedule if the date has none.")] = False,
):
    """
    Add a booking to a stored day schedule.
    """
    try:
        config = _load_config(config_file)
        service = _build_service(config, schedules_file, writable=True)
        booking = TimeRange(start=start, end=end)
        if create:
            service.ensure_schedule(date)
        schedule = service.add_booking(date, booking, strict=True)
    except (FileNotFoundError, ValueError, SchedulerError) as e:
        _fail(e)

    console.print(f"\n[green]✓ Booked {booking} on {schedule.date}.[/green]")
    console.print(f"   Bookings: {', '.join(str(b) for b in schedule.bookings)}\n")


@app.command()
def cancel(
    date: Annotated[str, typer.Argument(help="Day of the booking (YYYY-MM-DD)")],
    start: Annotated[str, typer.Argument(help="Start time (HH:MM)")],
    end: Annotated[str, typer.Argument(help="End time (HH:MM)")],
    config_file: ConfigOption = None,
    schedules_file: SchedulesOption = None,
):
    """
    Remove bookings that exactly match the given range.
    """
    try:
        config = _load_config(config_file)
        service = _build_service(config, schedules_file, writable=True)
        booking = TimeRange(start=start, end=end)
        before = len(service.schedule_for(date).bookings)
        schedule = service.remove_booking(date, booking, strict=True)
    except (FileNotFoundError, ValueError, SchedulerError) as e:
        _fail(e)

    removed = before - len(schedule.bookings)
    if removed:
        console.print(f"\n[green]✓ Cancelled {removed} booking(s) {booking} on {schedule.date}.[/green]\n")
    else:
        console.print(f"\n[yellow]No booking {booking} on {schedule.date}, nothing changed.[/yellow]\n")


@app.command()
def check_date(
    date: Annotated[str, typer.Argument(help="Day to check (YYYY-MM-DD)")],
    config_file: ConfigOption = None,
    min_date: Annotated[Optional[str], typer.Option("--min-date", help="Exclude days before this date")] = None,
    max_date: Annotated[Optional[str], typer.Option("--max-date", help="Exclude days after this date")] = None,
    available: Annotated[Optional[List[str]], typer.Option("--available", help="Allow only these days (repeatable)")] = None,
):
    """
    Check whether a day is selectable in the calendar picker.

    Options override the calendar section of the config.
    """
    try:
        config = _load_config(config_file)
        calendar = config.calendar
        if min_date or max_date or available:
            calendar = CalendarConfig(
                min_date=min_date or calendar.min_date,
                max_date=max_date or calendar.max_date,
                available_dates=available or calendar.available_dates,
            )
        eligible = calendar.get_eligibility().is_eligible(date)
        day = to_date(date)
    except (FileNotFoundError, ValueError, SchedulerError) as e:
        _fail(e)

    verdict = "[bold green]✓ selectable[/bold green]" if eligible else "[bold red]✗ not selectable[/bold red]"
    weekend = "yes" if is_weekend(day) else "no"

    console.print(Panel.fit(
        f"{verdict}\n\n"
        f"[bold]Weekday:[/bold] {day.format('dddd')}\n"
        f"[bold]Weekend:[/bold] {weekend}",
        title=day.to_date_string()
    ))


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]timescheduler[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
