"""
Main CLI application using Typer.
"""

import asyncio
import json
import logging
from datetime import date
from pathlib import Path
from typing import Annotated, List, Optional, Tuple

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from ..adapters.json_repository import JsonBookingRepository
from ..config import AppConfig, get_default_config_path
from ..domain.calendar import CalendarAggregator
from ..domain.exceptions import BookingCalendarError
from ..domain.models import DaysOfWeek, Occurrence
from ..services.booking_calendar import BookingCalendarService, BookingRequest

app = typer.Typer(
    name="bookingcalendar",
    help="Expand recurring resource bookings into calendars and book free slots",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml"),
]
SampleOption = Annotated[
    bool,
    typer.Option("--sample", help="Use the packaged sample data. Nothing is written."),
]
VerboseOption = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Show debug logging."),
]


def _load_config(config_file: Optional[Path]) -> Tuple[AppConfig, Path]:
    """
    Load the configuration and return it with the directory it came from.

    An explicitly given file must exist; without one, defaults are used when
    no config.yaml can be found.
    """
    if config_file is not None:
        return AppConfig.load_from_yaml(config_file), config_file.parent

    config_path = get_default_config_path()
    if config_path.exists():
        return AppConfig.load_from_yaml(config_path), config_path.parent

    return AppConfig(), Path.cwd()


def _configure_logging(config: AppConfig, verbose: bool) -> None:
    level = logging.DEBUG if verbose else config.log_level
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _build_service(config: AppConfig, base_dir: Path, sample: bool) -> BookingCalendarService:
    if sample:
        repository = JsonBookingRepository.sample()
    else:
        repository = JsonBookingRepository(config.resolve_data_file(base_dir))

    return BookingCalendarService(
        repository=repository,
        aggregator=CalendarAggregator(unknown_label=config.unknown_resource_label),
        timezone=config.timezone,
    )


def _setup(config_file: Optional[Path], sample: bool, verbose: bool) -> Tuple[AppConfig, BookingCalendarService]:
    config, base_dir = _load_config(config_file)
    _configure_logging(config, verbose)
    return config, _build_service(config, base_dir, sample)


def _parse_date_option(value: str, name: str) -> date:
    try:
        return pendulum.from_format(value, "YYYY-MM-DD").date()
    except ValueError as e:
        console.print(f"[red]Error parsing {name} '{escape(value)}': {escape(str(e))}[/red]")
        raise typer.Exit(1)


def _determine_window(
    *,
    config: AppConfig,
    start_option: Optional[str],
    end_option: Optional[str],
) -> Tuple[date, date]:
    """
    Resolve the calendar window from explicit dates or configured defaults.
    """
    if start_option:
        window_start = _parse_date_option(start_option, "--start")
    else:
        window_start = pendulum.today(config.timezone).date()

    if end_option:
        window_end = _parse_date_option(end_option, "--end")
    else:
        window_end = window_start.add(days=config.default_window_days)

    return window_start, window_end


def _print_occurrences(occurrences: List[Occurrence], title: str) -> None:
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Date", style="bold yellow")
    table.add_column("Weekday")
    table.add_column("From")
    table.add_column("To")
    table.add_column("Resource", style="dim")

    for occurrence in occurrences:
        table.add_row(
            occurrence.date.isoformat(),
            occurrence.date.strftime("%A"),
            occurrence.start_time.strftime("%H:%M"),
            occurrence.end_time.strftime("%H:%M"),
            occurrence.resource_label,
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def calendar(
    resource: Annotated[str, typer.Argument(help="Resource id or model name, e.g. 'civic'.")],
    start: Annotated[Optional[str], typer.Option("--start", help="Window start date (YYYY-MM-DD). Defaults to today.")] = None,
    end: Annotated[Optional[str], typer.Option("--end", help="Window end date (YYYY-MM-DD).")] = None,
    by_date: Annotated[bool, typer.Option("--by-date", help="Group occurrences per date.")] = False,
    as_json: Annotated[bool, typer.Option("--json", help="Print the occurrences as JSON.")] = False,
    config_file: ConfigOption = None,
    sample: SampleOption = False,
    verbose: VerboseOption = False,
):
    """
    Show the calendar occurrences of a resource inside a date window.

    Examples:

        bookingcalendar calendar civic --sample --start 2025-02-10 --end 2025-02-15

        bookingcalendar calendar focus --sample --start 2025-02-01 --end 2025-03-31 --by-date
    """
    try:
        config, service = _setup(config_file, sample, verbose)
        window_start, window_end = _determine_window(
            config=config,
            start_option=start,
            end_option=end,
        )

        found = asyncio.run(service.resolve_resource(resource))
        occurrences = asyncio.run(
            service.get_calendar_occurrences(
                resource_id=found.resource_id,
                window_start=window_start,
                window_end=window_end,
            )
        )
    except (FileNotFoundError, ValueError, BookingCalendarError) as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)

    if as_json:
        typer.echo(json.dumps([o.to_payload() for o in occurrences], indent=2))
        return

    if not occurrences:
        console.print(
            f"[yellow]No bookings for {found} between "
            f"{window_start.isoformat()} and {window_end.isoformat()}.[/yellow]"
        )
        return

    if by_date:
        for day, bucket in CalendarAggregator.group_by_date(occurrences).items():
            console.print(f"[bold]{day.strftime('%A, %d.%m.%Y')}[/bold]")
            for occurrence in bucket:
                console.print(
                    f"  {occurrence.start_time.strftime('%H:%M')} - "
                    f"{occurrence.end_time.strftime('%H:%M')}  {occurrence.resource_label}"
                )
        return

    _print_occurrences(
        occurrences,
        title=f"{found} ({window_start.isoformat()} - {window_end.isoformat()})",
    )


@app.command()
def book(
    resource: Annotated[str, typer.Argument(help="Resource id or model name.")],
    booking_date: Annotated[str, typer.Option("--date", help="Booking date (YYYY-MM-DD).")],
    start_time: Annotated[str, typer.Option("--from", help="Start time (HH:MM).")],
    end_time: Annotated[str, typer.Option("--to", help="End time (HH:MM).")],
    repeat: Annotated[str, typer.Option("--repeat", help="none, daily or weekly.")] = "none",
    until: Annotated[Optional[str], typer.Option("--until", help="End repeat date (YYYY-MM-DD).")] = None,
    days: Annotated[Optional[List[str]], typer.Option("--day", help="Weekday to repeat on. Stored only, repeatable.")] = None,
    config_file: ConfigOption = None,
    sample: SampleOption = False,
    verbose: VerboseOption = False,
):
    """
    Book a resource unless the time collides with an existing booking.

    Examples:

        bookingcalendar book corolla --date 2025-02-05 --from 12:00 --to 13:00

        bookingcalendar book civic --date 2025-04-01 --from 08:00 --to 09:00 --repeat weekly --until 2025-04-29
    """
    try:
        _, service = _setup(config_file, sample, verbose)
        found = asyncio.run(service.resolve_resource(resource))

        request = BookingRequest(
            resource_id=found.resource_id,
            booking_date=_parse_date_option(booking_date, "--date"),
            start_time=start_time,
            end_time=end_time,
            repeat_option=repeat,
            end_repeat_date=_parse_date_option(until, "--until") if until else None,
            days_to_repeat_on=DaysOfWeek.from_names(days) if days else None,
        )
        result = asyncio.run(service.create_booking(request))
    except (FileNotFoundError, ValueError, BookingCalendarError) as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)

    if not result.created:
        console.print(f"[bold red]✗ {result.reason}[/bold red]")
        for conflict in result.conflicts:
            console.print(
                f"  {conflict.booking_date.isoformat()} "
                f"{conflict.start_time.strftime('%H:%M')} - {conflict.end_time.strftime('%H:%M')} "
                f"({conflict.booking_id})"
            )
        raise typer.Exit(1)

    booking = result.booking
    console.print(f"[green]✓ Booking created:[/green] {booking.booking_id}")
    console.print(
        f"  {found} on {booking.booking_date.isoformat()}, "
        f"{booking.start_time.strftime('%H:%M')} - {booking.end_time.strftime('%H:%M')}, "
        f"repeats {booking.repeat_option.name.lower()}"
    )
    if sample:
        console.print("[yellow]Sample mode: the booking was not saved.[/yellow]")


@app.command()
def list_resources(
    config_file: ConfigOption = None,
    sample: SampleOption = False,
    verbose: VerboseOption = False,
):
    """
    List all bookable resources.
    """
    try:
        _, service = _setup(config_file, sample, verbose)
        resources = asyncio.run(service.list_resources())
    except (FileNotFoundError, ValueError, BookingCalendarError) as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)

    if not resources:
        console.print("[yellow]No resources defined in the data file.[/yellow]")
        return

    table = Table(
        title="Resources",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Id", style="bold yellow")
    table.add_column("Make")
    table.add_column("Model", style="dim")

    for resource in resources:
        table.add_row(resource.resource_id, resource.make, resource.model)

    console.print()
    console.print(table)
    console.print()


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]bookingcalendar[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
