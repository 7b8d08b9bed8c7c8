"""
Main CLI application using Typer.
"""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..adapters.backoffice_client import BackofficeClient
from ..adapters.json_source import JsonReservationSource
from ..config import AppConfig
from ..domain.aggregator import AvailabilityAggregator
from ..domain.exceptions import SpacefinderError
from ..domain.models import AvailabilityReport, ResourceCategory, TimeRange
from ..domain.slot_calculator import SlotCalculator
from ..services.availability import AvailabilityService
from ..services.query import AvailabilityQuery, parse_date

app = typer.Typer(
    name="spacefinder",
    help="Check coworking workspace availability",
    add_completion=False
)

console = Console()


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
):
    """
    Workspace availability for the coworking back-office.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load_config(config_file: Optional[Path]) -> AppConfig:
    try:
        return AppConfig.load_or_default(config_file)
    except (FileNotFoundError, ValueError, ValidationError) as e:
        console.print(f"[bold red]Configuration error:[/bold red] {e}")
        raise typer.Exit(1)


def _build_service(config: AppConfig) -> AvailabilityService:
    """Wire the configured data source into an AvailabilityService."""
    if config.source.kind == "api":
        source = BackofficeClient(
            base_url=config.source.base_url,
            access_token=config.source.api_token,
            timeout=config.source.timeout_seconds
        )
    else:
        source = JsonReservationSource(data_file=config.source.data_file)

    calculator = SlotCalculator(business_hours=config.business_hours.to_business_hours())
    return AvailabilityService(
        source=source,
        aggregator=AvailabilityAggregator(slot_calculator=calculator),
        timezone=config.timezone
    )


def _render_report(report: AvailabilityReport) -> None:
    table = Table(
        title=f"Availability on {report.date.format('dddd, DD.MM.YYYY', locale='en')}",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Workspace", style="bold yellow")
    table.add_column("Category", style="dim")
    table.add_column("Available")
    table.add_column("Free slots")
    table.add_column("Free hours", justify="right")

    for result in report.results:
        slots = "\n".join(str(slot.time_range) for slot in result.slots) or "-"
        table.add_row(
            result.workspace.name,
            result.workspace.resource_category.value,
            "[green]yes[/green]" if result.is_available else "[red]no[/red]",
            slots,
            f"{result.total_available_hours:g}"
        )

    console.print()
    console.print(table)

    summary = report.summary
    console.print(
        f"\n[bold]{summary.available_workspaces}[/bold] of {summary.total_workspaces} workspace(s) available, "
        f"{summary.unavailable_workspaces} unavailable.\n"
    )


@app.command()
def check(
    date: Annotated[str, typer.Option("--date", help="Date to check (YYYY-MM-DD)")],
    workspace: Annotated[Optional[str], typer.Option("--workspace", "-w", help="Only this workspace ID")] = None,
    category: Annotated[Optional[ResourceCategory], typer.Option("--category", help="Only desks or meeting rooms")] = None,
    start: Annotated[Optional[str], typer.Option("--start", help="Start time (HH:MM)")] = None,
    end: Annotated[Optional[str], typer.Option("--end", help="End time (HH:MM)")] = None,
    duration: Annotated[Optional[float], typer.Option("--duration", "-d", help="Minimum free duration in hours")] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print the raw result as JSON.")] = False,
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")] = None,
):
    """
    Check workspace availability for a day or a specific time range.

    Examples:

        # Free slots of every open workspace
        spacefinder check --date 2030-01-15

        # Is a specific desk free from 09:00 to 12:00?
        spacefinder check --date 2030-01-15 -w <id> --start 09:00 --end 12:00

        # Meeting rooms with at least 4 free hours in one block
        spacefinder check --date 2030-01-15 --category meeting-room --duration 4
    """
    config = _load_config(config_file)

    try:
        query = AvailabilityQuery.from_params({
            "date": date,
            "workspace_id": workspace,
            "resource_category": category.value if category else None,
            "start_time": start,
            "end_time": end,
            "duration_hours": duration,
        })
        service = _build_service(config)
        report = service.check_availability(query)
    except SpacefinderError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    if as_json:
        console.print_json(data=report.to_dict())
        return

    if not report.results:
        console.print("[yellow]No matching workspaces found.[/yellow]")
        return

    _render_report(report)


@app.command()
def can_book(
    workspace_id: Annotated[str, typer.Argument(help="Workspace ID")],
    date: Annotated[str, typer.Option("--date", help="Booking date (YYYY-MM-DD)")],
    start: Annotated[str, typer.Option("--start", help="Start time (HH:MM)")],
    end: Annotated[str, typer.Option("--end", help="End time (HH:MM)")],
    exclude_booking: Annotated[Optional[str], typer.Option("--exclude-booking", help="Existing booking ID to ignore, e.g. when extending it")] = None,
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file")] = None,
):
    """
    Check whether a booking could be created for a workspace.
    """
    config = _load_config(config_file)

    try:
        booking_date = parse_date(date)
        time_range = TimeRange.parse(start, end)
        service = _build_service(config)
        booked = service.ensure_bookable(workspace_id, booking_date, time_range, exclude_booking_id=exclude_booking)
    except (SpacefinderError, ValueError) as e:
        console.print(f"[bold red]✗ Not bookable:[/bold red] {e}")
        raise typer.Exit(1)

    console.print(
        f"[green]✓ {booked.name} is free on {booking_date.isoformat()} from {time_range}.[/green]"
    )


@app.command()
def list_workspaces(
    category: Annotated[Optional[ResourceCategory], typer.Option("--category", help="Only desks or meeting rooms")] = None,
    include_closed: Annotated[bool, typer.Option("--all", help="Include workspaces closed for booking")] = False,
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file")] = None,
):
    """
    List configured workspaces.
    """
    config = _load_config(config_file)

    try:
        service = _build_service(config)
        workspaces = service.list_workspaces(resource_category=category, only_open=not include_closed)
    except SpacefinderError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    if not workspaces:
        console.print("[yellow]No workspaces found.[/yellow]")
        return

    table = Table(
        title="Workspaces",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("ID", style="dim")
    table.add_column("Name", style="bold yellow")
    table.add_column("Type")
    table.add_column("Capacity", justify="right")
    table.add_column("Duration (h)", justify="right")
    table.add_column("Open")

    for workspace in workspaces:
        table.add_row(
            workspace.id,
            workspace.name,
            workspace.type.value,
            str(workspace.capacity),
            f"{workspace.min_duration:g}-{workspace.max_duration:g}",
            "yes" if workspace.available else "no"
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]spacefinder[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
