"""
Main CLI application using Typer.
"""

import logging
from pathlib import Path
from typing import Annotated, List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..adapters.clock import FixedClock, SystemClock
from ..adapters.seed import build_sample_slots
from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import SlotPlannerError
from ..domain.models import (
    DAY_LABELS,
    CapacityLine,
    Created,
    Deleted,
    Outcome,
    Rejected,
    SeriesCopied,
    SeriesDeleted,
    Updated,
    as_date,
    format_minutes,
)
from ..services.planner import AvailabilityPlannerService

app = typer.Typer(
    name="slotplanner",
    help="Plan availability windows and estimate how many sessions they can hold",
    add_completion=False
)

console = Console()

logger = logging.getLogger(__name__)

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml"),
]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")]
TodayOption = Annotated[
    Optional[str],
    typer.Option("--today", help="Pretend today is this date (YYYY-MM-DD)."),
]


def setup_logging(verbose: bool, level: str = "WARNING") -> None:
    """Configures logging to stderr through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, level, logging.WARNING),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_config(config_file: Optional[Path], verbose: bool) -> AppConfig:
    config_path = config_file or get_default_config_path()
    config = AppConfig.load_from_yaml(config_path)
    setup_logging(verbose, config.log_level)
    logger.debug("Loaded configuration from %s", config_path)
    return config


def _build_service(config: AppConfig, today: Optional[str], sample: bool) -> AvailabilityPlannerService:
    clock = FixedClock(as_date(today)) if today else SystemClock(config.timezone)
    service = AvailabilityPlannerService(
        clock=clock,
        catalog=config.build_catalog(),
        rules=config.scheduling.to_rules(),
    )
    if sample:
        loaded = service.load_slots(
            build_sample_slots(
                service.catalog,
                service.horizon.min_week_start,
                horizon=service.horizon,
            )
        )
        logger.debug("Loaded %d sample windows", loaded)
    return service


def _format_capacity(lines: List[CapacityLine]) -> str:
    if not lines:
        return "[dim]no services enabled[/dim]"
    parts = []
    for line in lines:
        if line.count == 0:
            parts.append(f"[yellow]{line.service.title}: too long[/yellow]")
        else:
            parts.append(f"{line.count}× {line.service.title}")
    return "\n".join(parts)


def _describe(outcome: Optional[Outcome]) -> str:
    """Render an outcome the way a confirmation banner would."""
    if outcome is None:
        return "[dim]nothing to do[/dim]"
    if isinstance(outcome, Rejected):
        return f"[red]✗ {outcome.message or outcome.reason.value}[/red]"
    if isinstance(outcome, Created):
        return f"[green]✓ Created[/green] {outcome.slot.format_display()}"
    if isinstance(outcome, Updated):
        return f"[green]✓ Updated[/green] {outcome.slot.format_display()}"
    if isinstance(outcome, Deleted):
        return f"[green]✓ Availability window removed[/green] ({outcome.slot_id})"
    if isinstance(outcome, SeriesDeleted):
        return f"[green]✓ {outcome.summary()}[/green]"
    if isinstance(outcome, SeriesCopied):
        colour = "green" if outcome.created else "yellow"
        return f"[{colour}]{outcome.summary()}[/{colour}]"
    return str(outcome)


def _print_week(service: AvailabilityPlannerService) -> None:
    dates = service.week_dates()
    table = Table(
        title=f"Week of {dates[0].format('D MMM')} - {dates[-1].format('D MMM YYYY')}",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Day", style="bold yellow")
    table.add_column("Date")
    table.add_column("Window")
    table.add_column("Length", justify="right")
    table.add_column("Capacity")

    for slot in service.slots_for_week():
        table.add_row(
            DAY_LABELS[slot.weekday],
            slot.date.format("D MMM"),
            f"{format_minutes(slot.start_minutes)} - {format_minutes(slot.end_minutes)}",
            f"{slot.duration_minutes} min",
            _format_capacity(service.capacity_lines(slot)),
        )

    console.print()
    console.print(table)
    console.print(
        f"[dim]{len(service.store)} window(s), "
        f"{service.store.total_hours():.1f} h of availability in total[/dim]\n"
    )


@app.command()
def services(config_file: ConfigOption = None, verbose: VerboseOption = False):
    """
    List the configured session types.
    """
    try:
        config = _load_config(config_file, verbose)

        if not config.services:
            console.print("[yellow]No session types configured.[/yellow]")
            return

        table = Table(
            title="Session types",
            show_header=True,
            header_style="bold cyan"
        )
        table.add_column("ID", style="dim")
        table.add_column("Title", style="bold yellow")
        table.add_column("Modality")
        table.add_column("Duration", justify="right")
        table.add_column("Price", justify="right")

        for service in config.build_catalog():
            table.add_row(
                service.id,
                service.title,
                service.modality.label,
                f"{service.duration} min",
                f"{service.price:.2f}",
            )

        console.print()
        console.print(table)
        console.print()

    except (FileNotFoundError, ValueError, SlotPlannerError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def horizon(
    config_file: ConfigOption = None,
    today: TodayOption = None,
    verbose: VerboseOption = False,
):
    """
    Show the schedulable date range and navigable weeks.
    """
    try:
        config = _load_config(config_file, verbose)
        bounds = _build_service(config, today, sample=False).horizon

        console.print(f"\n[bold]Today:[/bold]    {bounds.today.format('ddd D MMM YYYY')}")
        console.print(f"[bold]Last day:[/bold] {bounds.max_date.format('ddd D MMM YYYY')}")
        console.print("[bold]Weeks:[/bold]")
        for monday in bounds.navigable_weeks():
            console.print(f"  {monday.format('D MMM')} - {monday.add(days=6).format('D MMM')}")
        console.print()

    except (FileNotFoundError, ValueError, SlotPlannerError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def week(
    offset: Annotated[int, typer.Option("--week", "-w", help="Weeks ahead of the current week.")] = 0,
    sample: Annotated[bool, typer.Option("--sample", help="Fill the calendar with sample availability.")] = False,
    config_file: ConfigOption = None,
    today: TodayOption = None,
    verbose: VerboseOption = False,
):
    """
    Show one week of availability windows with their session capacity.

    Examples:

        slotplanner week --sample
        slotplanner week --sample --week 2
    """
    try:
        config = _load_config(config_file, verbose)
        service = _build_service(config, today, sample)

        service.editor.show_week(service.horizon.min_week_start.add(weeks=offset))
        if service.week_start != service.horizon.min_week_start.add(weeks=offset):
            console.print("[yellow]⚠ Week is outside the availability window, showing the nearest one.[/yellow]")

        _print_week(service)

    except (FileNotFoundError, ValueError, SlotPlannerError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def demo(
    config_file: ConfigOption = None,
    today: TodayOption = None,
    verbose: VerboseOption = False,
):
    """
    Walk through an editing session on sample data and print every outcome.
    """
    try:
        config = _load_config(config_file, verbose)
        service = _build_service(config, today, sample=True)
        rules = service.rules
        steps = []

        # Saturday is free in the sample pattern.
        saturday = 5
        start = rules.day_start + 3 * 60
        steps.append((
            "Drag Saturday 10:00-12:00",
            service.create_window(saturday, start, start + 2 * 60),
        ))
        steps.append(("Extend end by one step", service.nudge_end(+1)))
        steps.append(("Drag over the same window again", service.create_window(saturday, start, start + 60)))
        steps.append(("Copy to every Saturday", service.copy_to_weekday(saturday)))
        steps.append(("Copy to every Saturday again", service.copy_to_weekday(saturday)))
        steps.append(("Copy to every Monday", service.copy_to_weekday(0)))
        steps.append(("Delete the Saturday series", service.delete_series()))

        console.print("\n[bold cyan]Editing session[/bold cyan]\n")
        for label, outcome in steps:
            console.print(f"[bold]{label}:[/bold] {_describe(outcome)}")

        _print_week(service)

    except (FileNotFoundError, ValueError, SlotPlannerError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]slotplanner[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
