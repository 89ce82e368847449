"""
Main CLI application using Typer.
"""

import json
import logging
from datetime import timedelta
from pathlib import Path
from typing import Annotated, List, Optional, Sequence

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..adapters.json_event_source import JsonEventSource
from ..config import AppConfig, load_config
from ..domain.exceptions import ConflictFinderError
from ..domain.models import (
    BusyInterval,
    CandidateRequest,
    ConflictResult,
    TimeRange,
    parse_instant,
)
from ..domain.slot_search import SlotSearch
from ..services.conflict_service import ConflictService

app = typer.Typer(
    name="conflictfinder",
    help="Detect calendar conflicts and suggest alternative times",
    add_completion=False
)

console = Console()
err_console = Console(stderr=True)


def _configure_logging(level: str, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _load(config_file: Optional[Path], verbose: bool) -> AppConfig:
    config = load_config(config_file)
    _configure_logging(config.log_level, verbose)
    return config


def _parse_moment(value: str, tz: str, label: str) -> pendulum.DateTime:
    try:
        return parse_instant(value, tz)
    except ValueError as e:
        raise ValueError(f"Cannot parse {label} '{value}': {e}") from e


def _load_events(config: AppConfig, events_file: Optional[Path]) -> List[BusyInterval]:
    path = events_file or config.events_file
    if path is None:
        err_console.print("[yellow]⚠ No event file given, checking against an empty calendar.[/yellow]")
        return []
    return JsonEventSource(path=path, timezone=config.timezone).list_busy_intervals()


def _print_result(result: ConflictResult) -> None:
    if not result.has_conflicts:
        console.print("[bold green]✓ No conflicts found.[/bold green]")
        return

    table = Table(
        title="Conflicting events",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("ID", style="bold yellow")
    table.add_column("Time", style="dim")
    for busy in result.conflicts:
        table.add_row(str(busy.id), str(busy.range))
    console.print(table)

    _print_suggestions(result.suggestions)


def _print_suggestions(suggestions: Sequence[pendulum.DateTime]) -> None:
    if not suggestions:
        console.print(
            "[yellow]⚠ No free slot found within the search horizon.[/yellow]"
        )
        return

    console.print(f"[bold green]{len(suggestions)} suggested start time(s):[/bold green]")
    for moment in suggestions:
        console.print(f"  {moment.format('dddd, DD.MM.YYYY HH:mm')}")


@app.command()
def check(
    start: Annotated[str, typer.Argument(help="Candidate start (ISO-8601)")],
    end: Annotated[str, typer.Argument(help="Candidate end (ISO-8601)")],
    events_file: Annotated[Optional[Path], typer.Option("--events", "-e", help="JSON file with existing events")] = None,
    exclude: Annotated[Optional[str], typer.Option("--exclude", help="Id of the event being edited")] = None,
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print the result as JSON")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
):
    """
    Check a candidate time range for conflicts.

    Examples:

        conflictfinder check 2024-01-01T10:30 2024-01-01T11:30 --events events.json

        conflictfinder check 2024-01-01T10:30 2024-01-01T11:30 -e events.json --exclude 3 --json
    """
    try:
        config = _load(config_file, verbose)
        tz = config.timezone

        candidate = TimeRange.checked(
            _parse_moment(start, tz, "start"),
            _parse_moment(end, tz, "end"),
        )
        existing = _load_events(config, events_file)

        exclude_id = _match_exclude_id(exclude, existing)
        service = ConflictService(policy=config.to_policy())
        result = service.check(CandidateRequest(range=candidate, exclude_id=exclude_id), existing)

        if as_json:
            typer.echo(json.dumps(result.to_dict(), indent=2))
        else:
            _print_result(result)

    except (FileNotFoundError, ValueError, ConflictFinderError) as e:
        err_console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


def _match_exclude_id(exclude: Optional[str], existing: List[BusyInterval]):
    """Command-line ids are strings; match them to ids loaded from JSON."""
    if exclude is None:
        return None
    for busy in existing:
        if str(busy.id) == exclude:
            return busy.id
    return exclude


@app.command()
def suggest(
    start: Annotated[str, typer.Argument(help="Preferred start (ISO-8601)")],
    duration: Annotated[int, typer.Option("--duration", "-d", help="Slot duration in minutes")] = 60,
    events_file: Annotated[Optional[Path], typer.Option("--events", "-e", help="JSON file with existing events")] = None,
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
):
    """
    Suggest free start times from a preferred start.
    """
    try:
        config = _load(config_file, verbose)
        if duration <= 0:
            raise ValueError("Duration must be greater than zero")

        preferred = _parse_moment(start, config.timezone, "start")
        busy = [b.range for b in _load_events(config, events_file)]

        suggestions = SlotSearch(policy=config.to_policy()).suggest_slots(
            preferred_start=preferred,
            duration=timedelta(minutes=duration),
            busy=busy,
        )
        _print_suggestions(suggestions)

    except (FileNotFoundError, ValueError, ConflictFinderError) as e:
        err_console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def show_config(
    config_file: Optional[Path] = typer.Option(
        None,
        "--config", "-c",
        help="Path to config file"
    )
):
    """
    Show the effective suggestion policy.
    """
    try:
        config = load_config(config_file)
    except (FileNotFoundError, ValueError) as e:
        err_console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    policy = config.to_policy()

    table = Table(
        title="Suggestion policy",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Setting", style="bold yellow")
    table.add_column("Value")

    table.add_row("Time zone", policy.timezone)
    table.add_row("Working hours", f"{policy.workday_start_hour}:00 - {policy.workday_end_hour}:00")
    table.add_row("Granularity", f"{policy.slot_granularity_minutes} min")
    table.add_row("Search horizon", f"{policy.search_horizon.days} days")
    table.add_row("Max suggestions", str(policy.max_suggestions))
    table.add_row("Event file", str(config.events_file) if config.events_file else "-")

    console.print()
    console.print(table)
    console.print()


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]conflictfinder[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
