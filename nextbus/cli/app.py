"""
Main CLI application using Typer.
"""

import logging
from pathlib import Path
from typing import Optional, Annotated

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..adapters.signed_url import SignedUrlClient
from ..config import AppConfig
from ..domain.exceptions import NextBusError
from ..domain.models import DayType
from ..domain.phrases import date_to_phrase, time_to_phrase
from ..services.next_bus import NextBusService, create_service

app = typer.Typer(
    name="nextbus",
    help="Answer 'when is the next bus?' from the weekly timetable",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml if present"),
]


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging.")] = False,
):
    """
    nextbus command line interface.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load_service(config_file: Optional[Path]) -> tuple[AppConfig, NextBusService]:
    config = AppConfig.load(config_file)
    return config, create_service(config)


def _print_answer(service: NextBusService, reference) -> None:
    candidates = service.next_departures(reference)
    console.print(
        f"[dim]{date_to_phrase(reference)} {time_to_phrase(reference, service.on_the_hour)}"
        f" ({DayType.for_date(reference).value})[/dim]"
    )
    console.print(f"[bold green]{service.format_answer(candidates)}[/bold green]")


@app.command("next")
def next_bus(
    config_file: ConfigOption = None,
    at: Annotated[Optional[str], typer.Option("--at", help="Reference time (YYYY-MM-DD HH:mm) instead of now")] = None,
):
    """
    Show the next two departures from now (or from --at).

    Examples:

        nextbus next

        nextbus next --at "2024-11-25 08:10"
    """
    try:
        _, service = _load_service(config_file)

        if at:
            try:
                reference = pendulum.from_format(at, "YYYY-MM-DD HH:mm", tz=service.timezone)
            except ValueError as e:
                console.print(f"[red]Could not parse --at: {e}[/red]")
                raise typer.Exit(1)
        else:
            reference = service.now()

        _print_answer(service, reference)

    except (FileNotFoundError, ValueError, NextBusError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def ask(
    time: Annotated[str, typer.Argument(help="Spoken time slot value (HH:MM)")],
    day: Annotated[Optional[str], typer.Option("--day", "-d", help="Day-of-week phrase, e.g. 月曜")] = None,
    date: Annotated[Optional[str], typer.Option("--date", help="Date (YYYY-MM-DD)")] = None,
    config_file: ConfigOption = None,
):
    """
    Answer the way the voice skill does for a time, day phrase and date.

    Examples:

        nextbus ask 08:10

        nextbus ask 08:10 --day 月曜
    """
    try:
        _, service = _load_service(config_file)

        reference = service.resolve_reference(time, date_slot=date, day_of_week_slot=day)
        if reference is None:
            console.print(
                "[yellow]⚠ Time or day not recognized.[/yellow] "
                "Use HH:MM and a single day such as 月曜."
            )
            raise typer.Exit(2)

        _print_answer(service, reference)

    except (FileNotFoundError, ValueError, NextBusError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def timetable(
    day_type: Annotated[DayType, typer.Argument(help="Which timetable to show")] = DayType.WEEKDAY,
    config_file: ConfigOption = None,
):
    """
    Show a timetable as loaded from its CSV file.
    """
    try:
        _, service = _load_service(config_file)
        loaded = service.load_timetable(day_type)

        if loaded.is_empty():
            console.print(f"[yellow]No departures in the {day_type.value} timetable.[/yellow]")
            return

        table = Table(
            title=f"Timetable ({day_type.value})",
            show_header=True,
            header_style="bold cyan"
        )
        table.add_column("Hour", style="bold yellow", justify="right")
        table.add_column("Minutes")

        for hour in loaded.hours:
            table.add_row(f"{hour:02d}", " ".join(f"{m:02d}" for m in loaded.minutes_at(hour)))

        console.print()
        console.print(table)
        console.print(f"[dim]{len(loaded)} departures[/dim]\n")

    except (FileNotFoundError, ValueError, NextBusError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def sign_url(
    key: Annotated[str, typer.Argument(help="Object key within the configured bucket")],
    config_file: ConfigOption = None,
):
    """
    Print a short-lived pre-signed URL for a stored asset.
    """
    try:
        config = AppConfig.load(config_file)
        client = SignedUrlClient(
            bucket=config.storage.bucket or "",
            region=config.storage.region,
            expires_seconds=config.storage.expires_seconds,
        )
        console.print(client.get_signed_url(key), soft_wrap=True)

    except (FileNotFoundError, ValueError, NextBusError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]nextbus[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
