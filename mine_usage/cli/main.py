"""
Mine usage CLI - Main entry point.

Typer-based command-line interface for recording and reviewing water and
land usage at the configured mines.

Usage:
    mine-usage                       # interactive menu
    mine-usage add Rosemont --water 500 --land 2 --date 2024-01-01
    mine-usage view Rosemont
    mine-usage summary

Installation:
    pip install -e .
"""

import logging
from dataclasses import replace
from datetime import date
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table
from rich.panel import Panel

from mine_usage.application.registry import Registry
from mine_usage.config.config import Config, ConfigurationError, StorageConfig
from mine_usage.config.validation import validate_configuration
from mine_usage.domain.errors import ParseError
from mine_usage.domain.types import SiteReport
from mine_usage.utils.logging import setup_logging
from mine_usage.utils.tracing import get_session_id

app = typer.Typer(
    name="mine-usage",
    help="Track mine water and land usage against annual limits.",
    add_completion=False,
    invoke_without_command=True,
)

console = Console()

logger = logging.getLogger(__name__)

MENU_OPTIONS = ("1. Look at records", "2. Type in new data", "3. Exit")


def _open_registry(config: Config) -> Registry:
    """Load the registry or exit with a readable message."""
    try:
        return Registry.from_config(config)
    except ParseError as e:
        console.print(
            f"Usage file {config.storage.data_file} is corrupt: {e}",
            style="red", markup=False, soft_wrap=True,
        )
        raise typer.Exit(1)
    except OSError as e:
        console.print(f"Error loading data: {e}", style="red", markup=False, soft_wrap=True)
        raise typer.Exit(1)


def _print_report(report: SiteReport) -> None:
    for line in report.lines():
        console.print(line, markup=False, highlight=False, soft_wrap=True)


def _record(registry: Registry, site: str, water: float, land: float, when: str) -> bool:
    result = registry.record_usage(site, water, land, when)
    if result.is_ok:
        console.print("[green]Usage updated successfully.[/green]")
        return True
    console.print(result.error.message, style="red", markup=False, highlight=False, soft_wrap=True)
    return False


def run_menu(registry: Registry) -> None:
    """Interactive loop: look at records, type in new data, or exit."""
    while True:
        console.print("\n[bold]Menu:[/bold]")
        for option in MENU_OPTIONS:
            console.print(option)
        choice = typer.prompt("Choose an option (1/2/3)").strip()

        if choice == "1":
            site = typer.prompt("Enter mine name").strip()
            result = registry.get_records(site)
            if result.is_ok:
                _print_report(result.value)
            else:
                console.print(result.error.message, style="yellow", markup=False)

        elif choice == "2":
            site = typer.prompt("Enter mine name").strip()
            when = typer.prompt("Enter date (YYYY-MM-DD)").strip()
            land = typer.prompt("Enter land usage (in acres)", type=float)
            water = typer.prompt("Enter water usage (in acre-feet)", type=float)
            _record(registry, site, water, land, when)

        elif choice == "3":
            console.print("Exiting the program.")
            return

        else:
            console.print("[yellow]Invalid choice. Please choose 1, 2, or 3.[/yellow]")


@app.callback()
def main_callback(
    ctx: typer.Context,
    data_file: Optional[Path] = typer.Option(
        None,
        "--data-file", "-f",
        help="Usage file to read and write (overrides MINE_USAGE_FILE).",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Enable debug logging.",
    ),
):
    """
    Track mine water and land usage against annual limits.

    Without a command, starts the interactive menu.
    """
    config = Config.from_env()
    if data_file is not None:
        config = replace(config, storage=StorageConfig(data_file=data_file))

    try:
        validate_configuration(config)
    except ConfigurationError as e:
        console.print(str(e), style="red", markup=False)
        raise typer.Exit(1)

    setup_logging(
        level="DEBUG" if verbose else config.logging.level,
        log_file=config.logging.log_file,
        console_output=config.logging.console_output,
        log_format=config.logging.format,
    )
    logger.debug(f"Session {get_session_id()} using {config.storage.data_file}")

    ctx.obj = config
    if ctx.invoked_subcommand is None:
        run_menu(_open_registry(config))


@app.command()
def menu(ctx: typer.Context):
    """Start the interactive menu."""
    run_menu(_open_registry(ctx.obj))


@app.command()
def add(
    ctx: typer.Context,
    site: str = typer.Argument(..., help="Mine name, e.g. Rosemont."),
    water: float = typer.Option(..., "--water", "-w", help="Water used (acre-feet)."),
    land: float = typer.Option(..., "--land", "-l", help="Land used (acres)."),
    when: Optional[str] = typer.Option(
        None,
        "--date", "-d",
        help="Date of the usage (YYYY-MM-DD). Defaults to today.",
    ),
):
    """Record one usage entry against a mine's water allowance."""
    registry = _open_registry(ctx.obj)
    if not _record(registry, site, water, land, when or date.today().isoformat()):
        raise typer.Exit(1)

    remaining = registry.water_remaining(site).unwrap()
    console.print(f"Water remaining for {site}: {remaining:.2f} acre-feet", markup=False)


@app.command()
def view(
    ctx: typer.Context,
    site: str = typer.Argument(..., help="Mine name, e.g. Rosemont."),
):
    """Show every record for a mine with its totals."""
    registry = _open_registry(ctx.obj)
    result = registry.get_records(site)
    if result.is_err:
        console.print(result.error.message, style="yellow", markup=False)
        raise typer.Exit(1)

    report = result.value
    console.print(Panel(f"{report.site} - limit {report.water_limit:.2f} acre-feet", title="Usage Records"))
    if not report.records:
        console.print("[dim]No usage recorded yet.[/dim]")
    _print_report(report)


@app.command()
def summary(ctx: typer.Context):
    """Show water and land totals for every mine."""
    registry = _open_registry(ctx.obj)

    table = Table(title="Mine Usage Summary")
    table.add_column("Mine", style="cyan")
    table.add_column("Limit (ac-ft)", justify="right")
    table.add_column("Used (ac-ft)", justify="right")
    table.add_column("Remaining (ac-ft)", justify="right")
    table.add_column("Used %", justify="right")
    table.add_column("Land (acres)", justify="right")
    table.add_column("Records", justify="right")

    for row in registry.summary():
        pct = row.percent_used
        color = "red" if pct >= 90 else "yellow" if pct >= 75 else "green"
        table.add_row(
            row.site,
            f"{row.water_limit:.2f}",
            f"{row.water_used:.2f}",
            f"{row.water_remaining:.2f}",
            f"[{color}]{pct:.1f}%[/{color}]",
            f"{row.land_used:.2f}",
            str(row.record_count),
        )

    console.print(table)


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
