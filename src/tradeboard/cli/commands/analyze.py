"""Analyze command: performance file in, metrics report out."""

import sys
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Literal, Optional, cast

import click
from rich.console import Console

from tradeboard.libraries.performance.extraction import PerformanceDataError
from tradeboard.services.dashboard import DashboardService
from tradeboard.services.data import load_dataset
from tradeboard.services.reporting import display_performance_report, write_json_report
from tradeboard.system import LoggerFactory
from tradeboard.system.config import reload_system_config

console = Console()


@click.command("analyze")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--initial-capital",
    "-c",
    type=str,
    help="Starting capital (overrides the file's value, required for CSV)",
)
@click.option(
    "--start-date",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    help="Only show data from this date (YYYY-MM-DD)",
)
@click.option(
    "--end-date",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    help="Only show data up to this date (YYYY-MM-DD)",
)
@click.option(
    "--detail-level",
    "-d",
    type=click.Choice(["summary", "standard", "full"], case_sensitive=False),
    default="standard",
    show_default=True,
    help="How much of the report to display",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the metrics as JSON to this file",
)
@click.option(
    "--save",
    "-s",
    is_flag=True,
    help="Write the JSON report under output.default_results_dir/<file name>/",
)
@click.option(
    "--log-level",
    "-l",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Set logging level (DEBUG shows extraction details)",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="System config file (defaults to $TRADEBOARD_CONFIG or config/tradeboard.yaml)",
)
def analyze_command(
    file: Path,
    initial_capital: Optional[str],
    start_date: Optional[datetime],
    end_date: Optional[datetime],
    detail_level: str,
    output: Optional[Path],
    save: bool,
    log_level: Optional[str],
    config_path: Optional[Path],
):
    """
    Analyze a performance file.

    Extracts the first strategy's trades, pairs them into round trips and
    reports returns, risk and trade statistics.

    \b
    Examples:
        # Standard report
        tradeboard analyze results/btc.json

        # CSV trades need a starting capital
        tradeboard analyze trades.csv --initial-capital 10000

        # First quarter only, everything shown, saved as JSON
        tradeboard analyze results/btc.json \\
            --start-date 2022-01-01 --end-date 2022-03-31 -d full -o q1.json

        # Save to output/reports/btc/metrics.json
        tradeboard analyze results/btc.json --save
    """
    try:
        system_config = reload_system_config(config_path)

        if log_level:
            system_config.logging.level = cast(Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], log_level.upper())
        LoggerFactory.configure(system_config.logging.to_logger_config())

        capital = Decimal(initial_capital) if initial_capital is not None else None

        console.rule("[bold blue]tradeboard[/bold blue]")
        console.print(f"[cyan]Loading[/cyan] {file}")
        dataset = load_dataset(file, initial_capital=capital)

        service = DashboardService(system_config.analysis)
        metrics = service.load(dataset)

        if metrics.round_trip_count == 0:
            console.print("[yellow]⚠ No trades found in performance data[/yellow]")
            sys.exit(0)

        if start_date or end_date:
            metrics = service.view(
                start_date.date() if start_date else None,
                end_date.date() if end_date else None,
            )

        display_performance_report(
            metrics,
            detail_level=cast(Literal["summary", "standard", "full"], detail_level.lower()),
            console=console,
            max_drawdowns=system_config.analysis.max_drawdowns,
        )

        if output is None and save:
            output = Path(system_config.output.default_results_dir) / file.stem / system_config.output.report_filename
        if output is not None:
            written = write_json_report(metrics, output)
            console.print(f"[cyan]Report:[/cyan] {written}")

        sys.exit(0)

    except (PerformanceDataError, ValueError, ArithmeticError) as e:
        console.print(f"[bold red]✗ Analysis failed:[/bold red] {e}")
        sys.exit(1)
