"""
CLI interface for Claude Contribs.

Provides the show (contribution map) and stats commands.
"""

import json
import logging
import sys
from enum import Enum
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from claude_contribs.config.loader import AppConfig, load_config, resolve_timezone
from claude_contribs.core.aggregation import aggregate_by_day
from claude_contribs.core.grid import MAX_YEAR, MIN_YEAR, build_contribution_grid, date_range_label, usage_window
from claude_contribs.core.statistics import UsageStatistics, compute_usage_statistics
from claude_contribs.render.svg import svg_filename, write_svg
from claude_contribs.render.terminal import render_terminal
from claude_contribs.storage.repository import LoadResult, get_repository
from claude_contribs.utils.dates import default_year, format_date, parse_date, parse_month
from claude_contribs.utils.formatting import format_currency, format_token_count

app = typer.Typer(help="Generate GitHub-style contribution maps for Claude usage")
console = Console()

logger = logging.getLogger(__name__)

EXIT_CODE_PASS = 0
EXIT_CODE_FAIL = 1

NO_DATA_MESSAGE = (
    "No Claude usage data found. Make sure Claude Code is generating logs "
    "in the expected directory."
)


class OutputFormat(str, Enum):
    TERMINAL = "terminal"
    SVG = "svg"


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True
    )


def _parse_month_option(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        return parse_month(value)
    except ValueError as e:
        raise typer.BadParameter(str(e))


def _parse_date_option(value: Optional[str]) -> Optional[str]:
    """Normalize a --from/--to value to YYYY-MM-DD."""
    if value is None:
        return None
    try:
        return format_date(parse_date(value))
    except ValueError:
        raise typer.BadParameter(f"Invalid date: {value}. Use YYYY-MM-DD.")


def _check_timezone_option(value: Optional[str]) -> None:
    if value is None:
        return
    try:
        resolve_timezone(value)
    except ValueError as e:
        raise typer.BadParameter(str(e))


def _load_settings(config_path: Optional[Path], data_dir: Optional[Path], timezone_name: Optional[str]) -> AppConfig:
    """Config file values with CLI overrides applied."""
    config = load_config(config_path)
    if data_dir is None and timezone_name is None:
        return config
    return AppConfig(
        data_dir=str(data_dir) if data_dir is not None else config.data_dir,
        timezone=timezone_name if timezone_name is not None else config.timezone,
        output_dir=config.output_dir,
        max_workers=config.max_workers
    )


def _load_entries(config: AppConfig) -> LoadResult:
    repository = get_repository(config.resolved_data_dir, max_workers=config.max_workers)
    return repository.load_entries()


def _print_no_data(config: AppConfig) -> None:
    console.print(NO_DATA_MESSAGE)
    console.print(f"Looking for JSONL files in: {escape(str(config.resolved_data_dir))}")


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging"
    )
):
    """Claude Contribs CLI."""
    _configure_logging(verbose)
    if ctx.invoked_subcommand is None:
        _run_show()


@app.command()
def show(
    year: Optional[int] = typer.Option(
        None,
        "--year",
        "-y",
        min=MIN_YEAR,
        max=MAX_YEAR,
        help="Year to display (default: current year)"
    ),
    start_month: Optional[str] = typer.Option(
        None,
        "--start-month",
        "-s",
        help="First month of the 12-month window (1-12 or a month name)"
    ),
    output_format: OutputFormat = typer.Option(
        OutputFormat.TERMINAL,
        "--format",
        "-f",
        help="Output format"
    ),
    data_dir: Optional[Path] = typer.Option(
        None,
        "--data-dir",
        "-d",
        help="Claude data directory (default: ~/.claude/projects)"
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="SVG file to write (default: named by year in the output directory)"
    ),
    timezone_name: Optional[str] = typer.Option(
        None,
        "--timezone",
        help="Timezone for calendar dates: utc, local or an IANA name"
    ),
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        help="Path to a YAML config file"
    )
):
    """Display the contribution map."""
    _check_timezone_option(timezone_name)
    _run_show(
        year=year,
        start_month=_parse_month_option(start_month),
        output_format=output_format,
        data_dir=data_dir,
        output=output,
        timezone_name=timezone_name,
        config_path=config_path
    )


def _run_show(
    year: Optional[int] = None,
    start_month: Optional[int] = None,
    output_format: OutputFormat = OutputFormat.TERMINAL,
    data_dir: Optional[Path] = None,
    output: Optional[Path] = None,
    timezone_name: Optional[str] = None,
    config_path: Optional[Path] = None
) -> None:
    year = year or default_year()
    start_month = start_month or 1

    try:
        config = _load_settings(config_path, data_dir, timezone_name)
        result = _load_entries(config)

        if result.is_empty:
            _print_no_data(config)
            sys.exit(EXIT_CODE_PASS)

        range_start, range_end = usage_window(year, start_month)
        daily_usage = aggregate_by_day(
            result.entries,
            date_from=format_date(range_start),
            date_to=format_date(range_end),
            tz=config.tz
        )

        if not daily_usage:
            console.print(f"No Claude usage data found for {date_range_label(year, start_month)}.")
            sys.exit(EXIT_CODE_PASS)

        grid = build_contribution_grid(daily_usage, year, start_month)

        if output_format == OutputFormat.SVG:
            target = output or config.resolved_output_dir / svg_filename(year, start_month)
            written = write_svg(grid, target)
            console.print(f"[green]✓[/] SVG file saved: {escape(str(written))}")
        else:
            console.print(render_terminal(grid), soft_wrap=True)

        sys.exit(EXIT_CODE_PASS)

    except Exception as e:
        logger.debug("show failed", exc_info=True)
        console.print(f"[red]Error generating contribution map:[/] {escape(str(e))}")
        sys.exit(EXIT_CODE_FAIL)


@app.command()
def stats(
    date_from: Optional[str] = typer.Option(
        None,
        "--from",
        help="Start date (YYYY-MM-DD), inclusive"
    ),
    date_to: Optional[str] = typer.Option(
        None,
        "--to",
        help="End date (YYYY-MM-DD), inclusive"
    ),
    data_dir: Optional[Path] = typer.Option(
        None,
        "--data-dir",
        "-d",
        help="Claude data directory (default: ~/.claude/projects)"
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print statistics as JSON"
    ),
    exclude_cache: bool = typer.Option(
        False,
        "--exclude-cache",
        help="Leave cache creation/read tokens out of the totals"
    ),
    timezone_name: Optional[str] = typer.Option(
        None,
        "--timezone",
        help="Timezone for calendar dates: utc, local or an IANA name"
    ),
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        help="Path to a YAML config file"
    )
):
    """Show usage statistics."""
    date_from = _parse_date_option(date_from)
    date_to = _parse_date_option(date_to)
    if date_from and date_to and date_from > date_to:
        raise typer.BadParameter("--from must not be after --to")
    _check_timezone_option(timezone_name)

    try:
        config = _load_settings(config_path, data_dir, timezone_name)
        result = _load_entries(config)

        if result.is_empty:
            _print_no_data(config)
            sys.exit(EXIT_CODE_PASS)

        statistics = compute_usage_statistics(
            result.entries,
            date_from=date_from,
            date_to=date_to,
            tz=config.tz,
            include_cache=not exclude_cache
        )

        if statistics.total_entries == 0:
            console.print("No entries found for the specified date range.")
            sys.exit(EXIT_CODE_PASS)

        if as_json:
            typer.echo(json.dumps(statistics.to_dict(), indent=2))
        else:
            _display_statistics(statistics)

        sys.exit(EXIT_CODE_PASS)

    except Exception as e:
        logger.debug("stats failed", exc_info=True)
        console.print(f"[red]Error generating statistics:[/] {escape(str(e))}")
        sys.exit(EXIT_CODE_FAIL)


def _format_count(tokens: int) -> str:
    return f"{format_token_count(tokens)} ({tokens:,})"


def _display_statistics(stats: UsageStatistics) -> None:
    """Display usage statistics in sections."""
    console.print("\n[bold]Claude Usage Statistics[/bold]")
    console.print("[grey50]" + "─" * 50 + "[/]")

    if stats.first_date and stats.last_date:
        if stats.first_date == stats.last_date:
            console.print(f"[cyan]Date:[/] {stats.first_date}")
        else:
            console.print(f"[cyan]Date Range:[/] {stats.first_date} to {stats.last_date}")

    console.print(f"[cyan]Total Conversations:[/] {stats.total_entries:,}")
    console.print(f"[cyan]Active Days:[/] {stats.active_days}")

    console.print("\n[bold]Token Usage[/bold]")
    console.print(f"[cyan]Input Tokens:[/] {_format_count(stats.input_tokens)}")
    console.print(f"[cyan]Output Tokens:[/] {_format_count(stats.output_tokens)}")
    if stats.include_cache:
        console.print(f"[cyan]Cache Creation Tokens:[/] {_format_count(stats.cache_creation_tokens)}")
        console.print(f"[cyan]Cache Read Tokens:[/] {_format_count(stats.cache_read_tokens)}")
    console.print(f"[cyan]Total Tokens:[/] [green]{_format_count(stats.total_tokens)}[/]")

    console.print("\n[bold]Daily Averages[/bold]")
    console.print(f"[cyan]Average Daily Tokens:[/] {format_token_count(round(stats.avg_daily_tokens))}")
    peak_date = f" ({stats.max_daily_date})" if stats.max_daily_date else ""
    console.print(f"[cyan]Peak Daily Usage:[/] {format_token_count(stats.max_daily_tokens)}{peak_date}")

    if stats.total_cost > 0:
        console.print("\n[bold]Cost Information[/bold]")
        console.print(f"[cyan]Total Cost:[/] {format_currency(stats.total_cost)}")
        console.print(f"[cyan]Average Cost per Day:[/] {format_currency(stats.avg_daily_cost)}")

    if stats.models:
        table = Table(title="Model Usage", title_justify="left")
        table.add_column("Model", style="cyan")
        table.add_column("Tokens", justify="right")
        table.add_column("Share", justify="right")
        table.add_column("Conversations", justify="right")
        for model in stats.models:
            table.add_row(
                escape(model.model),
                format_token_count(model.tokens),
                f"{model.percentage:.1f}%",
                f"{model.entries:,}"
            )
        console.print()
        console.print(table)

    print()  # Add spacing after the report


if __name__ == "__main__":
    app()
