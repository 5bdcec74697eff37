"""Main CLI interface."""

import asyncio
from pathlib import Path
from typing import Optional
import typer
import structlog
from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from ..core import SignupReportService, SignupReportError
from ..generators.bar_chart import hour_label
from ..models.config import ReportConfig
from ..models.report import ReportResult
from ..models.signup import CATEGORIES

console = Console()
app = typer.Typer(help="Signups per local hour of the day, by highest-scoring category")

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
    cache_logger_on_first_use=True,
)


@app.command()
def report(
    source: Optional[str] = typer.Option(
        None,
        "--source",
        "-s",
        help="Dataset URL or local CSV path"
    ),
    output_dir: Optional[Path] = typer.Option(
        None,
        "--output-dir",
        help="Output directory for the chart"
    ),
    filename: Optional[str] = typer.Option(
        None,
        "--filename",
        "-o",
        help="Chart file name (.png or .pdf)"
    ),
    workers: Optional[int] = typer.Option(
        None,
        "--workers",
        "-w",
        min=1,
        help="Worker threads for per-record processing"
    ),
    max_parse_error_ratio: Optional[float] = typer.Option(
        None,
        "--max-parse-error-ratio",
        min=0.0,
        max=1.0,
        help="Fail when more than this share of timestamps is malformed"
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Logging level (default INFO or SIGNUP_LOG_LEVEL)"
    )
):
    """Render the signups-by-hour chart."""
    config = _load_config(source, output_dir, filename, workers, max_parse_error_ratio, log_level)
    _setup_logging(config.log_level, config.log_file)

    console.print("[green]Generating signup chart...[/green]")
    console.print(f"Source: {config.source.location}")
    console.print(f"Output: {config.output.output_path}")

    result = _run(_generate_report(config))

    _print_summary(result)
    if not result.success:
        console.print(f"[red]✗ Rendering failed: {escape(result.error_message or '')}[/red]")
        raise typer.Exit(1)

    console.print("[green]✓ Generated successfully![/green]")
    console.print(f"Output: {result.output_path}")
    console.print(f"Processing time: {result.processing_time_seconds:.2f}s")


@app.command()
def summary(
    source: Optional[str] = typer.Option(
        None,
        "--source",
        "-s",
        help="Dataset URL or local CSV path"
    ),
    workers: Optional[int] = typer.Option(None, "--workers", "-w", min=1, help="Worker threads"),
    max_parse_error_ratio: Optional[float] = typer.Option(
        None,
        "--max-parse-error-ratio",
        min=0.0,
        max=1.0,
        help="Fail when more than this share of timestamps is malformed"
    ),
    hours: bool = typer.Option(
        True,
        "--hours/--no-hours",
        help="Show the per-hour table"
    )
):
    """Show hourly counts, peak hours and drop counts without rendering."""
    config = _load_config(source, workers=workers, max_parse_error_ratio=max_parse_error_ratio)
    _setup_logging("WARNING", None)  # Quiet logging for summary display

    result = _run(_summarize(config))

    if hours:
        _print_hour_table(result)
    _print_summary(result)


def _run(coro) -> ReportResult:
    """Run a report coroutine, turning dataset-level failures into exit code 1."""
    try:
        return asyncio.run(coro)
    except SignupReportError as e:
        console.print(f"[red]✗ {type(e).__name__}: {escape(str(e))}[/red]")
        raise typer.Exit(1)


async def _generate_report(config: ReportConfig) -> ReportResult:
    """Load, aggregate and render."""
    with Progress(SpinnerColumn(), TextColumn("{task.description}"), console=console) as progress:
        task = progress.add_task("Building signup chart...", total=1)
        service = SignupReportService(config)
        result = await service.generate_report()
        progress.update(task, completed=1)
    return result


async def _summarize(config: ReportConfig) -> ReportResult:
    """Load and aggregate."""
    with Progress(SpinnerColumn(), TextColumn("{task.description}"), console=console) as progress:
        task = progress.add_task("Counting signups...", total=1)
        service = SignupReportService(config)
        result = await service.summarize()
        progress.update(task, completed=1)
    return result


def _print_hour_table(result: ReportResult) -> None:
    table = Table(title="Signups per local hour")
    table.add_column("Hour", style="cyan")
    for category in CATEGORIES:
        table.add_column(category.value, style="green", justify="right")

    for hour, *counts in result.table.rows():
        table.add_row(hour_label(hour), *(str(c) for c in counts))

    console.print(table)


def _print_summary(result: ReportResult) -> None:
    table = Table(title="Signup Report")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")

    drops = result.drops
    table.add_row("Input records", str(drops.input_records))
    table.add_row("Unresolved timezone", str(drops.unresolved_timezone))
    table.add_row("Invalid timestamp", str(drops.invalid_parse))
    table.add_row("Ambiguous local time", str(drops.ambiguous_local_time))
    table.add_row("Invalid score", str(drops.invalid_score))
    table.add_row("Tied category", str(drops.tied_category))
    table.add_row("Counted signups", str(result.table.total()))
    for category, hour in result.peaks.items():
        table.add_row(
            f"Peak hour ({category.value})",
            f"{hour_label(hour)} ({result.table.count(hour, category)} signups)"
        )

    console.print(table)

    if drops.total_dropped > 0:
        console.print(f"[yellow]{drops.total_dropped} records did not count toward any category[/yellow]")


def _load_config(
    source: Optional[str] = None,
    output_dir: Optional[Path] = None,
    filename: Optional[str] = None,
    workers: Optional[int] = None,
    max_parse_error_ratio: Optional[float] = None,
    log_level: Optional[str] = None
) -> ReportConfig:
    """Load report configuration."""
    # Start with default config
    config = ReportConfig.create_default()

    # Override with CLI options
    if source:
        config.source.location = source
    if output_dir:
        config.output.base_dir = output_dir
    if filename:
        config.output.filename = filename
    if workers:
        config.processing.max_workers = workers
    if max_parse_error_ratio is not None:
        config.normalizer.max_parse_error_ratio = max_parse_error_ratio
    if log_level:
        config.log_level = log_level

    return config


def _setup_logging(log_level: str, log_file: Optional[Path]) -> None:
    """Setup logging configuration."""
    import logging

    # Set log level
    level = getattr(logging, log_level.upper(), logging.INFO)
    if log_file:
        logging.basicConfig(level=level, filename=str(log_file))
    else:
        logging.basicConfig(level=level)


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
