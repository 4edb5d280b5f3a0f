"""Command-line interface for logfilelens."""

import json
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from .config import DEFAULT_SETTINGS_FILE, ConfigurationError, LensConfig, load_config
from .filtering import PatternCompileError
from .lens import LensScanner, ScanReport

app = typer.Typer(
    name="logfilelens",
    help="Highlight matching log lines with surrounding context",
    context_settings={"help_option_names": ["-h", "--help"]},
    add_completion=False,
)

console = Console(stderr=True)  # Diagnostics to stderr, stdout carries the report

PAUSE_MESSAGE = "Press Any Key to Continue"


def warn(message: str) -> None:
    """Print a non-fatal diagnostic."""
    console.print(f"[yellow]Warning:[/yellow] {escape(message)}")


def fail(message: str, code: int = 1) -> typer.Exit:
    """Print a fatal diagnostic and return the Exit to raise."""
    console.print(f"[red]Error:[/red] {escape(message)}")
    return typer.Exit(code=code)


def validate_arguments(stats_format: str) -> None:
    """Validate argument values.

    Raises:
        typer.BadParameter: If validation fails with clear message
    """
    valid_formats = {"text", "json"}
    if stats_format not in valid_formats:
        raise typer.BadParameter(
            f"--stats-format must be one of {sorted(valid_formats)}, got '{stats_format}'"
        )


@app.command()
def main(
    paths: Optional[list[Path]] = typer.Argument(
        None,
        help="Log file to scan",
        show_default=False,
    ),
    # Settings
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help=f"Settings file with LensSize and FilterRegexes (default: ./{DEFAULT_SETTINGS_FILE})",
        dir_okay=False,
        rich_help_panel="Settings",
    ),
    lens_size: Optional[int] = typer.Option(
        None,
        "--lens-size",
        "-w",
        help="Context lines shown before and after each match (overrides LensSize)",
        min=0,
        rich_help_panel="Settings",
    ),
    filters: Optional[list[str]] = typer.Option(
        None,
        "--filter",
        "-f",
        help="Regex to highlight (can specify multiple times, replaces FilterRegexes). "
        "First matching pattern wins.",
        rich_help_panel="Settings",
    ),
    # StdOut Control
    flush_on_close: bool = typer.Option(
        False,
        "--flush-on-close",
        help="Also print context lines still buffered when the file ends",
        rich_help_panel="StdOut Control",
    ),
    stats_format: str = typer.Option(
        "text",
        "--stats-format",
        help="Match count summary format: 'text' (default) or 'json' (machine-readable)",
        rich_help_panel="StdOut Control",
    ),
    color: Optional[bool] = typer.Option(
        None,
        "--color/--no-color",
        help="Force or disable highlighting (default: only when writing to a terminal)",
        show_default=False,
        rich_help_panel="StdOut Control",
    ),
    # StdErr Control
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress informational messages on stderr",
        rich_help_panel="StdErr Control",
    ),
    # Interaction
    pause: bool = typer.Option(
        False,
        "--pause",
        help="Wait for a key press before exiting (interactive terminals only)",
        rich_help_panel="Interaction",
    ),
) -> None:
    """
    Scan a log file and print every line matching a filter pattern,
    with a window of context lines before and after it.

    Examples:

        \b
        # Use LensSize and FilterRegexes from ./logfilelens.env
        logfilelens app.log

        \b
        # Explicit settings file
        logfilelens app.log --config lens.env

        \b
        # Override the settings on the command line
        logfilelens app.log --lens-size 3 --filter 'ERROR' --filter 'WARN(ING)?'
    """
    validate_arguments(stats_format)

    paths = paths or []
    if len(paths) != 1:
        console.print("[yellow]Required argument missing: path[/yellow]")
    if not paths:
        raise typer.Exit(code=2)
    path = paths[0]

    try:
        config = load_config(warn, config_file, lens_size=lens_size, filter_regexes=filters)
        scanner = LensScanner(config, color=color, flush_on_close=flush_on_close)
    except (ConfigurationError, PatternCompileError, OSError) as e:
        raise fail(str(e)) from e

    if not quiet:
        console.print(f"[cyan]Scanning:[/cyan] {escape(str(path))}", style="dim")

    try:
        report = scanner.scan(path)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        console.print("[dim]Partial statistics:[/dim]")
        print_summary(scanner, scanner.report(), stats_format)
        raise typer.Exit(1) from None
    except Exception as e:
        raise fail(str(e)) from e

    print_summary(scanner, report, stats_format)

    if pause:
        pause_for_key()


def pause_for_key() -> None:
    """Wait for a single key press. Does nothing unless stdin is a terminal."""
    if not sys.stdin.isatty():
        return
    typer.echo()
    typer.echo()
    typer.pause(info=PAUSE_MESSAGE)


def print_summary(scanner: LensScanner, report: ScanReport, stats_format: str) -> None:
    """Print the per-pattern match counts in the requested format."""
    if stats_format == "json":
        print_stats_json(report, scanner.config)
    else:
        scanner.renderer.render_summary(report)


def print_stats_json(report: ScanReport, config: LensConfig) -> None:
    """Print the scan report as JSON to stdout."""
    output = {
        "statistics": {
            "lines": {
                "checked": report.lines_checked,
                "matched": report.lines_matched,
                "dropped": report.lines_dropped,
            },
            "tally": report.tally,
        },
        "configuration": {
            "lens_size": config.lens_size,
            "filter_regexes": list(config.filter_regexes),
        },
    }

    typer.echo(json.dumps(output, indent=2))


if __name__ == "__main__":
    app()
