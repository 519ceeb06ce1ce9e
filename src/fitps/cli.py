"""Command-line interface for fitps.

This module provides:
- Typer-based CLI application
- Terminal width detection
- Config file loading and logging setup
- Dispatch to query, layout and rendering

Usage:
    fitps                    # All processes, fitted to the terminal
    fitps -d                 # Compact args column
    fitps -l                 # Args column takes nearly the whole line
    fitps sshd nginx         # Highlight processes matching either query
    fitps -- -bash           # Queries may start with '-' after '--'
"""

import logging
from pathlib import Path
import shutil
from typing import Annotated

import click
from rich.console import Console
from rich.markup import escape
import typer
from typer.core import TyperCommand

from fitps import __version__
from fitps.config import Config, ConfigError, LoggingConfig, load_config
from fitps.layout import DEFAULT_WIDTH, LayoutMode, plan, reserve_for_mode
from fitps.ps import PsError, make_runner
from fitps.query import collect_pids
from fitps.render import render, summary

logger = logging.getLogger(__name__)

console = Console()
err_console = Console(stderr=True)


MODE_FLAGS = {"-d": LayoutMode.DETAIL, "-l": LayoutMode.LONG}
VALUE_OPTIONS = ("-c", "--config")


def check_options(args: list[str]) -> list[str]:
    """Return the -d/-l flags in ``args`` in order, rejecting bad short options.

    Only arguments before ``--`` are checked. A lone ``-`` and grouped short
    flags such as ``-dl`` are unrecognized options, not queries.

    Raises:
        click.NoSuchOption: For the first offending argument
    """
    flags: list[str] = []
    tokens = iter(args)
    for token in tokens:
        if token == "--":
            break
        if token in VALUE_OPTIONS:
            next(tokens, None)
        elif token in MODE_FLAGS:
            flags.append(token)
        elif token == "-" or (token.startswith("-") and not token.startswith("--") and len(token) > 2):
            raise click.NoSuchOption(token)
    return flags


class FitpsCommand(TyperCommand):
    """Command that reports unknown options in one line and exits with 1."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        try:
            ctx.meta["mode_flags"] = check_options(args)
            return super().parse_args(ctx, args)
        except click.NoSuchOption as e:
            err_console.print(f"Unrecognized option: {escape(e.option_name)}", highlight=False)
            raise typer.Exit(1) from e


app = typer.Typer(
    name="fitps",
    help="List processes with ps, fitted to the terminal width",
    add_completion=False,
    rich_markup_mode="rich",
)


def version_callback(value: bool) -> None:
    """Display version and exit."""
    if value:
        console.print(f"fitps version {__version__}")
        raise typer.Exit()


def terminal_width(default: int = DEFAULT_WIDTH) -> int:
    """Return the terminal's column count, or ``default`` if it is unknown."""
    columns = shutil.get_terminal_size(fallback=(default, 24)).columns
    return columns if columns > 0 else default


def select_mode(flags: list[str]) -> LayoutMode:
    """Pick the layout mode from -d/-l flags in command-line order; the last one wins."""
    mode = LayoutMode.NORMAL
    for flag in flags:
        mode = MODE_FLAGS.get(flag, mode)
    return mode


def setup_logging(config: LoggingConfig) -> None:
    """Send fitps log records to the configured file, if logging is enabled."""
    if not config.enabled:
        return

    path = Path(config.file).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    package_logger = logging.getLogger("fitps")
    package_logger.setLevel(config.level)
    package_logger.addHandler(handler)


def run_fitps(
    config: Config,
    mode: LayoutMode,
    queries: list[str],
    width: int | None = None,
) -> int:
    """Print the fitted process table and, for queries, the match summary.

    Args:
        config: Validated configuration object
        mode: Layout mode chosen on the command line
        queries: Substrings to highlight; empty for no highlighting
        width: Line width; detected from the terminal when None

    Returns:
        Exit code (0 for success, 1 if ps failed)
    """
    if width is None:
        width = terminal_width(config.default_width)
    reserve = reserve_for_mode(mode, width, config.detail_reserve, config.default_width)
    layout = plan(width, reserve)
    logger.info("Width %d, %s mode, reserve %d, columns %s", width, mode.value, reserve, layout.spec)

    runner = make_runner(config.ps_command)
    try:
        pids = collect_pids(queries, runner=runner)
        render(layout, pids, runner=runner, use_highlight=config.highlight)
    except PsError as e:
        logger.error("ps failed: %s", e)
        err_console.print(f"[red]Error:[/red] {escape(str(e))}", highlight=False)
        return 1

    if queries:
        print(summary(pids))
    return 0


QueriesArgument = Annotated[
    list[str] | None,
    typer.Argument(
        help="Highlight processes whose command line contains any of these strings",
        show_default=False,
    ),
]

DetailOption = Annotated[
    bool,
    typer.Option(
        "-d",
        help="Keep the args column short to make room for more columns",
    ),
]

LongOption = Annotated[
    bool,
    typer.Option(
        "-l",
        help="Give the args column nearly the whole line",
    ),
]

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="Path to custom config file",
        envvar="FITPS_CONFIG_PATH",
        exists=False,  # We handle existence check ourselves
    ),
]

VersionOption = Annotated[
    bool | None,
    typer.Option(
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
]


@app.command(cls=FitpsCommand)
def main(
    ctx: typer.Context,
    queries: QueriesArgument = None,
    detail: DetailOption = False,
    long_: LongOption = False,
    config: ConfigOption = None,
    version: VersionOption = None,
) -> None:
    """List all processes, fitted to the terminal width.

    Rows whose command line contains any QUERY are shown in bold red, and a
    summary of the matching PIDs is printed at the end. Use '--' before
    queries that start with '-'.
    """
    try:
        config_path = str(config) if config else None
        cfg = load_config(config_path=config_path)
    except FileNotFoundError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e
    except ConfigError as e:
        err_console.print(f"[red]Configuration error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e

    setup_logging(cfg.logging)

    # detail and long_ only declare the flags; their order is in ctx.meta
    mode = select_mode(ctx.meta.get("mode_flags", []))
    exit_code = run_fitps(cfg, mode, list(queries or []))
    if exit_code != 0:
        raise typer.Exit(exit_code)


def cli_main() -> None:
    """Entry point for the CLI application."""
    app()
