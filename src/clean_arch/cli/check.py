"""Architecture check command."""

from pathlib import Path
from typing import Optional

import click
import typer

from ..analysis import ArchitectureAnalyzer
from ..api import build_graph
from ..exceptions import CleanArchError
from ..formatters import RichFormatter, get_formatter
from ..logging_config import setup_logging, verbosity_from_flags
from . import app
from ._common import EXIT_CONFIG_ERROR, EXIT_VIOLATIONS, console, resolve_config


@app.command()
def check(
    path: Path = typer.Argument(
        Path("."),
        help="Root of the codebase; qualified names are relative to it",
        exists=True,
        file_okay=False,
        dir_okay=True,
    ),
    fmt: str = typer.Option(
        "rich",
        "--format",
        "-f",
        help="Output format: rich, json or github",
        click_type=click.Choice(["rich", "json", "github"], case_sensitive=False),
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Debug logging",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress logging",
    ),
    no_fail: bool = typer.Option(
        False,
        "--no-fail",
        help="Always exit 0, even with violations",
    ),
):
    """
    Check module dependencies, encapsulation, cycles and main-sequence distance.

    Modules and their restrictions come from clean-arch.toml.

    [bold cyan]Examples:[/bold cyan]

      clean-arch check src

      clean-arch check src --config architecture.toml --format json

      clean-arch check . --format github
    """
    logger = setup_logging(verbosity_from_flags(verbose, quiet))

    try:
        settings = resolve_config(config=config, verbose=verbose, quiet=quiet, no_fail=no_fail)
        # The config file or CLEAN_ARCH_VERBOSITY may set a level the flags did not
        logger = setup_logging(settings.verbosity)
        if not settings.modules:
            logger.warning("No modules configured - every unit lands in *undefined*")

        result = build_graph(path, settings)
        report = ArchitectureAnalyzer(settings).analyze(result.registry)

        formatter = get_formatter(fmt.lower())
        if isinstance(formatter, RichFormatter):
            formatter.console = console
        formatter.render(report)

    except CleanArchError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(EXIT_CONFIG_ERROR)
    except Exception as e:
        logger.exception("Unexpected error")
        console.print(f"[red]Unexpected error:[/red] {e}")
        raise typer.Exit(EXIT_VIOLATIONS)

    if settings.fail_on_violations and report.has_errors:
        raise typer.Exit(EXIT_VIOLATIONS)
