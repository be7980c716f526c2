"""Logging for clean-arch.

Reports go to stdout (JSON and GitHub annotations must stay parseable), so
log records always go to a stderr console. Verbosity uses the same three
levels as ``AnalysisConfig.verbosity``.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "clean_arch"

LEVELS = {
    "quiet": logging.ERROR,
    "normal": logging.WARNING,
    "verbose": logging.DEBUG,
}


def verbosity_from_flags(verbose: bool = False, quiet: bool = False) -> str:
    """``--quiet`` wins over ``--verbose``."""
    if quiet:
        return "quiet"
    return "verbose" if verbose else "normal"


def setup_logging(verbosity: str = "normal", log_file: Optional[str] = None) -> logging.Logger:
    """Install a stderr RichHandler (plus an optional plain file handler).

    Safe to call again once the configuration is known: existing handlers
    are replaced.

    Raises:
        ValueError: If verbosity is not quiet, normal or verbose
    """
    if verbosity not in LEVELS:
        raise ValueError(f"Unknown verbosity: {verbosity!r}")
    level = LEVELS[verbosity]
    verbose = verbosity == "verbose"

    handlers: list[logging.Handler] = [
        RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            tracebacks_show_locals=verbose,
            # Unit names like "List[int]" are not markup
            markup=False,
            show_time=True,
            show_path=verbose,
        )
    ]

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a")
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
            )
        )
        handlers.append(file_handler)

    logging.basicConfig(
        level=level, format="%(message)s", datefmt="[%X]", handlers=handlers, force=True
    )

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger under the ``clean_arch`` namespace (``get_logger(__name__)``)."""
    if name is None:
        return logging.getLogger(ROOT_LOGGER)
    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
