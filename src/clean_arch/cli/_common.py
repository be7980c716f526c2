"""Shared CLI helpers."""

from pathlib import Path
from typing import Optional

from rich.console import Console

from ..config import AnalysisConfig, load_config

console = Console()

EXIT_VIOLATIONS = 1
EXIT_CONFIG_ERROR = 2


def resolve_config(
    config: Optional[Path] = None,
    verbose: bool = False,
    quiet: bool = False,
    no_fail: bool = False,
) -> AnalysisConfig:
    """Build configuration from CLI options."""
    overrides = {"verbose": verbose, "quiet": quiet}
    if no_fail:
        overrides["fail_on_violations"] = False
    return load_config(config_file=config, **overrides)
