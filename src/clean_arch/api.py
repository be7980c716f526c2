"""Public API for clean-arch.

Example:
    >>> from clean_arch import check
    >>> report = check("/path/to/code", config_file=Path("clean-arch.toml"))
    >>> [v.message for v in report.errors]
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Union

from .analysis import ArchitectureAnalyzer, ArchitectureReport, BuildResult, GraphBuilder
from .config import AnalysisConfig, load_config
from .exceptions import InvalidPathError
from .logging_config import get_logger
from .scanning import SourceScanner

logger = get_logger(__name__)


def build_graph(path: Union[str, Path], config: AnalysisConfig) -> BuildResult:
    """Scan ``path`` and build the sealed module graph.

    Raises:
        InvalidPathError: If path is not a directory
    """
    root = Path(path).resolve()
    if not root.is_dir():
        raise InvalidPathError(root, "not a directory")

    declarations = SourceScanner(root, config).scan()
    builder = GraphBuilder(config, root_dir=root)
    builder.register_modules()
    return builder.build(declarations)


def check(
    path: Union[str, Path] = ".",
    config: Optional[AnalysisConfig] = None,
    config_file: Optional[Path] = None,
    **overrides: Any,
) -> ArchitectureReport:
    """Scan a codebase and report architectural violations.

    Args:
        path: Root directory; qualified names are relative to it
        config: Ready configuration (skips discovery when given)
        config_file: Explicit TOML file for discovery
        **overrides: Configuration overrides

    Returns:
        ArchitectureReport with module metrics and violations
    """
    if config is None:
        config = load_config(config_file=config_file, **overrides)

    result = build_graph(path, config)
    logger.info(
        f"{result.declaration_count} declarations, {len(result.arena)} units, "
        f"{result.edge_count} dependencies, {len(result.registry)} modules"
    )
    return ArchitectureAnalyzer(config).analyze(result.registry)
