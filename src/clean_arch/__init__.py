"""
clean-arch - architecture linter for Python codebases.

Partitions a codebase into configured modules, checks dependency direction,
encapsulation and cycles between them, and measures each module against the
main sequence (abstractness vs. instability).
"""

__version__ = "0.1.0"

from .analysis import ArchitectureReport, Violation, ViolationType
from .api import build_graph, check
from .architecture import Module, ModuleRegistry, Path, Restrictions, UnitOfCode

__all__ = [
    "check",  # Main entry point
    "build_graph",
    "ArchitectureReport",
    "Module",
    "ModuleRegistry",
    "Path",
    "Restrictions",
    "UnitOfCode",
    "Violation",
    "ViolationType",
]
