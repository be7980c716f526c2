"""Graph building and architecture checks."""

from .builder import BuildResult, GraphBuilder, is_primitive_name
from .engine import ArchitectureAnalyzer
from .models import ArchitectureReport, ModuleReport, Severity, Violation, ViolationType

__all__ = [
    "ArchitectureAnalyzer",
    "ArchitectureReport",
    "BuildResult",
    "GraphBuilder",
    "ModuleReport",
    "Severity",
    "Violation",
    "ViolationType",
    "is_primitive_name",
]
