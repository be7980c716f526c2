"""Report models produced by the ArchitectureAnalyzer."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from ..architecture.metrics import MetricSummary


class ViolationType(Enum):
    """Kinds of architectural violations."""

    ILLEGAL_DEPENDENCY = "illegal_dependency"  # forbidden dependency direction
    PRIVATE_UNIT_ACCESS = "private_unit_access"  # private unit of an allowed module used
    CYCLIC_DEPENDENCY = "cyclic_dependency"
    DISTANCE_OVERAGE = "distance_overage"  # D above max_allowable_distance
    UNSTABLE_DEPENDENCY = "unstable_dependency"  # depends on a less stable module


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass
class Violation:
    """One finding, attributed to the module that commits it."""

    type: ViolationType
    module: str
    message: str
    target: str = ""  # the other module, if any
    units: List[str] = field(default_factory=list)
    severity: Severity = Severity.ERROR


@dataclass
class ModuleReport:
    """Metrics and findings of one module."""

    name: str
    unit_count: int = 0

    # Martin metrics
    abstractness: float = 0.0
    instability: float = 0.0
    distance: float = 0.0
    distance_overage: float = 0.0
    max_allowable_distance: Optional[float] = None
    primitiveness: float = 0.0

    dependency_modules: List[str] = field(default_factory=list)
    dependent_modules: List[str] = field(default_factory=list)

    # Findings
    illegal_dependencies: Dict[str, List[str]] = field(default_factory=dict)  # module -> units
    private_accesses: List[str] = field(default_factory=list)
    cycles: List[List[str]] = field(default_factory=list)
    unstable_dependencies: List[str] = field(default_factory=list)


@dataclass
class ArchitectureReport:
    """Top-level result of a check run."""

    modules: List[ModuleReport] = field(default_factory=list)
    violations: List[Violation] = field(default_factory=list)
    distance_summary: MetricSummary = field(default_factory=MetricSummary)
    unit_count: int = 0

    @property
    def module_count(self) -> int:
        return len(self.modules)

    @property
    def errors(self) -> List[Violation]:
        return [v for v in self.violations if v.severity is Severity.ERROR]

    @property
    def warnings(self) -> List[Violation]:
        return [v for v in self.violations if v.severity is Severity.WARNING]

    @property
    def has_errors(self) -> bool:
        return any(v.severity is Severity.ERROR for v in self.violations)

    def module(self, name: str) -> Optional[ModuleReport]:
        return next((m for m in self.modules if m.name == name), None)
