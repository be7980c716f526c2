"""ArchitectureAnalyzer: turns a sealed module registry into a report.

For every analyzed module:
1. Martin metrics (A, I, D, overage, primitiveness)
2. Illegal dependency modules and the units behind them
3. Private units of allowed modules used from outside
4. Cycles closing back on the module
5. Dependencies on less stable modules (optional)
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from ..architecture.cycles import find_cyclic_dependencies
from ..architecture.metrics import summarize
from ..architecture.modules import Module
from ..architecture.registry import SealedModuleRegistry
from ..config import AnalysisConfig
from ..logging_config import get_logger
from .models import ArchitectureReport, ModuleReport, Severity, Violation, ViolationType

logger = get_logger(__name__)


def _names(items: Iterable) -> List[str]:
    return [item.name for item in items]


class ArchitectureAnalyzer:
    """Runs the configured checks over every module enabled for analysis."""

    def __init__(self, config: Optional[AnalysisConfig] = None):
        self.config = config or AnalysisConfig()

    def analyze(self, registry: SealedModuleRegistry) -> ArchitectureReport:
        modules = [module for module in registry if self._is_analyzed(module)]

        cycles: Dict[str, List[List[Module]]] = {}
        if self.config.check_acyclic_dependencies:
            cycles = find_cyclic_dependencies(registry.all())

        report = ArchitectureReport(unit_count=sum(len(module) for module in registry))
        for module in modules:
            module_report, violations = self._analyze_module(module, cycles.get(module.name, []))
            report.modules.append(module_report)
            report.violations.extend(violations)

        report.distance_summary = summarize(m.distance for m in report.modules)
        logger.debug(
            f"Analyzed {report.module_count} modules: {len(report.errors)} errors, "
            f"{len(report.warnings)} warnings"
        )
        return report

    @staticmethod
    def _is_analyzed(module: Module) -> bool:
        if not module.is_enabled_for_analysis:
            return False
        # The fallback module only matters when something landed in it
        if module.is_undefined():
            return len(module) > 0
        return True

    def _analyze_module(
        self, module: Module, module_cycles: List[List[Module]]
    ) -> tuple[ModuleReport, List[Violation]]:
        report = ModuleReport(
            name=module.name,
            unit_count=len(module),
            abstractness=module.calculate_abstractness_rate(),
            instability=module.calculate_instability_rate(),
            distance=module.calculate_distance_rate(),
            distance_overage=module.calculate_distance_rate_overage(),
            max_allowable_distance=module.restrictions.max_allowable_distance,
            primitiveness=module.calculate_primitiveness_rate(),
            dependency_modules=_names(module.get_dependency_modules()),
            dependent_modules=_names(module.get_dependent_modules()),
        )
        violations: List[Violation] = []

        for dependency in module.get_illegal_dependency_modules():
            units = _names(module.get_dependency_units_of_code(dependency))
            report.illegal_dependencies[dependency.name] = units
            dependents = _names(module.get_dependent_units_of_code(dependency))
            violations.append(
                Violation(
                    type=ViolationType.ILLEGAL_DEPENDENCY,
                    module=module.name,
                    target=dependency.name,
                    message=(
                        f"{module.name} must not depend on {dependency.name} "
                        f"(used by {', '.join(dependents)})"
                    ),
                    units=units,
                )
            )

        if self.config.check_private_access:
            private_units = module.get_illegal_dependency_units_of_code(only_from_allowed_modules=True)
            report.private_accesses = _names(private_units)
            for unit in private_units:
                owner = unit.module.name if unit.module is not None else "?"
                violations.append(
                    Violation(
                        type=ViolationType.PRIVATE_UNIT_ACCESS,
                        module=module.name,
                        target=owner,
                        message=f"{module.name} uses {unit.name}, which is private to {owner}",
                        units=[unit.name],
                    )
                )

        if self.config.check_acyclic_dependencies:
            for cycle in module_cycles:
                names = _names(cycle)
                report.cycles.append(names)
                violations.append(
                    Violation(
                        type=ViolationType.CYCLIC_DEPENDENCY,
                        module=module.name,
                        target=names[1] if len(names) > 1 else "",
                        message=f"Dependency cycle: {' -> '.join(names)}",
                    )
                )

        if self.config.check_distance and report.distance_overage > 0:
            violations.append(
                Violation(
                    type=ViolationType.DISTANCE_OVERAGE,
                    module=module.name,
                    message=(
                        f"{module.name} is {report.distance:.3f} from the main sequence, "
                        f"{report.distance_overage:.3f} over the allowed "
                        f"{report.max_allowable_distance:.3f}"
                    ),
                    severity=Severity.WARNING,
                )
            )

        if self.config.check_stable_dependencies:
            for dependency in module.get_dependency_modules():
                if dependency.is_sentinel():
                    continue
                dependency_instability = dependency.calculate_instability_rate()
                if dependency_instability > report.instability:
                    report.unstable_dependencies.append(dependency.name)
                    violations.append(
                        Violation(
                            type=ViolationType.UNSTABLE_DEPENDENCY,
                            module=module.name,
                            target=dependency.name,
                            message=(
                                f"{module.name} (I={report.instability:.3f}) depends on less "
                                f"stable {dependency.name} (I={dependency_instability:.3f})"
                            ),
                            severity=Severity.WARNING,
                        )
                    )

        return report, violations
