"""Module: a named partition of the units of code.

A Module owns its root/excluded path matchers and its Restrictions, indexes
its member units, and answers the dependency, restriction, cycle and metric
queries the report layer needs. Membership is decided by the ModuleRegistry
and cached on each unit; the Module never recomputes it.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from .metrics import (
    compute_abstractness,
    compute_instability,
    compute_main_seq_distance,
    compute_mean,
)
from .path import Location, Path
from .restrictions import Restrictions
from .units import UnitOfCode

UNDEFINED = "*undefined*"  # fallback when no root path matches
PRIMITIVES = "*primitives*"  # built-in and pseudo types
GLOBAL = "*global*"  # names without a qualified scope

SENTINEL_NAMES = (UNDEFINED, PRIMITIVES, GLOBAL)


class Module:
    """A named, mutually exclusive group of units with its own policy."""

    def __init__(
        self,
        name: str,
        root_paths: Iterable[Path] = (),
        excluded_paths: Iterable[Path] = (),
        restrictions: Optional[Restrictions] = None,
    ):
        self.name = name
        self.is_enabled_for_analysis = True
        self.root_paths: List[Path] = []
        self.excluded_paths: List[Path] = []
        self.restrictions = restrictions or Restrictions()
        self._units: Dict[int, UnitOfCode] = {}
        for root_path in root_paths:
            self.add_root_path(root_path)
        for excluded_path in excluded_paths:
            self.add_excluded_path(excluded_path)

    def __repr__(self) -> str:
        return f"Module({self.name!r}, units={len(self._units)})"

    # ── Identity & configuration ────────────────────────────────────

    def is_undefined(self) -> bool:
        return self.name == UNDEFINED

    def is_primitives(self) -> bool:
        return self.name == PRIMITIVES

    def is_global(self) -> bool:
        return self.name == GLOBAL

    def is_sentinel(self) -> bool:
        return self.name in SENTINEL_NAMES

    def exclude_from_analysis(self) -> Module:
        self.is_enabled_for_analysis = False
        return self

    def add_root_path(self, root_path: Path) -> Module:
        if root_path not in self.root_paths:
            self.root_paths.append(root_path)
        return self

    def add_excluded_path(self, excluded_path: Path) -> Module:
        if excluded_path not in self.excluded_paths:
            self.excluded_paths.append(excluded_path)
        return self

    def is_excluded(self, location: Location) -> bool:
        """Is the location inside one of the excluded paths?

        Example: with excluded path ``/app/core/legacy``, units under
        ``/app/core/legacy/old.py`` and ``/app/core/legacy_v2/x.py`` are both
        excluded (plain prefix match).
        """
        return any(excluded.is_part_of(location) for excluded in self.excluded_paths)

    def contains(self, location: Location) -> bool:
        """Inside a root path and not excluded."""
        return any(root.is_part_of(location) for root in self.root_paths) and not self.is_excluded(
            location
        )

    # ── Membership ──────────────────────────────────────────────────

    @property
    def units_of_code(self) -> List[UnitOfCode]:
        return list(self._units.values())

    def add_unit_of_code(self, unit: UnitOfCode) -> Module:
        self._units[unit.index] = unit
        return self

    def remove_unit_of_code(self, unit: UnitOfCode) -> Module:
        self._units.pop(unit.index, None)
        return self

    def __contains__(self, unit: object) -> bool:
        return isinstance(unit, UnitOfCode) and unit.index in self._units

    def __len__(self) -> int:
        return len(self._units)

    # ── Restrictions ────────────────────────────────────────────────

    def is_dependency_allowed(self, dependency: Module) -> bool:
        return self.restrictions.is_dependency_allowed(dependency, self)

    def is_unit_of_code_accessible_from_outside(self, unit: UnitOfCode) -> bool:
        return self.restrictions.is_unit_of_code_accessible_from_outside(unit, self)

    def get_illegal_dependency_modules(self) -> List[Module]:
        """Modules this one depends on although its restrictions forbid it."""
        return self.restrictions.get_illegal_dependency_modules(self)

    def get_illegal_dependency_units_of_code(
        self, only_from_allowed_modules: bool = False
    ) -> List[UnitOfCode]:
        """Units of other modules this one should not depend on.

        Args:
            only_from_allowed_modules: If False, return units of forbidden
                modules plus private units of allowed modules. If True,
                return only the private units of allowed modules.
        """
        return self.restrictions.get_illegal_dependency_units_of_code(
            self, only_from_allowed_modules
        )

    # ── Dependency aggregation ──────────────────────────────────────

    def get_dependent_modules(self) -> List[Module]:
        """Modules with at least one unit depending on this module."""
        modules: Dict[str, Module] = {}
        for unit in self._units.values():
            for dependent in unit.input_dependencies:
                module = dependent.module
                if module is None or dependent.belongs_to_module(self):
                    continue
                modules.setdefault(module.name, module)
        return list(modules.values())

    def get_dependency_modules(self) -> List[Module]:
        """Modules this module depends on (primitives and global names excluded)."""
        modules: Dict[str, Module] = {}
        for unit in self._units.values():
            for dependency in unit.output_dependencies:
                module = dependency.module
                if (
                    module is None
                    or dependency.belongs_to_module(self)
                    or dependency.belongs_to_global_namespace()
                    or dependency.is_primitive()
                ):
                    continue
                modules.setdefault(module.name, module)
        return list(modules.values())

    def get_dependent_units_of_code(self, dependency_module: Module) -> List[UnitOfCode]:
        """Units of this module that depend on units of ``dependency_module``."""
        units: Dict[int, UnitOfCode] = {}
        for unit in self._units.values():
            for dependency in unit.output_dependencies:
                if dependency.belongs_to_module(dependency_module):
                    units[unit.index] = unit
                    break
        return list(units.values())

    def get_dependency_units_of_code(self, dependency_module: Module) -> List[UnitOfCode]:
        """Units of ``dependency_module`` that this module depends on."""
        units: Dict[int, UnitOfCode] = {}
        for unit in self._units.values():
            for dependency in unit.output_dependencies:
                if dependency.belongs_to_module(dependency_module):
                    units[dependency.index] = dependency
        return list(units.values())

    # ── Cycles ──────────────────────────────────────────────────────

    def get_cyclic_dependencies(
        self,
        path: Optional[List[Module]] = None,
        result: Optional[List[List[Module]]] = None,
    ) -> List[List[Module]]:
        """Find dependency cycles that close back on the search root.

        Depth-first over dependency modules. A module already on the current
        branch only yields a cycle when it is the root (``path[0]``); cycles
        among other modules are left to the searches rooted at them. Every
        reported cycle starts and ends with the root. There is no visited set
        across branches, so the same subgraph may be explored repeatedly.

        Args:
            path: Leave empty (used by the recursion)
            result: Leave empty (used by the recursion)

        Returns:
            [[root, m1, ..., root], ...]
        """
        path = [*(path or []), self]
        if result is None:
            result = []
        for dependency in self.get_dependency_modules():
            if any(module is dependency for module in path):
                if path[0] is dependency:
                    result.append([*path, dependency])
            else:
                result = dependency.get_cyclic_dependencies(path, result)
        return result

    # ── Metrics ─────────────────────────────────────────────────────

    def calculate_abstractness_rate(self) -> float:
        """Abstractness A = Na / (Na + Nc), units with unknown status skipped.

        Returns:
            0..1 (0 - nothing abstract, 1 - everything abstract)
        """
        num_abstract = 0
        num_concrete = 0
        for unit in self._units.values():
            if unit.is_abstract is True:
                num_abstract += 1
            elif unit.is_abstract is False:
                num_concrete += 1
        return compute_abstractness(num_abstract, num_concrete)

    def calculate_instability_rate(self) -> float:
        """Instability I = FanOut / (FanIn + FanOut).

        FanIn counts distinct external units depending on this module's units;
        FanOut counts distinct external units this module's units depend on,
        ignoring primitives and global names. Units are deduplicated by name.

        Returns:
            0..1 (0 - maximally stable, 1 - maximally unstable)
        """
        fan_in: set[str] = set()
        fan_out: set[str] = set()
        for unit in self._units.values():
            for dependent in unit.input_dependencies:
                if not dependent.belongs_to_module(self):
                    fan_in.add(dependent.name)
            for dependency in unit.output_dependencies:
                if (
                    dependency.belongs_to_module(self)
                    or dependency.belongs_to_global_namespace()
                    or dependency.is_primitive()
                ):
                    continue
                fan_out.add(dependency.name)
        return compute_instability(len(fan_in), len(fan_out))

    def calculate_distance_rate(self) -> float:
        """Distance from the main sequence D = |A + I - 1|."""
        return compute_main_seq_distance(
            self.calculate_abstractness_rate(), self.calculate_instability_rate()
        )

    def calculate_distance_rate_overage(self) -> float:
        """How far D exceeds the configured max_allowable_distance."""
        return self.restrictions.calculate_distance_rate_overage(self)

    def calculate_primitiveness_rate(self) -> float:
        """Mean primitiveness of the member units, 0 for an empty module."""
        return compute_mean(unit.calculate_primitiveness_rate() for unit in self._units.values())
