"""Module registry: one Module per name, resolution of units to modules.

The registry is built during the scan phase and sealed before any query
(metrics, cycles, report). ``seal()`` returns a read-only view so the query
phase cannot register modules or move units.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Union

from ..logging_config import get_logger
from .modules import GLOBAL, PRIMITIVES, UNDEFINED, Module
from .path import Path
from .restrictions import Restrictions
from .units import UnitOfCode

logger = get_logger(__name__)


@dataclass(frozen=True)
class Resolved:
    module: Module


@dataclass(frozen=True)
class Unmatched:
    """No registered module claims the unit."""

    unit: UnitOfCode


Resolution = Union[Resolved, Unmatched]


class ModuleRegistry:
    """Name-keyed store of modules, in creation order."""

    def __init__(self) -> None:
        self._modules: Dict[str, Module] = {}

    def get_or_create(
        self,
        name: str = UNDEFINED,
        root_paths: Iterable[Path] = (),
        excluded_paths: Iterable[Path] = (),
        restrictions: Optional[Restrictions] = None,
    ) -> Module:
        """Return the module called ``name``, creating it on first use.

        Repeated calls merge new root/excluded paths into the existing module
        (duplicates ignored) and replace its restrictions when one is given.
        """
        module = self._modules.get(name)
        if module is None:
            module = Module(name, restrictions=restrictions)
            if name in (PRIMITIVES, GLOBAL):
                module.exclude_from_analysis()
            self._modules[name] = module
            logger.debug(f"Registered module {name!r}")
        elif restrictions is not None:
            module.restrictions = restrictions
        for root_path in root_paths:
            module.add_root_path(root_path)
        for excluded_path in excluded_paths:
            module.add_excluded_path(excluded_path)
        return module

    def find_by_name(self, name: str) -> Optional[Module]:
        return self._modules.get(name)

    def all(self) -> List[Module]:
        return list(self._modules.values())

    def __iter__(self) -> Iterator[Module]:
        return iter(list(self._modules.values()))

    def __len__(self) -> int:
        return len(self._modules)

    def __contains__(self, name: object) -> bool:
        return name in self._modules

    def resolve(self, unit: UnitOfCode) -> Resolution:
        """Find the module a unit belongs to.

        Primitives and global names go to their sentinels. Otherwise the
        first module, in registration order, whose roots contain the unit and
        whose exclusions do not wins.
        """
        if unit.is_primitive():
            return Resolved(self.get_or_create(PRIMITIVES))
        if unit.belongs_to_global_namespace():
            return Resolved(self.get_or_create(GLOBAL))
        for module in self._modules.values():
            if module.contains(unit):
                return Resolved(module)
        return Unmatched(unit)

    def module_for_unit(self, unit: UnitOfCode) -> Module:
        """Like ``resolve`` but falls back to the undefined module."""
        resolution = self.resolve(unit)
        if isinstance(resolution, Resolved):
            return resolution.module
        logger.debug(f"No module matches {unit.name!r} ({unit.path or 'no path'}) - using {UNDEFINED}")
        return self.get_or_create(UNDEFINED)

    def assign(self, unit: UnitOfCode) -> Module:
        """Resolve the unit once, cache the module on it and add it as a member."""
        if unit.module is None:
            unit.module = self.module_for_unit(unit)
        unit.module.add_unit_of_code(unit)
        return unit.module

    def seal(self) -> SealedModuleRegistry:
        return SealedModuleRegistry(self._modules)


class SealedModuleRegistry:
    """Read-only view of a registry for the query phase."""

    def __init__(self, modules: Dict[str, Module]):
        self._modules = dict(modules)

    def find_by_name(self, name: str) -> Optional[Module]:
        return self._modules.get(name)

    def all(self) -> List[Module]:
        return list(self._modules.values())

    def __iter__(self) -> Iterator[Module]:
        return iter(list(self._modules.values()))

    def __len__(self) -> int:
        return len(self._modules)

    def __contains__(self, name: object) -> bool:
        return name in self._modules
