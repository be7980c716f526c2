"""Architecture core: paths, units, modules, restrictions, cycles and metrics."""

from .cycles import find_cyclic_dependencies, tarjan_scc
from .modules import GLOBAL, PRIMITIVES, UNDEFINED, Module
from .path import Path
from .registry import ModuleRegistry, Resolved, SealedModuleRegistry, Unmatched
from .restrictions import DependencyRule, Restrictions, RuleEffect
from .units import UnitArena, UnitKind, UnitOfCode

__all__ = [
    "DependencyRule",
    "GLOBAL",
    "Module",
    "ModuleRegistry",
    "Path",
    "PRIMITIVES",
    "Resolved",
    "Restrictions",
    "RuleEffect",
    "SealedModuleRegistry",
    "UNDEFINED",
    "UnitArena",
    "UnitKind",
    "UnitOfCode",
    "Unmatched",
    "find_cyclic_dependencies",
    "tarjan_scc",
]
