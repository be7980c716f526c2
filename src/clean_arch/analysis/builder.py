"""Two-pass graph construction: discover units, then link their dependencies.

Names can only be resolved once every declared unit exists, so the builder
first creates a unit per declaration, then extracts and resolves the raw
names of each declaration, and finally assigns every unit to a module and
seals the registry. Nothing downstream of ``build`` mutates the graph.
"""

from __future__ import annotations

import builtins
import sys
from dataclasses import dataclass
from pathlib import Path as FsPath
from typing import Dict, Iterable, List, Optional, Sequence

from ..architecture.path import Path
from ..architecture.registry import ModuleRegistry, SealedModuleRegistry
from ..architecture.restrictions import Restrictions
from ..architecture.units import UnitArena, UnitKind, UnitOfCode
from ..config import AnalysisConfig, ModuleConfig
from ..extraction import (
    CodeParsingStrategy,
    CompositeParsingStrategy,
    ReferencedNamesParsingStrategy,
    default_strategies,
)
from ..logging_config import get_logger
from ..scanning.models import Declaration

logger = get_logger(__name__)

BUILTIN_NAMES = frozenset(dir(builtins))
# Typing constructs and the standard library count as primitives
PRIMITIVE_PACKAGES = frozenset(sys.stdlib_module_names) | {"typing_extensions"}


def is_primitive_name(name: str) -> bool:
    """Built-in names and anything from the standard library."""
    if "." not in name:
        return name in BUILTIN_NAMES
    return name.split(".", 1)[0] in PRIMITIVE_PACKAGES


@dataclass
class BuildResult:
    """Graph produced by a build, ready for queries."""

    registry: SealedModuleRegistry
    arena: UnitArena
    declaration_count: int = 0
    edge_count: int = 0


class GraphBuilder:
    """Builds the unit graph and module partition from declarations."""

    def __init__(
        self,
        config: Optional[AnalysisConfig] = None,
        root_dir: Optional[FsPath] = None,
        strategies: Optional[Sequence[CodeParsingStrategy]] = None,
    ):
        self.config = config or AnalysisConfig()
        self.root_dir = FsPath(root_dir).resolve() if root_dir is not None else None
        self.strategies = list(strategies) if strategies is not None else default_strategies()
        self.registry = ModuleRegistry()
        self.arena = UnitArena()
        self._module_paths: Dict[str, str] = {}

    def register_modules(self, modules: Optional[Iterable[ModuleConfig]] = None) -> ModuleRegistry:
        """Create one module per definition, in definition order."""
        for module_config in self.config.modules if modules is None else modules:
            restrictions_config = module_config.restrictions
            max_distance = restrictions_config.max_allowable_distance
            if max_distance is None:
                max_distance = self.config.max_allowable_distance
            module = self.registry.get_or_create(
                module_config.name,
                root_paths=[Path.from_config(p.as_dict(), self.root_dir) for p in module_config.roots],
                excluded_paths=[
                    Path.from_config(p.as_dict(), self.root_dir) for p in module_config.excluded
                ],
                restrictions=Restrictions.from_lists(
                    allowed=restrictions_config.allowed_dependencies,
                    forbidden=restrictions_config.forbidden_dependencies,
                    public_units=restrictions_config.public_units,
                    private_units=restrictions_config.private_units,
                    max_allowable_distance=max_distance,
                ),
            )
            if not module_config.enabled:
                module.exclude_from_analysis()
        logger.debug(f"Registered {len(self.registry)} modules")
        return self.registry

    def build(self, declarations: Sequence[Declaration]) -> BuildResult:
        """Discover, link, partition and seal."""
        if not len(self.registry) and self.config.modules:
            self.register_modules()

        # Pass 1: every declared unit exists before any name is resolved
        declared: List[UnitOfCode] = []
        for declaration in declarations:
            unit = self.arena.get_or_create(
                declaration.name,
                path=declaration.path,
                kind=declaration.kind,
                is_abstract=declaration.is_abstract,
            )
            declared.append(unit)
            self._module_paths.setdefault(declaration.module_name, declaration.path)

        siblings_by_file: Dict[str, Dict[str, str]] = {}
        for declaration in declarations:
            siblings_by_file.setdefault(declaration.path, {})[declaration.short_name] = declaration.name

        # Pass 2: link
        for declaration, unit in zip(declarations, declared):
            siblings = siblings_by_file.get(declaration.path, {})
            strategy = CompositeParsingStrategy(
                *self.strategies,
                ReferencedNamesParsingStrategy([*declaration.imports, *siblings]),
            )
            for raw_name in strategy.parse(declaration.text):
                dependency = self.resolve_name(raw_name, declaration, siblings)
                if dependency is None or dependency.index == unit.index:
                    continue
                unit.add_dependency(dependency)

        edge_count = sum(len(unit.output_dependencies) for unit in self.arena)

        # Partition: every unit, declared or referenced, gets exactly one module
        for unit in self.arena:
            self.registry.assign(unit)

        logger.debug(
            f"Built graph: {len(declared)} declarations, {len(self.arena)} units, {edge_count} edges"
        )
        return BuildResult(
            registry=self.registry.seal(),
            arena=self.arena,
            declaration_count=len(declared),
            edge_count=edge_count,
        )

    def resolve_name(
        self,
        raw_name: str,
        declaration: Declaration,
        siblings: Optional[Dict[str, str]] = None,
    ) -> Optional[UnitOfCode]:
        """Turn a raw extracted name into a unit, creating it when unknown.

        Order: sibling declaration, import alias, known unit (or a known unit
        the name is an attribute of), primitive, global name, external name.
        """
        name = raw_name.replace("\\", ".").strip(".")
        if not name:
            return None

        head, _, rest = name.partition(".")
        siblings = siblings or {}
        if head in siblings:
            name = siblings[head] + (f".{rest}" if rest else "")
        elif head in declaration.imports:
            name = declaration.imports[head] + (f".{rest}" if rest else "")

        unit = self.arena.find(name) or self._find_owner(name)
        if unit is not None:
            return unit

        if is_primitive_name(name):
            return self.arena.get_or_create(name, kind=UnitKind.PRIMITIVE)

        if "." not in name:
            return self.arena.get_or_create(name, kind=UnitKind.UNDEFINED)

        return self.arena.get_or_create(name, path=self._path_of_module(name), kind=UnitKind.UNDEFINED)

    def _find_owner(self, name: str) -> Optional[UnitOfCode]:
        """Longest known unit that ``name`` is an attribute of (``User.objects`` -> ``User``)."""
        parts = name.split(".")
        for size in range(len(parts) - 1, 1, -1):
            unit = self.arena.find(".".join(parts[:size]))
            if unit is not None and unit.kind is not UnitKind.UNDEFINED:
                return unit
        return None

    def _path_of_module(self, name: str) -> str:
        """File of the longest scanned module that prefixes ``name``, or ''."""
        parts = name.split(".")
        for size in range(len(parts), 0, -1):
            path = self._module_paths.get(".".join(parts[:size]))
            if path is not None:
                return path
        return ""
