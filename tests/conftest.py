"""Shared test fixtures for clean-arch."""

from typing import Dict, Iterable, Optional, Sequence, Tuple

import pytest

from clean_arch.architecture import (
    ModuleRegistry,
    Path,
    Restrictions,
    UnitArena,
    UnitKind,
)


@pytest.fixture
def arena():
    """Empty unit arena."""
    return UnitArena()


@pytest.fixture
def registry():
    """Empty module registry."""
    return ModuleRegistry()


@pytest.fixture
def make_partition():
    """Factory building a small partitioned graph.

    ``modules`` is a sequence of ``(name, namespace, restrictions)``;
    ``edges`` a sequence of ``(dependent, dependency)`` qualified names;
    ``units`` optionally maps names to ``(kind, is_abstract)`` so they are
    created with that kind before any edge is added.
    """

    def _make(
        modules: Sequence[Tuple[str, str, Optional[Restrictions]]],
        edges: Iterable[Tuple[str, str]],
        units: Optional[Dict[str, Tuple[UnitKind, Optional[bool]]]] = None,
    ):
        registry = ModuleRegistry()
        for name, namespace, restrictions in modules:
            registry.get_or_create(
                name, root_paths=[Path(namespace=namespace)], restrictions=restrictions
            )
        arena = UnitArena()
        for unit_name, (kind, is_abstract) in (units or {}).items():
            arena.get_or_create(unit_name, kind=kind, is_abstract=is_abstract)
        for dependent, dependency in edges:
            arena.get_or_create(dependent).add_dependency(arena.get_or_create(dependency))
        for unit in arena:
            registry.assign(unit)
        return registry, arena

    return _make
