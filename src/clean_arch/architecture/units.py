"""Units of code and the arena that owns them.

A UnitOfCode is one analyzable symbol: a class, an abstract class/protocol,
a function, a built-in (primitive) type, or a name that was referenced but
never declared in the scanned tree. Every unit gets a stable integer index
from its UnitArena; dependency edges and module membership are keyed by that
index rather than by object identity.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Dict, Iterator, List, Optional

if TYPE_CHECKING:
    from .modules import Module


class UnitKind(Enum):
    """What a unit of code represents."""

    CLASS = "class"
    INTERFACE = "interface"  # abstract base class or protocol
    FUNCTION = "function"
    PRIMITIVE = "primitive"  # built-in or pseudo type (int, str, Any, ...)
    UNDEFINED = "undefined"  # referenced, not declared in the scanned tree


class UnitOfCode:
    """A symbol with resolved dependency edges to other symbols."""

    __slots__ = (
        "index",
        "name",
        "path",
        "kind",
        "is_abstract",
        "module",
        "_inputs",
        "_outputs",
    )

    def __init__(
        self,
        index: int,
        name: str,
        path: str = "",
        kind: UnitKind = UnitKind.UNDEFINED,
        is_abstract: Optional[bool] = None,
    ):
        self.index = index
        self.name = name
        self.path = path
        self.kind = kind
        self.is_abstract = is_abstract
        self.module: Optional[Module] = None
        self._inputs: Dict[int, UnitOfCode] = {}
        self._outputs: Dict[int, UnitOfCode] = {}

    def __repr__(self) -> str:
        return f"UnitOfCode(#{self.index} {self.name!r}, {self.kind.value})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UnitOfCode):
            return NotImplemented
        return self.index == other.index

    def __hash__(self) -> int:
        return hash(self.index)

    @property
    def input_dependencies(self) -> List[UnitOfCode]:
        """Units depending on this one."""
        return list(self._inputs.values())

    @property
    def output_dependencies(self) -> List[UnitOfCode]:
        """Units this one depends on."""
        return list(self._outputs.values())

    def add_dependency(self, dependency: UnitOfCode) -> None:
        """Record ``self -> dependency`` in both directions. Self-edges are ignored."""
        if dependency.index == self.index:
            return
        self._outputs[dependency.index] = dependency
        dependency._inputs[self.index] = self

    def is_primitive(self) -> bool:
        return self.kind is UnitKind.PRIMITIVE

    def belongs_to_global_namespace(self) -> bool:
        """True for non-primitive names without a dotted scope."""
        return not self.is_primitive() and "." not in self.name.strip(".")

    def belongs_to_module(self, module: Module) -> bool:
        return self.module is module

    def calculate_primitiveness_rate(self) -> float:
        """Share of output dependencies that are primitives (0..1)."""
        total = len(self._outputs)
        if total == 0:
            return 0.0
        primitives = sum(1 for dep in self._outputs.values() if dep.is_primitive())
        return round(primitives / total, 3)


class UnitArena:
    """Owns every unit of a run and hands out stable indices.

    Lookup is by exact qualified name: Python names are case-sensitive, so
    ``settings.Config`` and ``settings.config`` are different units.
    """

    def __init__(self) -> None:
        self._units: List[UnitOfCode] = []
        self._by_name: Dict[str, UnitOfCode] = {}

    def get_or_create(
        self,
        name: str,
        path: str = "",
        kind: UnitKind = UnitKind.UNDEFINED,
        is_abstract: Optional[bool] = None,
    ) -> UnitOfCode:
        unit = self._by_name.get(name)
        if unit is None:
            unit = UnitOfCode(len(self._units), name, path, kind, is_abstract)
            self._units.append(unit)
            self._by_name[name] = unit
        return unit

    def find(self, name: str) -> Optional[UnitOfCode]:
        return self._by_name.get(name)

    def get(self, index: int) -> UnitOfCode:
        return self._units[index]

    def __iter__(self) -> Iterator[UnitOfCode]:
        return iter(self._units)

    def __len__(self) -> int:
        return len(self._units)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name in self._by_name
