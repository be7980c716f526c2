"""Per-module policy: dependency direction rules, visibility, distance threshold."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from fnmatch import fnmatchcase
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional, Sequence, Tuple

from .metrics import compute_overage

if TYPE_CHECKING:
    from .modules import Module
    from .units import UnitOfCode


class RuleEffect(Enum):
    ALLOW = "allow"
    DENY = "deny"


@dataclass(frozen=True)
class DependencyRule:
    """One ordered rule: may ``source`` depend on ``target``?

    Both sides are shell-style patterns over module names.
    """

    effect: RuleEffect
    target: str
    source: str = "*"

    def matches(self, dependent_name: str, dependency_name: str) -> bool:
        return fnmatchcase(dependent_name, self.source) and fnmatchcase(
            dependency_name, self.target
        )


def _matches_any(name: str, patterns: Sequence[str]) -> bool:
    lowered = name.strip(".").lower()
    return any(fnmatchcase(lowered, pattern.strip(".").lower()) for pattern in patterns)


class Restrictions:
    """Policy owned by a single Module.

    Rules are evaluated in order against the pair (dependent, dependency);
    the first matching rule decides. With no matching rule the dependency
    falls back to ``default_allowed``.
    """

    def __init__(
        self,
        rules: Iterable[DependencyRule] = (),
        default_allowed: bool = True,
        public_units: Iterable[str] = (),
        private_units: Iterable[str] = (),
        max_allowable_distance: Optional[float] = None,
    ):
        self.rules: Tuple[DependencyRule, ...] = tuple(rules)
        self.default_allowed = default_allowed
        self.public_units: Tuple[str, ...] = tuple(public_units)
        self.private_units: Tuple[str, ...] = tuple(private_units)
        self.max_allowable_distance = max_allowable_distance

    @classmethod
    def from_lists(
        cls,
        allowed: Iterable[str] = (),
        forbidden: Iterable[str] = (),
        public_units: Iterable[str] = (),
        private_units: Iterable[str] = (),
        max_allowable_distance: Optional[float] = None,
    ) -> "Restrictions":
        """Build rules from allow/deny lists.

        Forbidden modules are checked first. A non-empty allow-list makes
        every module not on it illegal.
        """
        allowed = list(allowed)
        rules = [DependencyRule(RuleEffect.DENY, name) for name in forbidden]
        rules.extend(DependencyRule(RuleEffect.ALLOW, name) for name in allowed)
        return cls(
            rules=rules,
            default_allowed=not allowed,
            public_units=public_units,
            private_units=private_units,
            max_allowable_distance=max_allowable_distance,
        )

    def __repr__(self) -> str:
        return (
            f"Restrictions(rules={len(self.rules)}, default_allowed={self.default_allowed}, "
            f"max_allowable_distance={self.max_allowable_distance})"
        )

    def is_dependency_allowed(self, dependency: Module, dependent: Module) -> bool:
        """May ``dependent`` depend on ``dependency``?"""
        if dependency is dependent:
            return True
        for rule in self.rules:
            if rule.matches(dependent.name, dependency.name):
                return rule.effect is RuleEffect.ALLOW
        return self.default_allowed

    def is_unit_of_code_accessible_from_outside(self, unit: UnitOfCode, module: Module) -> bool:
        """Is ``unit`` public, i.e. usable from outside ``module``?"""
        if unit.is_primitive() or unit.belongs_to_global_namespace():
            return True
        if self.private_units and _matches_any(unit.name, self.private_units):
            return False
        if self.public_units:
            return _matches_any(unit.name, self.public_units)
        return True

    def get_illegal_dependency_modules(self, module: Module) -> List[Module]:
        return [
            dependency
            for dependency in module.get_dependency_modules()
            if not module.is_dependency_allowed(dependency)
        ]

    def get_illegal_dependency_units_of_code(
        self, module: Module, only_from_allowed_modules: bool = False
    ) -> List[UnitOfCode]:
        """Dependency units ``module`` should not use.

        Without ``only_from_allowed_modules`` this is every unit of a
        disallowed module plus the private units of allowed modules. With it,
        only the private units of allowed modules.
        """
        illegal: Dict[int, UnitOfCode] = {}
        for dependency in module.get_dependency_modules():
            units = module.get_dependency_units_of_code(dependency)
            if not module.is_dependency_allowed(dependency):
                if not only_from_allowed_modules:
                    for unit in units:
                        illegal[unit.index] = unit
                continue
            for unit in units:
                if not dependency.is_unit_of_code_accessible_from_outside(unit):
                    illegal[unit.index] = unit
        return list(illegal.values())

    def calculate_distance_rate_overage(self, module: Module) -> float:
        return compute_overage(module.calculate_distance_rate(), self.max_allowable_distance)
