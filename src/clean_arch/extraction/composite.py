"""Union of several strategies, plus the default strategy set."""

from typing import List

from .annotations import (
    ParamAnnotationsParsingStrategy,
    ReturnAnnotationsParsingStrategy,
    SphinxFieldsParsingStrategy,
)
from .base import CodeParsingStrategy, unique
from .python import BaseClassesParsingStrategy, TypeHintsParsingStrategy


class CompositeParsingStrategy(CodeParsingStrategy):
    """Runs every strategy and unions the results."""

    def __init__(self, *strategies: CodeParsingStrategy):
        self.strategies = list(strategies)

    def add(self, strategy: CodeParsingStrategy) -> "CompositeParsingStrategy":
        self.strategies.append(strategy)
        return self

    def parse(self, content: str) -> List[str]:
        names: List[str] = []
        for strategy in self.strategies:
            names.extend(strategy.parse(content))
        return unique(names)


def default_strategies() -> List[CodeParsingStrategy]:
    """Strategies applied to every declaration."""
    return [
        BaseClassesParsingStrategy(),
        TypeHintsParsingStrategy(),
        ParamAnnotationsParsingStrategy(),
        ReturnAnnotationsParsingStrategy(),
        SphinxFieldsParsingStrategy(),
    ]
