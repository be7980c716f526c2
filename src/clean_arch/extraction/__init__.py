"""Dependency-extraction strategies: source text in, raw type names out."""

from .annotations import (
    ParamAnnotationsParsingStrategy,
    ReturnAnnotationsParsingStrategy,
    SphinxFieldsParsingStrategy,
)
from .base import CodeParsingStrategy, normalize_type_list
from .composite import CompositeParsingStrategy, default_strategies
from .python import (
    BaseClassesParsingStrategy,
    ReferencedNamesParsingStrategy,
    TypeHintsParsingStrategy,
)

__all__ = [
    "BaseClassesParsingStrategy",
    "CodeParsingStrategy",
    "CompositeParsingStrategy",
    "ParamAnnotationsParsingStrategy",
    "ReferencedNamesParsingStrategy",
    "ReturnAnnotationsParsingStrategy",
    "SphinxFieldsParsingStrategy",
    "TypeHintsParsingStrategy",
    "default_strategies",
    "normalize_type_list",
]
