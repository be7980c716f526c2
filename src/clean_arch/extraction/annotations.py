"""Docstring annotation strategies: ``@param``/``@return`` tags and Sphinx fields."""

import re
from typing import List

from .base import CodeParsingStrategy, normalize_type_list, unique

# One type token, optionally a ``|`` union with spaces around the pipes
_TYPES = r"[\w\[\]\\.]+(?:\s*\|\s*[\w\[\]\\.]+)*"


class ParamAnnotationsParsingStrategy(CodeParsingStrategy):
    """Types found in ``@param Type name`` tags."""

    pattern = re.compile(rf"@param\s+(?P<types>{_TYPES})", re.IGNORECASE)

    def parse(self, content: str) -> List[str]:
        dependencies: List[str] = []
        for match in self.pattern.finditer(content):
            dependencies.extend(normalize_type_list(match.group("types")))
        return unique(dependencies)


class ReturnAnnotationsParsingStrategy(CodeParsingStrategy):
    """Types found in ``@return Type`` tags."""

    pattern = re.compile(rf"@return\s+(?P<types>{_TYPES})", re.IGNORECASE)

    def parse(self, content: str) -> List[str]:
        dependencies: List[str] = []
        for match in self.pattern.finditer(content):
            dependencies.extend(normalize_type_list(match.group("types")))
        return unique(dependencies)


class SphinxFieldsParsingStrategy(CodeParsingStrategy):
    """Types found in ``:type x:``, ``:rtype:`` and ``:raises X:`` fields."""

    patterns = (
        re.compile(rf":type\s+\w+:\s*(?P<types>{_TYPES})"),
        re.compile(rf":rtype:\s*(?P<types>{_TYPES})"),
        re.compile(rf":raises\s+(?P<types>{_TYPES})\s*:"),
    )

    def parse(self, content: str) -> List[str]:
        dependencies: List[str] = []
        for pattern in self.patterns:
            for match in pattern.finditer(content):
                dependencies.extend(normalize_type_list(match.group("types")))
        return unique(dependencies)
