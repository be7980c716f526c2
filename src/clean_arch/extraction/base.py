"""Strategy interface for extracting referenced type names from source text."""

import re
from abc import ABC, abstractmethod
from typing import Iterable, List

_WHITESPACE = re.compile(r"\s+")


def normalize_type_list(types_as_string: str) -> List[str]:
    """Split a union like ``"Foo | Bar[]"`` into ``["Foo", "Bar"]``.

    Whitespace is removed, ``[]`` array suffixes are stripped and the
    result is split on ``|``. Empty parts are dropped.
    """
    compact = _WHITESPACE.sub("", types_as_string).replace("[]", "")
    return [part for part in compact.split("|") if part]


def unique(names: Iterable[str]) -> List[str]:
    """Deduplicate while keeping first-seen order."""
    return list(dict.fromkeys(name for name in names if name))


class CodeParsingStrategy(ABC):
    """Turns a unit's source text into raw, unresolved type names."""

    @abstractmethod
    def parse(self, content: str) -> List[str]:
        """Return referenced type names, deduplicated, in order of appearance."""
