"""Strategies reading Python declarations: annotations, base classes, known names."""

import re
from typing import Iterable, List

from .base import CodeParsingStrategy, unique

_IDENTIFIER = re.compile(r"[A-Za-z_][\w.]*")
_STRING_LITERAL = re.compile(r"(['\"])(?P<body>.*?)\1")
_SIGNATURE = re.compile(
    r"^[ \t]*(?:async[ \t]+)?def[ \t]+\w+[ \t]*\((?P<params>.*?)\)[ \t]*(?:->(?P<returns>.*?))?:[ \t]*(?:#[^\n]*)?$",
    re.MULTILINE | re.DOTALL,
)
_CLASS_HEADER = re.compile(r"^[ \t]*class[ \t]+\w+[ \t]*\((?P<bases>.*?)\)[ \t]*:", re.MULTILINE | re.DOTALL)
_KEYWORDS = frozenset({"None", "True", "False", "and", "or", "not", "in", "is", "lambda"})


def split_top_level(text: str, separator: str = ",") -> List[str]:
    """Split on ``separator`` outside of brackets and parentheses."""
    parts: List[str] = []
    depth = 0
    current: List[str] = []
    for char in text:
        if char in "([{":
            depth += 1
        elif char in ")]}":
            depth = max(0, depth - 1)
        if char == separator and depth == 0:
            parts.append("".join(current))
            current = []
        else:
            current.append(char)
    parts.append("".join(current))
    return [part.strip() for part in parts if part.strip()]


def names_in_expression(expression: str) -> List[str]:
    """Dotted identifiers used in an annotation, string forward refs included."""
    # "Foo" forward references count as plain names
    expression = _STRING_LITERAL.sub(lambda m: m.group("body"), expression)
    names = (name.rstrip(".") for name in _IDENTIFIER.findall(expression))
    return [name for name in names if name not in _KEYWORDS]


class TypeHintsParsingStrategy(CodeParsingStrategy):
    """Names used in parameter and return annotations of ``def`` statements."""

    def parse(self, content: str) -> List[str]:
        dependencies: List[str] = []
        for match in _SIGNATURE.finditer(content):
            for param in split_top_level(match.group("params")):
                annotation = self._annotation_of(param)
                if annotation:
                    dependencies.extend(names_in_expression(annotation))
            returns = match.group("returns")
            if returns:
                dependencies.extend(names_in_expression(returns))
        return unique(dependencies)

    @staticmethod
    def _annotation_of(param: str) -> str:
        if ":" not in param:
            return ""
        annotation = param.split(":", 1)[1]
        # Drop the default value
        default_split = split_top_level(annotation, "=")
        return default_split[0] if default_split else ""


class BaseClassesParsingStrategy(CodeParsingStrategy):
    """Base classes and metaclass of ``class`` statements."""

    def parse(self, content: str) -> List[str]:
        dependencies: List[str] = []
        for match in _CLASS_HEADER.finditer(content):
            for base in split_top_level(match.group("bases")):
                if "=" in base:
                    keyword, value = base.split("=", 1)
                    if keyword.strip() != "metaclass":
                        continue
                    base = value
                dependencies.extend(names_in_expression(base))
        return unique(dependencies)


class ReferencedNamesParsingStrategy(CodeParsingStrategy):
    """Which of a known set of names occur in the text as whole words.

    Attribute access is kept (``models.User`` for the alias ``models``).
    Used with the imported aliases and sibling declarations of a file, so a
    class instantiated or called inside a function body counts as a
    dependency even without an annotation.
    """

    def __init__(self, names: Iterable[str]):
        self.names = unique(names)
        self._pattern = (
            re.compile(
                r"(?<![\w.])(?:"
                + "|".join(re.escape(n) for n in sorted(self.names, key=len, reverse=True))
                + r")(?!\w)(?:\.\w+)*"
            )
            if self.names
            else None
        )

    def parse(self, content: str) -> List[str]:
        if self._pattern is None:
            return []
        return unique(match.group(0) for match in self._pattern.finditer(content))
