"""Regex-based discovery of top-level declarations and imports in Python files.

This is a best-effort text scanner, not a parser: it finds ``class`` and
``def`` statements at column 0, the text belonging to each, and the import
aliases of the file.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from ..architecture.units import UnitKind
from .models import Declaration

_DECLARATION = re.compile(r"^(?:async[ \t]+)?(?P<keyword>def|class)[ \t]+(?P<name>\w+)")
_TRIPLE_QUOTE = re.compile(r'"""|\'\'\'')
_IMPORT = re.compile(r"^[ \t]*import[ \t]+(?P<names>[^\n#;]+)", re.MULTILINE)
_FROM_IMPORT = re.compile(
    r"^[ \t]*from[ \t]+(?P<module>\.*[\w.]*)[ \t]+import[ \t]+(?P<names>\([^)]*\)|(?:[^\n#;\\]|\\\n)+)",
    re.MULTILINE,
)
_ABSTRACT_BASES = frozenset({"ABC", "abc.ABC", "ABCMeta", "abc.ABCMeta", "Protocol", "typing.Protocol"})
_ABSTRACT_METHOD = re.compile(r"@(?:abc\.)?abstract(?:method|property|classmethod|staticmethod)\b")
_CLASS_BASES = re.compile(r"^class[ \t]+\w+[ \t]*\((?P<bases>.*?)\)[ \t]*:", re.MULTILINE | re.DOTALL)


def module_name_for(path: Path, root_dir: Path) -> str:
    """Dotted module name of a file relative to the scan root.

    ``root/app/core/service.py`` -> ``app.core.service``; ``__init__`` is
    dropped so a package is named after its directory.
    """
    relative = path.relative_to(root_dir).with_suffix("")
    parts = list(relative.parts)
    if parts and parts[-1] == "__init__":
        parts.pop()
    if not parts:
        return root_dir.name
    return ".".join(parts)


def parse_imports(content: str, module_name: str, is_package: bool = False) -> Dict[str, str]:
    """Map every imported alias to the qualified name it refers to.

    Args:
        content: Source text
        module_name: Dotted name of the file, used for relative imports
        is_package: True for ``__init__`` files

    Returns:
        ``{"alias": "qualified.name"}``
    """
    aliases: Dict[str, str] = {}

    for match in _IMPORT.finditer(content):
        for item in _split_names(match.group("names")):
            target, alias = _split_alias(item)
            if alias:
                aliases[alias] = target
            else:
                # "import a.b" binds "a"
                head = target.split(".", 1)[0]
                aliases[head] = head

    for match in _FROM_IMPORT.finditer(content):
        source = _absolute_module(match.group("module"), module_name, is_package)
        for item in _split_names(match.group("names")):
            target, alias = _split_alias(item)
            if target == "*":
                continue
            qualified = f"{source}.{target}" if source else target
            aliases[alias or target] = qualified

    return aliases


def parse_source(content: str, path: str, module_name: str, is_package: bool = False) -> List[Declaration]:
    """Find the top-level declarations of one file."""
    imports = parse_imports(content, module_name, is_package)
    lines = content.splitlines(keepends=True)
    declarations: List[Declaration] = []

    for start, end, keyword, name in _find_blocks(lines):
        text = "".join(lines[start:end])
        if keyword == "class":
            is_abstract = _is_abstract_class(text, imports)
            kind = UnitKind.INTERFACE if is_abstract else UnitKind.CLASS
        else:
            is_abstract = None
            kind = UnitKind.FUNCTION
        declarations.append(
            Declaration(
                name=f"{module_name}.{name}",
                path=path,
                module_name=module_name,
                kind=kind,
                is_abstract=is_abstract,
                text=text,
                start_line=start + 1,
                imports=imports,
            )
        )

    return declarations


def _find_blocks(lines: List[str]) -> List[Tuple[int, int, str, str]]:
    """(start, end, keyword, name) of each top-level def/class, decorators included."""
    blocks: List[Tuple[int, int, str, str]] = []
    current: Optional[Tuple[int, str, str]] = None
    decorator_start: Optional[int] = None
    in_string: Optional[str] = None

    for i, line in enumerate(lines):
        if in_string is None and _is_top_level_statement(line):
            match = _DECLARATION.match(line)
            if line.startswith("@"):
                if current is not None:
                    blocks.append((current[0], i, current[1], current[2]))
                    current = None
                if decorator_start is None:
                    decorator_start = i
            elif match:
                if current is not None:
                    blocks.append((current[0], i, current[1], current[2]))
                start = decorator_start if decorator_start is not None else i
                current = (start, match.group("keyword"), match.group("name"))
                decorator_start = None
            else:
                if current is not None:
                    blocks.append((current[0], i, current[1], current[2]))
                    current = None
                decorator_start = None
        in_string = _string_state_after(line, in_string)

    if current is not None:
        blocks.append((current[0], len(lines), current[1], current[2]))
    return blocks


def _is_top_level_statement(line: str) -> bool:
    if not line.strip() or line[0].isspace():
        return False
    # Comments and closing brackets of multi-line headers belong to the block
    return line[0] not in "#)]}"


def _string_state_after(line: str, in_string: Optional[str]) -> Optional[str]:
    for match in _TRIPLE_QUOTE.finditer(line):
        token = match.group()
        if in_string is None:
            in_string = token
        elif token == in_string:
            in_string = None
    return in_string


def _is_abstract_class(text: str, imports: Dict[str, str]) -> bool:
    if _ABSTRACT_METHOD.search(text):
        return True
    header = _CLASS_BASES.search(text)
    if header is None:
        return False
    for base in header.group("bases").split(","):
        base = base.split("=", 1)[-1].split("[", 1)[0].strip()
        if base in _ABSTRACT_BASES or imports.get(base, "") in {"abc.ABC", "abc.ABCMeta", "typing.Protocol"}:
            return True
    return False


def _split_names(names: str) -> List[str]:
    cleaned = names.replace("\\\n", " ").strip().strip("()")
    return [item.strip() for item in cleaned.replace("\n", " ").split(",") if item.strip()]


def _split_alias(item: str) -> Tuple[str, Optional[str]]:
    parts = item.split()
    if len(parts) == 3 and parts[1] == "as":
        return parts[0], parts[2]
    return parts[0], None


def _absolute_module(module: str, module_name: str, is_package: bool) -> str:
    level = len(module) - len(module.lstrip("."))
    if level == 0:
        return module
    package_parts = module_name.split(".")
    if not is_package:
        package_parts = package_parts[:-1]
    if level > 1:
        package_parts = package_parts[: len(package_parts) - (level - 1)]
    rest = module[level:]
    return ".".join(part for part in [*package_parts, rest] if part)
