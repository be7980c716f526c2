"""Path matcher: qualified-name prefix and/or filesystem-path prefix.

A location (anything exposing ``name`` and ``path``, typically a UnitOfCode)
is part of a Path when its qualified name starts with the namespace prefix or
its file path starts with the path prefix. Both comparisons are
case-insensitive plain string prefixes, so ``/a/b`` also matches ``/a/bc``.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path as FsPath
from typing import Any, Mapping, Optional, Protocol

# Separators trimmed from both ends of qualified names before comparison
NAMESPACE_SEPARATORS = ".\\"


class Location(Protocol):
    """Something that lives at a qualified name and/or a file path."""

    name: str
    path: str


@dataclass(frozen=True)
class Path:
    """Immutable matcher combining an optional namespace and an optional path prefix."""

    namespace: Optional[str] = None
    path: Optional[str] = None

    def is_part_of(self, location: Location) -> bool:
        """Check whether the location lies inside this Path."""
        namespace = (self.namespace or "").strip(NAMESPACE_SEPARATORS)
        if namespace:
            name = (location.name or "").strip(NAMESPACE_SEPARATORS)
            if name.lower().startswith(namespace.lower()):
                return True

        if self.path and location.path:
            if location.path.lower().startswith(self.path.lower()):
                return True

        return False

    def is_empty(self) -> bool:
        return not self.namespace and not self.path

    @classmethod
    def from_config(cls, entry: Mapping[str, Any], base_dir: Optional[FsPath] = None) -> "Path":
        """Build a Path from a config table ``{namespace = "...", path = "..."}``.

        A relative ``path`` is anchored at ``base_dir`` and normalised to POSIX
        form so it compares against scanned unit paths.
        """
        namespace = entry.get("namespace") or None
        raw_path = entry.get("path") or None
        path = None
        if raw_path:
            fs_path = FsPath(raw_path)
            if base_dir is not None and not fs_path.is_absolute():
                fs_path = base_dir / fs_path
            path = fs_path.as_posix()
        return cls(namespace=namespace, path=path)

    def __str__(self) -> str:
        parts = []
        if self.namespace:
            parts.append(f"namespace={self.namespace}")
        if self.path:
            parts.append(f"path={self.path}")
        return f"Path({', '.join(parts)})"
