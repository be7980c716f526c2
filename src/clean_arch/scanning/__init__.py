"""Source scanning: files in, top-level declarations out."""

from .models import Declaration
from .parser import module_name_for, parse_imports, parse_source
from .scanner import SourceScanner

__all__ = [
    "Declaration",
    "SourceScanner",
    "module_name_for",
    "parse_imports",
    "parse_source",
]
