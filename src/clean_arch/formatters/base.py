"""Base formatter interface for clean-arch output rendering."""

import re
from abc import ABC, abstractmethod

from ..analysis.models import ArchitectureReport

_UID_SEPARATORS = re.compile(r"[ /\\]")


def generate_uid(name: str) -> str:
    """Stable identifier for a module name: lowercase, separators replaced by '-'."""
    return _UID_SEPARATORS.sub("-", name).lower()


class BaseFormatter(ABC):
    """Abstract base class for output formatters."""

    @abstractmethod
    def render(self, report: ArchitectureReport) -> None:
        """Render the report to stdout/console."""

    @abstractmethod
    def format(self, report: ArchitectureReport) -> str:
        """Return formatted string representation of the report."""
