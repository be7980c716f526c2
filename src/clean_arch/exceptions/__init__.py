"""Exception hierarchy for clean-arch."""

from .analysis import AnalysisError, FileAccessError
from .base import CleanArchError
from .config import ConfigurationError, InvalidConfigError, InvalidPathError

__all__ = [
    "CleanArchError",
    "AnalysisError",
    "FileAccessError",
    "ConfigurationError",
    "InvalidPathError",
    "InvalidConfigError",
]
