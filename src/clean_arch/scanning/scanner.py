"""Filesystem walk producing declarations for the graph builder."""

from fnmatch import fnmatch
from pathlib import Path
from typing import List, Optional

from ..config import AnalysisConfig
from ..exceptions import FileAccessError
from ..logging_config import get_logger
from .models import Declaration
from .parser import module_name_for, parse_source

logger = get_logger(__name__)


class SourceScanner:
    """Walks a source tree and extracts top-level declarations."""

    def __init__(self, root_dir: Path, config: Optional[AnalysisConfig] = None):
        """
        Initialize scanner.

        Args:
            root_dir: Root directory to scan; qualified names are relative to it
            config: Analysis configuration (extensions, excludes, size limit)
        """
        self.root_dir = Path(root_dir).resolve()
        self.config = config or AnalysisConfig()
        logger.debug(f"Initialized {self.__class__.__name__} for {self.root_dir}")

    def scan(self) -> List[Declaration]:
        """
        Scan all source files in a stable (sorted) order.

        Returns:
            Declarations of every readable file
        """
        declarations: List[Declaration] = []
        files_scanned = 0
        files_skipped = 0

        for file_path in sorted(self.root_dir.rglob("*")):
            if not file_path.is_file() or file_path.suffix not in self.config.extensions:
                continue
            if self._should_skip(file_path):
                files_skipped += 1
                continue
            try:
                declarations.extend(self._scan_file(file_path))
                files_scanned += 1
            except FileAccessError as e:
                logger.warning(str(e))
                files_skipped += 1

        logger.debug(
            f"Scanned {files_scanned} files ({files_skipped} skipped), "
            f"{len(declarations)} declarations"
        )
        return declarations

    def _should_skip(self, file_path: Path) -> bool:
        relative = file_path.relative_to(self.root_dir)
        if not self.config.allow_hidden_files and any(
            part.startswith(".") for part in relative.parts
        ):
            return True
        relative_posix = relative.as_posix()
        if any(fnmatch(relative_posix, pattern) for pattern in self.config.exclude_patterns):
            return True
        try:
            return file_path.stat().st_size > self.config.max_file_size_bytes
        except OSError:
            return True

    def _scan_file(self, file_path: Path) -> List[Declaration]:
        try:
            content = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise FileAccessError(file_path, str(e)) from e

        module_name = module_name_for(file_path, self.root_dir)
        return parse_source(
            content,
            path=file_path.as_posix(),
            module_name=module_name,
            is_package=file_path.stem == "__init__",
        )
