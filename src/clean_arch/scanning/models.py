"""Scanner output: one Declaration per top-level class or function."""

from dataclasses import dataclass, field
from typing import Dict, Optional

from ..architecture.units import UnitKind


@dataclass
class Declaration:
    """A top-level symbol discovered in a source file.

    ``imports`` maps each alias visible in the file to the qualified name it
    stands for, so raw names extracted from ``text`` can be expanded.
    """

    name: str  # qualified, e.g. "app.core.service.UserService"
    path: str  # POSIX path of the source file
    module_name: str  # dotted module of the file, e.g. "app.core.service"
    kind: UnitKind
    is_abstract: Optional[bool] = None
    text: str = ""
    start_line: int = 0
    imports: Dict[str, str] = field(default_factory=dict)

    @property
    def short_name(self) -> str:
        return self.name.rsplit(".", 1)[-1]
