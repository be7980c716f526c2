"""GitHub Actions annotations (``::error`` / ``::warning``)."""

from ..analysis.models import ArchitectureReport, Severity
from .base import BaseFormatter


def _escape(text: str) -> str:
    return text.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


class GithubFormatter(BaseFormatter):
    """One workflow command per violation."""

    def render(self, report: ArchitectureReport) -> None:
        output = self.format(report)
        if output:
            print(output)

    def format(self, report: ArchitectureReport) -> str:
        lines = []
        for violation in report.violations:
            level = "error" if violation.severity is Severity.ERROR else "warning"
            title = violation.type.value.replace("_", " ")
            lines.append(f"::{level} title={title}::{_escape(violation.message)}")
        return "\n".join(lines)
