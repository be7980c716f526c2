"""JSON formatter for clean-arch."""

import json
from dataclasses import asdict
from typing import Any, Dict

from ..analysis.models import ArchitectureReport
from .base import BaseFormatter, generate_uid


class JsonFormatter(BaseFormatter):
    """Render the report as JSON."""

    def render(self, report: ArchitectureReport) -> None:
        print(self.format(report))

    def format(self, report: ArchitectureReport) -> str:
        return json.dumps(self.to_dict(report), indent=2)

    @staticmethod
    def to_dict(report: ArchitectureReport) -> Dict[str, Any]:
        return {
            "summary": {
                "modules": report.module_count,
                "units": report.unit_count,
                "errors": len(report.errors),
                "warnings": len(report.warnings),
                "distance": asdict(report.distance_summary),
            },
            "modules": [
                {"uid": generate_uid(module.name), **asdict(module)} for module in report.modules
            ],
            "violations": [
                {
                    "type": violation.type.value,
                    "severity": violation.severity.value,
                    "module": violation.module,
                    "target": violation.target,
                    "message": violation.message,
                    "units": violation.units,
                }
                for violation in report.violations
            ],
        }
