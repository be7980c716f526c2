"""Rich terminal formatter for clean-arch."""

import io
from typing import Optional

from rich.console import Console
from rich.table import Table

from ..analysis.models import ArchitectureReport, Severity, ViolationType
from .base import BaseFormatter

_SECTION_TITLES = {
    ViolationType.ILLEGAL_DEPENDENCY: "Illegal Dependencies",
    ViolationType.PRIVATE_UNIT_ACCESS: "Private Unit Access",
    ViolationType.CYCLIC_DEPENDENCY: "Cyclic Dependencies",
    ViolationType.DISTANCE_OVERAGE: "Distance From Main Sequence",
    ViolationType.UNSTABLE_DEPENDENCY: "Unstable Dependencies",
}


def _distance_label(distance: float, overage: float) -> str:
    if overage > 0:
        return f"[red]{distance:.3f}[/red]"
    elif distance >= 0.7:
        return f"[yellow]{distance:.3f}[/yellow]"
    else:
        return f"[green]{distance:.3f}[/green]"


class RichFormatter(BaseFormatter):
    """Module metrics table followed by violations grouped by type."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def render(self, report: ArchitectureReport) -> None:
        self._print(report, self.console)

    def format(self, report: ArchitectureReport) -> str:
        buffer = io.StringIO()
        self._print(report, Console(file=buffer, width=120, no_color=True))
        return buffer.getvalue()

    def _print(self, report: ArchitectureReport, console: Console) -> None:
        console.print()
        console.print("[bold cyan]CLEAN ARCH: Architecture Check[/bold cyan]")
        console.print(
            f"  [bold]{report.unit_count}[/bold] units across [bold]{report.module_count}[/bold] modules"
        )
        console.print()

        table = Table(title="Modules", show_lines=False)
        table.add_column("Module", style="bold")
        table.add_column("Units", justify="right")
        table.add_column("A", justify="right")
        table.add_column("I", justify="right")
        table.add_column("D", justify="right")
        table.add_column("Max D", justify="right")
        table.add_column("Primitiveness", justify="right")
        for module in report.modules:
            max_distance = (
                f"{module.max_allowable_distance:.3f}"
                if module.max_allowable_distance is not None
                else "-"
            )
            table.add_row(
                module.name,
                str(module.unit_count),
                f"{module.abstractness:.3f}",
                f"{module.instability:.3f}",
                _distance_label(module.distance, module.distance_overage),
                max_distance,
                f"{module.primitiveness:.3f}",
            )
        console.print(table)

        summary = report.distance_summary
        if summary.count:
            console.print(
                f"  [dim]D across modules: mean {summary.mean:.3f}, median {summary.median:.3f}, "
                f"p90 {summary.p90:.3f}, max {summary.maximum:.3f}[/dim]"
            )
        console.print()

        if not report.violations:
            console.print("[bold green]No architecture violations found[/bold green]")
            return

        for violation_type, title in _SECTION_TITLES.items():
            violations = [v for v in report.violations if v.type is violation_type]
            if not violations:
                continue
            color = "red" if violations[0].severity is Severity.ERROR else "yellow"
            console.print(f"[bold {color}]{title}[/bold {color}] ({len(violations)})")
            for violation in violations:
                console.print(f"  {violation.message}", markup=False)
                for unit in violation.units:
                    console.print(f"    - {unit}", style="dim", markup=False)
            console.print()

        console.print(
            f"[bold]{len(report.errors)}[/bold] errors, [bold]{len(report.warnings)}[/bold] warnings"
        )
