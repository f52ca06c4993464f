"""
Plain-text dependency report
"""

from pathlib import Path
from typing import List, Union

from .fileio import atomic_write_text
from .models import DependencyAnalysisResult

REPORT_TITLE = "Dependency Analysis Report"


def _name_list(names: List[str]) -> List[str]:
    if not names:
        return ["  None"]
    return [f"  - {name}" for name in names]


def generate_report(result: DependencyAnalysisResult) -> str:
    """Render an analysis result as text.

    Sections always appear in the same order: totals, components with no
    dependencies, missing dependencies, dependent counts, topological order
    and cycles.
    """
    lines = [REPORT_TITLE, "=" * 32, ""]

    lines.append(f"Total Components: {len(result.graph.components)}")
    lines.append("")

    lines.append("Components with no dependencies:")
    lines.extend(_name_list(result.components_with_no_dependencies))
    lines.append("")

    lines.append("Missing dependencies:")
    lines.extend(_name_list(result.components_with_missing_dependencies))
    lines.append("")

    lines.append("Dependency counts:")
    if not result.dependency_counts:
        lines.append("  None")
    for name, count in result.dependency_counts.items():
        noun = "dependent" if count == 1 else "dependents"
        lines.append(f"  {name}: {count} {noun}")
    lines.append("")

    lines.append("Topological order:")
    if result.topological_order:
        for index, name in enumerate(result.topological_order, start=1):
            lines.append(f"  {index}. {name}")
    elif result.cycles:
        lines.append("  Not available (cycles detected)")
    else:
        lines.append("  None")
    lines.append("")

    lines.append("Cycles detected:")
    if not result.cycles:
        lines.append("  None")
    for index, cycle in enumerate(result.cycles, start=1):
        lines.append(f"  Cycle {index}: {' -> '.join(cycle)}")

    return "\n".join(lines) + "\n"


def write_report(result: DependencyAnalysisResult, path: Union[str, Path]) -> Path:
    return atomic_write_text(path, generate_report(result))
