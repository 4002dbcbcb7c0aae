"""Over-engineering metrics analyzer.

Measures a repository's size against its public surface. Three signals
are reported independently:

1. File proliferation: source files per export
2. Code density: code lines per export
3. Directory depth below ``src/``
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..detector_logging import get_logger
from ..rules.base import Severity, Violation, verdict_for
from .source_tree import (
    count_entry_point_exports,
    count_source_lines,
    iter_source_files,
    max_directory_depth,
)

logger = get_logger()


@dataclass
class OverEngineeringResult:
    """Metrics and violations for one repository."""

    metrics: dict[str, Any]
    violations: list[Violation] = field(default_factory=list)

    @property
    def verdict(self) -> str:
        """OK, MEDIUM or HIGH from the worst violation."""
        return verdict_for(self.violations)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "metrics": self.metrics,
            "violations": [v.to_dict() for v in self.violations],
            "verdict": self.verdict,
        }


def _severity(value: float, threshold: float) -> Severity:
    return Severity.HIGH if value > threshold * 2 else Severity.MEDIUM


def analyze_over_engineering(
    repo_root: str | Path,
    file_ratio_threshold: float = 20,
    lines_per_export_threshold: float = 500,
    depth_threshold: int = 4,
) -> OverEngineeringResult:
    """Analyze a repository for over-engineering.

    Each signal is a violation when its value strictly exceeds its
    threshold, and is high severity when it exceeds twice the threshold.

    Args:
        repo_root: Repository root directory
        file_ratio_threshold: Max source files per export
        lines_per_export_threshold: Max code lines per export
        depth_threshold: Max directory depth below src/

    Returns:
        OverEngineeringResult with metrics, violations and verdict
    """
    root = Path(repo_root)
    violations: list[Violation] = []

    files = iter_source_files(root)
    source_files = len(files)
    exports = count_entry_point_exports(root)
    export_count = max(exports.count, 1)

    file_ratio = source_files / export_count
    if file_ratio > file_ratio_threshold:
        violations.append(
            Violation(
                type="file_proliferation",
                value=f"{source_files} files / {exports.count} exports = {file_ratio:.1f}x",
                threshold=f"{file_ratio_threshold}x",
                severity=_severity(file_ratio, file_ratio_threshold),
                details={
                    "source_file_count": source_files,
                    "export_count": exports.count,
                    "file_ratio": round(file_ratio, 2),
                    "export_method": exports.method,
                },
            )
        )

    total_lines = count_source_lines(root, files)
    lines_per_export = total_lines / export_count
    if lines_per_export > lines_per_export_threshold:
        violations.append(
            Violation(
                type="code_density",
                value=(
                    f"{total_lines} lines / {exports.count} exports = "
                    f"{round(lines_per_export)}:1"
                ),
                threshold=f"{lines_per_export_threshold}:1",
                severity=_severity(lines_per_export, lines_per_export_threshold),
                details={
                    "total_lines": total_lines,
                    "export_count": exports.count,
                    "lines_per_export": round(lines_per_export, 2),
                },
            )
        )

    depth = max_directory_depth(root, "src")
    if depth > depth_threshold:
        violations.append(
            Violation(
                type="directory_depth",
                value=f"{depth} levels",
                threshold=f"{depth_threshold} levels",
                severity=_severity(depth, depth_threshold),
                details={"max_depth": depth},
            )
        )

    metrics = {
        "source_files": source_files,
        "exports": exports.count,
        "export_method": exports.method,
        "entry_points": exports.entry_points,
        "total_lines": total_lines,
        "directory_depth": depth,
        "file_ratio": round(file_ratio, 2),
        "lines_per_export": round(lines_per_export),
    }
    logger.debug(f"Over-engineering metrics for {root}: {metrics}")

    return OverEngineeringResult(metrics=metrics, violations=violations)


__all__ = ["OverEngineeringResult", "analyze_over_engineering"]
