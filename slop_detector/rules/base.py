"""Base types for slop detection rules.

This module provides the shared vocabulary of the engine: severities,
remediation hints, certainty tiers, the immutable rule definition, and
the Finding/Violation records produced by a scan.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping


class Severity(Enum):
    """Severity levels for findings."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        """Numeric rank, higher is more severe."""
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {
    Severity.LOW: 0,
    Severity.MEDIUM: 1,
    Severity.HIGH: 2,
    Severity.CRITICAL: 3,
}


class Remediation(Enum):
    """Suggested action for a finding. Never applied by this engine."""

    REMOVE = "remove"  # Delete the matching line(s)
    REPLACE = "replace"  # Replace with a normalized form
    ANNOTATE = "annotate"  # Add error logging/handling around the site
    FLAG = "flag"  # Mark for manual review
    NONE = "none"  # Report only

    @property
    def is_auto_fixable(self) -> bool:
        """Whether a consumer may apply this remediation mechanically."""
        return self in (Remediation.REMOVE, Remediation.REPLACE, Remediation.ANNOTATE)


class Certainty(Enum):
    """How much a finding can be trusted without human review."""

    HIGH = "HIGH"  # Direct pattern hit
    MEDIUM = "MEDIUM"  # Structural analysis, needs context
    LOW = "LOW"  # Heuristic, may be a false positive


class StructuralAnalyzer(Enum):
    """Named analyzers that resolve rules without a single pattern."""

    DOC_RATIO = "doc_ratio"
    VERBOSITY_RATIO = "verbosity_ratio"
    OVER_ENGINEERING = "over_engineering"
    CLAIM_EVIDENCE = "claim_evidence"
    STUB_FUNCTIONS = "stub_functions"
    DUPLICATE_STRINGS = "duplicate_strings"

    @property
    def is_project_level(self) -> bool:
        """Whether the analyzer inspects a whole repository instead of one file."""
        return self in (StructuralAnalyzer.OVER_ENGINEERING, StructuralAnalyzer.CLAIM_EVIDENCE)


class MatchScope(Enum):
    """Where a pattern rule is applied."""

    LINE = "line"
    CONTENT = "content"


@dataclass(frozen=True, eq=False)
class RuleDefinition:
    """A single immutable entry of the rule table.

    Exactly one of ``pattern`` and ``analyzer`` is set: pattern rules are
    matched directly, structural rules are resolved by a named analyzer.
    """

    name: str
    description: str
    severity: Severity
    remediation: Remediation
    language: str | None = None  # None = universal
    pattern: re.Pattern | None = None
    analyzer: StructuralAnalyzer | None = None
    exclude_globs: tuple[str, ...] = ()
    thresholds: Mapping[str, float] = field(
        default_factory=lambda: MappingProxyType({})
    )
    min_consecutive_lines: int | None = None
    entropy_threshold: float | None = None
    scope: MatchScope = MatchScope.LINE

    def __post_init__(self) -> None:
        if (self.pattern is None) == (self.analyzer is None):
            raise ValueError(
                f"Rule {self.name} must define exactly one of pattern or analyzer"
            )
        if not isinstance(self.thresholds, MappingProxyType):
            object.__setattr__(
                self, "thresholds", MappingProxyType(dict(self.thresholds))
            )
        if not isinstance(self.exclude_globs, tuple):
            object.__setattr__(self, "exclude_globs", tuple(self.exclude_globs))

    @property
    def requires_structural_analysis(self) -> bool:
        """Whether the rule is resolved by a structural analyzer."""
        return self.analyzer is not None

    @property
    def is_universal(self) -> bool:
        """Whether the rule applies to every language."""
        return self.language is None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "description": self.description,
            "severity": self.severity.value,
            "remediation": self.remediation.value,
            "language": self.language,
            "pattern": self.pattern.pattern if self.pattern is not None else None,
            "analyzer": self.analyzer.value if self.analyzer is not None else None,
            "exclude_globs": list(self.exclude_globs),
            "thresholds": dict(self.thresholds),
        }


@dataclass
class Finding:
    """A single reported defect tied to a file position."""

    file: str
    line: int
    rule: str
    severity: Severity
    certainty: Certainty
    excerpt: str
    column: int = 0  # 1-indexed, 0 when the analyzer has no column
    remediation: Remediation = Remediation.FLAG
    description: str = ""
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def location(self) -> str:
        """file:line[:column] string for display."""
        location = f"{self.file}:{self.line}"
        if self.column:
            location += f":{self.column}"
        return location

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "file": self.file,
            "line": self.line,
            "column": self.column,
            "rule": self.rule,
            "severity": self.severity.value,
            "certainty": self.certainty.value,
            "excerpt": self.excerpt,
            "remediation": self.remediation.value,
            "description": self.description,
            "details": self.details,
        }


@dataclass
class Violation:
    """A ratio-based or project-level defect report."""

    type: str
    value: str
    threshold: str
    severity: Severity
    details: dict[str, Any] = field(default_factory=dict)
    file: str | None = None
    line: int | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result = {
            "type": self.type,
            "value": self.value,
            "threshold": self.threshold,
            "severity": self.severity.value,
            "details": self.details,
        }
        if self.file is not None:
            result["file"] = self.file
        if self.line is not None:
            result["line"] = self.line
        return result


def verdict_for(violations: list[Violation]) -> str:
    """Overall verdict tag for a set of violations.

    Returns:
        "OK" when empty, "HIGH" when any violation is high or critical,
        otherwise "MEDIUM"
    """
    if not violations:
        return "OK"
    if any(v.severity.rank >= Severity.HIGH.rank for v in violations):
        return "HIGH"
    return "MEDIUM"


__all__ = [
    "Certainty",
    "Finding",
    "MatchScope",
    "Remediation",
    "RuleDefinition",
    "Severity",
    "StructuralAnalyzer",
    "Violation",
    "verdict_for",
]
