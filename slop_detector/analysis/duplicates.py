"""Duplicate string-literal analyzer."""

import re

from ..rules.base import Severity, Violation
from .text import line_number_at

VIOLATION_TYPE = "duplicate_strings"

# Single-line quoted literals, escape-aware
_STRING_LITERAL = re.compile(r"\"((?:[^\"\\\n]|\\.)*)\"|'((?:[^'\\\n]|\\.)*)'")


def analyze_duplicate_strings(
    content: str,
    max_occurrences: int = 5,
    min_length: int = 4,
) -> list[Violation]:
    """Find string literals repeated more often than ``max_occurrences``.

    Args:
        content: File content
        max_occurrences: Largest allowed number of copies of one literal
        min_length: Shorter literals are ignored

    Returns:
        One violation per literal, at its first occurrence, in first-seen order
    """
    first_seen: dict[str, int] = {}
    counts: dict[str, int] = {}

    for match in _STRING_LITERAL.finditer(content):
        value = match.group(1) if match.group(1) is not None else match.group(2)
        if len(value) < min_length or not value.strip():
            continue
        if value not in first_seen:
            first_seen[value] = match.start()
            counts[value] = 0
        counts[value] += 1

    violations: list[Violation] = []
    for value, offset in first_seen.items():
        count = counts[value]
        if count <= max_occurrences:
            continue
        violations.append(
            Violation(
                type=VIOLATION_TYPE,
                value=f'"{value}" appears {count} times',
                threshold=f"{max_occurrences} occurrences",
                severity=Severity.LOW,
                details={"literal": value, "occurrences": count},
                line=line_number_at(content, offset),
            )
        )
    return violations


__all__ = ["VIOLATION_TYPE", "analyze_duplicate_strings"]
