"""Small text helpers shared by the analyzers."""

import math
from collections import Counter


def count_non_empty_lines(text: str) -> int:
    """Count lines that contain anything besides whitespace."""
    return sum(1 for line in text.split("\n") if line.strip())


def line_number_at(content: str, offset: int) -> int:
    """1-indexed line number of a character offset."""
    return content.count("\n", 0, offset) + 1


def excerpt(line: str, limit: int = 100) -> str:
    """Trimmed line, cut to at most ``limit`` characters."""
    return line.strip()[:limit]


def shannon_entropy(value: str) -> float:
    """Shannon entropy of a string in bits per character."""
    if not value:
        return 0.0
    length = len(value)
    return -sum(
        (count / length) * math.log2(count / length)
        for count in Counter(value).values()
    )


def indentation(line: str) -> int:
    """Width of the leading whitespace of a line."""
    return len(line) - len(line.lstrip())
