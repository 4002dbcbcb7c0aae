"""Documentation-ratio analyzer.

Flags functions whose preceding documentation block is disproportionately
long compared to the function body. Brace languages locate the body with
the delimiter scanner; Python uses docstrings and indentation.
"""

import re
from dataclasses import dataclass

from ..rules.base import Severity, Violation
from .delimiters import NOT_FOUND, find_matching_delimiter
from .languages import detect_language
from .text import count_non_empty_lines, indentation, line_number_at

VIOLATION_TYPE = "doc_code_ratio"


@dataclass(frozen=True)
class _DocPattern:
    """Doc-block-then-declaration regex for one language.

    Group ``doc`` holds the documentation text, group ``name`` the
    declared function name and group ``decl`` starts at the declaration.
    """

    regex: re.Pattern


_DOC_PATTERNS: dict[str, tuple[_DocPattern, ...]] = {
    "javascript": (
        _DocPattern(
            re.compile(
                r"/\*\*(?P<doc>[\s\S]*?)\*/\s*"
                r"(?P<decl>(?:export\s+)?(?:async\s+)?"
                r"(?:function\s+(?P<name>\w+)\s*\([^)]*\)"
                r"|(?:const|let|var)\s+(?P<alt>\w+)\s*=\s*(?:async\s*)?\([^)]*\)\s*=>))"
            )
        ),
    ),
    "java": (
        _DocPattern(
            re.compile(
                r"/\*\*(?P<doc>[\s\S]*?)\*/\s*"
                r"(?P<decl>(?:@\w+\s*)*(?:public|private|protected)?\s*(?:static\s+)?"
                r"(?:final\s+)?(?:\w+(?:<[^>]*>)?)\s+(?P<name>\w+)\s*\([^)]*\))"
            )
        ),
    ),
    "rust": (
        _DocPattern(
            re.compile(
                r"(?P<doc>(?:^[ \t]*//[/!].*\n)+)[ \t]*"
                r"(?P<decl>(?:pub(?:\([^)]*\))?\s+)?(?:async\s+)?fn\s+(?P<name>\w+))",
                re.MULTILINE,
            )
        ),
    ),
    "go": (
        _DocPattern(
            re.compile(
                r"(?P<doc>(?:^[ \t]*//.*\n)+)[ \t]*"
                r"(?P<decl>func\s+(?:\([^)]+\)\s+)?(?P<name>\w+))",
                re.MULTILINE,
            )
        ),
    ),
}

_PY_DEF = re.compile(r"^(\s*)(?:async\s+)?def\s+(\w+)\s*\([^)]*\)\s*(?:->.*)?:\s*$")


def _strip_doc_markers(doc: str) -> str:
    """Drop line-comment markers so marker-only lines count as blank."""
    return "\n".join(
        re.sub(r"^\s*(?://[/!]?|\*)", "", line) for line in doc.split("\n")
    )


def _violation(
    line: int,
    doc_lines: int,
    code_lines: int,
    max_ratio: float,
    function_name: str,
) -> Violation:
    ratio = round(doc_lines / code_lines, 2)
    return Violation(
        type=VIOLATION_TYPE,
        value=f"{doc_lines} doc lines / {code_lines} code lines = {ratio}x",
        threshold=f"{max_ratio}x",
        severity=Severity.MEDIUM,
        details={
            "doc_lines": doc_lines,
            "code_lines": code_lines,
            "ratio": ratio,
            "function_name": function_name,
        },
        line=line,
    )


def _analyze_brace_language(
    content: str,
    patterns: tuple[_DocPattern, ...],
    min_function_lines: int,
    max_ratio: float,
) -> list[Violation]:
    violations: list[Violation] = []

    for doc_pattern in patterns:
        for match in doc_pattern.regex.finditer(content):
            doc_lines = count_non_empty_lines(_strip_doc_markers(match.group("doc")))

            open_index = content.find("{", match.end())
            if open_index == -1:
                continue
            # Only whitespace, return types and signatures may sit between
            # the declaration and its body
            if ";" in content[match.end():open_index]:
                continue

            close_index = find_matching_delimiter(content, open_index)
            if close_index == NOT_FOUND:
                continue

            body_lines = count_non_empty_lines(content[open_index + 1:close_index])
            if body_lines < min_function_lines:
                continue

            if doc_lines / body_lines > max_ratio:
                name = match.groupdict().get("name") or match.groupdict().get("alt")
                violations.append(
                    _violation(
                        line=line_number_at(content, match.start("decl")),
                        doc_lines=doc_lines,
                        code_lines=body_lines,
                        max_ratio=max_ratio,
                        function_name=name or "unknown",
                    )
                )

    violations.sort(key=lambda v: v.line or 0)
    return violations


def _python_docstring(lines: list[str], start: int) -> tuple[int, int]:
    """Measure a docstring beginning at ``start``.

    Returns:
        (docstring line count, index of the first line after it)
    """
    if start >= len(lines):
        return 0, start
    first = lines[start].strip()
    if not (first.startswith('"""') or first.startswith("'''")):
        return 0, start

    quote = first[:3]
    if len(first) >= 6 and first.endswith(quote):
        return 1, start + 1

    doc_lines = 1
    index = start + 1
    while index < len(lines):
        if lines[index].strip():
            doc_lines += 1
        if quote in lines[index]:
            return doc_lines, index + 1
        index += 1
    return doc_lines, index


def _analyze_python(
    content: str, min_function_lines: int, max_ratio: float
) -> list[Violation]:
    violations: list[Violation] = []
    lines = content.split("\n")

    for i, line in enumerate(lines):
        match = _PY_DEF.match(line)
        if not match:
            continue

        func_indent = len(match.group(1))
        doc_lines, body_start = _python_docstring(lines, i + 1)
        if doc_lines == 0:
            continue

        code_lines = 0
        for body_line in lines[body_start:]:
            stripped = body_line.strip()
            if not stripped:
                continue
            if indentation(body_line) <= func_indent:
                break
            if not stripped.startswith("#"):
                code_lines += 1

        if code_lines < min_function_lines:
            continue

        if doc_lines / code_lines > max_ratio:
            violations.append(
                _violation(
                    line=i + 1,
                    doc_lines=doc_lines,
                    code_lines=code_lines,
                    max_ratio=max_ratio,
                    function_name=match.group(2),
                )
            )

    return violations


def analyze_doc_ratio(
    content: str,
    min_function_lines: int = 3,
    max_ratio: float = 3.0,
    language: str | None = None,
    file_path: str | None = None,
) -> list[Violation]:
    """Flag functions documented far beyond their size.

    A function is flagged when its body has at least ``min_function_lines``
    non-blank lines and ``doc_lines / body_lines`` is strictly greater than
    ``max_ratio``. A declaration whose body cannot be delimited is skipped.

    Args:
        content: File content
        min_function_lines: Smallest body that is considered
        max_ratio: Largest allowed doc/body ratio
        language: Language tag; detected from ``file_path`` when omitted
        file_path: Path used for language detection

    Returns:
        Violations with the 1-indexed declaration line and the ratio
        rounded to two decimals
    """
    language = language or detect_language(file_path) or "javascript"

    if language == "python":
        return _analyze_python(content, min_function_lines, max_ratio)

    patterns = _DOC_PATTERNS.get(language)
    if not patterns:
        return []
    return _analyze_brace_language(content, patterns, min_function_lines, max_ratio)


__all__ = ["VIOLATION_TYPE", "analyze_doc_ratio"]
