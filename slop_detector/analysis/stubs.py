"""Stub-function analyzer.

A stub is a function whose body holds exactly one significant line and
that line only returns a placeholder value or raises a not-implemented
marker. Comments do not count as significant lines.
"""

import re
from dataclasses import dataclass

from ..rules.base import Severity, Violation
from .delimiters import NOT_FOUND, find_matching_delimiter
from .languages import detect_language
from .text import indentation, line_number_at

VIOLATION_TYPE = "stub_function"

_TODO_MARKER = re.compile(r"\b(TODO|FIXME|XXX|HACK|STUB)\b", re.IGNORECASE)
_C_COMMENT = re.compile(r"^\s*(?://|/\*|\*)")

# Python looks for TODO markers this many lines from the def
_PY_TODO_WINDOW = 10


@dataclass(frozen=True)
class _StubConfig:
    """How one brace language declares functions and spells a stub body.

    Each entry of ``stub_lines`` pairs a pattern with a label; when the
    label is None the pattern's first group is the reported value.
    """

    functions: tuple[re.Pattern, ...]
    stub_lines: tuple[tuple[re.Pattern, str | None], ...]


_CONFIGS: dict[str, _StubConfig] = {
    "javascript": _StubConfig(
        functions=(
            re.compile(r"(?:async\s+)?function\s+(\w+)\s*\([^)]*\)\s*\{"),
            re.compile(r"(?:const|let|var)\s+(\w+)\s*=\s*(?:async\s*)?\([^)]*\)\s*=>\s*\{"),
            re.compile(r"(?:const|let|var)\s+(\w+)\s*=\s*(?:async\s+)?function\s*\([^)]*\)\s*\{"),
            re.compile(
                r"^[ \t]*(?:async\s+)?(?!if\b|for\b|while\b|switch\b|catch\b|with\b|function\b)"
                r"(\w+)\s*\([^)]*\)\s*\{",
                re.MULTILINE,
            ),
        ),
        stub_lines=(
            (
                re.compile(r"^\s*return\s+(0|null|undefined|true|false|\[\]|\{\}|\"\"|''|``)\s*;?\s*$"),
                None,
            ),
        ),
    ),
    "rust": _StubConfig(
        functions=(
            re.compile(
                r"(?:pub(?:\([^)]*\))?\s+)?(?:async\s+)?fn\s+(\w+)\s*(?:<[^>]*>)?\s*\([^)]*\)"
                r"(?:\s*->\s*[^{]+)?\s*\{"
            ),
        ),
        stub_lines=(
            (
                re.compile(
                    r"^\s*(?:return\s+)?(None|0|true|false|String::new\(\)|Vec::new\(\)|vec!\[\]"
                    r"|\(\)|\"\"|Default::default\(\))\s*;?\s*$"
                ),
                None,
            ),
            (re.compile(r"^\s*(todo!\(\)|unimplemented!\(\)|panic!\([^)]*\))\s*;?\s*$"), None),
        ),
    ),
    "java": _StubConfig(
        functions=(
            re.compile(
                r"(?:public|private|protected)?\s*(?:static\s+)?(?:final\s+)?"
                r"(?:\w+(?:<[^>]*>)?)\s+(\w+)\s*\([^)]*\)\s*(?:throws\s+[^{]+)?\s*\{"
            ),
        ),
        stub_lines=(
            (
                re.compile(
                    r"^\s*return\s+(null|0|0L|0\.0|0\.0f|true|false|\"\"|Collections\.emptyList\(\)"
                    r"|Collections\.emptyMap\(\)|Optional\.empty\(\))\s*;\s*$"
                ),
                None,
            ),
            (
                re.compile(
                    r"^\s*throw\s+new\s+(?:Unsupported(?:Operation)?Exception|NotImplementedException"
                    r"|IllegalStateException)\s*\([^)]*\)\s*;\s*$"
                ),
                "throw stub",
            ),
        ),
    ),
    "go": _StubConfig(
        functions=(
            re.compile(
                r"func\s+(?:\([^)]+\)\s+)?(\w+)\s*\([^)]*\)(?:\s*(?:\([^)]+\)|[^{\n]+))?\s*\{"
            ),
        ),
        stub_lines=(
            (
                re.compile(
                    r"^\s*return\s+(nil|0|\"\"|false|true|\[\][a-zA-Z_]\w*\{\}"
                    r"|map\[[^\]]+\][a-zA-Z_]\w*\{\}|&?[A-Z]\w*\{\})\s*$"
                ),
                None,
            ),
            (re.compile(r"^\s*panic\s*\([^)]*\)\s*$"), "panic"),
        ),
    ),
}

_PY_DEF = re.compile(r"^(\s*)(?:async\s+)?def\s+(\w+)\s*\([^)]*\)\s*(?:->.*)?:\s*$")
_PY_STUB_LINES = (
    re.compile(r"^\s*return\s+(None|0|True|False|\[\]|\{\}|\"\")\s*$"),
    re.compile(r"^\s*pass\s*$"),
    re.compile(r"^\s*raise\s+NotImplementedError(?:\s*\([^)]*\))?\s*$"),
    re.compile(r"^\s*\.\.\.\s*$"),
)

# Control-flow keywords the JavaScript method pattern must not treat as names
_NOT_FUNCTION_NAMES = frozenset({"if", "for", "while", "switch", "catch", "with", "return"})


def _violation(
    line: int, function_name: str, return_value: str, has_todo: bool, content: str
) -> Violation:
    return Violation(
        type=VIOLATION_TYPE,
        value=content,
        threshold="1 significant line",
        severity=Severity.HIGH if has_todo else Severity.MEDIUM,
        details={
            "function_name": function_name,
            "return_value": return_value,
            "has_todo": has_todo,
        },
        line=line,
    )


def _match_stub_line(line: str, stub_lines) -> str | None:
    for pattern, label in stub_lines:
        match = pattern.match(line)
        if match:
            return label or match.group(1)
    return None


def _analyze_brace_language(content: str, config: _StubConfig) -> list[Violation]:
    found: dict[int, Violation] = {}

    for pattern in config.functions:
        for match in pattern.finditer(content):
            open_index = match.end() - 1
            if open_index in found:
                continue
            name = match.group(1) or "anonymous"
            if name in _NOT_FUNCTION_NAMES:
                continue

            close_index = find_matching_delimiter(content, open_index)
            if close_index == NOT_FOUND:
                continue

            body = content[open_index + 1:close_index]
            significant = [
                line.strip()
                for line in body.split("\n")
                if line.strip() and not _C_COMMENT.match(line)
            ]
            if len(significant) != 1:
                continue

            return_value = _match_stub_line(significant[0], config.stub_lines)
            if return_value is None:
                continue

            found[open_index] = _violation(
                line=line_number_at(content, open_index),
                function_name=name,
                return_value=return_value,
                has_todo=bool(_TODO_MARKER.search(body)),
                content=f"{name}() returns {return_value}",
            )

    return [found[index] for index in sorted(found)]


def _python_body(lines: list[str], start: int, func_indent: int) -> list[str]:
    """Significant body lines, without comments and docstrings."""
    body: list[str] = []
    docstring_quote = ""

    for line in lines[start:]:
        stripped = line.strip()
        if not stripped:
            continue
        if docstring_quote:
            if docstring_quote in stripped:
                docstring_quote = ""
            continue
        if indentation(line) <= func_indent:
            break
        if stripped.startswith("#"):
            continue
        if stripped.startswith(('"""', "'''")):
            quote = stripped[:3]
            if quote not in stripped[3:]:
                docstring_quote = quote
            continue
        body.append(stripped)

    return body


def _analyze_python(content: str) -> list[Violation]:
    violations: list[Violation] = []
    lines = content.split("\n")

    for i, line in enumerate(lines):
        match = _PY_DEF.match(line)
        if not match:
            continue

        name = match.group(2)
        body = _python_body(lines, i + 1, len(match.group(1)))
        if len(body) != 1:
            continue

        only_line = body[0]
        for pattern in _PY_STUB_LINES:
            stub = pattern.match(only_line)
            if not stub:
                continue
            window = "\n".join(lines[i:i + _PY_TODO_WINDOW])
            violations.append(
                _violation(
                    line=i + 1,
                    function_name=name,
                    return_value=stub.group(1) if stub.groups() else only_line,
                    has_todo=bool(_TODO_MARKER.search(window)),
                    content=f"def {name}(): {only_line}",
                )
            )
            break

    return violations


def analyze_stub_functions(
    content: str,
    language: str | None = None,
    file_path: str | None = None,
) -> list[Violation]:
    """Find functions whose whole body is a placeholder.

    Args:
        content: File content
        language: Language tag; detected from ``file_path`` when omitted
        file_path: Path used for language detection

    Returns:
        Violations in line order; ``details["has_todo"]`` is set when a
        TODO-like marker appears in or right after the function
    """
    language = language or detect_language(file_path) or "javascript"

    if language == "python":
        return _analyze_python(content)

    config = _CONFIGS.get(language)
    if config is None:
        return []
    return _analyze_brace_language(content, config)


__all__ = ["VIOLATION_TYPE", "analyze_stub_functions"]
