"""Comment-verbosity analyzer.

Flags function bodies where comment lines outnumber code lines by more
than a configured ratio.
"""

import re

from ..rules.base import Severity, Violation
from .delimiters import NOT_FOUND, find_matching_delimiter
from .languages import CommentSyntax, comment_syntax_for, detect_language
from .text import indentation, line_number_at

VIOLATION_TYPE = "verbosity_ratio"

# How far past a signature the opening brace may appear
_BRACE_LOOKAHEAD = 200

_FUNCTION_PATTERNS: dict[str, re.Pattern] = {
    "javascript": re.compile(
        r"(?:export\s+)?(?:async\s+)?"
        r"(?:function\s+\w+\s*\([^)]*\)"
        r"|(?:const|let|var)\s+\w+\s*=\s*(?:async\s*)?\([^)]*\)\s*=>"
        r"|(?:const|let|var)\s+\w+\s*=\s*(?:async\s+)?function\s*\([^)]*\))"
    ),
    "java": re.compile(
        r"(?:(?:public|private|protected|static|final|synchronized|abstract)\s+)*"
        r"[\w<>\[\],.]+\s+(?P<name>\w+)\s*\([^)]*\)"
        r"(?:\s*throws\s+[\w.]+(?:\s*,\s*[\w.]+)*)?"
    ),
    "rust": re.compile(
        r"(?:pub(?:\([^)]*\))?\s+)?(?:async\s+)?(?:unsafe\s+)?fn\s+\w+"
        r"\s*(?:<[^>]*>)?\s*\([^)]*\)[^{;]*"
    ),
    "go": re.compile(r"func\s+(?:\([^)]+\)\s+)?\w+\s*\([^)]*\)[^{\n]*"),
}

_PY_DEF = re.compile(r"^(\s*)(?:async\s+)?def\s+\w+\s*\(")
_PY_SIGNATURE_END = re.compile(r":\s*(?:#.*)?$")
_PY_ONE_LINER = re.compile(r"\)\s*(?:->[^:]*)?:\s*[^\s#]")

# Longest multi-line Python signature that is followed
_MAX_SIGNATURE_LINES = 20

# Java control-flow keywords the method pattern would otherwise accept
_JAVA_KEYWORDS = frozenset(
    {"if", "for", "while", "switch", "catch", "else", "return", "new", "synchronized"}
)


def classify_lines(body: str, syntax: CommentSyntax) -> tuple[int, int]:
    """Count comment and code lines of a function body.

    Args:
        body: Text between the function's delimiters
        syntax: Comment markers of the body's language

    Returns:
        (comment_lines, code_lines); blank lines count as neither
    """
    comment_lines = 0
    code_lines = 0
    in_block = False

    for raw in body.split("\n"):
        line = raw.strip()
        if not line:
            continue

        if in_block:
            comment_lines += 1
            if syntax.block_end in line:
                in_block = False
            continue

        if line.startswith(syntax.block_start):
            comment_lines += 1
            rest = line[len(syntax.block_start):]
            if syntax.block_end not in rest:
                in_block = True
        elif line.startswith(syntax.line):
            comment_lines += 1
        else:
            code_lines += 1

    return comment_lines, code_lines


def _violation(
    line: int, comment_lines: int, code_lines: int, max_comment_ratio: float
) -> Violation:
    ratio = round(comment_lines / code_lines, 2)
    return Violation(
        type=VIOLATION_TYPE,
        value=f"{comment_lines} comment lines / {code_lines} code lines = {ratio}x",
        threshold=f"{max_comment_ratio}x",
        severity=Severity.MEDIUM,
        details={
            "comment_lines": comment_lines,
            "code_lines": code_lines,
            "ratio": ratio,
        },
        line=line,
    )


def _analyze_brace_language(
    content: str,
    pattern: re.Pattern,
    syntax: CommentSyntax,
    min_code_lines: int,
    max_comment_ratio: float,
    skip_keywords: bool = False,
) -> list[Violation]:
    violations: list[Violation] = []
    resume_at = 0

    for match in pattern.finditer(content):
        if match.start() < resume_at:
            # Nested inside a body that was already measured
            continue
        if skip_keywords and (
            match.group("name") in _JAVA_KEYWORDS
            or match.group(0).split()[0] in _JAVA_KEYWORDS
        ):
            continue

        after = content[match.end():match.end() + _BRACE_LOOKAHEAD]
        brace = re.match(r"\s*\{", after)
        if not brace:
            continue

        open_index = match.end() + brace.end() - 1
        close_index = find_matching_delimiter(content, open_index)
        if close_index == NOT_FOUND:
            continue

        comment_lines, code_lines = classify_lines(
            content[open_index + 1:close_index], syntax
        )
        resume_at = close_index

        if code_lines >= min_code_lines and comment_lines / code_lines > max_comment_ratio:
            violations.append(
                _violation(
                    line_number_at(content, match.start()),
                    comment_lines,
                    code_lines,
                    max_comment_ratio,
                )
            )

    return violations


def _analyze_python(
    content: str, min_code_lines: int, max_comment_ratio: float
) -> list[Violation]:
    violations: list[Violation] = []
    lines = content.split("\n")
    syntax = comment_syntax_for("python")
    index = 0

    while index < len(lines):
        match = _PY_DEF.match(lines[index])
        if not match:
            index += 1
            continue

        if _PY_ONE_LINER.search(lines[index]):
            index += 1
            continue

        func_indent = len(match.group(1))
        signature_end = index
        while (
            signature_end < len(lines)
            and signature_end - index < _MAX_SIGNATURE_LINES
            and not _PY_SIGNATURE_END.search(lines[signature_end])
        ):
            signature_end += 1
        if signature_end >= len(lines) or signature_end - index >= _MAX_SIGNATURE_LINES:
            index += 1
            continue

        start = signature_end + 1
        end = start
        while end < len(lines):
            line = lines[end]
            if line.strip() and indentation(line) <= func_indent:
                break
            end += 1

        comment_lines, code_lines = classify_lines("\n".join(lines[start:end]), syntax)
        if code_lines >= min_code_lines and comment_lines / code_lines > max_comment_ratio:
            violations.append(
                _violation(index + 1, comment_lines, code_lines, max_comment_ratio)
            )

        # Nested functions are part of the enclosing body
        index = max(end, index + 1)

    return violations


def analyze_verbosity_ratio(
    content: str,
    min_code_lines: int = 3,
    max_comment_ratio: float = 2.0,
    language: str | None = None,
    file_path: str | None = None,
) -> list[Violation]:
    """Flag functions with excessive inline commentary.

    Args:
        content: File content
        min_code_lines: Smallest number of code lines considered
        max_comment_ratio: Largest allowed comment/code ratio
        language: Language tag; detected from ``file_path`` when omitted
        file_path: Path used for language detection

    Returns:
        Violations with the 1-indexed line of each flagged function
    """
    language = language or detect_language(file_path) or "javascript"

    if language == "python":
        return _analyze_python(content, min_code_lines, max_comment_ratio)

    pattern = _FUNCTION_PATTERNS.get(language)
    if pattern is None:
        return []
    return _analyze_brace_language(
        content,
        pattern,
        comment_syntax_for(language),
        min_code_lines,
        max_comment_ratio,
        skip_keywords=language == "java",
    )


__all__ = ["VIOLATION_TYPE", "analyze_verbosity_ratio", "classify_lines"]
