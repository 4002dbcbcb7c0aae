"""Bounded repository traversal and the counters built on it.

Used by the project-level analyzers. Every walk is sorted, skips build,
vendor and VCS directories, never follows directory symlinks and stops at
a fixed depth, so the amount of work is bounded by the tree itself.
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path

from ..detector_logging import get_logger
from .languages import ALL_SOURCE_EXTENSIONS, EXCLUDE_DIRS, detect_language, is_test_file

logger = get_logger()

MAX_TRAVERSAL_DEPTH = 20
DEFAULT_MAX_FILES = 10000

# Export statements of each language's public surface
EXPORT_PATTERNS: dict[str, tuple[re.Pattern, ...]] = {
    "javascript": (
        re.compile(r"export\s+(function|class|const|let|var|default|async\s+function)"),
        re.compile(r"export\s*\{[^}]+\}"),
        re.compile(r"export\s*\*\s*(as\s+\w+\s+)?from"),
        re.compile(r"module\.exports\s*="),
        re.compile(r"exports\.\w+\s*="),
    ),
    "rust": (
        re.compile(r"^pub\s+(fn|struct|enum|mod|type|trait|const|static)", re.MULTILINE),
    ),
    "go": (
        re.compile(r"^func\s+[A-Z]", re.MULTILINE),
        re.compile(r"^type\s+[A-Z]\w*\s+(struct|interface)", re.MULTILINE),
        re.compile(r"^var\s+[A-Z]", re.MULTILINE),
        re.compile(r"^const\s+[A-Z]", re.MULTILINE),
    ),
    "python": (
        re.compile(r"__all__\s*=\s*\["),
        re.compile(r"^def\s+(?!_)\w+\s*\(", re.MULTILINE),
        re.compile(r"^class\s+[A-Z]\w*[\s:(]", re.MULTILINE),
    ),
    "java": (
        re.compile(r"^\s*public\s+(?:final\s+|abstract\s+)*(class|interface|enum|record)\s+", re.MULTILINE),
    ),
}

# Conventional public entry points, checked in order
ENTRY_POINTS = (
    "index.js",
    "index.ts",
    "src/index.js",
    "src/index.ts",
    "lib/index.js",
    "lib/index.ts",
    "main.js",
    "main.ts",
    "lib.rs",
    "src/lib.rs",
    "main.go",
    "__init__.py",
    "src/__init__.py",
)

_LINE_COMMENT_PREFIXES = ("//", "#", "///", '"""', "'''")


@dataclass
class ExportCount:
    """Result of counting a repository's public exports."""

    count: int
    method: str  # entry-points | src-scan | fallback
    entry_points: list[str] = field(default_factory=list)


def sorted_entries(directory: Path) -> list[os.DirEntry]:
    """Directory entries sorted by name; empty when unreadable."""
    try:
        with os.scandir(directory) as it:
            return sorted(it, key=lambda entry: entry.name)
    except OSError as e:
        logger.debug(f"Skipping unreadable directory {directory}: {e}")
        return []


def iter_source_files(
    root: str | Path,
    include_tests: bool = False,
    max_files: int = DEFAULT_MAX_FILES,
    max_depth: int = MAX_TRAVERSAL_DEPTH,
) -> list[str]:
    """List source files under ``root`` as sorted relative posix paths.

    Args:
        root: Directory to walk
        include_tests: Keep files that follow a test naming convention
        max_files: Stop after this many files
        max_depth: Deepest directory level entered below ``root``

    Returns:
        Relative paths in walk order
    """
    root = Path(root)
    files: list[str] = []

    def walk(directory: Path, prefix: str, depth: int) -> None:
        if depth > max_depth:
            return
        for entry in sorted_entries(directory):
            if len(files) >= max_files:
                return
            if entry.name in EXCLUDE_DIRS:
                continue
            relative = f"{prefix}{entry.name}"
            try:
                if entry.is_dir(follow_symlinks=False):
                    walk(Path(entry.path), f"{relative}/", depth + 1)
                    continue
                if not entry.is_file():
                    continue
            except OSError:
                continue
            if os.path.splitext(entry.name)[1] not in ALL_SOURCE_EXTENSIONS:
                continue
            if include_tests or not is_test_file(relative):
                files.append(relative)

    walk(root, "", 0)
    if len(files) >= max_files:
        logger.debug(f"Source file walk of {root} stopped at {max_files} files")
    return files


def read_source_text(path: Path) -> str | None:
    """Read a file as UTF-8, or None when it cannot be read or decoded."""
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.debug(f"Skipping unreadable file {path}: {e}")
        return None


def count_code_lines(content: str) -> int:
    """Count lines that are neither blank nor comments.

    Block comments are removed inline and across lines; lines that start
    with a line-comment or docstring marker are skipped.
    """
    total = 0
    in_block = False

    for raw in content.split("\n"):
        line = raw.strip()
        if not line:
            continue

        if in_block:
            end = line.find("*/")
            if end == -1:
                continue
            in_block = False
            line = line[end + 2:].strip()

        start = line.find("/*")
        if start != -1:
            before = line[:start].strip()
            after = line[start + 2:]
            end = after.find("*/")
            if end != -1:
                line = f"{before} {after[end + 2:].strip()}".strip()
            else:
                in_block = True
                line = before

        if not line or line.startswith(_LINE_COMMENT_PREFIXES):
            continue
        total += 1

    return total


def count_source_lines(root: str | Path, files: list[str] | None = None) -> int:
    """Total code lines across ``files`` (default: the non-test source tree)."""
    root = Path(root)
    if files is None:
        files = iter_source_files(root)

    total = 0
    for relative in files:
        content = read_source_text(root / relative)
        if content is not None:
            total += count_code_lines(content)
    return total


def count_exports_in_content(content: str, language: str | None) -> int:
    """Count export statements, using JavaScript patterns for unknown languages."""
    patterns = EXPORT_PATTERNS.get(language or "", EXPORT_PATTERNS["javascript"])
    return sum(len(pattern.findall(content)) for pattern in patterns)


def count_entry_point_exports(root: str | Path) -> ExportCount:
    """Count the public exports of a repository.

    Conventional entry points are tried first. When none of them exports
    anything, every source file under ``src/`` is scanned. When that finds
    nothing either, a single export is assumed so ratios stay defined.
    """
    root = Path(root)
    found: list[str] = []
    count = 0

    for entry in ENTRY_POINTS:
        path = root / entry
        if not path.is_file():
            continue
        content = read_source_text(path)
        if content is None:
            continue
        exports = count_exports_in_content(content, detect_language(entry))
        if exports > 0:
            found.append(entry)
            count += exports

    if count > 0:
        return ExportCount(count=count, method="entry-points", entry_points=found)

    src = root / "src"
    if src.is_dir():
        for relative in iter_source_files(src):
            content = read_source_text(src / relative)
            if content is not None:
                count += count_exports_in_content(content, detect_language(relative))
        if count > 0:
            return ExportCount(count=count, method="src-scan", entry_points=["src/"])

    return ExportCount(count=1, method="fallback")


def max_directory_depth(root: str | Path, start_dir: str = "src") -> int:
    """Deepest directory level below ``root/start_dir``.

    The start directory itself is level 1; 0 means it does not exist.
    Levels beyond MAX_TRAVERSAL_DEPTH are not entered.
    """
    start = Path(root) / start_dir
    if not start.is_dir():
        return 0

    deepest = 0

    def walk(directory: Path, depth: int) -> None:
        nonlocal deepest
        deepest = max(deepest, depth)
        if depth >= MAX_TRAVERSAL_DEPTH:
            return
        for entry in sorted_entries(directory):
            if entry.name in EXCLUDE_DIRS:
                continue
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
            except OSError:
                continue
            if is_dir:
                walk(Path(entry.path), depth + 1)

    walk(start, 1)
    return deepest


__all__ = [
    "ENTRY_POINTS",
    "EXPORT_PATTERNS",
    "ExportCount",
    "MAX_TRAVERSAL_DEPTH",
    "count_code_lines",
    "count_entry_point_exports",
    "count_exports_in_content",
    "count_source_lines",
    "iter_source_files",
    "max_directory_depth",
    "read_source_text",
    "sorted_entries",
]
