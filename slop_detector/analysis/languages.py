"""Language conventions used across the analyzers.

Extension-to-language mapping, comment syntax per language family, and
the path conventions that mark test files and non-source directories.
"""

import re
from dataclasses import dataclass
from pathlib import PurePath

# Language names match the rule table's language tags
SOURCE_EXTENSIONS: dict[str, tuple[str, ...]] = {
    "javascript": (".js", ".jsx", ".ts", ".tsx", ".mjs", ".cjs"),
    "python": (".py",),
    "rust": (".rs",),
    "go": (".go",),
    "java": (".java",),
}

_EXTENSION_TO_LANGUAGE = {
    ext: language for language, exts in SOURCE_EXTENSIONS.items() for ext in exts
}

ALL_SOURCE_EXTENSIONS = frozenset(_EXTENSION_TO_LANGUAGE)

EXCLUDE_DIRS = frozenset(
    {
        "node_modules",
        "vendor",
        "dist",
        "build",
        "out",
        "target",
        ".git",
        ".svn",
        ".hg",
        "__pycache__",
        ".pytest_cache",
        "coverage",
        ".nyc_output",
        ".next",
        ".nuxt",
        ".cache",
    }
)

_TEST_FILE_PATTERNS = (
    re.compile(r"\.test\.[jt]sx?$"),
    re.compile(r"\.spec\.[jt]sx?$"),
    re.compile(r"_tests?\.(go|rs|py)$"),
    re.compile(r"(^|/)test_[^/]*\.py$"),
    re.compile(r"Test\.java$"),
    re.compile(r"__tests__"),
    re.compile(r"(^|/)tests?/", re.IGNORECASE),
)


@dataclass(frozen=True)
class CommentSyntax:
    """Comment markers of one language family."""

    line: str
    block_start: str
    block_end: str


COMMENT_SYNTAX: dict[str, CommentSyntax] = {
    "javascript": CommentSyntax(line="//", block_start="/*", block_end="*/"),
    "java": CommentSyntax(line="//", block_start="/*", block_end="*/"),
    "rust": CommentSyntax(line="//", block_start="/*", block_end="*/"),
    "go": CommentSyntax(line="//", block_start="/*", block_end="*/"),
    "python": CommentSyntax(line="#", block_start='"""', block_end='"""'),
}


def _as_posix(file_path: str | PurePath) -> str:
    return str(file_path).replace("\\", "/")


def detect_language(file_path: str | PurePath | None) -> str | None:
    """Map a file path to a rule language tag.

    Args:
        file_path: Path or bare extension (".py")

    Returns:
        Language name, or None for unrecognized files
    """
    if not file_path:
        return None
    path = _as_posix(file_path)
    name = path.rsplit("/", 1)[-1]
    if name.startswith(".") and name.count(".") == 1:
        suffix = name
    else:
        suffix = PurePath(name).suffix
    return _EXTENSION_TO_LANGUAGE.get(suffix.lower())


def comment_syntax_for(language: str | None) -> CommentSyntax:
    """Comment syntax of a language, defaulting to the C family."""
    return COMMENT_SYNTAX.get(language or "", COMMENT_SYNTAX["javascript"])


def is_test_file(file_path: str | PurePath) -> bool:
    """Check whether a path follows a test-file naming convention."""
    path = _as_posix(file_path)
    return any(p.search(path) for p in _TEST_FILE_PATTERNS)
