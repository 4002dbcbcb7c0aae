"""Tests for language conventions and text helpers."""

import pytest

from slop_detector.analysis.languages import (
    comment_syntax_for,
    detect_language,
    is_test_file,
)
from slop_detector.analysis.text import (
    count_non_empty_lines,
    excerpt,
    line_number_at,
    shannon_entropy,
)


class TestLanguages:
    """Test extension mapping and path conventions."""

    @pytest.mark.parametrize(
        "path, language",
        [
            ("src/app.tsx", "javascript"),
            ("lib/mod.mjs", "javascript"),
            ("pkg/tool.py", "python"),
            ("src/lib.rs", "rust"),
            ("cmd/main.go", "go"),
            ("App.java", "java"),
            (".py", "python"),
            ("README.md", None),
            ("Makefile", None),
            (None, None),
        ],
    )
    def test_detect_language(self, path, language):
        """Test extension to language mapping."""
        assert detect_language(path) == language

    @pytest.mark.parametrize(
        "path",
        [
            "src/app.test.ts",
            "src/app.spec.js",
            "pkg/store_test.go",
            "tests/test_engine.py",
            "src/__tests__/x.js",
            "UserTest.java",
        ],
    )
    def test_test_files(self, path):
        """Test files following test naming conventions."""
        assert is_test_file(path)

    def test_non_test_files(self):
        """Test ordinary source files are not test files."""
        assert not is_test_file("src/contest.js")
        assert not is_test_file("src/latest.py")

    def test_comment_syntax(self):
        """Test comment markers per language family."""
        assert comment_syntax_for("python").line == "#"
        assert comment_syntax_for(None).line == "//"


class TestTextHelpers:
    """Test line and entropy helpers."""

    def test_line_number_at(self):
        """Test offsets map to 1-indexed lines."""
        content = "a\nbb\nccc"
        assert line_number_at(content, 0) == 1
        assert line_number_at(content, 2) == 2
        assert line_number_at(content, 5) == 3

    def test_count_non_empty_lines(self):
        """Test whitespace-only lines are not counted."""
        assert count_non_empty_lines("a\n  \n\tb\n") == 2

    def test_excerpt(self):
        """Test excerpts are stripped and cut to 100 characters."""
        assert excerpt("   x   ") == "x"
        assert len(excerpt("y" * 300)) == 100

    def test_shannon_entropy(self):
        """Test entropy of uniform and repeated strings."""
        assert shannon_entropy("") == 0.0
        assert shannon_entropy("aaaa") == 0.0
        assert shannon_entropy("abcd") == pytest.approx(2.0)
