"""Tests for bounded repository traversal and its counters."""

import os
from pathlib import Path

import pytest

from slop_detector.analysis.source_tree import (
    count_code_lines,
    count_entry_point_exports,
    count_exports_in_content,
    count_source_lines,
    iter_source_files,
    max_directory_depth,
)


def write(root: Path, relative: str, content: str = "") -> Path:
    """Create a file with parent directories."""
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path


class TestIterSourceFiles:
    """Test the source file walk."""

    @pytest.fixture
    def repo(self, tmp_path: Path) -> Path:
        """Create a small mixed repository."""
        write(tmp_path, "README.md", "# Project\n")
        write(tmp_path, "src/a.js", "const a = 1;\n")
        write(tmp_path, "src/b.test.js", "test('b', () => {});\n")
        write(tmp_path, "src/deep/c.py", "x = 1\n")
        write(tmp_path, "node_modules/dep/index.js", "module.exports = {};\n")
        write(tmp_path, "build/out.js", "var x;\n")
        return tmp_path

    def test_sorted_relative_paths(self, repo):
        """Test the walk is sorted and skips non-source files."""
        assert iter_source_files(repo) == ["src/a.js", "src/deep/c.py"]

    def test_include_tests(self, repo):
        """Test test files are kept on request."""
        assert iter_source_files(repo, include_tests=True) == [
            "src/a.js",
            "src/b.test.js",
            "src/deep/c.py",
        ]

    def test_max_files(self, repo):
        """Test the walk stops at max_files."""
        assert iter_source_files(repo, include_tests=True, max_files=2) == [
            "src/a.js",
            "src/b.test.js",
        ]

    def test_max_depth(self, repo):
        """Test directories deeper than max_depth are not entered."""
        assert iter_source_files(repo, max_depth=1) == ["src/a.js"]

    def test_directory_symlinks_not_followed(self, repo):
        """Test a symlink loop does not recurse."""
        os.symlink(repo / "src", repo / "src" / "loop", target_is_directory=True)
        assert iter_source_files(repo) == ["src/a.js", "src/deep/c.py"]

    def test_missing_root(self, tmp_path):
        """Test a missing root yields nothing."""
        assert iter_source_files(tmp_path / "missing") == []


class TestCountCodeLines:
    """Test code line counting."""

    def test_skips_comments_and_blanks(self):
        """Test comments, block comments and blank lines are not code."""
        content = (
            "// header\n"
            "\n"
            "const a = 1; /* inline */\n"
            "/*\n"
            " block\n"
            "*/\n"
            "const b = 2;\n"
            "# python comment\n"
        )
        assert count_code_lines(content) == 2

    def test_code_after_block_end(self):
        """Test code following a block comment end counts."""
        assert count_code_lines("/* a\n b */ run();\n") == 1

    def test_count_source_lines(self, tmp_path):
        """Test line totals across a tree."""
        write(tmp_path, "a.js", "const a = 1;\nconst b = 2;\n")
        write(tmp_path, "b.py", "# note\nx = 1\n")
        assert count_source_lines(tmp_path) == 3


class TestExports:
    """Test export counting."""

    def test_javascript(self):
        """Test JavaScript export forms."""
        content = (
            "export function a() {}\n"
            "export const b = 1;\n"
            "export { c, d };\n"
            "module.exports = {};\n"
        )
        assert count_exports_in_content(content, "javascript") == 4

    def test_python(self):
        """Test __all__, public functions and classes."""
        content = (
            "__all__ = ['a']\n"
            "def public():\n"
            "    pass\n"
            "def _private():\n"
            "    pass\n"
            "class Foo:\n"
            "    pass\n"
        )
        assert count_exports_in_content(content, "python") == 3

    def test_rust_and_go(self):
        """Test pub items and capitalized Go names."""
        rust = "pub fn a() {}\npub struct B;\nfn c() {}\n"
        go = "func Exported() {}\nfunc private() {}\ntype Server struct {}\n"
        assert count_exports_in_content(rust, "rust") == 2
        assert count_exports_in_content(go, "go") == 2

    def test_entry_points(self, tmp_path):
        """Test conventional entry points are counted first."""
        write(tmp_path, "index.js", "export function a() {}\nexport function b() {}\n")
        write(tmp_path, "src/other.js", "export function c() {}\n")

        result = count_entry_point_exports(tmp_path)

        assert result.count == 2
        assert result.method == "entry-points"
        assert result.entry_points == ["index.js"]

    def test_src_scan(self, tmp_path):
        """Test src/ is scanned when entry points export nothing."""
        write(tmp_path, "src/util.js", "export function c() {}\n")
        write(tmp_path, "src/more.js", "export const d = 1;\n")

        result = count_entry_point_exports(tmp_path)

        assert result.count == 2
        assert result.method == "src-scan"

    def test_fallback(self, tmp_path):
        """Test a single export is assumed when nothing is found."""
        write(tmp_path, "src/util.js", "const c = 1;\n")

        result = count_entry_point_exports(tmp_path)

        assert result.count == 1
        assert result.method == "fallback"


class TestDirectoryDepth:
    """Test directory depth measurement."""

    def test_no_src(self, tmp_path):
        """Test a missing start directory has depth 0."""
        assert max_directory_depth(tmp_path) == 0

    def test_levels(self, tmp_path):
        """Test src itself is level 1."""
        (tmp_path / "src").mkdir()
        assert max_directory_depth(tmp_path) == 1

        (tmp_path / "src" / "a" / "b").mkdir(parents=True)
        assert max_directory_depth(tmp_path) == 3

    def test_excluded_directories(self, tmp_path):
        """Test excluded directories do not add depth."""
        (tmp_path / "src" / "node_modules" / "x" / "y").mkdir(parents=True)
        assert max_directory_depth(tmp_path) == 1
