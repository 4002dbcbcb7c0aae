"""Tests for the delimiter-matching scanner."""

import pytest

from slop_detector.analysis.delimiters import NOT_FOUND, find_matching_delimiter


class TestFindMatchingDelimiter:
    """Test structural delimiter matching."""

    @pytest.mark.parametrize(
        "content",
        [
            "{ a { b } }",
            "(a, (b), c)",
            "[1, [2, [3]]]",
        ],
    )
    def test_nested(self, content):
        """Test nested pairs of the same kind."""
        assert find_matching_delimiter(content, 0) == len(content) - 1

    def test_other_delimiters_ignored(self):
        """Test only the opener's own kind changes depth."""
        content = "(a, {b), c})"
        assert find_matching_delimiter(content, 0) == 6

    def test_line_comment(self):
        """Test closers in line comments are skipped."""
        content = "{ // }\n}"
        assert find_matching_delimiter(content, 0) == len(content) - 1

    def test_block_comment(self):
        """Test closers in block comments are skipped."""
        content = "{ /* } */ }"
        assert find_matching_delimiter(content, 0) == len(content) - 1

    def test_string_literals(self):
        """Test closers in quoted strings are skipped."""
        assert find_matching_delimiter("{ '}' }", 0) == 6
        assert find_matching_delimiter('{ "}" }', 0) == 6

    def test_escaped_quote(self):
        """Test an escaped quote does not end the string."""
        content = '{ "a\\"}" }'
        assert find_matching_delimiter(content, 0) == len(content) - 1

    def test_template_interpolation(self):
        """Test quotes and braces inside ${...} are tracked."""
        content = "{ a: `${ b ? '{' : '}' }`, c: {} }"
        assert find_matching_delimiter(content, 0) == len(content) - 1

    def test_template_literal_spans_lines(self):
        """Test backtick strings may span lines."""
        content = "{ `line }\nstill }` }"
        assert find_matching_delimiter(content, 0) == len(content) - 1

    def test_apostrophe_ends_at_newline(self):
        """Test a lone apostrophe does not swallow the rest of the file."""
        content = "{\n  // it's fine\n  let x = 'it\n}"
        assert find_matching_delimiter(content, 0) == len(content) - 1

    def test_rust_lifetime(self):
        """Test a Rust lifetime does not open a string."""
        content = "{\n    let s: &'a str = x;\n}"
        assert find_matching_delimiter(content, 0) == len(content) - 1

    def test_unbalanced(self):
        """Test an unclosed opener returns NOT_FOUND."""
        assert find_matching_delimiter("{ a { b }", 0) == NOT_FOUND

    def test_unterminated_comment(self):
        """Test an unterminated block comment returns NOT_FOUND."""
        assert find_matching_delimiter("{ /* }", 0) == NOT_FOUND

    def test_invalid_opener(self):
        """Test non-delimiter and out-of-range indices."""
        assert find_matching_delimiter("abc", 0) == NOT_FOUND
        assert find_matching_delimiter("{}", 5) == NOT_FOUND
        assert find_matching_delimiter("{}", -1) == NOT_FOUND

    def test_window_limit(self):
        """Test the scan stops after the window."""
        content = "{" + " " * 10 + "}"
        assert find_matching_delimiter(content, 0, max_window=5) == NOT_FOUND
        assert find_matching_delimiter(content, 0, max_window=11) == 11

    def test_closer_exactly_at_window_end(self):
        """Test the window includes its last character."""
        content = "{" + " " * 4 + "}"
        assert find_matching_delimiter(content, 0, max_window=5) == 5
