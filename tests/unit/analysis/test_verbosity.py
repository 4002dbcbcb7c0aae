"""Tests for the comment-verbosity analyzer."""

from slop_detector.analysis.languages import comment_syntax_for
from slop_detector.analysis.verbosity import (
    VIOLATION_TYPE,
    analyze_verbosity_ratio,
    classify_lines,
)


def comments(count: int, marker: str = "//", indent: str = "  ") -> str:
    """Build consecutive comment lines."""
    return "".join(f"{indent}{marker} step {i}\n" for i in range(count))


def js_function(comment_count: int) -> str:
    """Build a three-statement JS function with leading comments."""
    return (
        "function process(items) {\n"
        + comments(comment_count)
        + "  const a = 1;\n"
        "  const b = 2;\n"
        "  return a + b;\n"
        "}\n"
    )


class TestClassifyLines:
    """Test comment/code line classification."""

    def test_block_and_line_comments(self):
        """Test block comments count every line they span."""
        body = "/* a\n b\n*/\ncode();\n// c\n\n"
        assert classify_lines(body, comment_syntax_for("javascript")) == (4, 1)

    def test_python_docstring_lines(self):
        """Test docstrings count as comment lines in Python."""
        body = '    """Doc."""\n    # note\n    x = 1\n'
        assert classify_lines(body, comment_syntax_for("python")) == (2, 1)


class TestJavaScriptVerbosity:
    """Test verbosity detection in JavaScript."""

    def test_flags_verbose_function(self):
        """Test 7 comments over 3 code lines is flagged."""
        violations = analyze_verbosity_ratio(js_function(7), language="javascript")

        assert len(violations) == 1
        violation = violations[0]
        assert violation.type == VIOLATION_TYPE
        assert violation.line == 1
        assert violation.details == {"comment_lines": 7, "code_lines": 3, "ratio": 2.33}

    def test_ratio_at_threshold_is_allowed(self):
        """Test a ratio equal to the maximum is not flagged."""
        assert analyze_verbosity_ratio(js_function(6), language="javascript") == []

    def test_min_code_lines(self):
        """Test bodies under the minimum code lines are skipped."""
        content = "function f() {\n" + comments(10) + "  return 1;\n}\n"
        assert analyze_verbosity_ratio(content, language="javascript") == []

    def test_nested_function_measured_once(self):
        """Test a nested function is part of its enclosing body."""
        content = (
            "function outer() {\n"
            + "".join(f"  const v{i} = {i};\n" for i in range(6))
            + "  function inner() {\n"
            + comments(7, indent="    ")
            + "    x();\n"
            "    y();\n"
            "    z();\n"
            "  }\n"
            "  return inner();\n"
            "}\n"
        )
        assert analyze_verbosity_ratio(content, language="javascript") == []

    def test_arrow_function(self):
        """Test arrow functions are measured."""
        content = (
            "const run = async (job) => {\n"
            + comments(9)
            + "  await job.start();\n"
            "  await job.wait();\n"
            "  return job.result;\n"
            "};\n"
        )
        assert len(analyze_verbosity_ratio(content, file_path="run.js")) == 1


class TestOtherLanguagesVerbosity:
    """Test verbosity detection in Python, Java, Rust and Go."""

    def test_python(self):
        """Test Python bodies are found by indentation."""
        content = (
            "def handler(event):\n"
            + comments(7, marker="#", indent="    ")
            + "    a = 1\n"
            "    b = 2\n"
            "    return a + b\n"
            "\n"
            "def other():\n"
            "    return 1\n"
        )
        violations = analyze_verbosity_ratio(content, language="python")

        assert len(violations) == 1
        assert violations[0].line == 1
        assert violations[0].details["code_lines"] == 3

    def test_python_multiline_signature(self):
        """Test signatures spanning several lines."""
        content = (
            "def handler(\n"
            "    event,\n"
            "    context,\n"
            "):\n"
            + comments(7, marker="#", indent="    ")
            + "    a = event\n"
            "    b = context\n"
            "    return a, b\n"
        )
        violations = analyze_verbosity_ratio(content, language="python")

        assert len(violations) == 1
        assert violations[0].line == 1

    def test_python_one_liner(self):
        """Test one-line functions are skipped."""
        content = "def f(): return 1\n" + comments(5, marker="#", indent="")
        assert analyze_verbosity_ratio(content, language="python") == []

    def test_java_method(self):
        """Test Java methods inside a class."""
        content = (
            "public class Calc {\n"
            "    public int compute(int x) {\n"
            + comments(7, indent="        ")
            + "        int a = x;\n"
            "        int b = a;\n"
            "        return b;\n"
            "    }\n"
            "}\n"
        )
        violations = analyze_verbosity_ratio(content, file_path="Calc.java")

        assert len(violations) == 1
        assert violations[0].line == 2

    def test_java_control_flow_not_a_method(self):
        """Test if/while blocks are not mistaken for methods."""
        content = (
            "    if (ready) {\n"
            + comments(7, indent="        ")
            + "        a();\n"
            "        b();\n"
            "        c();\n"
            "    }\n"
        )
        assert analyze_verbosity_ratio(content, language="java") == []

    def test_rust(self):
        """Test Rust functions with return types."""
        content = (
            "fn compute(x: u32) -> u32 {\n"
            + comments(7, indent="    ")
            + "    let a = x;\n"
            "    let b = a;\n"
            "    a + b\n"
            "}\n"
        )
        assert len(analyze_verbosity_ratio(content, language="rust")) == 1

    def test_go(self):
        """Test Go functions and methods."""
        content = (
            "func (s *Server) Compute(x int) int {\n"
            + comments(7, indent="\t")
            + "\ta := x\n"
            "\tb := a\n"
            "\treturn a + b\n"
            "}\n"
        )
        assert len(analyze_verbosity_ratio(content, language="go")) == 1

    def test_unknown_language(self):
        """Test unsupported languages produce no violations."""
        assert analyze_verbosity_ratio("x", language="cobol") == []
