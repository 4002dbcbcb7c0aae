"""Tests for the buzzword-evidence analyzer."""

from pathlib import Path

import pytest

from slop_detector.analysis.buzzwords import (
    VIOLATION_TYPE,
    analyze_claim_evidence,
    build_buzzword_regex,
    extract_claims,
    find_claim_source_files,
    is_positive_claim,
)
from slop_detector.rules.base import Severity


def write(root: Path, relative: str, content: str) -> None:
    """Create a file with parent directories."""
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)


class TestClaimExtraction:
    """Test claim detection in documentation and comments."""

    @pytest.mark.parametrize(
        "line, expected",
        [
            ("This library is production-ready.", True),
            ("Provides robust error recovery.", True),
            ("Designed to be scalable.", True),
            ("// TODO: make this production-ready", False),
            ("This should be secure eventually.", False),
            ("We plan to be enterprise-grade.", False),
            ("Scalable.", False),
        ],
    )
    def test_is_positive_claim(self, line, expected):
        """Test assertions are distinguished from aspirations."""
        assert is_positive_claim(line) is expected

    def test_longest_buzzword_wins(self):
        """Test multi-word buzzwords take precedence over their prefix."""
        claims = extract_claims("The API is secure by default.\n", "README.md")

        assert len(claims) == 1
        assert claims[0].buzzword == "secure by default"
        assert claims[0].category == "security"

    def test_word_boundaries(self):
        """Test buzzwords inside other words are ignored."""
        assert extract_claims("This is insecure and incomplete.\n", "README.md") == []

    def test_case_insensitive(self):
        """Test buzzwords match regardless of case."""
        claims = extract_claims("It is Battle-Tested.\n", "docs/intro.md")

        assert claims[0].buzzword == "battle-tested"
        assert claims[0].line == 1
        assert claims[0].column == 6

    def test_source_files_only_use_comments(self):
        """Test code lines in source files are not claims."""
        content = (
            '"""Robust parser."""\n'
            'MODE = "robust"\n'
            "x = 1  # this is scalable\n"
        )
        claims = extract_claims(content, "pkg/parser.py")

        assert [(c.line, c.buzzword) for c in claims] == [(1, "robust"), (3, "scalable")]
        assert claims[0].is_positive is False
        assert claims[1].is_positive is True

    def test_javascript_block_comment(self):
        """Test multi-line block comments are scanned."""
        content = (
            "/**\n"
            " * This client is production-ready.\n"
            " */\n"
            "const label = 'production-ready';\n"
        )
        claims = extract_claims(content, "src/client.js")

        assert [c.line for c in claims] == [2]

    def test_custom_categories(self):
        """Test callers may replace the buzzword table."""
        claims = extract_claims(
            "This is blazing fast.\n", "README.md", {"speed": ["blazing fast"]}
        )
        assert [(c.category, c.buzzword) for c in claims] == [("speed", "blazing fast")]

    def test_build_regex_lookup(self):
        """Test the lookup maps lowercase buzzwords to their category."""
        regex, lookup = build_buzzword_regex({"scale": ["High-Performance"]})

        assert regex.search("a HIGH-PERFORMANCE engine")
        assert lookup["high-performance"] == ("scale", "High-Performance")


class TestClaimSources:
    """Test claim source discovery."""

    def test_documentation_and_source(self, tmp_path):
        """Test docs and source files are included, vendored files are not."""
        write(tmp_path, "README.md", "# x\n")
        write(tmp_path, "docs/guide.txt", "guide\n")
        write(tmp_path, "src/app.js", "const a = 1;\n")
        write(tmp_path, "node_modules/dep/README.md", "# dep\n")
        write(tmp_path, "data.csv", "a,b\n")

        assert find_claim_source_files(tmp_path) == [
            "README.md",
            "docs/guide.txt",
            "src/app.js",
        ]


class TestClaimEvidence:
    """Test evidence search and gap detection."""

    def test_unsupported_claim(self, tmp_path):
        """Test a claim with no evidence at all is high severity."""
        write(tmp_path, "README.md", "This library is production-ready.\n")

        result = analyze_claim_evidence(tmp_path)

        assert result.claims_found == 1
        assert result.positive_claims_found == 1
        assert len(result.violations) == 1
        violation = result.violations[0]
        assert violation.type == VIOLATION_TYPE
        assert violation.severity == Severity.HIGH
        assert violation.file == "README.md"
        assert violation.line == 1
        assert violation.details["evidence_count"] == 0
        assert violation.details["evidence_required"] == 2
        assert result.verdict == "HIGH"

    def test_aspirational_claim_is_ignored(self, tmp_path):
        """Test TODO claims are recorded but never reported."""
        write(tmp_path, "src/app.js", "// TODO: make this production-ready\nrun();\n")

        result = analyze_claim_evidence(tmp_path)

        assert result.claims_found == 1
        assert result.positive_claims_found == 0
        assert result.violations == []
        assert result.verdict == "OK"

    def test_supported_claim(self, tmp_path):
        """Test tests, error handling and logging back a production claim."""
        write(tmp_path, "README.md", "This library is production-ready.\n")
        write(
            tmp_path,
            "src/app.js",
            "try {\n  run();\n} catch (e) {\n  logger.error(e);\n}\n",
        )
        write(tmp_path, "src/app.test.js", "it('runs', () => {});\n")

        result = analyze_claim_evidence(tmp_path)

        assert result.violations == []

    def test_partial_evidence(self, tmp_path):
        """Test some evidence below the minimum is medium severity."""
        write(tmp_path, "README.md", "This library is production-ready.\n")
        write(tmp_path, "src/app.test.js", "it('runs', () => {});\n")

        result = analyze_claim_evidence(tmp_path)

        assert len(result.violations) == 1
        violation = result.violations[0]
        assert violation.severity == Severity.MEDIUM
        assert violation.details["evidence_found"] == ["tests"]
        assert "found 1/2 required" in violation.value

    def test_min_evidence_matches(self, tmp_path):
        """Test the evidence requirement is configurable."""
        write(tmp_path, "README.md", "This library is production-ready.\n")
        write(tmp_path, "src/app.test.js", "it('runs', () => {});\n")

        result = analyze_claim_evidence(tmp_path, min_evidence_matches=1)

        assert result.violations == []

    def test_to_dict(self, tmp_path):
        """Test serialization includes claims and verdict."""
        write(tmp_path, "README.md", "This library is production-ready.\n")

        data = analyze_claim_evidence(tmp_path).to_dict()

        assert data["claims_found"] == 1
        assert data["claims"][0]["buzzword"] == "production-ready"
        assert data["verdict"] == "HIGH"
