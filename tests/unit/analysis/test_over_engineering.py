"""Tests for the over-engineering metrics analyzer."""

from pathlib import Path

import pytest

from slop_detector.analysis.over_engineering import analyze_over_engineering
from slop_detector.rules.base import Severity


def write(root: Path, relative: str, content: str) -> None:
    """Create a file with parent directories."""
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)


class TestOverEngineering:
    """Test file ratio, code density and depth signals."""

    @pytest.fixture
    def bloated_repo(self, tmp_path: Path) -> Path:
        """Create 100 source files exposing 2 exports, nested 6 levels deep."""
        write(
            tmp_path,
            "src/index.js",
            "export function a() {}\nexport function b() {}\n",
        )
        for i in range(99):
            write(tmp_path, f"src/module{i:02d}.js", f"const value{i} = {i};\n")
        (tmp_path / "src" / "a" / "b" / "c" / "d" / "e").mkdir(parents=True)
        return tmp_path

    def test_bloated_repository(self, bloated_repo):
        """Test proliferation and depth violations with their severities."""
        result = analyze_over_engineering(bloated_repo)

        assert result.metrics["source_files"] == 100
        assert result.metrics["exports"] == 2
        assert result.metrics["export_method"] == "entry-points"
        assert result.metrics["file_ratio"] == 50.0
        assert result.metrics["directory_depth"] == 6

        by_type = {v.type: v for v in result.violations}
        assert set(by_type) == {"file_proliferation", "directory_depth"}
        assert by_type["file_proliferation"].severity == Severity.HIGH
        assert by_type["directory_depth"].severity == Severity.MEDIUM
        assert result.verdict == "HIGH"

    def test_deterministic(self, bloated_repo):
        """Test two runs over the same tree are identical."""
        first = analyze_over_engineering(bloated_repo).to_dict()
        second = analyze_over_engineering(bloated_repo).to_dict()
        assert first == second

    def test_small_repository(self, tmp_path):
        """Test a compact repository has no violations."""
        write(tmp_path, "src/index.js", "export function a() {}\n")
        write(tmp_path, "src/util.js", "const x = 1;\n")

        result = analyze_over_engineering(tmp_path)

        assert result.violations == []
        assert result.verdict == "OK"
        assert result.to_dict()["verdict"] == "OK"

    def test_code_density(self, tmp_path):
        """Test lines per export above the threshold."""
        body = "".join(f"const v{i} = {i};\n" for i in range(600))
        write(tmp_path, "src/index.js", "export function a() {}\n" + body)

        result = analyze_over_engineering(tmp_path)

        assert [v.type for v in result.violations] == ["code_density"]
        violation = result.violations[0]
        assert violation.severity == Severity.MEDIUM
        assert violation.details["total_lines"] == 601
        assert violation.threshold == "500:1"

    def test_thresholds_at_boundary(self, tmp_path):
        """Test values equal to a threshold are not violations."""
        write(tmp_path, "src/index.js", "export function a() {}\n")
        for i in range(3):
            write(tmp_path, f"src/m{i}.js", "const x = 1;\n")
        (tmp_path / "src" / "a" / "b" / "c").mkdir(parents=True)

        result = analyze_over_engineering(
            tmp_path, file_ratio_threshold=4, depth_threshold=4
        )

        assert result.metrics["file_ratio"] == 4.0
        assert result.metrics["directory_depth"] == 4
        assert result.violations == []

    def test_fallback_export_count(self, tmp_path):
        """Test repositories without exports are measured against one export."""
        for i in range(25):
            write(tmp_path, f"lib/m{i:02d}.js", "const x = 1;\n")

        result = analyze_over_engineering(tmp_path)

        assert result.metrics["export_method"] == "fallback"
        assert result.metrics["file_ratio"] == 25.0
        assert result.violations[0].type == "file_proliferation"
        assert result.violations[0].severity == Severity.MEDIUM
