"""Scan orchestrator.

This module provides the ScanEngine that resolves the rules for each file
through the registry indices, applies pattern rules and structural
analyzers, runs the project-level analyzers once per repository, and
aggregates everything into a ScanResult.
"""

import time
from collections import Counter
from collections.abc import Callable, Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from threading import Lock
from typing import Any

from .analysis.buzzwords import BUZZWORD_CATEGORIES, analyze_claim_evidence
from .analysis.doc_ratio import analyze_doc_ratio
from .analysis.duplicates import analyze_duplicate_strings
from .analysis.languages import detect_language
from .analysis.over_engineering import analyze_over_engineering
from .analysis.source_tree import iter_source_files
from .analysis.stubs import analyze_stub_functions
from .analysis.text import excerpt, line_number_at, shannon_entropy
from .analysis.verbosity import analyze_verbosity_ratio
from .config import ScanConfig, load_config
from .detector_logging import get_logger
from .rules.base import (
    Certainty,
    Finding,
    MatchScope,
    RuleDefinition,
    Severity,
    StructuralAnalyzer,
    Violation,
)
from .rules.exclusion import ExclusionMatcher
from .rules.registry import UNIVERSAL, Registry, default_registry

logger = get_logger()

TOP_RULES_LIMIT = 5

# Certainty of findings produced by each per-file analyzer
_ANALYZER_CERTAINTY = {
    StructuralAnalyzer.DOC_RATIO: Certainty.MEDIUM,
    StructuralAnalyzer.VERBOSITY_RATIO: Certainty.MEDIUM,
    StructuralAnalyzer.STUB_FUNCTIONS: Certainty.LOW,
    StructuralAnalyzer.DUPLICATE_STRINGS: Certainty.LOW,
    StructuralAnalyzer.CLAIM_EVIDENCE: Certainty.MEDIUM,
}


@dataclass
class ScanResult:
    """Aggregated result of one scan.

    Findings are ordered by input file, then by discovery within the file
    with pattern rules before structural rules; repository-level findings
    come last. ``violations`` holds the repository-level reports.
    """

    findings: list[Finding] = field(default_factory=list)
    violations: list[Violation] = field(default_factory=list)
    files_requested: int = 0
    files_analyzed: int = 0
    files_filtered: int = 0  # dropped by the language filter
    execution_time_ms: float = 0.0

    @property
    def has_findings(self) -> bool:
        """Check if any findings were generated."""
        return len(self.findings) > 0

    @property
    def has_critical(self) -> bool:
        """Check if any finding or violation is critical."""
        return any(f.severity == Severity.CRITICAL for f in self.findings) or any(
            v.severity == Severity.CRITICAL for v in self.violations
        )

    @property
    def verdict(self) -> str:
        """OK when nothing was reported, HIGH when anything is high or critical."""
        severities = [f.severity for f in self.findings]
        severities.extend(v.severity for v in self.violations)
        if not severities:
            return "OK"
        if any(s.rank >= Severity.HIGH.rank for s in severities):
            return "HIGH"
        return "MEDIUM"

    @property
    def findings_by_certainty(self) -> dict[Certainty, list[Finding]]:
        """Group findings by certainty, HIGH first."""
        result: dict[Certainty, list[Finding]] = {c: [] for c in Certainty}
        for finding in self.findings:
            result[finding.certainty].append(finding)
        return result

    @property
    def summary(self) -> dict[str, Any]:
        """Counts by severity, certainty, remediation and most frequent rules."""
        rules = Counter(f.rule for f in self.findings)
        return {
            "total": len(self.findings),
            "by_severity": {
                s.value: sum(1 for f in self.findings if f.severity == s)
                for s in Severity
            },
            "by_certainty": {
                c.value: sum(1 for f in self.findings if f.certainty == c)
                for c in Certainty
            },
            "by_remediation": dict(
                Counter(f.remediation.value for f in self.findings)
            ),
            "auto_fixable": sum(
                1 for f in self.findings if f.remediation.is_auto_fixable
            ),
            "top_rules": [
                {"rule": rule, "count": count}
                for rule, count in rules.most_common(TOP_RULES_LIMIT)
            ],
        }

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "findings": [f.to_dict() for f in self.findings],
            "violations": [v.to_dict() for v in self.violations],
            "verdict": self.verdict,
            "files_requested": self.files_requested,
            "files_analyzed": self.files_analyzed,
            "files_filtered": self.files_filtered,
            "execution_time_ms": self.execution_time_ms,
            "summary": self.summary,
            "has_critical": self.has_critical,
        }


StructuralHandler = Callable[[RuleDefinition, str, str | None], list[Violation]]


class ScanEngine:
    """Runs the rule table over files and repositories.

    The registry is shared and read-only; per-file analysis depends only on
    the file content, so files can be analyzed in parallel.
    """

    def __init__(
        self,
        registry: Registry | None = None,
        config: ScanConfig | None = None,
    ):
        """Initialize the scan engine.

        Args:
            registry: Rule registry (default: the built-in catalog)
            config: Scan configuration (default: ScanConfig())
        """
        self.registry = registry or default_registry()
        self.config = config or ScanConfig()
        self.matcher = ExclusionMatcher(
            pattern_capacity=self.config.cache.pattern_capacity,
            result_capacity=self.config.cache.result_capacity,
            thread_safe=self.config.max_workers > 1,
        )
        self._rules_by_language: dict[str, tuple[RuleDefinition, ...]] = {}
        self._rules_lock = Lock()
        self._handlers: Mapping[StructuralAnalyzer, StructuralHandler] = {
            StructuralAnalyzer.DOC_RATIO: self._run_doc_ratio,
            StructuralAnalyzer.VERBOSITY_RATIO: self._run_verbosity_ratio,
            StructuralAnalyzer.STUB_FUNCTIONS: self._run_stub_functions,
            StructuralAnalyzer.DUPLICATE_STRINGS: self._run_duplicate_strings,
        }

    # =========================================================================
    # Rule resolution
    # =========================================================================

    def _is_selected(self, rule: RuleDefinition) -> bool:
        if not self.config.is_rule_enabled(rule.name):
            return False
        severities = self.config.severities
        return severities is None or rule.severity.value in severities

    def rules_for(self, language: str | None) -> tuple[RuleDefinition, ...]:
        """Rules applying to files of a language, after config filters.

        Args:
            language: Language tag, or None for unrecognized files

        Returns:
            Language and universal rules in table order
        """
        key = language or UNIVERSAL
        rules = self._rules_by_language.get(key)
        if rules is not None:
            return rules
        with self._rules_lock:
            rules = tuple(
                rule for rule in self.registry.lookup(language=key) if self._is_selected(rule)
            )
            self._rules_by_language[key] = rules
        return rules

    # =========================================================================
    # Per-file analysis
    # =========================================================================

    def analyze_content(
        self, content: str, file_path: str, language: str | None = None
    ) -> list[Finding]:
        """Apply every applicable rule to one file's content.

        Args:
            content: File content
            file_path: Path reported in findings and matched against exclusions
            language: Language tag; detected from ``file_path`` when omitted

        Returns:
            Findings from pattern rules, then from structural analyzers
        """
        language = language or detect_language(file_path)
        rules = [
            rule
            for rule in self.rules_for(language)
            if not self.matcher.is_excluded(file_path, rule.exclude_globs)
        ]
        # Only "\n" ends a line, matching line_number_at and the analyzers
        lines = [line.rstrip("\r") for line in content.split("\n")]

        findings: list[Finding] = []
        for rule in rules:
            if rule.pattern is None:
                continue
            if rule.scope == MatchScope.CONTENT:
                findings.extend(self._match_content(rule, content, lines, file_path))
            elif rule.min_consecutive_lines:
                findings.extend(self._match_blocks(rule, lines, file_path))
            else:
                findings.extend(self._match_lines(rule, lines, file_path))

        if self.config.is_quick or language is None:
            return findings

        for rule in rules:
            if rule.analyzer is None or rule.analyzer.is_project_level:
                continue
            handler = self._handlers.get(rule.analyzer)
            if handler is None:
                logger.warning(f"No handler for structural analyzer {rule.analyzer.value}")
                continue
            for violation in handler(rule, content, language):
                line = violation.line or 1
                text = lines[line - 1] if line <= len(lines) else violation.value
                findings.append(
                    self._finding_from_violation(rule, violation, file_path, text=text)
                )

        return findings

    def _pattern_finding(
        self, rule: RuleDefinition, file_path: str, line_number: int, column: int, text: str
    ) -> Finding:
        return Finding(
            file=file_path,
            line=line_number,
            column=column,
            rule=rule.name,
            severity=rule.severity,
            certainty=Certainty.HIGH,
            excerpt=excerpt(text),
            remediation=rule.remediation,
            description=rule.description,
        )

    def _match_lines(
        self, rule: RuleDefinition, lines: list[str], file_path: str
    ) -> list[Finding]:
        findings: list[Finding] = []
        for index, line in enumerate(lines):
            for match in rule.pattern.finditer(line):
                if rule.entropy_threshold is not None:
                    token = match.group(1) if match.re.groups else match.group(0)
                    if shannon_entropy(token) < rule.entropy_threshold:
                        continue
                findings.append(
                    self._pattern_finding(rule, file_path, index + 1, match.start() + 1, line)
                )
                # One finding per rule and line
                break
        return findings

    def _match_blocks(
        self, rule: RuleDefinition, lines: list[str], file_path: str
    ) -> list[Finding]:
        """Report runs of at least min_consecutive_lines matching lines."""
        findings: list[Finding] = []
        run_start: int | None = None

        for index in range(len(lines) + 1):
            hit = index < len(lines) and rule.pattern.search(lines[index]) is not None
            if hit:
                if run_start is None:
                    run_start = index
                continue
            if run_start is None:
                continue

            count = index - run_start
            if count >= rule.min_consecutive_lines:
                start_line, end_line = run_start + 1, index
                findings.append(
                    Finding(
                        file=file_path,
                        line=start_line,
                        rule=rule.name,
                        severity=rule.severity,
                        certainty=Certainty.HIGH,
                        excerpt=f"Lines {start_line}-{end_line}",
                        remediation=rule.remediation,
                        description=rule.description,
                        details={
                            "start_line": start_line,
                            "end_line": end_line,
                            "line_count": count,
                        },
                    )
                )
            run_start = None

        return findings

    def _match_content(
        self, rule: RuleDefinition, content: str, lines: list[str], file_path: str
    ) -> list[Finding]:
        findings: list[Finding] = []
        for match in rule.pattern.finditer(content):
            line_number = line_number_at(content, match.start())
            column = match.start() - content.rfind("\n", 0, match.start())
            text = lines[line_number - 1] if line_number <= len(lines) else ""
            findings.append(self._pattern_finding(rule, file_path, line_number, column, text))
        return findings

    def _finding_from_violation(
        self,
        rule: RuleDefinition,
        violation: Violation,
        file_path: str,
        text: str | None = None,
    ) -> Finding:
        certainty = _ANALYZER_CERTAINTY.get(rule.analyzer, Certainty.MEDIUM)
        if rule.analyzer == StructuralAnalyzer.STUB_FUNCTIONS and violation.details.get(
            "has_todo"
        ):
            certainty = Certainty.MEDIUM

        line = violation.line or 1
        return Finding(
            file=violation.file or file_path,
            line=line,
            rule=rule.name,
            severity=violation.severity,
            certainty=certainty,
            excerpt=excerpt(text if text is not None else violation.value),
            remediation=rule.remediation,
            description=f"{rule.description}: {violation.value}",
            details={
                **violation.details,
                "value": violation.value,
                "threshold": violation.threshold,
            },
        )

    # =========================================================================
    # Structural handlers
    # =========================================================================

    def _run_doc_ratio(
        self, rule: RuleDefinition, content: str, language: str | None
    ) -> list[Violation]:
        t = self.config.thresholds_for("doc_ratio", dict(rule.thresholds))
        return analyze_doc_ratio(
            content,
            min_function_lines=int(t["min_function_lines"]),
            max_ratio=float(t["max_ratio"]),
            language=language,
        )

    def _run_verbosity_ratio(
        self, rule: RuleDefinition, content: str, language: str | None
    ) -> list[Violation]:
        t = self.config.thresholds_for("verbosity", dict(rule.thresholds))
        return analyze_verbosity_ratio(
            content,
            min_code_lines=int(t["min_code_lines"]),
            max_comment_ratio=float(t["max_comment_ratio"]),
            language=language,
        )

    def _run_stub_functions(
        self, rule: RuleDefinition, content: str, language: str | None
    ) -> list[Violation]:
        return analyze_stub_functions(content, language=language)

    def _run_duplicate_strings(
        self, rule: RuleDefinition, content: str, language: str | None
    ) -> list[Violation]:
        t = self.config.thresholds_for("duplicates", dict(rule.thresholds))
        return analyze_duplicate_strings(
            content,
            max_occurrences=int(t["max_occurrences"]),
            min_length=int(t["min_length"]),
        )

    # =========================================================================
    # Files and repositories
    # =========================================================================

    def _language_allowed(self, language: str | None) -> bool:
        if self.config.languages is None:
            return True
        return language in self.config.languages

    def analyze_file(self, file_path: str, repo_root: Path | None = None) -> list[Finding] | None:
        """Read and analyze one file.

        Args:
            file_path: Path as given by the caller (reported in findings)
            repo_root: Base for relative paths

        Returns:
            Findings, or None when the file was skipped
        """
        language = detect_language(file_path)
        if not self._language_allowed(language):
            logger.debug(f"Skipping {file_path}: language {language} not selected")
            return None

        path = Path(file_path)
        if repo_root is not None and not path.is_absolute():
            path = repo_root / path
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(f"Skipping unreadable file {file_path}: {e}")
            return None

        return self.analyze_content(content, str(file_path).replace("\\", "/"), language)

    def _project_rules(self) -> list[RuleDefinition]:
        return [
            rule
            for rule in self.registry.structural_rules()
            if rule.analyzer.is_project_level and self._is_selected(rule)
        ]

    def analyze_repository(self, repo_root: str | Path) -> tuple[list[Finding], list[Violation]]:
        """Run the project-level analyzers once over a repository.

        Returns:
            (findings, violations); claim violations appear in both
        """
        root = Path(repo_root)
        findings: list[Finding] = []
        violations: list[Violation] = []

        for rule in self._project_rules():
            if rule.analyzer == StructuralAnalyzer.OVER_ENGINEERING:
                t = self.config.thresholds_for("over_engineering", dict(rule.thresholds))
                result = analyze_over_engineering(
                    root,
                    file_ratio_threshold=t["file_ratio_threshold"],
                    lines_per_export_threshold=t["lines_per_export_threshold"],
                    depth_threshold=int(t["depth_threshold"]),
                )
                violations.extend(result.violations)
            elif rule.analyzer == StructuralAnalyzer.CLAIM_EVIDENCE:
                t = self.config.thresholds_for("claim_evidence", dict(rule.thresholds))
                categories = self.config.claim_evidence.buzzword_categories
                result = analyze_claim_evidence(
                    root,
                    buzzword_categories=categories or BUZZWORD_CATEGORIES,
                    min_evidence_matches=int(t["min_evidence_matches"]),
                )
                for violation in result.violations:
                    violations.append(violation)
                    findings.append(
                        self._finding_from_violation(
                            rule,
                            violation,
                            violation.file or ".",
                            text=violation.details["claim"],
                        )
                    )

        return findings, violations

    def scan(
        self,
        files: Iterable[str] | None = None,
        repo_root: str | Path | None = None,
    ) -> ScanResult:
        """Scan files and, when a repository root is given, the repository.

        Args:
            files: Paths to scan in order; discovered under ``repo_root``
                when omitted
            repo_root: Repository root for relative paths and project-level
                analyzers

        Returns:
            ScanResult with order-stable findings
        """
        start_time = time.perf_counter()
        root = Path(repo_root) if repo_root is not None else None

        if files is None:
            file_list = discover_files(root, self.config.max_files) if root else []
        else:
            file_list = [str(f) for f in files]

        files_filtered = 0
        if self.config.languages is not None:
            selected = [f for f in file_list if self._language_allowed(detect_language(f))]
            files_filtered = len(file_list) - len(selected)
            file_list = selected

        logger.info(f"Scanning {len(file_list)} files")

        if self.config.max_workers > 1 and len(file_list) > 1:
            with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
                per_file = list(executor.map(lambda f: self.analyze_file(f, root), file_list))
        else:
            per_file = [self.analyze_file(f, root) for f in file_list]

        result = ScanResult(files_requested=len(file_list), files_filtered=files_filtered)
        for findings in per_file:
            if findings is None:
                continue
            result.files_analyzed += 1
            result.findings.extend(findings)

        if root is not None and not self.config.is_quick:
            project_findings, project_violations = self.analyze_repository(root)
            result.findings.extend(project_findings)
            result.violations.extend(project_violations)

        result.execution_time_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            f"Scan finished: {len(result.findings)} findings in "
            f"{result.files_analyzed}/{result.files_requested} files "
            f"({result.execution_time_ms:.1f}ms)"
        )
        return result


def discover_files(repo_root: str | Path, max_files: int = 10000) -> list[str]:
    """Default file set: non-test source files outside excluded directories."""
    return iter_source_files(repo_root, include_tests=False, max_files=max_files)


def scan(
    files: Iterable[str] | None,
    registry: Registry | None = None,
    options: ScanConfig | Mapping[str, Any] | None = None,
    repo_root: str | Path | None = None,
) -> ScanResult:
    """Scan files with a one-off engine.

    Args:
        files: Paths to scan; None discovers files under ``repo_root``
        registry: Rule registry (default: the built-in catalog)
        options: ScanConfig or a mapping of its fields
        repo_root: Repository root for relative paths and project-level analyzers

    Returns:
        ScanResult

    Raises:
        ConfigError: If ``options`` fails validation
    """
    if options is None or isinstance(options, ScanConfig):
        config = options
    else:
        config = load_config(**dict(options))
    return ScanEngine(registry=registry, config=config).scan(files, repo_root=repo_root)


__all__ = ["ScanEngine", "ScanResult", "discover_files", "scan"]
