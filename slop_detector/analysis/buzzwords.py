"""Buzzword-evidence analyzer.

Finds quality claims such as "production-ready" or "secure" in
documentation and code comments, then searches the source tree for
evidence backing each claimed category. Positive claims whose category
has too little evidence are reported.
"""

import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..detector_logging import get_logger
from ..rules.base import Severity, Violation, verdict_for
from .languages import EXCLUDE_DIRS, comment_syntax_for, detect_language
from .source_tree import iter_source_files, read_source_text, sorted_entries

logger = get_logger()

VIOLATION_TYPE = "buzzword_inflation"

CLAIM_SOURCE_MAX_DEPTH = 5
CLAIM_SOURCE_MAX_FILES = 500

BUZZWORD_CATEGORIES: dict[str, tuple[str, ...]] = {
    "production": ("production-ready", "production-grade", "prod-ready"),
    "enterprise": ("enterprise-grade", "enterprise-ready", "enterprise-class"),
    "security": ("secure", "secure by default", "security-focused"),
    "scale": ("scalable", "high-performance", "performant", "highly scalable"),
    "reliability": ("battle-tested", "robust", "reliable", "rock-solid"),
    "completeness": ("comprehensive", "complete", "full-featured", "feature-complete"),
}


@dataclass(frozen=True)
class EvidencePattern:
    """One way of recognizing evidence for a claim category.

    Path patterns are tested against a file's relative path, content
    patterns against its text.
    """

    regex: re.Pattern
    on_path: bool = False


_TEST_PATHS = re.compile(
    r"\.test\.[jt]sx?$|\.spec\.[jt]sx?$|__tests__|test_.*\.py$|_test\.go$|_test\.rs$"
)

EVIDENCE_PATTERNS: dict[str, dict[str, tuple[EvidencePattern, ...]]] = {
    "production": {
        "tests": (EvidencePattern(_TEST_PATHS, on_path=True),),
        "error_handling": (
            EvidencePattern(
                re.compile(
                    r"try\s*\{|catch\s*\(|\.catch\s*\(|except\s*:|if\s+let\s+Err|match.*Err\("
                )
            ),
        ),
        "logging": (
            EvidencePattern(
                re.compile(
                    r"logger\.|\.log\s*\(|console\.error|tracing::|slog\.|log\.(info|warn|error|debug)",
                    re.IGNORECASE,
                )
            ),
        ),
    },
    "enterprise": {
        "auth": (
            EvidencePattern(
                re.compile(r"authenticat|authorization|permission|rbac|acl|role", re.IGNORECASE)
            ),
        ),
        "audit": (
            EvidencePattern(
                re.compile(r"audit|track.*event|event.*log|activity.*log", re.IGNORECASE)
            ),
        ),
        "rate_limit": (
            EvidencePattern(re.compile(r"rate.?limit|throttle|limiter", re.IGNORECASE)),
        ),
    },
    "security": {
        "validation": (
            EvidencePattern(
                re.compile(r"validat|sanitiz|escape|clean|htmlspecialchars", re.IGNORECASE)
            ),
        ),
        "auth": (
            EvidencePattern(
                re.compile(r"\bauth\b|token|jwt|session|login|passport", re.IGNORECASE)
            ),
        ),
        "encryption": (
            EvidencePattern(
                re.compile(r"encrypt|decrypt|hash|bcrypt|argon|crypto\.", re.IGNORECASE)
            ),
        ),
    },
    "scale": {
        "async": (
            EvidencePattern(
                re.compile(r"async\s+|await\s+|Promise|Future|tokio|async_std|goroutine")
            ),
        ),
        "cache": (
            EvidencePattern(re.compile(r"\bcache\b|redis|memcache|lru", re.IGNORECASE)),
        ),
        "pool": (
            EvidencePattern(re.compile(r"pool|connection.?pool|thread.?pool", re.IGNORECASE)),
        ),
    },
    "reliability": {
        "tests": (EvidencePattern(_TEST_PATHS, on_path=True),),
        "coverage": (
            EvidencePattern(re.compile(r"coverage|lcov|nyc|istanbul|codecov", re.IGNORECASE)),
        ),
        "error_handling": (
            EvidencePattern(
                re.compile(r"try\s*\{|catch\s*\(|\.catch\s*\(|except\s*:|if\s+let\s+Err")
            ),
        ),
    },
    "completeness": {
        "edge_cases": (
            EvidencePattern(re.compile(r"edge.?case|boundary|corner.?case", re.IGNORECASE)),
        ),
        "error_handling": (
            EvidencePattern(
                re.compile(
                    r"\b(handle|handles|handled|handling)\s+(all\s+)?(errors?|exceptions?|failures?)\b",
                    re.IGNORECASE,
                )
            ),
        ),
        "documentation": (EvidencePattern(re.compile(r"/\*\*|///|\"\"\"|'''")),),
    },
}

# A line asserting a quality ("is secure", "provides robust ...")
CLAIM_INDICATORS = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        r"\bis\s+",
        r"\bare\s+",
        r"\bprovides?\s+",
        r"\boffers?\s+",
        r"\bfeatures?\s+",
        r"\bfully\s+",
        r"\b100%\s+",
        r"\bdesigned\s+(for|to\s+be)\s+",
    )
)

# A line describing an aspiration rather than a fact
NOT_CLAIM_INDICATORS = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        r"\bTODO\b",
        r"\bFIXME\b",
        r"\bshould\s+be\b",
        r"\bwill\s+be\b",
        r"\bmake\s+(?:it\s+(?:more|less|better)|this\b)",
        r"\bneed(s)?\s+to\s+be\b",
        r"\bplan(ning)?\s+to\b",
        r"\bwant(s)?\s+to\b",
    )
)

_DOC_FILE_PATTERNS = (
    re.compile(r"README", re.IGNORECASE),
    re.compile(r"\.md$"),
    re.compile(r"(^|/)docs?/", re.IGNORECASE),
    re.compile(r"\.rst$"),
    re.compile(r"CHANGELOG", re.IGNORECASE),
)


@dataclass
class Claim:
    """A buzzword occurrence in a documentation or comment line."""

    file: str
    line: int
    column: int
    buzzword: str
    category: str
    text: str
    is_positive: bool

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "file": self.file,
            "line": self.line,
            "column": self.column,
            "buzzword": self.buzzword,
            "category": self.category,
            "text": self.text,
            "is_positive": self.is_positive,
        }


@dataclass
class Evidence:
    """Evidence found for one claim category."""

    by_type: dict[str, list[str]] = field(default_factory=dict)

    @property
    def found(self) -> list[str]:
        """Evidence types with at least one supporting file."""
        return list(self.by_type)

    @property
    def total(self) -> int:
        """Number of (evidence type, file) pairs."""
        return sum(len(files) for files in self.by_type.values())

    def add(self, evidence_type: str, file: str) -> None:
        files = self.by_type.setdefault(evidence_type, [])
        if file not in files:
            files.append(file)


@dataclass
class ClaimEvidenceResult:
    """Claims, violations and verdict for one repository."""

    claims: list[Claim] = field(default_factory=list)
    violations: list[Violation] = field(default_factory=list)

    @property
    def claims_found(self) -> int:
        return len(self.claims)

    @property
    def positive_claims_found(self) -> int:
        return sum(1 for claim in self.claims if claim.is_positive)

    @property
    def verdict(self) -> str:
        """OK, MEDIUM or HIGH from the worst violation."""
        return verdict_for(self.violations)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "claims_found": self.claims_found,
            "positive_claims_found": self.positive_claims_found,
            "claims": [claim.to_dict() for claim in self.claims],
            "violations": [v.to_dict() for v in self.violations],
            "verdict": self.verdict,
        }


def build_buzzword_regex(
    categories: Mapping[str, Sequence[str]],
) -> tuple[re.Pattern, dict[str, tuple[str, str]]]:
    """Combine every buzzword into one case-insensitive word-bounded regex.

    Longer buzzwords are tried first so "secure by default" wins over
    "secure".

    Returns:
        (regex, lowercase buzzword -> (category, buzzword))
    """
    lookup: dict[str, tuple[str, str]] = {}
    for category, buzzwords in categories.items():
        for buzzword in buzzwords:
            lookup[buzzword.lower()] = (category, buzzword)

    alternatives = sorted(lookup, key=len, reverse=True)
    regex = re.compile(
        r"\b(" + "|".join(re.escape(word) for word in alternatives) + r")\b",
        re.IGNORECASE,
    )
    return regex, lookup


def is_positive_claim(line: str) -> bool:
    """Whether a line asserts a quality instead of aspiring to it."""
    if any(p.search(line) for p in NOT_CLAIM_INDICATORS):
        return False
    return any(p.search(line) for p in CLAIM_INDICATORS)


def _comment_lines(content: str, language: str) -> Iterable[tuple[int, str]]:
    """Yield (0-based index, line) for comment and docstring lines."""
    syntax = comment_syntax_for(language)
    in_block = False
    block_end = syntax.block_end

    for index, line in enumerate(content.split("\n")):
        stripped = line.strip()
        if in_block:
            yield index, line
            if block_end in stripped:
                in_block = False
            continue

        if stripped.startswith(syntax.line):
            yield index, line
        elif language == "python" and stripped.startswith(("'''", '"""')):
            block_end = stripped[:3]
            yield index, line
            if block_end not in stripped[3:]:
                in_block = True
        elif stripped.startswith(syntax.block_start):
            block_end = syntax.block_end
            yield index, line
            if block_end not in stripped[len(syntax.block_start):]:
                in_block = True
        elif syntax.line in line and language != "python":
            # Trailing comment after code
            yield index, line[line.index(syntax.line):]
        elif language == "python" and "#" in line:
            yield index, line[line.index("#"):]


def extract_claims(
    content: str,
    file_path: str,
    categories: Mapping[str, Sequence[str]] | None = None,
) -> list[Claim]:
    """Extract buzzword claims from a file.

    Documentation files are scanned line by line. For source files only
    comment and docstring text is considered.

    Args:
        content: File content
        file_path: Relative path used for reporting and language detection
        categories: Category -> buzzwords mapping

    Returns:
        Claims in line order
    """
    regex, lookup = build_buzzword_regex(categories or BUZZWORD_CATEGORIES)
    language = detect_language(file_path)

    if language is None:
        lines: Iterable[tuple[int, str]] = enumerate(content.split("\n"))
    else:
        lines = _comment_lines(content, language)

    claims: list[Claim] = []
    for index, line in lines:
        matches = list(regex.finditer(line))
        if not matches:
            continue
        positive = is_positive_claim(line)
        for match in matches:
            mapping = lookup.get(match.group(1).lower())
            if mapping is None:
                continue
            category, buzzword = mapping
            claims.append(
                Claim(
                    file=file_path,
                    line=index + 1,
                    column=match.start(),
                    buzzword=buzzword,
                    category=category,
                    text=line.strip(),
                    is_positive=positive,
                )
            )
    return claims


def _is_claim_source(relative: str) -> bool:
    if detect_language(relative) is not None:
        return True
    return any(p.search(relative) for p in _DOC_FILE_PATTERNS)


def find_claim_source_files(
    repo_root: str | Path,
    max_depth: int = CLAIM_SOURCE_MAX_DEPTH,
    max_files: int = CLAIM_SOURCE_MAX_FILES,
) -> list[str]:
    """List documentation and source files that may contain claims."""
    root = Path(repo_root)
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
                elif entry.is_file() and _is_claim_source(relative):
                    files.append(relative)
            except OSError:
                continue

    walk(root, "", 0)
    return files


def search_evidence(
    repo_root: str | Path,
    category: str,
    evidence_patterns: Mapping[str, Mapping[str, Sequence[EvidencePattern]]],
    files: Sequence[str],
) -> Evidence:
    """Search files for evidence supporting a claim category.

    Each file counts at most once per evidence type. Files are only read
    when the category has content patterns.

    Args:
        repo_root: Root the relative paths resolve against
        category: Claim category
        evidence_patterns: Category -> evidence type -> patterns
        files: Relative paths to search

    Returns:
        Evidence grouped by type
    """
    evidence = Evidence()
    patterns = evidence_patterns.get(category)
    if not patterns:
        return evidence

    path_patterns = [
        (evidence_type, p.regex)
        for evidence_type, group in patterns.items()
        for p in group
        if p.on_path
    ]
    content_patterns = [
        (evidence_type, p.regex)
        for evidence_type, group in patterns.items()
        for p in group
        if not p.on_path
    ]

    root = Path(repo_root)
    for file in files:
        for evidence_type, regex in path_patterns:
            if regex.search(file):
                evidence.add(evidence_type, file)

        if not content_patterns:
            continue
        content = read_source_text(root / file)
        if content is None:
            continue
        for evidence_type, regex in content_patterns:
            if regex.search(content):
                evidence.add(evidence_type, file)

    return evidence


def detect_gaps(
    claims: Sequence[Claim],
    repo_root: str | Path,
    evidence_patterns: Mapping[str, Mapping[str, Sequence[EvidencePattern]]],
    min_evidence_matches: int,
    files: Sequence[str],
) -> list[Violation]:
    """Report positive claims whose category lacks evidence.

    Evidence is searched once per category for the whole call.
    """
    violations: list[Violation] = []
    cache: dict[str, Evidence] = {}

    for claim in claims:
        if not claim.is_positive:
            continue

        evidence = cache.get(claim.category)
        if evidence is None:
            evidence = search_evidence(repo_root, claim.category, evidence_patterns, files)
            cache[claim.category] = evidence

        if evidence.total >= min_evidence_matches:
            continue

        violations.append(
            Violation(
                type=VIOLATION_TYPE,
                value=(
                    f'Claim "{claim.buzzword}" without sufficient evidence '
                    f"(found {evidence.total}/{min_evidence_matches} required)"
                ),
                threshold=f"{min_evidence_matches} evidence matches",
                severity=Severity.HIGH if evidence.total == 0 else Severity.MEDIUM,
                details={
                    "buzzword": claim.buzzword,
                    "category": claim.category,
                    "claim": claim.text,
                    "evidence_found": evidence.found,
                    "evidence_count": evidence.total,
                    "evidence_required": min_evidence_matches,
                },
                file=claim.file,
                line=claim.line,
            )
        )

    return violations


def analyze_claim_evidence(
    repo_root: str | Path,
    buzzword_categories: Mapping[str, Sequence[str]] | None = None,
    evidence_patterns: Mapping[str, Mapping[str, Sequence[EvidencePattern]]] | None = None,
    min_evidence_matches: int = 2,
) -> ClaimEvidenceResult:
    """Analyze a repository for quality claims without supporting evidence.

    Args:
        repo_root: Repository root directory
        buzzword_categories: Category -> buzzwords (default BUZZWORD_CATEGORIES)
        evidence_patterns: Category -> evidence patterns (default EVIDENCE_PATTERNS)
        min_evidence_matches: Evidence needed to back a category

    Returns:
        ClaimEvidenceResult with claims, violations and verdict
    """
    root = Path(repo_root)
    categories = buzzword_categories or BUZZWORD_CATEGORIES
    patterns = evidence_patterns or EVIDENCE_PATTERNS

    claims: list[Claim] = []
    for relative in find_claim_source_files(root):
        content = read_source_text(root / relative)
        if content is not None:
            claims.extend(extract_claims(content, relative, categories))

    # Tests are evidence
    evidence_files = iter_source_files(root, include_tests=True)
    violations = detect_gaps(claims, root, patterns, min_evidence_matches, evidence_files)

    logger.debug(
        f"Claim evidence for {root}: {len(claims)} claims, "
        f"{len(violations)} unsupported"
    )
    return ClaimEvidenceResult(claims=claims, violations=violations)


__all__ = [
    "BUZZWORD_CATEGORIES",
    "CLAIM_INDICATORS",
    "Claim",
    "ClaimEvidenceResult",
    "EVIDENCE_PATTERNS",
    "Evidence",
    "EvidencePattern",
    "NOT_CLAIM_INDICATORS",
    "VIOLATION_TYPE",
    "analyze_claim_evidence",
    "detect_gaps",
    "extract_claims",
    "find_claim_source_files",
    "is_positive_claim",
    "search_evidence",
]
