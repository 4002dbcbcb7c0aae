"""The versioned rule table.

Every rule the engine knows about is declared here as literal data. The
registry derives all of its lookup indices from RULES exactly once, so
this tuple is the single source of truth.
"""

import re

from .base import (
    MatchScope,
    Remediation,
    RuleDefinition,
    Severity,
    StructuralAnalyzer,
)

CATALOG_VERSION = "1.0.0"

# Test and fixture files that secret rules never inspect
SECRET_EXCLUDES = ("*.test.*", "*.spec.*", "*.example.*")

# Identifiers flagged by the generic naming rules
_GENERIC_NAMES = (
    "data|result|item|temp|value|output|response|obj|ret|res|val|arr"
)


def _secret_rule(
    name: str,
    pattern: str,
    description: str,
    extra_excludes: tuple[str, ...] = (),
    flags: int = 0,
) -> RuleDefinition:
    """Build a critical, universal secret-detection rule."""
    return RuleDefinition(
        name=name,
        description=description,
        severity=Severity.CRITICAL,
        remediation=Remediation.FLAG,
        pattern=re.compile(pattern, flags),
        exclude_globs=SECRET_EXCLUDES + extra_excludes,
    )


RULES: tuple[RuleDefinition, ...] = (
    # -------------------------------------------------------------------------
    # Debug statements
    # -------------------------------------------------------------------------
    RuleDefinition(
        name="console_debugging",
        description="Console.log statements left in production code",
        severity=Severity.MEDIUM,
        remediation=Remediation.REMOVE,
        language="javascript",
        pattern=re.compile(r"console\.(log|debug|info|warn)\("),
        exclude_globs=("*.test.*", "*.spec.*", "*.config.*"),
    ),
    RuleDefinition(
        name="python_debugging",
        description="Debug print/breakpoint statements in production",
        severity=Severity.MEDIUM,
        remediation=Remediation.REMOVE,
        language="python",
        pattern=re.compile(r"(print\(|import pdb|breakpoint\(\)|import ipdb)"),
        exclude_globs=("test_*.py", "*_test.py", "conftest.py"),
    ),
    RuleDefinition(
        name="rust_debugging",
        description="Debug print macros in production code",
        severity=Severity.MEDIUM,
        remediation=Remediation.REMOVE,
        language="rust",
        pattern=re.compile(r"(println!|dbg!|eprintln!)\("),
        exclude_globs=("*_test.rs", "*_tests.rs"),
    ),
    # -------------------------------------------------------------------------
    # Leftovers and placeholders
    # -------------------------------------------------------------------------
    RuleDefinition(
        name="old_todos",
        description="TODO/FIXME/HACK/XXX markers left in code",
        severity=Severity.LOW,
        remediation=Remediation.FLAG,
        pattern=re.compile(r"(TODO|FIXME|HACK|XXX):"),
    ),
    RuleDefinition(
        name="commented_code",
        description="Large blocks of commented-out code",
        severity=Severity.MEDIUM,
        remediation=Remediation.REMOVE,
        pattern=re.compile(r"^\s*(//|#)\s*\w{5,}"),
        min_consecutive_lines=5,
    ),
    RuleDefinition(
        name="placeholder_text",
        description="Placeholder text that should be replaced",
        severity=Severity.HIGH,
        remediation=Remediation.FLAG,
        pattern=re.compile(
            r"(lorem ipsum|test test test|asdf|foo bar baz|placeholder|"
            r"replace this|todo: implement)",
            re.IGNORECASE,
        ),
        exclude_globs=("*.test.*", "*.spec.*", "README.*", "*.md"),
    ),
    RuleDefinition(
        name="placeholder_stub_returns_js",
        description="Stub return value (0, true, false, null, undefined, [], {})",
        severity=Severity.HIGH,
        remediation=Remediation.FLAG,
        language="javascript",
        pattern=re.compile(r"return\s+(?:0|true|false|null|undefined|\[\]|\{\})\s*;?\s*$"),
        exclude_globs=("*.test.*", "*.spec.*", "*.config.*"),
    ),
    RuleDefinition(
        name="placeholder_not_implemented_js",
        description='throw new Error("TODO: implement...") placeholder',
        severity=Severity.HIGH,
        remediation=Remediation.FLAG,
        language="javascript",
        pattern=re.compile(
            r"throw\s+new\s+Error\s*\(\s*['\"`].*(?:TODO|implement|not\s+impl)",
            re.IGNORECASE,
        ),
        exclude_globs=("*.test.*", "*.spec.*"),
    ),
    RuleDefinition(
        name="placeholder_empty_function_js",
        description="Empty function body (placeholder)",
        severity=Severity.HIGH,
        remediation=Remediation.FLAG,
        language="javascript",
        pattern=re.compile(r"(?:function\s+\w+\s*\([^)]*\)|=>\s*)\s*\{\s*\}"),
        exclude_globs=("*.test.*", "*.spec.*", "*.d.ts"),
    ),
    RuleDefinition(
        name="placeholder_todo_rust",
        description="Rust todo!() or unimplemented!() macro",
        severity=Severity.HIGH,
        remediation=Remediation.FLAG,
        language="rust",
        pattern=re.compile(r"\b(?:todo|unimplemented)!\s*\("),
        exclude_globs=("*_test.rs", "*_tests.rs", "**/tests/**"),
    ),
    RuleDefinition(
        name="placeholder_panic_todo_rust",
        description='Rust panic!("TODO: ...") placeholder',
        severity=Severity.HIGH,
        remediation=Remediation.FLAG,
        language="rust",
        pattern=re.compile(r"\bpanic!\s*\(\s*[\"'].*(?:TODO|implement)", re.IGNORECASE),
        exclude_globs=("*_test.rs", "*_tests.rs", "**/tests/**"),
    ),
    RuleDefinition(
        name="placeholder_not_implemented_py",
        description="Python raise NotImplementedError placeholder",
        severity=Severity.HIGH,
        remediation=Remediation.FLAG,
        language="python",
        pattern=re.compile(r"raise\s+NotImplementedError"),
        exclude_globs=("test_*.py", "*_test.py", "conftest.py", "**/tests/**"),
    ),
    RuleDefinition(
        name="placeholder_pass_only_py",
        description="Python function with only pass statement",
        severity=Severity.HIGH,
        remediation=Remediation.FLAG,
        language="python",
        pattern=re.compile(
            r"def\s+\w+\s*\([^)]*\)\s*:\s*(?:pass|\n\s+pass)\s*$", re.MULTILINE
        ),
        exclude_globs=("test_*.py", "*_test.py", "conftest.py"),
        scope=MatchScope.CONTENT,
    ),
    RuleDefinition(
        name="placeholder_ellipsis_py",
        description="Python function with only ellipsis (...)",
        severity=Severity.HIGH,
        remediation=Remediation.FLAG,
        language="python",
        pattern=re.compile(
            r"def\s+\w+\s*\([^)]*\)\s*:\s*(?:\.\.\.|\n\s+\.\.\.)\s*$", re.MULTILINE
        ),
        exclude_globs=("*.pyi", "test_*.py", "*_test.py"),
        scope=MatchScope.CONTENT,
    ),
    RuleDefinition(
        name="placeholder_panic_go",
        description='Go panic("TODO: ...") placeholder',
        severity=Severity.HIGH,
        remediation=Remediation.FLAG,
        language="go",
        pattern=re.compile(
            r"panic\s*\(\s*[\"'].*(?:TODO|implement|not\s+impl)", re.IGNORECASE
        ),
        exclude_globs=("*_test.go", "**/testdata/**"),
    ),
    RuleDefinition(
        name="placeholder_unsupported_java",
        description="Java throw new UnsupportedOperationException() placeholder",
        severity=Severity.HIGH,
        remediation=Remediation.FLAG,
        language="java",
        pattern=re.compile(r"throw\s+new\s+UnsupportedOperationException\s*\("),
        exclude_globs=("*Test.java", "**/test/**"),
    ),
    RuleDefinition(
        name="placeholder_stub_functions",
        description="Function body is a single stub return",
        severity=Severity.MEDIUM,
        remediation=Remediation.FLAG,
        analyzer=StructuralAnalyzer.STUB_FUNCTIONS,
        exclude_globs=("*.test.*", "*.spec.*", "*.config.*", "*.pyi"),
    ),
    # -------------------------------------------------------------------------
    # Error handling
    # -------------------------------------------------------------------------
    RuleDefinition(
        name="empty_catch_js",
        description="Empty catch blocks without error handling",
        severity=Severity.HIGH,
        remediation=Remediation.ANNOTATE,
        language="javascript",
        pattern=re.compile(r"catch\s*\([^)]*\)\s*\{\s*\}"),
    ),
    RuleDefinition(
        name="empty_except_py",
        description="Empty except blocks with just pass",
        severity=Severity.HIGH,
        remediation=Remediation.ANNOTATE,
        language="python",
        pattern=re.compile(r"except\s*[^:]*:\s*pass\s*$"),
    ),
    # -------------------------------------------------------------------------
    # Code hygiene
    # -------------------------------------------------------------------------
    RuleDefinition(
        name="magic_numbers",
        description="Magic numbers that should be constants",
        severity=Severity.LOW,
        remediation=Remediation.FLAG,
        pattern=re.compile(r"(?<![a-zA-Z_\d])[0-9]{4,}(?![a-zA-Z_\d])"),
        exclude_globs=(
            "*.test.*",
            "*.spec.*",
            "*.config.*",
            "package.json",
            "package-lock.json",
        ),
    ),
    RuleDefinition(
        name="disabled_linter",
        description="Disabled linter rules that may hide issues",
        severity=Severity.MEDIUM,
        remediation=Remediation.FLAG,
        pattern=re.compile(
            r"(eslint-disable|pylint: disable|#\s*noqa|@SuppressWarnings|#\[allow\()"
        ),
    ),
    RuleDefinition(
        name="unused_imports_hint",
        description="Imports marked as unused",
        severity=Severity.LOW,
        remediation=Remediation.REMOVE,
        pattern=re.compile(r"^import .* from .* // unused$"),
    ),
    RuleDefinition(
        name="duplicate_strings",
        description="Duplicate string literals that should be constants",
        severity=Severity.LOW,
        remediation=Remediation.FLAG,
        analyzer=StructuralAnalyzer.DUPLICATE_STRINGS,
        exclude_globs=("*.test.*", "*.spec.*"),
        thresholds={"max_occurrences": 5, "min_length": 4},
    ),
    RuleDefinition(
        name="mixed_indentation",
        description="Mixed tabs and spaces",
        severity=Severity.LOW,
        remediation=Remediation.REPLACE,
        pattern=re.compile(r"^\t+ +|^ +\t+"),
        exclude_globs=("Makefile", "*.mk"),
    ),
    RuleDefinition(
        name="trailing_whitespace",
        description="Trailing whitespace at end of lines",
        severity=Severity.LOW,
        remediation=Remediation.REMOVE,
        pattern=re.compile(r"\s+$"),
        # Markdown uses trailing spaces for line breaks
        exclude_globs=("*.md",),
    ),
    RuleDefinition(
        name="multiple_blank_lines",
        description="More than 2 consecutive blank lines",
        severity=Severity.LOW,
        remediation=Remediation.REPLACE,
        pattern=re.compile(r"^[ \t]*\n[ \t]*\n[ \t]*\n", re.MULTILINE),
        scope=MatchScope.CONTENT,
    ),
    RuleDefinition(
        name="process_exit",
        description="process.exit() should not be in library code",
        severity=Severity.HIGH,
        remediation=Remediation.FLAG,
        language="javascript",
        pattern=re.compile(r"process\.exit\("),
        exclude_globs=("*.test.*", "cli.js", "index.js", "bin/*"),
    ),
    RuleDefinition(
        name="bare_urls",
        description="Hardcoded URLs that should be configuration",
        severity=Severity.LOW,
        remediation=Remediation.FLAG,
        pattern=re.compile(r"https?://[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}"),
        exclude_globs=("*.test.*", "*.md", "package.json", "README.*"),
    ),
    # -------------------------------------------------------------------------
    # Secrets
    # -------------------------------------------------------------------------
    RuleDefinition(
        name="hardcoded_secrets",
        description="Potential hardcoded credentials",
        severity=Severity.CRITICAL,
        remediation=Remediation.FLAG,
        # Skips template placeholders (${VAR}, {{VAR}}, <VAR>) and masked values
        pattern=re.compile(
            r"(password|secret|api[_-]?key|token|credential|auth)"
            r"[_-]?(key|token|secret|pass)?\s*[:=]\s*[\"'`]"
            r"(?!\$\{)(?!\{\{)(?!<[A-Z_])(?![x*#]{8,})(?![X*#]{8,})"
            r"[^\"'`\s]{8,}[\"'`]",
            re.IGNORECASE,
        ),
        exclude_globs=(
            "*.test.*",
            "*.spec.*",
            "*.example.*",
            "*.sample.*",
            "README.*",
            "*.md",
        ),
    ),
    _secret_rule(
        "jwt_tokens",
        r"eyJ[A-Za-z0-9_-]{10,}\.eyJ[A-Za-z0-9_-]{10,}\.[A-Za-z0-9_-]{10,}",
        "Hardcoded JWT token",
    ),
    _secret_rule("openai_api_key", r"sk-[a-zA-Z0-9]{32,}", "Hardcoded OpenAI API key"),
    _secret_rule(
        "github_token",
        r"(ghp_[a-zA-Z0-9]{36}|gho_[a-zA-Z0-9]{36}|ghu_[a-zA-Z0-9]{36}|"
        r"ghs_[a-zA-Z0-9]{36}|ghr_[a-zA-Z0-9]{36}|"
        r"github_pat_[a-zA-Z0-9]{22}_[a-zA-Z0-9]{59})",
        "Hardcoded GitHub token",
    ),
    _secret_rule(
        "aws_credentials",
        r"(AKIA[0-9A-Z]{16}|aws_secret_access_key\s*[:=]\s*[\"'`][A-Za-z0-9/+=]{40}[\"'`])",
        "Hardcoded AWS credentials",
        flags=re.IGNORECASE,
    ),
    _secret_rule(
        "google_api_key",
        r"(AIza[0-9A-Za-z_-]{35}|[0-9]+-[a-z0-9_]{32}\.apps\.googleusercontent\.com)",
        "Hardcoded Google/Firebase API key",
    ),
    _secret_rule(
        "stripe_api_key",
        r"(sk_live_[a-zA-Z0-9]{24,}|sk_test_[a-zA-Z0-9]{24,}|"
        r"rk_live_[a-zA-Z0-9]{24,}|rk_test_[a-zA-Z0-9]{24,})",
        "Hardcoded Stripe API key",
    ),
    _secret_rule(
        "slack_token",
        r"(xoxb-[0-9]{10,}-[0-9]{10,}-[a-zA-Z0-9]{24}|"
        r"xoxp-[0-9]{10,}-[0-9]{10,}-[a-zA-Z0-9]{24}|"
        r"xoxa-[0-9]{10,}-[a-zA-Z0-9]{24}|"
        r"https://hooks\.slack\.com/services/T[A-Z0-9]{8}/B[A-Z0-9]{8,}/[a-zA-Z0-9]{24})",
        "Hardcoded Slack token or webhook URL",
    ),
    _secret_rule(
        "discord_token",
        r"(discord.*[\"'`][A-Za-z0-9_-]{24}\.[A-Za-z0-9_-]{6}\.[A-Za-z0-9_-]{27}[\"'`]|"
        r"https://discord(?:app)?\.com/api/webhooks/[0-9]+/[A-Za-z0-9_-]+)",
        "Hardcoded Discord token or webhook",
        flags=re.IGNORECASE,
    ),
    _secret_rule(
        "sendgrid_api_key",
        r"SG\.[a-zA-Z0-9_-]{22}\.[a-zA-Z0-9_-]{43}",
        "Hardcoded SendGrid API key",
    ),
    _secret_rule(
        "twilio_credentials",
        r"(AC[a-f0-9]{32}|SK[a-f0-9]{32})",
        "Hardcoded Twilio credentials",
    ),
    _secret_rule("npm_token", r"npm_[a-zA-Z0-9]{36}", "Hardcoded NPM token"),
    _secret_rule(
        "private_key",
        r"-----BEGIN\s+(RSA\s+)?PRIVATE\s+KEY-----",
        "Private key in source code",
        extra_excludes=("*.pem.example",),
    ),
    RuleDefinition(
        name="high_entropy_string",
        description="High-entropy string that may be a secret",
        severity=Severity.MEDIUM,
        remediation=Remediation.FLAG,
        pattern=re.compile(r"[\"'`]([A-Za-z0-9+/=_-]{40,})[\"'`]"),
        exclude_globs=(
            "*.test.*",
            "*.spec.*",
            "*.example.*",
            "*.lock",
            "package-lock.json",
            "yarn.lock",
            "pnpm-lock.yaml",
        ),
        entropy_threshold=4.5,
    ),
    # -------------------------------------------------------------------------
    # Comment references
    # -------------------------------------------------------------------------
    RuleDefinition(
        name="issue_pr_references",
        description="Issue/PR/iteration references in comments",
        severity=Severity.MEDIUM,
        remediation=Remediation.REMOVE,
        pattern=re.compile(
            r"//.*(?:#\d+|issue\s+#?\d+|PR\s+#?\d+|pull\s+request\s+#?\d+|"
            r"fixed\s+in\s+#?\d+|closes?\s+#?\d+|resolves?\s+#?\d+|iteration\s+\d+)",
            re.IGNORECASE,
        ),
        exclude_globs=("*.md", "README.*", "CHANGELOG.*", "CONTRIBUTING.*"),
    ),
    RuleDefinition(
        name="file_path_references",
        description="File path references in comments that may be outdated",
        severity=Severity.LOW,
        remediation=Remediation.FLAG,
        pattern=re.compile(
            r"//.*(?:see|refer\s+to|in|per|documented\s+in)\s+"
            r"([a-zA-Z0-9_\-./]+\.(?:md|js|ts|json|yaml|yml|toml|txt))",
            re.IGNORECASE,
        ),
        exclude_globs=("*.md", "README.*", "*.test.*", "*.spec.*"),
    ),
    # -------------------------------------------------------------------------
    # Generic naming
    # -------------------------------------------------------------------------
    RuleDefinition(
        name="generic_naming_js",
        description="Generic variable name that could be more descriptive",
        severity=Severity.LOW,
        remediation=Remediation.FLAG,
        language="javascript",
        pattern=re.compile(
            rf"\b(?:const|let|var)\s+({_GENERIC_NAMES}|str|num|buf|ctx|cfg|opts|args|params)\s*[=:]",
            re.IGNORECASE,
        ),
        exclude_globs=("*.test.*", "*.spec.*", "**/test/**", "**/tests/**"),
    ),
    RuleDefinition(
        name="generic_naming_py",
        description="Generic variable name that could be more descriptive",
        severity=Severity.LOW,
        remediation=Remediation.FLAG,
        language="python",
        pattern=re.compile(
            rf"^(\s*)(?!.*\bfor\s+\w+\s+in\b)({_GENERIC_NAMES}|ctx|cfg|opts|args|params)\s*[:=]",
            re.IGNORECASE,
        ),
        exclude_globs=("*test*.py", "**/test_*.py", "**/tests/**", "conftest.py"),
    ),
    RuleDefinition(
        name="generic_naming_rust",
        description="Generic variable name that could be more descriptive",
        severity=Severity.LOW,
        remediation=Remediation.FLAG,
        language="rust",
        pattern=re.compile(
            rf"\blet\s+(?:mut\s+)?({_GENERIC_NAMES}|buf|ctx|cfg|opts|args)\s*[=:]",
            re.IGNORECASE,
        ),
        exclude_globs=("*_test.rs", "*_tests.rs", "**/tests/**"),
    ),
    RuleDefinition(
        name="generic_naming_go",
        description="Generic variable name that could be more descriptive",
        severity=Severity.LOW,
        remediation=Remediation.FLAG,
        language="go",
        pattern=re.compile(
            rf"\b({_GENERIC_NAMES}|buf|ctx|cfg|opts|args)\s*:=", re.IGNORECASE
        ),
        exclude_globs=("*_test.go", "**/tests/**", "**/testdata/**"),
    ),
    # -------------------------------------------------------------------------
    # Verbosity
    # -------------------------------------------------------------------------
    RuleDefinition(
        name="verbosity_preambles",
        description="AI preamble phrases in comments",
        severity=Severity.LOW,
        remediation=Remediation.FLAG,
        pattern=re.compile(
            r"//\s*(?:certainly|i'd\s+be\s+happy|great\s+question|absolutely|"
            r"of\s+course|happy\s+to\s+help|let\s+me\s+help|i\s+can\s+help)",
            re.IGNORECASE,
        ),
        exclude_globs=("*.test.*", "*.spec.*", "*.md"),
    ),
    RuleDefinition(
        name="verbosity_buzzwords",
        description="Marketing buzzwords that obscure technical meaning",
        severity=Severity.LOW,
        remediation=Remediation.FLAG,
        pattern=re.compile(
            r"\b(?:synergize|operationalize|paradigm\s+shift|best-in-class|world-class|"
            r"cutting-edge|game-changing|holistic|revolutionary|transformative|seamless|"
            r"next-generation|bleeding-edge|industry-leading)\b",
            re.IGNORECASE,
        ),
        exclude_globs=("*.test.*", "*.spec.*", "*.md", "CHANGELOG.*", "README.*"),
    ),
    RuleDefinition(
        name="verbosity_hedging",
        description="Hedging language in comments",
        severity=Severity.LOW,
        remediation=Remediation.FLAG,
        pattern=re.compile(
            r"//.*\b(?:it'?s?\s+worth\s+noting|generally\s+speaking|more\s+or\s+less|"
            r"arguably|perhaps|possibly|might\s+be|should\s+work|i\s+think|"
            r"i\s+believe|probably|maybe)\b",
            re.IGNORECASE,
        ),
        exclude_globs=("*.test.*", "*.spec.*"),
    ),
    # -------------------------------------------------------------------------
    # Structural rules
    # -------------------------------------------------------------------------
    RuleDefinition(
        name="doc_code_ratio",
        description="Documentation longer than code (doc block > 3x function body)",
        severity=Severity.MEDIUM,
        remediation=Remediation.FLAG,
        analyzer=StructuralAnalyzer.DOC_RATIO,
        exclude_globs=("*.test.*", "*.spec.*", "*.d.ts"),
        thresholds={"min_function_lines": 3, "max_ratio": 3.0},
    ),
    RuleDefinition(
        name="verbosity_ratio",
        description="Excessive inline comments (>2:1 comment-to-code ratio within function)",
        severity=Severity.MEDIUM,
        remediation=Remediation.FLAG,
        analyzer=StructuralAnalyzer.VERBOSITY_RATIO,
        exclude_globs=("*.test.*", "*.spec.*", "*.md", "*.d.ts"),
        thresholds={"min_code_lines": 3, "max_comment_ratio": 2.0},
    ),
    RuleDefinition(
        name="over_engineering_metrics",
        description="Excessive files/lines relative to public API",
        severity=Severity.HIGH,
        remediation=Remediation.FLAG,
        analyzer=StructuralAnalyzer.OVER_ENGINEERING,
        thresholds={
            "file_ratio_threshold": 20,
            "lines_per_export_threshold": 500,
            "depth_threshold": 4,
        },
    ),
    RuleDefinition(
        name="buzzword_inflation",
        description="Quality claims (production-ready, secure, scalable) without supporting evidence",
        severity=Severity.HIGH,
        remediation=Remediation.FLAG,
        analyzer=StructuralAnalyzer.CLAIM_EVIDENCE,
        thresholds={"min_evidence_matches": 2},
    ),
)


__all__ = ["CATALOG_VERSION", "RULES", "SECRET_EXCLUDES"]
