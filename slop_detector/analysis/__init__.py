"""Structural analyzers and the text/traversal helpers they share.

Per-file analyzers take file content and return Violations; the
repository analyzers walk a bounded source tree.
"""

from .buzzwords import ClaimEvidenceResult, analyze_claim_evidence, extract_claims
from .delimiters import MAX_SCAN_WINDOW, NOT_FOUND, find_matching_delimiter
from .doc_ratio import analyze_doc_ratio
from .duplicates import analyze_duplicate_strings
from .languages import detect_language, is_test_file
from .over_engineering import OverEngineeringResult, analyze_over_engineering
from .stubs import analyze_stub_functions
from .verbosity import analyze_verbosity_ratio

__all__ = [
    # Scanner
    "MAX_SCAN_WINDOW",
    "NOT_FOUND",
    "find_matching_delimiter",
    # Per-file analyzers
    "analyze_doc_ratio",
    "analyze_duplicate_strings",
    "analyze_stub_functions",
    "analyze_verbosity_ratio",
    # Repository analyzers
    "ClaimEvidenceResult",
    "OverEngineeringResult",
    "analyze_claim_evidence",
    "analyze_over_engineering",
    "extract_claims",
    # Languages
    "detect_language",
    "is_test_file",
]
