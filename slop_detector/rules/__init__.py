"""Rule definitions, the rule table and its indexed registry.

This package provides the shared finding vocabulary, the literal rule
catalog, the registry that indexes it, and the exclusion matcher that
decides which files a rule skips.
"""

from .base import (
    Certainty,
    Finding,
    MatchScope,
    Remediation,
    RuleDefinition,
    Severity,
    StructuralAnalyzer,
    Violation,
    verdict_for,
)
from .catalog import CATALOG_VERSION, RULES
from .exclusion import BoundedCache, ExclusionMatcher, compile_glob, is_excluded
from .registry import UNIVERSAL, Registry, build_registry, default_registry

__all__ = [
    # Base types
    "Certainty",
    "Finding",
    "MatchScope",
    "Remediation",
    "RuleDefinition",
    "Severity",
    "StructuralAnalyzer",
    "Violation",
    "verdict_for",
    # Catalog and registry
    "CATALOG_VERSION",
    "RULES",
    "UNIVERSAL",
    "Registry",
    "build_registry",
    "default_registry",
    # Exclusions
    "BoundedCache",
    "ExclusionMatcher",
    "compile_glob",
    "is_excluded",
]
