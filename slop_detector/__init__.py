"""Slop Detector - Code Slop Detection and Structural Analysis

Scans source files for quality defects (debug leftovers, placeholders,
hardcoded secrets, excessive documentation, over-engineering and quality
claims without evidence) and classifies every finding by certainty and
severity.
"""

__version__ = "1.0.0"
__description__ = "Code slop detection engine with certainty-graded findings"

from .config import ConfigError, ScanConfig, load_config
from .engine import ScanEngine, ScanResult, discover_files, scan
from .formatters import format_findings_for_display, format_handoff_prompt
from .rules import (
    Certainty,
    Finding,
    Registry,
    Remediation,
    RuleDefinition,
    Severity,
    Violation,
    build_registry,
    default_registry,
    is_excluded,
)
from .cli import main as cli_main

__all__ = [
    # Engine
    "ScanEngine",
    "ScanResult",
    "discover_files",
    "scan",
    # Configuration
    "ConfigError",
    "ScanConfig",
    "load_config",
    # Rules
    "Certainty",
    "Finding",
    "Registry",
    "Remediation",
    "RuleDefinition",
    "Severity",
    "Violation",
    "build_registry",
    "default_registry",
    "is_excluded",
    # Output
    "format_findings_for_display",
    "format_handoff_prompt",
    "cli_main",
]
