"""Configuration for slop scans.

This module provides the Pydantic configuration models that control which
rules run, structural analyzer thresholds, cache sizes and parallelism,
plus the JSON loader for project configuration files.
"""

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from .detector_logging import get_logger

logger = get_logger()

CONFIG_FILE = ".slop-detector.json"

THOROUGHNESS_LEVELS = ("quick", "normal")


class ConfigError(ValueError):
    """Raised when a configuration file cannot be read or validated."""

    def __init__(self, message: str, config_path: Path | None = None):
        super().__init__(message)
        self.config_path = config_path


class DocRatioConfig(BaseModel):
    """Documentation-ratio analyzer thresholds."""

    min_function_lines: int | None = Field(
        default=None, ge=1, description="Smallest function body considered"
    )
    max_ratio: float | None = Field(
        default=None, gt=0, description="Largest allowed doc/body ratio"
    )

    class Config:
        extra = "allow"


class VerbosityConfig(BaseModel):
    """Comment-verbosity analyzer thresholds."""

    min_code_lines: int | None = Field(
        default=None, ge=1, description="Smallest number of code lines considered"
    )
    max_comment_ratio: float | None = Field(
        default=None, gt=0, description="Largest allowed comment/code ratio"
    )

    class Config:
        extra = "allow"


class OverEngineeringConfig(BaseModel):
    """Over-engineering analyzer thresholds."""

    file_ratio_threshold: float | None = Field(
        default=None, gt=0, description="Max source files per export"
    )
    lines_per_export_threshold: float | None = Field(
        default=None, gt=0, description="Max code lines per export"
    )
    depth_threshold: int | None = Field(
        default=None, ge=1, description="Max directory depth below src/"
    )

    class Config:
        extra = "allow"


class ClaimEvidenceConfig(BaseModel):
    """Buzzword-evidence analyzer settings."""

    min_evidence_matches: int | None = Field(
        default=None, ge=1, description="Evidence needed to back a claim category"
    )
    buzzword_categories: dict[str, list[str]] | None = Field(
        default=None, description="Replacement category -> buzzwords mapping"
    )

    class Config:
        extra = "allow"


class DuplicatesConfig(BaseModel):
    """Duplicate string analyzer thresholds."""

    max_occurrences: int | None = Field(
        default=None, ge=1, description="Largest allowed number of copies"
    )
    min_length: int | None = Field(
        default=None, ge=1, description="Shorter literals are ignored"
    )

    class Config:
        extra = "allow"


class CacheConfig(BaseModel):
    """Exclusion matcher cache sizes (0 disables a cache)."""

    pattern_capacity: int = Field(
        default=50, ge=0, description="Compiled exclusion glob cache size"
    )
    result_capacity: int = Field(
        default=200, ge=0, description="Per-file exclusion result cache size"
    )

    class Config:
        extra = "allow"


class ScanConfig(BaseModel):
    """Configuration for a slop scan.

    Threshold fields left as None fall back to the thresholds declared in
    the rule table.
    """

    languages: list[str] | None = Field(
        default=None, description="Only scan files of these languages"
    )
    severities: list[str] | None = Field(
        default=None, description="Only report rules of these severities"
    )
    disabled_rules: list[str] = Field(
        default_factory=list, description="Rule names never applied"
    )
    thoroughness: str = Field(
        default="normal", description="quick skips structural analyzers"
    )
    max_workers: int = Field(
        default=1, ge=1, le=64, description="Files analyzed in parallel"
    )
    max_files: int = Field(
        default=10000, ge=1, description="Cap on discovered files"
    )

    doc_ratio: DocRatioConfig = Field(default_factory=DocRatioConfig)
    verbosity: VerbosityConfig = Field(default_factory=VerbosityConfig)
    over_engineering: OverEngineeringConfig = Field(
        default_factory=OverEngineeringConfig
    )
    claim_evidence: ClaimEvidenceConfig = Field(default_factory=ClaimEvidenceConfig)
    duplicates: DuplicatesConfig = Field(default_factory=DuplicatesConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)

    class Config:
        extra = "allow"

    @field_validator("thoroughness")
    @classmethod
    def _check_thoroughness(cls, value: str) -> str:
        value = value.lower()
        if value not in THOROUGHNESS_LEVELS:
            raise ValueError(
                f"thoroughness must be one of {', '.join(THOROUGHNESS_LEVELS)}"
            )
        return value

    @field_validator("severities")
    @classmethod
    def _check_severities(cls, value: list[str] | None) -> list[str] | None:
        if value is None:
            return None
        allowed = ("critical", "high", "medium", "low")
        normalized = [s.lower() for s in value]
        for severity in normalized:
            if severity not in allowed:
                raise ValueError(f"Unknown severity: {severity}")
        return normalized

    def is_rule_enabled(self, rule_name: str) -> bool:
        """Check if a rule may run."""
        return rule_name not in self.disabled_rules

    @property
    def is_quick(self) -> bool:
        """Whether structural analyzers are skipped."""
        return self.thoroughness == "quick"

    def thresholds_for(self, section: str, defaults: dict[str, Any]) -> dict[str, Any]:
        """Merge a section's explicit thresholds over rule defaults.

        Args:
            section: Config section name (e.g. "doc_ratio")
            defaults: Thresholds from the rule table

        Returns:
            Defaults overridden by every non-None field of the section
        """
        merged = dict(defaults)
        model = getattr(self, section, None)
        if model is None:
            return merged
        for key, value in model.model_dump().items():
            if value is not None and key in merged:
                merged[key] = value
        return merged


def _read_json(path: Path) -> dict[str, Any]:
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in config {path}: {e}")
        raise ConfigError(f"Invalid JSON in {path}: {e}", path) from None
    except OSError as e:
        raise ConfigError(f"Cannot read config {path}: {e}", path) from None

    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must contain a JSON object", path)
    return data


def load_config(
    path: str | Path | None = None,
    project_path: str | Path | None = None,
    **overrides: Any,
) -> ScanConfig:
    """Load scan configuration.

    Precedence (highest to lowest):
    1. Keyword overrides
    2. Explicit config file ``path``
    3. ``.slop-detector.json`` in ``project_path``
    4. Defaults

    Args:
        path: Explicit JSON config file (must exist)
        project_path: Project root searched for CONFIG_FILE
        **overrides: Top-level ScanConfig fields; None values are ignored

    Returns:
        Validated ScanConfig

    Raises:
        ConfigError: If a file is unreadable, not JSON, or fails validation
    """
    data: dict[str, Any] = {}
    source: Path | None = None

    if path is not None:
        source = Path(path)
        if not source.is_file():
            raise ConfigError(f"Config file not found: {source}", source)
        data = _read_json(source)
    elif project_path is not None:
        candidate = Path(project_path) / CONFIG_FILE
        if candidate.is_file():
            source = candidate
            data = _read_json(candidate)

    data.update({key: value for key, value in overrides.items() if value is not None})

    try:
        config = ScanConfig(**data)
    except ValidationError as e:
        where = str(source) if source else "overrides"
        raise ConfigError(f"Invalid configuration in {where}: {e}", source) from None

    if source is not None:
        logger.info(f"Loaded scan config from {source}")
    return config


__all__ = [
    "CONFIG_FILE",
    "CacheConfig",
    "ClaimEvidenceConfig",
    "ConfigError",
    "DocRatioConfig",
    "DuplicatesConfig",
    "OverEngineeringConfig",
    "ScanConfig",
    "VerbosityConfig",
    "load_config",
]
