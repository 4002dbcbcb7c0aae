"""Rule registry with eagerly built lookup indices.

The registry wraps the literal rule table and derives three indices from
it at construction time (by language, by severity, by remediation). The
table and the indices are read-only afterwards, so lookups never need to
re-scan the table and can never drift from it.
"""

from collections.abc import Iterable, Iterator
from functools import lru_cache
from types import MappingProxyType
from typing import Mapping

from ..detector_logging import get_logger
from .base import Remediation, RuleDefinition, Severity

logger = get_logger()

UNIVERSAL = "universal"


def _freeze(index: dict[str, list[RuleDefinition]]) -> Mapping[str, tuple[RuleDefinition, ...]]:
    """Convert a mutable bucket map into a read-only one."""
    return MappingProxyType({key: tuple(rules) for key, rules in index.items()})


class Registry:
    """Immutable rule table plus its derived indices.

    Use build_registry() or default_registry() rather than instantiating
    directly so the table is only indexed once.
    """

    def __init__(self, rules: Iterable[RuleDefinition]):
        """Index the rule table.

        Args:
            rules: Rule definitions in table order

        Raises:
            ValueError: If two rules share a name
        """
        table: dict[str, RuleDefinition] = {}
        for rule in rules:
            if rule.name in table:
                raise ValueError(f"Rule {rule.name} is already registered")
            table[rule.name] = rule
        self._rules: Mapping[str, RuleDefinition] = MappingProxyType(table)
        self._ordered: tuple[RuleDefinition, ...] = tuple(table.values())

        by_language: dict[str, list[RuleDefinition]] = {UNIVERSAL: []}
        language_only: dict[str, list[RuleDefinition]] = {}
        by_severity: dict[str, list[RuleDefinition]] = {}
        by_remediation: dict[str, list[RuleDefinition]] = {}

        for rule in self._ordered:
            if rule.language is not None:
                language_only.setdefault(rule.language, []).append(rule)
            by_severity.setdefault(rule.severity.value, []).append(rule)
            by_remediation.setdefault(rule.remediation.value, []).append(rule)

        # Language buckets hold universal rules merged in table order
        for language in language_only:
            by_language[language] = []
        for rule in self._ordered:
            if rule.language is None:
                for bucket in by_language.values():
                    bucket.append(rule)
            else:
                by_language[rule.language].append(rule)

        self._by_language = _freeze(by_language)
        self._language_only = _freeze(language_only)
        self._by_severity = _freeze(by_severity)
        self._by_remediation = _freeze(by_remediation)

        # Name sets for O(1) membership checks during intersection
        self._language_names = MappingProxyType(
            {k: frozenset(r.name for r in v) for k, v in self._by_language.items()}
        )
        self._severity_names = MappingProxyType(
            {k: frozenset(r.name for r in v) for k, v in self._by_severity.items()}
        )
        self._remediation_names = MappingProxyType(
            {k: frozenset(r.name for r in v) for k, v in self._by_remediation.items()}
        )

        logger.debug(
            f"Indexed {len(self._ordered)} rules across "
            f"{len(self._language_only)} languages"
        )

    def __len__(self) -> int:
        return len(self._ordered)

    def __iter__(self) -> Iterator[RuleDefinition]:
        return iter(self._ordered)

    def __contains__(self, name: object) -> bool:
        return name in self._rules

    @property
    def rules(self) -> tuple[RuleDefinition, ...]:
        """All rules in table order."""
        return self._ordered

    def get(self, name: str) -> RuleDefinition | None:
        """Get a rule by name."""
        return self._rules.get(name)

    def _language_bucket(self, language: str) -> tuple[RuleDefinition, ...]:
        bucket = self._by_language.get(language)
        if bucket is None:
            return self._by_language[UNIVERSAL]
        return bucket

    def lookup(
        self,
        language: str | None = None,
        severity: Severity | str | None = None,
        remediation: Remediation | str | None = None,
    ) -> list[RuleDefinition]:
        """Return rules matching every given criterion.

        The language criterion includes universal rules. The first given
        criterion's bucket is walked once and checked against the other
        criteria's name sets.

        Args:
            language: Language name (e.g. "python")
            severity: Severity or its string value
            remediation: Remediation or its string value

        Returns:
            Matching rules in table order
        """
        severity_key = severity.value if isinstance(severity, Severity) else severity
        remediation_key = (
            remediation.value if isinstance(remediation, Remediation) else remediation
        )

        if language is None and severity_key is None and remediation_key is None:
            return list(self._ordered)

        filters: list[frozenset[str]] = []
        candidates: tuple[RuleDefinition, ...] | None = None

        if language is not None:
            candidates = self._language_bucket(language)
        if severity_key is not None:
            names = self._severity_names.get(severity_key, frozenset())
            if candidates is None:
                candidates = self._by_severity.get(severity_key, ())
            else:
                filters.append(names)
        if remediation_key is not None:
            names = self._remediation_names.get(remediation_key, frozenset())
            if candidates is None:
                candidates = self._by_remediation.get(remediation_key, ())
            else:
                filters.append(names)

        return [
            rule
            for rule in candidates or ()
            if all(rule.name in names for names in filters)
        ]

    def for_language_only(self, language: str) -> list[RuleDefinition]:
        """Rules tagged with exactly this language, without universal rules."""
        return list(self._language_only.get(language, ()))

    def universal(self) -> list[RuleDefinition]:
        """Rules that apply to every language."""
        return list(self._by_language[UNIVERSAL])

    def structural_rules(self) -> list[RuleDefinition]:
        """Rules resolved by a structural analyzer."""
        return [r for r in self._ordered if r.requires_structural_analysis]

    def pattern_rules(self) -> list[RuleDefinition]:
        """Rules resolved by direct pattern matching."""
        return [r for r in self._ordered if not r.requires_structural_analysis]

    @property
    def languages(self) -> list[str]:
        """Language tags present in the table, plus "universal"."""
        return list(self._by_language.keys())

    @property
    def severities(self) -> list[str]:
        """Severity values present in the table."""
        return list(self._by_severity.keys())

    def has_language(self, language: str) -> bool:
        """Check whether any rule targets this language specifically."""
        return language in self._language_only


def build_registry(rules: Iterable[RuleDefinition] | None = None) -> Registry:
    """Build a registry from a rule table.

    Args:
        rules: Rule table; defaults to the built-in catalog

    Returns:
        Indexed, read-only Registry
    """
    if rules is None:
        from .catalog import RULES

        rules = RULES
    return Registry(rules)


@lru_cache(maxsize=1)
def default_registry() -> Registry:
    """Process-wide registry over the built-in catalog, built once."""
    return build_registry()


__all__ = ["Registry", "UNIVERSAL", "build_registry", "default_registry"]
