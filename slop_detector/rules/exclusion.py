"""Exclusion glob matching with bounded caches.

This module provides a ReDoS-safe glob compiler and an ExclusionMatcher
that caches both compiled globs and per-file results. Both caches use
insertion-order (FIFO) eviction, following the OrderedDict pattern used
for ticket caching.
"""

from __future__ import annotations

import re
from collections import OrderedDict
from collections.abc import Hashable, Sequence
from threading import Lock
from typing import Any, Generic, TypeVar

from ..detector_logging import get_logger

logger = get_logger()

MAX_GLOB_WILDCARDS = 10
DEFAULT_PATTERN_CACHE_SIZE = 50
DEFAULT_RESULT_CACHE_SIZE = 200

# Never matches, not even the empty string
_MATCH_NOTHING = re.compile(r"(?!)")

# Every regex metacharacter except the * wildcard
_GLOB_ESCAPE = re.compile(r"[.+?^${}()|\[\]\\]")

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class BoundedCache(Generic[K, V]):
    """Fixed-capacity map with oldest-inserted-first eviction.

    Reads do not reorder entries. A capacity of 0 disables caching: every
    get() misses and set() is a no-op. Pass a lock to share one instance
    across threads.
    """

    def __init__(self, capacity: int, lock: Lock | None = None):
        """Initialize the cache.

        Args:
            capacity: Maximum number of entries (0 disables caching)
            lock: Optional lock guarding every operation
        """
        if capacity < 0:
            raise ValueError(f"Cache capacity must be >= 0, got {capacity}")
        self.capacity = capacity
        self._entries: OrderedDict[K, V] = OrderedDict()
        self._lock = lock
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    @property
    def enabled(self) -> bool:
        """Whether the cache stores anything."""
        return self.capacity > 0

    def _get(self, key: K) -> V | None:
        value = self._entries.get(key)
        if value is None:
            self._misses += 1
        else:
            self._hits += 1
        return value

    def _set(self, key: K, value: V) -> None:
        if not self.enabled:
            return
        if key in self._entries:
            self._entries[key] = value
            return
        while len(self._entries) >= self.capacity:
            # Remove oldest entry (first item in OrderedDict)
            self._entries.popitem(last=False)
            self._evictions += 1
        self._entries[key] = value

    def get(self, key: K) -> V | None:
        """Get a cached value.

        Args:
            key: The cache key

        Returns:
            Cached value or None if absent
        """
        if self._lock is None:
            return self._get(key)
        with self._lock:
            return self._get(key)

    def set(self, key: K, value: V) -> None:
        """Store a value, evicting the oldest entry when full.

        Args:
            key: The cache key
            value: The value to cache (None is not cacheable)
        """
        if self._lock is None:
            self._set(key, value)
            return
        with self._lock:
            self._set(key, value)

    def keys(self) -> list[K]:
        """Keys in insertion order (oldest first)."""
        return list(self._entries.keys())

    def clear(self) -> int:
        """Clear all entries.

        Returns:
            Number of entries cleared
        """
        if self._lock is None:
            count = len(self._entries)
            self._entries.clear()
            return count
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
            return count

    @property
    def stats(self) -> dict[str, Any]:
        """Get cache statistics."""
        total_requests = self._hits + self._misses
        hit_rate = self._hits / total_requests if total_requests > 0 else 0.0
        return {
            "entries": len(self._entries),
            "capacity": self.capacity,
            "hits": self._hits,
            "misses": self._misses,
            "evictions": self._evictions,
            "hit_rate": hit_rate,
        }


def compile_glob(pattern: str) -> re.Pattern:
    """Compile a glob into an anchored regex without backtracking blowups.

    Both ``*`` and ``**`` match any sequence, including path separators.
    Patterns with more than MAX_GLOB_WILDCARDS wildcards, and patterns
    that fail to compile, become a matcher that matches no file.

    Args:
        pattern: Glob pattern such as ``*.test.*`` or ``**/tests/**``

    Returns:
        Compiled regex
    """
    if pattern.count("*") > MAX_GLOB_WILDCARDS:
        logger.warning(
            f"Exclusion glob {pattern!r} has more than {MAX_GLOB_WILDCARDS} "
            f"wildcards; it will not match any file"
        )
        return _MATCH_NOTHING

    escaped = _GLOB_ESCAPE.sub(lambda m: "\\" + m.group(0), pattern)
    # Collapse runs of wildcards first so ** and * produce a single .*
    regex = re.sub(r"\*+", ".*", escaped)

    try:
        return re.compile(f"^{regex}$")
    except re.error as e:
        logger.warning(f"Exclusion glob {pattern!r} failed to compile: {e}")
        return _MATCH_NOTHING


def _normalize(file_path: str) -> str:
    return str(file_path).replace("\\", "/")


class ExclusionMatcher:
    """Decides whether a file is excluded by a rule's globs.

    A glob excludes a file when it matches the whole normalized path or
    the path's final component.
    """

    def __init__(
        self,
        pattern_capacity: int = DEFAULT_PATTERN_CACHE_SIZE,
        result_capacity: int = DEFAULT_RESULT_CACHE_SIZE,
        thread_safe: bool = False,
    ):
        """Initialize the matcher.

        Args:
            pattern_capacity: Compiled glob cache size (0 disables)
            result_capacity: Per-file result cache size (0 disables)
            thread_safe: Guard both caches with a lock
        """
        self.thread_safe = thread_safe
        self._patterns: BoundedCache[str, re.Pattern] = BoundedCache(
            pattern_capacity, Lock() if thread_safe else None
        )
        self._results: BoundedCache[tuple[str, tuple[str, ...]], bool] = BoundedCache(
            result_capacity, Lock() if thread_safe else None
        )

    @property
    def pattern_cache(self) -> BoundedCache:
        """Compiled glob cache."""
        return self._patterns

    @property
    def result_cache(self) -> BoundedCache:
        """Per-file exclusion result cache."""
        return self._results

    def compiled(self, pattern: str) -> re.Pattern:
        """Get the compiled matcher for a glob (cached)."""
        regex = self._patterns.get(pattern)
        if regex is None:
            regex = compile_glob(pattern)
            self._patterns.set(pattern, regex)
        return regex

    def is_excluded(self, file_path: str, globs: Sequence[str]) -> bool:
        """Check whether any glob excludes the file.

        Args:
            file_path: File path as reported in findings
            globs: Exclusion globs of one rule

        Returns:
            True if the file should be skipped for that rule
        """
        if not globs:
            return False

        path = _normalize(file_path)
        key = (path, tuple(globs))
        cached = self._results.get(key)
        if cached is not None:
            return cached

        name = path.rsplit("/", 1)[-1]
        result = False
        for glob in globs:
            regex = self.compiled(glob)
            if regex.match(path) or (name != path and regex.match(name)):
                result = True
                break

        self._results.set(key, result)
        return result

    def clear(self) -> None:
        """Drop both caches."""
        self._patterns.clear()
        self._results.clear()


_default_matcher = ExclusionMatcher()


def is_excluded(file_path: str, globs: Sequence[str]) -> bool:
    """Check exclusion with the module-level shared matcher."""
    return _default_matcher.is_excluded(file_path, globs)


def default_matcher() -> ExclusionMatcher:
    """The module-level matcher used by is_excluded()."""
    return _default_matcher


__all__ = [
    "BoundedCache",
    "DEFAULT_PATTERN_CACHE_SIZE",
    "DEFAULT_RESULT_CACHE_SIZE",
    "ExclusionMatcher",
    "MAX_GLOB_WILDCARDS",
    "compile_glob",
    "default_matcher",
    "is_excluded",
]
