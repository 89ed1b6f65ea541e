"""NormalizationCache: LRU-backed memoization of property path normalization.

Folder batches repeat the same raw paths thousands of times (one per file
pair), so every analyzer normalizes through a ``NormalizationCache``.  LRU
eviction occurs silently when ``max_size`` is exceeded; no error is raised.

Each ``NormalizationCache`` instance maintains its own ``LRUCache``.  The
analyzers create one per analysis call, so no state crosses calls.

Example::

    from diff_patterns.cache import NormalizationCache

    cache = NormalizationCache(max_size=1024)

    # First call runs the regex pipeline
    cache.normalize("Results[0].Score")   # "Results[*].Score"

    # Second call is served from memory
    cache.normalize("Results[0].Score")
"""

from __future__ import annotations

from cachetools import LRUCache

from diff_patterns.paths.normalizer import PathNormalizer

__all__ = ["NormalizationCache"]


class NormalizationCache:
    """LRU-backed caching proxy around a ``PathNormalizer``.

    Args:
        normalizer: Normalizer to delegate to.  Defaults to a fresh
            ``PathNormalizer``.
        max_size: Maximum number of raw paths to remember.  Defaults to 4096.
    """

    def __init__(
        self,
        normalizer: PathNormalizer | None = None,
        max_size: int = 4096,
    ) -> None:
        self._normalizer = normalizer if normalizer is not None else PathNormalizer()
        self._cache: LRUCache[str, str] = LRUCache(maxsize=max_size)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def max_size(self) -> int:
        """The maximum number of entries this cache can hold."""
        return int(self._cache.maxsize)

    @property
    def curr_size(self) -> int:
        """The current number of entries stored in the cache."""
        return int(self._cache.currsize)

    # ------------------------------------------------------------------
    # Normalization
    # ------------------------------------------------------------------

    def normalize(self, raw_path: str | None) -> str:
        """Return the normalized form of *raw_path*, computing it at most once."""
        if not raw_path:
            return ""
        cached = self._cache.get(raw_path)
        if cached is None:
            cached = self._normalizer.normalize(raw_path)
            self._cache[raw_path] = cached
        return cached
