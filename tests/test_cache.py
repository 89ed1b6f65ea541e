"""Unit tests for NormalizationCache."""

from __future__ import annotations

from diff_patterns.cache import NormalizationCache
from diff_patterns.paths import PathNormalizer


class _CountingNormalizer(PathNormalizer):
    """PathNormalizer that counts how often it is actually invoked."""

    def __init__(self) -> None:
        self.calls = 0

    def normalize(self, raw_path: str | None) -> str:
        self.calls += 1
        return super().normalize(raw_path)


class TestNormalizationCache:
    """Tests for cache hits, eviction and size reporting."""

    def test_result_matches_normalizer(self) -> None:
        cache = NormalizationCache()
        assert cache.normalize("Results[0].Score") == "Results[*].Score"

    def test_repeated_path_computed_once(self) -> None:
        normalizer = _CountingNormalizer()
        cache = NormalizationCache(normalizer=normalizer)
        for _ in range(5):
            cache.normalize("Results[0].Score")
        assert normalizer.calls == 1
        assert cache.curr_size == 1

    def test_distinct_raw_paths_cached_separately(self) -> None:
        cache = NormalizationCache()
        assert cache.normalize("Results[0].Score") == cache.normalize("Results[1].Score")
        assert cache.curr_size == 2

    def test_empty_and_none_not_cached(self) -> None:
        cache = NormalizationCache()
        assert cache.normalize("") == ""
        assert cache.normalize(None) == ""
        assert cache.curr_size == 0

    def test_eviction_bounded_by_max_size(self) -> None:
        cache = NormalizationCache(max_size=2)
        for i in range(10):
            cache.normalize(f"Field{i}")
        assert cache.max_size == 2
        assert cache.curr_size == 2

    def test_evicted_path_recomputed(self) -> None:
        normalizer = _CountingNormalizer()
        cache = NormalizationCache(normalizer=normalizer, max_size=1)
        cache.normalize("A[0]")
        cache.normalize("B[0]")
        cache.normalize("A[0]")
        assert normalizer.calls == 3

    def test_default_max_size(self) -> None:
        assert NormalizationCache().max_size == 4096
