"""DifferenceSummarizer: per-file-pair breakdown of differences.

Groups the differences of one pair by basic category and by normalized path
("root object"), computes the share of each, and lists the normalized paths
that occur more than once.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from diff_patterns.analysis.categories import DifferenceCategory
from diff_patterns.analysis.categorizer import DifferenceCategorizer
from diff_patterns.cache import NormalizationCache
from diff_patterns.config import AnalysisConfig
from diff_patterns.models import Difference, FilePairResult
from diff_patterns.result import DifferenceSummary, PathPattern

__all__ = ["DifferenceSummarizer"]

logger = logging.getLogger(__name__)


def _percentage(part: int, total: int) -> float:
    return round(part / total * 100, 1) if total else 0.0


class DifferenceSummarizer:
    """Summarizes the differences of single file pairs.

    Args:
        config: Supplies ``max_examples`` and ``path_cache_size``.
        cache: Normalization cache to share across pairs.  A fresh one is
            created when omitted.
    """

    def __init__(
        self,
        config: AnalysisConfig | None = None,
        cache: NormalizationCache | None = None,
    ) -> None:
        self._config = config if config is not None else AnalysisConfig()
        self._cache = cache if cache is not None else NormalizationCache(
            max_size=self._config.path_cache_size
        )
        self._categorizer = DifferenceCategorizer()

    def summarize_pair(self, pair: FilePairResult) -> DifferenceSummary:
        """Summary of *pair*; pairs flagged equal summarize as equal and empty."""
        if pair.are_equal:
            return DifferenceSummary(are_equal=True)
        return self.summarize(pair.differences or ())

    def summarize(self, differences: Sequence[Difference]) -> DifferenceSummary:
        total = len(differences)
        if total == 0:
            return DifferenceSummary(are_equal=True)

        by_category: dict[DifferenceCategory, list[Difference]] = {}
        by_root: dict[str, list[Difference]] = {}
        by_root_and_category: dict[str, dict[DifferenceCategory, list[Difference]]] = {}

        for diff in differences:
            category = self._categorizer.categorize(diff)
            root = self._cache.normalize(diff.property_path)
            by_category.setdefault(category, []).append(diff)
            by_root.setdefault(root, []).append(diff)
            by_root_and_category.setdefault(root, {}).setdefault(category, []).append(diff)

        common = [
            PathPattern(
                path=root,
                occurrence_count=len(diffs),
                examples=tuple(diffs[: self._config.max_examples]),
            )
            for root, diffs in by_root.items()
            if len(diffs) > 1
        ]
        common.sort(key=lambda p: p.occurrence_count, reverse=True)

        logger.debug(
            "Summarized %d differences into %d categories and %d root objects",
            total,
            len(by_category),
            len(by_root),
        )
        return DifferenceSummary(
            are_equal=False,
            total_difference_count=total,
            by_category=by_category,
            by_root_object=by_root,
            by_root_object_and_category=by_root_and_category,
            category_percentages={c: _percentage(len(d), total) for c, d in by_category.items()},
            root_object_percentages={r: _percentage(len(d), total) for r, d in by_root.items()},
            common_patterns=common,
        )
