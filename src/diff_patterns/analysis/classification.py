"""FileClassifier: labels each file pair by its dominant kind of difference.

Every difference of a file counts as exactly one kind:

- missing : absent on exactly one side
- order   : an indexed element that looks shifted by reordering (best-effort,
            see ``diff_patterns.values.is_likely_reordered``)
- value   : present on both sides otherwise
- other   : anything else (absent on both sides)

A kind is significant when its share of the file's differences exceeds the
configured threshold (20 % by default).  Several significant kinds make the
file MIXED; a single one names the classification (``other`` maps to
UNCATEGORIZED); none, or no differences at all, gives UNCATEGORIZED.

Classification is a partition: every file lands in exactly one bucket.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Sequence

from diff_patterns.analysis.categories import FileClassification
from diff_patterns.config import AnalysisConfig
from diff_patterns.models import Difference
from diff_patterns.values import is_likely_reordered, is_missing

__all__ = ["FileClassifier"]

_KIND_CLASSIFICATION: dict[str, FileClassification] = {
    "missing": FileClassification.MISSING,
    "order": FileClassification.ORDER,
    "value": FileClassification.VALUE,
    "other": FileClassification.UNCATEGORIZED,
}


class FileClassifier:
    """Classifies file pairs by the kinds of their differences.

    Args:
        config: Supplies ``significance_threshold`` and
            ``order_numeric_tolerance``.  Defaults to ``AnalysisConfig()``.
    """

    def __init__(self, config: AnalysisConfig | None = None) -> None:
        self._config = config if config is not None else AnalysisConfig()

    def kind_of(self, diff: Difference) -> str:
        """Kind of a single difference: missing, order, value or other."""
        if is_missing(diff):
            return "missing"
        if is_likely_reordered(diff, self._config.order_numeric_tolerance):
            return "order"
        if diff.old_value is not None and diff.new_value is not None:
            return "value"
        return "other"

    def classify(self, differences: Sequence[Difference]) -> FileClassification:
        total = len(differences)
        if total == 0:
            return FileClassification.UNCATEGORIZED

        counts = Counter(self.kind_of(diff) for diff in differences)
        significant = [
            kind
            for kind in _KIND_CLASSIFICATION
            if counts[kind] / total > self._config.significance_threshold
        ]

        if len(significant) > 1:
            return FileClassification.MIXED
        if len(significant) == 1:
            return _KIND_CLASSIFICATION[significant[0]]
        return FileClassification.UNCATEGORIZED

    def partition(
        self,
        files: Iterable[tuple[str, Sequence[Difference]]],
    ) -> dict[FileClassification, list[str]]:
        """Bucket ``(file_id, differences)`` pairs; every classification is a key.

        Files keep their input order within a bucket.
        """
        buckets: dict[FileClassification, list[str]] = {c: [] for c in FileClassification}
        for file_id, differences in files:
            buckets[self.classify(differences)].append(file_id)
        return buckets
