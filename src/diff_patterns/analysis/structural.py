"""StructuralPatternMiner: finds recurring difference shapes across file pairs.

The miner runs as map/reduce over the file pairs of a folder:

1. ``map_file_pair`` runs the per-file passes over one pair's differences and
   returns a ``PatternAccumulator``:

   - critical-property:  missing configured critical properties
   - missing-property:   properties missing outside collections
   - collection-element: properties missing from collection elements
   - order-difference:   collections touched at several indices with at
                         least one real value change
   - general value:      any value change, per normalized path
   - uncategorized:      whatever no pass above claimed

2. The accumulators are merged.  Their summed value-change tallies pick, per
   path, the most frequent ``old -> new`` change.

3. ``map_recurring`` folds every occurrence of a winning change seen at least
   twice into a recurring value-change pattern, again per file.

4. A finishing pass scores consistency, writes the count-dependent
   descriptions and routes every pattern into exactly one bucket.

Pass results never depend on file order except for the examples retained,
which are capped at ``AnalysisConfig.max_examples``.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Sequence

from diff_patterns.analysis.accumulator import PatternAccumulator, ValueChangeKey
from diff_patterns.analysis.categories import (
    DifferenceCategory,
    EnhancedDifferenceCategory,
    PatternBucket,
)
from diff_patterns.analysis.categorizer import infer_value_change_category
from diff_patterns.analysis.classification import FileClassifier
from diff_patterns.cache import NormalizationCache
from diff_patterns.config import AnalysisConfig
from diff_patterns.models import Difference, FolderResult
from diff_patterns.paths.normalizer import WILDCARD
from diff_patterns.paths.segments import (
    collection_name,
    element_property,
    first_index,
    has_index,
    parent_and_leaf,
    split_segments,
)
from diff_patterns.result import StructuralAnalysisResult, StructuralPattern
from diff_patterns.values import is_missing, truncate_value, value_text

__all__ = ["UNCATEGORIZED_KEY", "StructuralPatternMiner", "consistency_of"]

logger = logging.getLogger(__name__)

UNCATEGORIZED_KEY = "uncategorized"
_ORDER_SUBJECT = "[Order]"

# Winning value change per normalized path: (old text, new text, occurrences)
_Winners = dict[str, tuple[str, str, int]]


def consistency_of(file_count: int, files_with_differences: int) -> float:
    """Percentage of files with differences showing a pattern, rounded to 0.1.

    Returns 0.0 when no file has differences.
    """
    if files_with_differences <= 0:
        return 0.0
    return round(file_count / files_with_differences * 100, 1)


def _present_on_both_sides(diff: Difference) -> bool:
    return diff.old_value is not None and diff.new_value is not None


class StructuralPatternMiner:
    """Mines structural patterns from a ``FolderResult``.

    Creates a fresh ``NormalizationCache`` per ``analyze`` call; instances hold
    only their configuration and may be reused.

    Args:
        config: Analysis configuration.  Defaults to ``AnalysisConfig()``
            (no critical properties, no order suffix guard).
    """

    def __init__(self, config: AnalysisConfig | None = None) -> None:
        self._config = config if config is not None else AnalysisConfig()
        self._classifier = FileClassifier(self._config)

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def analyze(self, folder: FolderResult) -> StructuralAnalysisResult:
        """Run every pass over *folder* and return the routed patterns."""
        pairs = folder.pairs_with_differences
        files_with_differences = len(pairs)
        logger.info(
            "Starting structural analysis of %d file pairs (%d with differences)",
            folder.total_pairs,
            files_with_differences,
        )

        cache = NormalizationCache(max_size=self._config.path_cache_size)
        combined = PatternAccumulator(self._config.max_examples)
        for pair in pairs:
            combined.merge(self.map_file_pair(pair.identifier, pair.differences or (), cache))

        winners = self.recurring_winners(combined.value_changes)
        for pair in pairs:
            combined.merge(
                self.map_recurring(pair.identifier, pair.differences or (), winners, cache)
            )
        logger.debug(
            "Accumulated %d patterns; %d differences claimed by a pass",
            len(combined),
            combined.claimed,
        )

        buckets = self._finish(combined, files_with_differences)

        covered: set[str] = set()
        for pattern in combined:
            covered |= pattern.affected_files
        unaccounted = [pair.identifier for pair in pairs if pair.identifier not in covered]

        classifications = self._classifier.partition(
            (pair.identifier, pair.differences or ()) for pair in pairs
        )

        all_patterns = sorted(
            combined,
            key=lambda p: (p.is_critical, p.consistency, p.occurrence_count),
            reverse=True,
        )

        result = StructuralAnalysisResult(
            critical_missing=buckets[PatternBucket.CRITICAL_MISSING],
            missing_properties=buckets[PatternBucket.MISSING_PROPERTIES],
            missing_collection_elements=buckets[PatternBucket.MISSING_COLLECTION_ELEMENTS],
            order_differences=buckets[PatternBucket.ORDER_DIFFERENCES],
            consistent_value_differences=buckets[PatternBucket.CONSISTENT_VALUE_DIFFERENCES],
            general_value_differences=buckets[PatternBucket.GENERAL_VALUE_DIFFERENCES],
            uncategorized=buckets[PatternBucket.UNCATEGORIZED],
            all_patterns=all_patterns,
            file_classifications=classifications,
            unaccounted_files=unaccounted,
            total_files_analyzed=folder.total_pairs,
            files_with_differences=files_with_differences,
            total_differences=folder.total_differences,
            critical_differences_found=combined.critical_differences,
        )

        logger.info(
            "Structural analysis complete: %d critical, %d missing, "
            "%d collection, %d order, %d recurring value patterns",
            len(result.critical_missing),
            len(result.missing_properties),
            len(result.missing_collection_elements),
            len(result.order_differences),
            len(result.consistent_value_differences),
        )
        return result

    # ------------------------------------------------------------------
    # Map phase
    # ------------------------------------------------------------------

    def map_file_pair(
        self,
        file_id: str,
        differences: Sequence[Difference],
        cache: NormalizationCache | None = None,
    ) -> PatternAccumulator:
        """Run the per-file passes over the differences of one file pair."""
        if cache is None:
            cache = NormalizationCache(max_size=self._config.path_cache_size)
        acc = PatternAccumulator(self._config.max_examples)
        paths = [cache.normalize(diff.property_path) for diff in differences]
        claimed: set[int] = set()

        self._critical_pass(acc, file_id, differences, paths, claimed)
        self._missing_property_pass(acc, file_id, differences, paths, claimed)
        self._collection_element_pass(acc, file_id, differences, paths, claimed)
        self._order_pass(acc, file_id, differences, paths, claimed)
        self._general_value_pass(acc, file_id, differences, paths, claimed)
        self._uncategorized_pass(acc, file_id, differences, claimed)

        acc.claimed = len(claimed)
        return acc

    def recurring_winners(self, tallies: Counter[ValueChangeKey]) -> _Winners:
        """Most frequent ``old -> new`` change per path; the first seen wins ties."""
        winners: _Winners = {}
        for (path, old, new), count in tallies.items():
            best = winners.get(path)
            if best is None or count > best[2]:
                winners[path] = (old, new, count)
        return winners

    def map_recurring(
        self,
        file_id: str,
        differences: Sequence[Difference],
        winners: _Winners,
        cache: NormalizationCache | None = None,
    ) -> PatternAccumulator:
        """Fold this file's occurrences of each winning value change into patterns.

        Only changes seen at least twice across the folder form a pattern.
        """
        if cache is None:
            cache = NormalizationCache(max_size=self._config.path_cache_size)
        acc = PatternAccumulator(self._config.max_examples)
        for diff in differences:
            if not _present_on_both_sides(diff):
                continue
            path = cache.normalize(diff.property_path)
            winner = winners.get(path)
            if winner is None or winner[2] < 2:
                continue
            old, new, _ = winner
            if value_text(diff.old_value) != old or value_text(diff.new_value) != new:
                continue
            parent, leaf = parent_and_leaf(path)
            acc.upsert(
                f"{path}|{old}|{new}",
                diff,
                file_id,
                full_pattern=path,
                parent_path=parent,
                subject_property=leaf,
                category=infer_value_change_category(old, new),
                collection_name=collection_name(path),
                is_collection_element=has_index(path),
                old_value=old,
                new_value=new,
            )
        return acc

    # ------------------------------------------------------------------
    # Per-file passes
    # ------------------------------------------------------------------

    def _is_critical_path(self, path: str) -> bool:
        """True if any segment of *path*, index stripped, is a critical property."""
        if not self._config.critical_properties:
            return False
        return any(
            self._config.is_critical_name(segment.replace(WILDCARD, ""))
            for segment in split_segments(path)
        )

    def _critical_pass(
        self,
        acc: PatternAccumulator,
        file_id: str,
        differences: Sequence[Difference],
        paths: list[str],
        claimed: set[int],
    ) -> None:
        for i, (diff, path) in enumerate(zip(differences, paths, strict=True)):
            if not is_missing(diff) or not self._is_critical_path(path):
                continue
            parent, leaf = parent_and_leaf(path)
            acc.upsert(
                f"{path}|critical",
                diff,
                file_id,
                full_pattern=path,
                parent_path=parent,
                subject_property=leaf,
                category=DifferenceCategory.NULL_VALUE_CHANGE,
                collection_name=collection_name(path),
                is_collection_element=has_index(path),
                is_critical=True,
                description=f"The critical '{leaf}' section is missing from the response.",
                recommended_action=(
                    f"Verify that the '{leaf}' section should be present in the response. "
                    "This is identified as a critical section."
                ),
            )
            acc.critical_differences += 1
            claimed.add(i)

    def _missing_property_pass(
        self,
        acc: PatternAccumulator,
        file_id: str,
        differences: Sequence[Difference],
        paths: list[str],
        claimed: set[int],
    ) -> None:
        for i, (diff, path) in enumerate(zip(differences, paths, strict=True)):
            if i in claimed or not path or has_index(path) or not is_missing(diff):
                continue
            parent, leaf = parent_and_leaf(path)
            acc.upsert(
                path,
                diff,
                file_id,
                full_pattern=path,
                parent_path=parent,
                subject_property=leaf,
                category=DifferenceCategory.NULL_VALUE_CHANGE,
                description=f"The property '{leaf}' is missing from the response.",
                recommended_action=f"Check if '{leaf}' should be present in the response.",
            )
            claimed.add(i)

    def _collection_element_pass(
        self,
        acc: PatternAccumulator,
        file_id: str,
        differences: Sequence[Difference],
        paths: list[str],
        claimed: set[int],
    ) -> None:
        for i, (diff, path) in enumerate(zip(differences, paths, strict=True)):
            if i in claimed or not has_index(path) or not is_missing(diff):
                continue
            collection = collection_name(path)
            subject = element_property(path)
            if subject:
                key = f"{collection}{WILDCARD}.{subject}"
            else:
                key = f"{collection}{WILDCARD}"
                subject = WILDCARD
            acc.upsert(
                key,
                diff,
                file_id,
                full_pattern=key,
                parent_path=collection,
                subject_property=subject,
                category=EnhancedDifferenceCategory.COLLECTION_ELEMENT_MISSING,
                collection_name=collection,
                is_collection_element=True,
                description=(
                    f"The property '{subject}' is missing from elements in the "
                    f"'{collection}' collection."
                ),
                recommended_action=(
                    f"Check if '{subject}' should be present in all elements of the "
                    f"'{collection}' collection."
                ),
            )
            claimed.add(i)

    def _order_pass(
        self,
        acc: PatternAccumulator,
        file_id: str,
        differences: Sequence[Difference],
        paths: list[str],
        claimed: set[int],
    ) -> None:
        """Flag collections of this file whose elements look reordered.

        A collection qualifies when more than one distinct index is touched,
        at least one of its differences is not a missing value, and it is not
        a configured single-entity collection touched at one index or fewer.
        """
        by_collection: dict[str, list[int]] = {}
        for i, path in enumerate(paths):
            if has_index(path):
                by_collection.setdefault(collection_name(path), []).append(i)

        suffixes = self._config.order_false_positive_suffixes
        for collection, members in by_collection.items():
            indices = {first_index(differences[i].property_path) for i in members}
            indices.discard(-1)

            has_multiple_indices = len(indices) > 1
            has_value_change = any(not is_missing(differences[i]) for i in members)
            single_entity = collection.endswith(suffixes) and len(indices) <= 1
            if not (has_multiple_indices and has_value_change and not single_entity):
                continue

            key = f"{collection}{_ORDER_SUBJECT}"
            member_diffs = [differences[i] for i in members]
            acc.upsert(
                key,
                member_diffs[0],
                file_id,
                count=len(indices),
                full_pattern=key,
                parent_path=collection,
                subject_property=_ORDER_SUBJECT,
                category=EnhancedDifferenceCategory.COLLECTION_ELEMENT_OUT_OF_ORDER,
                collection_name=collection,
                is_collection_element=True,
                description=(
                    f"The elements in the '{collection}' collection appear in a different order"
                ),
                recommended_action=(
                    f"Check if the order of elements in '{collection}' is significant. "
                    "If order matters, investigate why the ordering is different."
                ),
            )
            acc.add_examples(key, member_diffs[1:])
            claimed.update(members)

    def _general_value_pass(
        self,
        acc: PatternAccumulator,
        file_id: str,
        differences: Sequence[Difference],
        paths: list[str],
        claimed: set[int],
    ) -> None:
        for i, (diff, path) in enumerate(zip(differences, paths, strict=True)):
            if not _present_on_both_sides(diff):
                continue
            acc.value_changes[(path, value_text(diff.old_value), value_text(diff.new_value))] += 1
            parent, leaf = parent_and_leaf(path)
            acc.upsert(
                f"{path}|general",
                diff,
                file_id,
                full_pattern=path,
                parent_path=parent,
                subject_property=leaf,
                category=DifferenceCategory.GENERAL_VALUE_CHANGED,
                collection_name=collection_name(path),
                is_collection_element=has_index(path),
            )
            claimed.add(i)

    def _uncategorized_pass(
        self,
        acc: PatternAccumulator,
        file_id: str,
        differences: Sequence[Difference],
        claimed: set[int],
    ) -> None:
        for i, diff in enumerate(differences):
            if i in claimed:
                continue
            acc.upsert(
                UNCATEGORIZED_KEY,
                diff,
                file_id,
                full_pattern="*",
                parent_path="",
                subject_property="",
                category=DifferenceCategory.UNCATEGORIZED_DIFFERENCE,
            )

    # ------------------------------------------------------------------
    # Finishing pass
    # ------------------------------------------------------------------

    def _finish(
        self,
        acc: PatternAccumulator,
        files_with_differences: int,
    ) -> dict[PatternBucket, list[StructuralPattern]]:
        buckets: dict[PatternBucket, list[StructuralPattern]] = {b: [] for b in PatternBucket}
        for pattern in acc:
            pattern.consistency = consistency_of(pattern.file_count, files_with_differences)
            _describe_aggregate(pattern)
            buckets[_route(pattern)].append(pattern)

        for bucket, patterns in buckets.items():
            patterns.sort(key=lambda p: (p.consistency, p.occurrence_count), reverse=True)
            logger.debug("Bucket %s: %d patterns", bucket, len(patterns))
        return buckets


def _route(pattern: StructuralPattern) -> PatternBucket:
    """Bucket of a finished pattern; the critical flag wins over the category."""
    if pattern.is_critical:
        return PatternBucket.CRITICAL_MISSING
    category = pattern.category
    if category is DifferenceCategory.UNCATEGORIZED_DIFFERENCE:
        return PatternBucket.UNCATEGORIZED
    if category is EnhancedDifferenceCategory.COLLECTION_ELEMENT_MISSING:
        return PatternBucket.MISSING_COLLECTION_ELEMENTS
    if category is EnhancedDifferenceCategory.COLLECTION_ELEMENT_OUT_OF_ORDER:
        return PatternBucket.ORDER_DIFFERENCES
    if category is DifferenceCategory.NULL_VALUE_CHANGE:
        return PatternBucket.MISSING_PROPERTIES
    if category is DifferenceCategory.GENERAL_VALUE_CHANGED:
        return PatternBucket.GENERAL_VALUE_DIFFERENCES
    return PatternBucket.CONSISTENT_VALUE_DIFFERENCES


def _describe_aggregate(pattern: StructuralPattern) -> None:
    """Write the descriptions that depend on totals known only after the reduce."""
    prop = pattern.subject_property
    files = pattern.file_count

    if pattern.category is DifferenceCategory.GENERAL_VALUE_CHANGED:
        if files > 1:
            pattern.description = f"The value of '{prop}' varies across {files} files"
        else:
            pattern.description = f"The value of '{prop}' has differences within this file"
        pattern.recommended_action = (
            f"Review the differing values of '{prop}' and confirm they are expected."
        )
    elif pattern.category is DifferenceCategory.UNCATEGORIZED_DIFFERENCE:
        pattern.description = (
            f"{pattern.occurrence_count} difference(s) in {files} file(s) "
            "did not match any known pattern"
        )
        pattern.recommended_action = "Review these differences manually."
    elif pattern.old_value is not None and pattern.new_value is not None:
        pattern.description = (
            f"The value of '{prop}' consistently changes from "
            f"'{truncate_value(pattern.old_value)}' to '{truncate_value(pattern.new_value)}'"
        )
        pattern.recommended_action = (
            f"Verify if this value change is expected. This appears in {files} files"
        )
