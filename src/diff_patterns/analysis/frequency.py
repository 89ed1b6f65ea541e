"""PatternFrequencyAnalyzer: how often paths and exact changes recur across files.

Complements the structural miner with plain frequency tables:

- ``total_by_category``: difference count per basic category
- ``common_path_patterns``: normalized paths changed in more than one file
- ``common_property_changes``: exact ``path | old | new`` changes seen in
  more than one file
- ``pattern_frequencies``: differences grouped by (normalized path, category)
- ``similar_file_groups``: the similarity clustering of the same folder

``most_affected_fields`` ranks fields by the number of file pairs changing
them; paths inside a collection are counted against the collection (or the
containing object) so one list does not flood the ranking.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from diff_patterns.analysis.categories import DifferenceCategory
from diff_patterns.analysis.categorizer import DifferenceCategorizer
from diff_patterns.cache import NormalizationCache
from diff_patterns.clustering.grouping import FileSimilarityClusterer, build_fingerprints
from diff_patterns.config import AnalysisConfig, ClusteringConfig
from diff_patterns.models import Difference, FolderResult
from diff_patterns.paths.normalizer import WILDCARD
from diff_patterns.result import (
    ComparisonPatternAnalysis,
    FieldImpact,
    PathPattern,
    PatternFrequency,
    PropertyChange,
)
from diff_patterns.values import value_text

__all__ = ["PatternFrequencyAnalyzer"]

logger = logging.getLogger(__name__)

TOP_N = 20


@dataclass(slots=True)
class _Tally:
    occurrence_count: int = 0
    files: dict[str, None] = field(default_factory=dict)
    examples: list[Difference] = field(default_factory=list)

    def add(self, diff: Difference, file_id: str, max_examples: int) -> None:
        self.occurrence_count += 1
        self.files.setdefault(file_id)
        if len(self.examples) < max_examples:
            self.examples.append(diff)


def _field_group(path: str) -> str:
    """Grouping path of a normalized path for the most-affected-fields ranking."""
    if WILDCARD not in path:
        return path
    if path.endswith(WILDCARD) and len(path) > len(WILDCARD):
        return path[: -len(WILDCARD)]
    cut = path.rfind(".")
    return path[:cut] if cut > 0 else path


class PatternFrequencyAnalyzer:
    """Cross-file frequency tables for a folder.

    Args:
        config: Supplies ``max_examples`` and ``path_cache_size``.
        clustering: Configuration of the similar-file clustering.
    """

    def __init__(
        self,
        config: AnalysisConfig | None = None,
        clustering: ClusteringConfig | None = None,
    ) -> None:
        self._config = config if config is not None else AnalysisConfig()
        self._clusterer = FileSimilarityClusterer(clustering)
        self._categorizer = DifferenceCategorizer()

    def analyze(self, folder: FolderResult) -> ComparisonPatternAnalysis:
        pairs = folder.pairs_with_differences
        logger.info("Starting pattern frequency analysis of %d file pairs", folder.total_pairs)

        cache = NormalizationCache(max_size=self._config.path_cache_size)
        max_examples = self._config.max_examples
        by_category: dict[DifferenceCategory, int] = dict.fromkeys(DifferenceCategory, 0)
        paths: dict[str, _Tally] = {}
        changes: dict[tuple[str, str, str], _Tally] = {}
        frequencies: dict[tuple[str, DifferenceCategory], _Tally] = {}

        for pair in pairs:
            file_id = pair.identifier
            for diff in pair.differences or ():
                path = cache.normalize(diff.property_path)
                category = self._categorizer.categorize(diff)
                by_category[category] += 1
                paths.setdefault(path, _Tally()).add(diff, file_id, max_examples)
                change = (path, value_text(diff.old_value), value_text(diff.new_value))
                changes.setdefault(change, _Tally()).add(diff, file_id, max_examples)
                frequencies.setdefault((path, category), _Tally()).add(
                    diff, file_id, max_examples
                )

        common_paths = [
            PathPattern(
                path=path,
                occurrence_count=tally.occurrence_count,
                file_count=len(tally.files),
                affected_files=tuple(tally.files),
                examples=tuple(tally.examples),
            )
            for path, tally in paths.items()
            if len(tally.files) > 1
        ]
        common_paths.sort(key=lambda p: (p.file_count, p.occurrence_count), reverse=True)

        common_changes = [
            PropertyChange(
                path=path,
                old_value=old,
                new_value=new,
                occurrence_count=tally.occurrence_count,
                affected_files=tuple(tally.files),
            )
            for (path, old, new), tally in changes.items()
            if len(tally.files) > 1
        ]
        common_changes.sort(key=lambda c: (c.file_count, c.occurrence_count), reverse=True)

        pattern_frequencies = [
            PatternFrequency(
                path=path,
                category=category,
                occurrence_count=tally.occurrence_count,
                affected_files=tuple(tally.files),
                examples=tuple(tally.examples),
            )
            for (path, category), tally in frequencies.items()
        ]
        pattern_frequencies.sort(key=lambda f: (f.file_count, f.occurrence_count), reverse=True)

        groups = self._clusterer.cluster(build_fingerprints(folder, cache))

        logger.info(
            "Pattern frequency analysis complete: %d common paths, %d common changes",
            len(common_paths),
            len(common_changes),
        )
        return ComparisonPatternAnalysis(
            total_files_paired=folder.total_pairs,
            files_with_differences=len(pairs),
            total_differences=folder.total_differences,
            total_by_category=by_category,
            common_path_patterns=common_paths[:TOP_N],
            common_property_changes=common_changes[:TOP_N],
            pattern_frequencies=pattern_frequencies,
            similar_file_groups=groups,
        )

    def most_affected_fields(self, folder: FolderResult) -> list[FieldImpact]:
        """Fields ranked by affected pair count, then occurrences, then path."""
        cache = NormalizationCache(max_size=self._config.path_cache_size)
        occurrences: dict[str, int] = {}
        pair_counts: dict[str, int] = {}

        for pair in folder.pairs_with_differences:
            seen: set[str] = set()
            for diff in pair.differences or ():
                path = cache.normalize(diff.property_path).strip()
                if not path:
                    continue
                group = _field_group(path)
                occurrences[group] = occurrences.get(group, 0) + 1
                if group not in seen:
                    seen.add(group)
                    pair_counts[group] = pair_counts.get(group, 0) + 1

        impacts = [
            FieldImpact(
                field_path=path,
                affected_pair_count=pair_counts[path],
                occurrence_count=count,
            )
            for path, count in occurrences.items()
        ]
        impacts.sort(key=lambda f: (-f.affected_pair_count, -f.occurrence_count, f.field_path))
        return impacts
