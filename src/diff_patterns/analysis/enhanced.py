"""EnhancedDifferenceAnalyzer: enhanced categories and structural problems of a folder.

Where the structural miner answers "which difference shapes recur", this
analyzer answers "what is structurally wrong, and what should a tester look
at".  It runs in two stages over the pairs with differences:

1. Every difference gets its enhanced category (``categorize_enhanced``) and
   is filed by category and by normalized path.

2. Three passes look for structural problems:

   - collection:        element properties missing in more than one element,
                        and collections differing at more than
                        ``COUNT_MISMATCH_INDICES`` distinct indices
   - missing-property:  properties missing more than once from the same
                        parent outside collections
   - structural:        type mismatches and unexpected extra properties at a
                        path seen at least ``MIN_STRUCTURAL_OCCURRENCES`` times

Each problem becomes an ``EnhancedPattern`` carrying guidance for the tester
and a likely root cause.  A pattern key found by an earlier pass is never
overwritten by a later one.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

from diff_patterns.analysis.categories import EnhancedDifferenceCategory
from diff_patterns.analysis.categorizer import DifferenceCategorizer
from diff_patterns.analysis.structural import consistency_of
from diff_patterns.cache import NormalizationCache
from diff_patterns.config import AnalysisConfig
from diff_patterns.models import Difference, FolderResult
from diff_patterns.paths.normalizer import WILDCARD
from diff_patterns.paths.segments import (
    collection_name,
    element_property,
    first_index,
    has_index,
    last_segment,
    parent_and_leaf,
)
from diff_patterns.result import EnhancedAnalysisResult, EnhancedPattern
from diff_patterns.values import is_missing

__all__ = [
    "COUNT_MISMATCH_INDICES",
    "HIGH_IMPACT_CONSISTENCY",
    "MIN_STRUCTURAL_OCCURRENCES",
    "EnhancedDifferenceAnalyzer",
]

logger = logging.getLogger(__name__)

# A collection differing at more distinct indices than this is a count mismatch
COUNT_MISMATCH_INDICES = 10

# Paths seen fewer times than this are too rare for the structural pass
MIN_STRUCTURAL_OCCURRENCES = 3

# Consistency a pattern seen in several files must exceed to be high impact
HIGH_IMPACT_CONSISTENCY = 40.0

_Category = EnhancedDifferenceCategory

_COLLECTION_PROBLEMS = frozenset(
    {
        _Category.COLLECTION_ELEMENT_MISSING,
        _Category.COLLECTION_ELEMENT_EXTRA_PROPERTY,
        _Category.COLLECTION_ELEMENT_COUNT_MISMATCH,
    }
)
_PROPERTY_PROBLEMS = frozenset(
    {
        _Category.MISSING_REQUIRED_FIELD,
        _Category.IDENTIFIER_MISMATCH,
        _Category.NULL_VALUE_CHANGE,
    }
)


@dataclass(frozen=True, slots=True)
class _Occurrence:
    diff: Difference
    file_id: str
    path: str


def _distinct_files(occurrences: Iterable[_Occurrence]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(occ.file_id for occ in occurrences))


def _group_by(
    occurrences: Iterable[_Occurrence], key_of: Callable[[_Occurrence], str]
) -> dict[str, list[_Occurrence]]:
    """Group *occurrences* by ``key_of(occ)``, keys in first-seen order."""
    groups: dict[str, list[_Occurrence]] = {}
    for occ in occurrences:
        groups.setdefault(key_of(occ), []).append(occ)
    return groups


def _is_extra(diff: Difference) -> bool:
    """Present in the actual document only."""
    return diff.old_value is None and diff.new_value is not None


def _is_type_mismatch(diff: Difference) -> bool:
    old, new = diff.old_value, diff.new_value
    return old is not None and new is not None and type(old) is not type(new)


def _element_property_of(path: str) -> str:
    return element_property(path) or last_segment(path)


def _by_impact(patterns: list[EnhancedPattern]) -> list[EnhancedPattern]:
    return sorted(patterns, key=lambda p: (p.consistency, p.occurrence_count), reverse=True)


class EnhancedDifferenceAnalyzer:
    """Enhanced-category breakdown of a folder plus its structural problems.

    Args:
        config: Supplies ``max_examples`` and ``path_cache_size``.  Defaults
            to ``AnalysisConfig()``.

    Example usage:
        analyzer = EnhancedDifferenceAnalyzer()
        result = analyzer.analyze(folder)
        for pattern in result.high_impact_patterns:
            print(pattern.impact, pattern.description, pattern.tester_guidance)
    """

    def __init__(self, config: AnalysisConfig | None = None) -> None:
        self._config = config if config is not None else AnalysisConfig()
        self._categorizer = DifferenceCategorizer()

    def analyze(self, folder: FolderResult) -> EnhancedAnalysisResult:
        pairs = folder.pairs_with_differences
        logger.info("Starting enhanced difference analysis of %d file pairs", folder.total_pairs)

        cache = NormalizationCache(max_size=self._config.path_cache_size)
        by_category: dict[EnhancedDifferenceCategory, list[Difference]] = {
            category: [] for category in EnhancedDifferenceCategory
        }
        by_path: dict[str, list[Difference]] = {}
        occurrences: list[_Occurrence] = []

        for pair in pairs:
            file_id = pair.identifier
            for diff in pair.differences or ():
                path = cache.normalize(diff.property_path)
                by_category[self._categorizer.categorize_enhanced(diff)].append(diff)
                by_path.setdefault(path, []).append(diff)
                occurrences.append(_Occurrence(diff, file_id, path))

        patterns: dict[str, EnhancedPattern] = {}
        self._collection_pass(occurrences, patterns)
        self._missing_property_pass(occurrences, patterns)
        self._structural_pass(occurrences, patterns)

        missing_elements: list[EnhancedPattern] = []
        inconsistent: list[EnhancedPattern] = []
        structural: list[EnhancedPattern] = []
        high_impact: list[EnhancedPattern] = []
        for pattern in patterns.values():
            pattern.consistency = consistency_of(pattern.file_count, len(pairs))
            if pattern.category in _COLLECTION_PROBLEMS:
                missing_elements.append(pattern)
            elif pattern.category in _PROPERTY_PROBLEMS:
                inconsistent.append(pattern)
            else:
                structural.append(pattern)
            if pattern.consistency > HIGH_IMPACT_CONSISTENCY and pattern.file_count > 1:
                high_impact.append(pattern)
        high_impact.sort(key=lambda p: (p.consistency, p.file_count), reverse=True)

        logger.info(
            "Enhanced analysis complete: %d collection element patterns, "
            "%d inconsistent properties, %d structural issues",
            len(missing_elements),
            len(inconsistent),
            len(structural),
        )
        return EnhancedAnalysisResult(
            recurring_missing_elements=_by_impact(missing_elements),
            inconsistent_properties=_by_impact(inconsistent),
            structural_issues=_by_impact(structural),
            high_impact_patterns=high_impact,
            all_patterns=list(patterns.values()),
            differences_by_category=by_category,
            category_counts={category: len(diffs) for category, diffs in by_category.items()},
            differences_by_path=by_path,
            total_differences=len(occurrences),
            total_file_pairs=folder.total_pairs,
            file_pairs_with_differences=len(pairs),
        )

    # ------------------------------------------------------------------
    # Passes
    # ------------------------------------------------------------------

    def _collection_pass(
        self, occurrences: Sequence[_Occurrence], patterns: dict[str, EnhancedPattern]
    ) -> None:
        in_collections = (occ for occ in occurrences if has_index(occ.path))
        for collection, group in _group_by(
            in_collections, lambda occ: collection_name(occ.path)
        ).items():
            name = last_segment(collection) or collection
            missing = _group_by(
                (occ for occ in group if is_missing(occ.diff)),
                lambda occ: _element_property_of(occ.path),
            )
            for prop, found in missing.items():
                key = f"{collection}.{prop}_missing"
                if len(found) < 2 or key in patterns:
                    continue
                patterns[key] = self._pattern(
                    key,
                    f"{collection}{WILDCARD}.{prop}",
                    f"The property '{prop}' is consistently missing in elements of the "
                    f"'{name}' collection",
                    _Category.COLLECTION_ELEMENT_MISSING,
                    found,
                    is_collection_pattern=True,
                    tester_guidance=(
                        f"Check if '{prop}' should always be present in '{name}' items. "
                        "This appears to be a consistent omission pattern."
                    ),
                    potential_root_cause=(
                        "Data mapping issue or conditional logic that's excluding this property"
                    ),
                )

            # Indices come from the raw path; the normalized one only has wildcards.
            indices = {first_index(occ.diff.property_path) for occ in group}
            key = f"{collection}_count"
            if len(indices) <= COUNT_MISMATCH_INDICES or key in patterns:
                continue
            patterns[key] = self._pattern(
                key,
                collection,
                f"The '{name}' collection has {len(indices)} elements with differences",
                _Category.COLLECTION_ELEMENT_COUNT_MISMATCH,
                group,
                occurrence_count=len(indices),
                is_collection_pattern=True,
                tester_guidance=(
                    f"Check if '{name}' collection should have a consistent number of "
                    "elements. Large differences might indicate missing or extra data."
                ),
                potential_root_cause=(
                    "Data filtering applied differently between environments or data "
                    "source differences"
                ),
            )

    def _missing_property_pass(
        self, occurrences: Sequence[_Occurrence], patterns: dict[str, EnhancedPattern]
    ) -> None:
        outside = (occ for occ in occurrences if not has_index(occ.path) and "." in occ.path)
        for parent, group in _group_by(
            outside, lambda occ: parent_and_leaf(occ.path)[0]
        ).items():
            missing = _group_by(
                (occ for occ in group if is_missing(occ.diff)),
                lambda occ: parent_and_leaf(occ.path)[1],
            )
            for prop, found in missing.items():
                key = f"{parent}.{prop}_missing"
                if len(found) < 2 or key in patterns:
                    continue
                field_type = self._categorizer.field_type(prop)
                is_identifier = field_type == "Identifier"
                patterns[key] = self._pattern(
                    key,
                    f"{parent}.{prop}",
                    f"The {field_type.lower()} property '{prop}' is consistently missing "
                    f"from '{parent}'",
                    _Category.IDENTIFIER_MISMATCH
                    if is_identifier
                    else _Category.MISSING_REQUIRED_FIELD,
                    found,
                    tester_guidance=(
                        f"Verify if '{prop}' is a required field for '{parent}'. "
                        "This appears to be consistently missing."
                    ),
                    potential_root_cause=(
                        "Identifier generation logic differs between environments"
                        if is_identifier
                        else "Required field not being populated by the system under test"
                    ),
                )

    def _structural_pass(
        self, occurrences: Sequence[_Occurrence], patterns: dict[str, EnhancedPattern]
    ) -> None:
        for path, group in _group_by(occurrences, lambda occ: occ.path).items():
            if len(group) < MIN_STRUCTURAL_OCCURRENCES:
                continue
            in_collection = WILDCARD in path

            mismatched = [occ for occ in group if _is_type_mismatch(occ.diff)]
            key = f"{path}_type_mismatch"
            if mismatched and key not in patterns:
                first = mismatched[0].diff
                patterns[key] = self._pattern(
                    key,
                    path,
                    f"Data type mismatch at '{path}' (Expected: "
                    f"{type(first.old_value).__name__}, Actual: "
                    f"{type(first.new_value).__name__})",
                    _Category.INCONSISTENT_DATA_TYPE,
                    mismatched,
                    is_collection_pattern=in_collection,
                    tester_guidance=(
                        "This is a potential schema violation. The data types don't match "
                        "between expected and actual responses."
                    ),
                    potential_root_cause="API contract change or serialization issue",
                )

            extra = [occ for occ in group if _is_extra(occ.diff)]
            key = f"{path}_extra"
            if extra and key not in patterns:
                patterns[key] = self._pattern(
                    key,
                    path,
                    f"Unexpected extra property at '{path}'",
                    _Category.COLLECTION_ELEMENT_EXTRA_PROPERTY
                    if in_collection
                    else _Category.STRUCTURAL_MISMATCH,
                    extra,
                    is_collection_pattern=in_collection,
                    tester_guidance=(
                        "This property exists in the actual response but not in the "
                        "expected response. May indicate schema evolution."
                    ),
                    potential_root_cause="API version mismatch or schema changes",
                )

    def _pattern(
        self,
        key: str,
        path: str,
        description: str,
        category: EnhancedDifferenceCategory,
        found: Sequence[_Occurrence],
        *,
        occurrence_count: int | None = None,
        is_collection_pattern: bool = False,
        tester_guidance: str = "",
        potential_root_cause: str = "",
    ) -> EnhancedPattern:
        logger.debug("Enhanced pattern %r: %s (%d occurrences)", key, category, len(found))
        return EnhancedPattern(
            key=key,
            path=path,
            description=description,
            category=category,
            occurrence_count=len(found) if occurrence_count is None else occurrence_count,
            affected_files=_distinct_files(found),
            examples=tuple(occ.diff for occ in found[: self._config.max_examples]),
            is_collection_pattern=is_collection_pattern,
            tester_guidance=tester_guidance,
            potential_root_cause=potential_root_cause,
        )
