"""Result types returned by the analyzers.

``StructuralPattern`` and ``SemanticGroup`` are mutable while an analysis
runs (patterns only ever accumulate: counts grow, file sets grow, examples
are appended up to a cap) and are handed out read-only once finalized.  The
container results are frozen dataclasses.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from diff_patterns.analysis.categories import (
    DifferenceCategory,
    EnhancedDifferenceCategory,
    FileClassification,
)
from diff_patterns.models import Difference

__all__ = [
    "ComparisonPatternAnalysis",
    "DifferenceSummary",
    "EnhancedAnalysisResult",
    "EnhancedPattern",
    "FieldImpact",
    "PathPattern",
    "PatternFrequency",
    "PropertyChange",
    "SemanticDifferenceAnalysis",
    "SemanticGroup",
    "SimilarFileGroup",
    "StructuralAnalysisResult",
    "StructuralPattern",
]

PatternCategory = DifferenceCategory | EnhancedDifferenceCategory


# ---------------------------------------------------------------------------
# Structural analysis
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class StructuralPattern:
    """Aggregated, scored description of one recurring difference shape.

    Attributes:
        key:                  Pattern signature; unique within one analysis.
        full_pattern:         Normalized path (or collection pattern) the
                              pattern describes.
        parent_path:          Normalized path of the containing object.
        subject_property:     Property the pattern is about (the missing
                              property, the changed property, ``"[Order]"``).
        category:             Category shared by every occurrence.
        collection_name:      Collection path for collection-scoped patterns,
                              ``""`` otherwise.
        is_collection_element: True when the pattern lives inside a collection.
        is_critical:          True for configured critical properties.
        old_value:            Rendered old value of a recurring value change.
        new_value:            Rendered new value of a recurring value change.
        occurrence_count:     Number of differences folded into the pattern.
        affected_files:       File ids exhibiting the pattern.
        examples:             First few occurrences, at most ``max_examples``.
        consistency:          Percentage of files with differences showing the
                              pattern; set by the finishing pass.
        description:          Human-readable description.
        recommended_action:   What a reviewer should check.
    """

    key: str
    full_pattern: str
    parent_path: str
    subject_property: str
    category: PatternCategory
    collection_name: str = ""
    is_collection_element: bool = False
    is_critical: bool = False
    old_value: str | None = None
    new_value: str | None = None
    occurrence_count: int = 0
    affected_files: set[str] = field(default_factory=set)
    examples: list[Difference] = field(default_factory=list)
    consistency: float = 0.0
    description: str = ""
    recommended_action: str = ""

    @property
    def file_count(self) -> int:
        return len(self.affected_files)

    def record(self, diff: Difference, file_id: str, max_examples: int, count: int = 1) -> None:
        """Fold one occurrence (or *count* occurrences) of the pattern into it."""
        self.occurrence_count += count
        self.affected_files.add(file_id)
        if len(self.examples) < max_examples:
            self.examples.append(diff)

    def absorb(self, other: StructuralPattern, max_examples: int) -> None:
        """Fold the counts, files and examples of *other* into this pattern."""
        self.occurrence_count += other.occurrence_count
        self.affected_files |= other.affected_files
        room = max_examples - len(self.examples)
        if room > 0:
            self.examples.extend(other.examples[:room])


@dataclass(frozen=True, slots=True)
class StructuralAnalysisResult:
    """Everything the structural pattern miner found in one folder.

    Every pattern appears in exactly one bucket; ``all_patterns`` lists them
    all with critical patterns first.  Buckets are sorted by consistency, then
    occurrence count, both descending.

    Attributes:
        critical_missing: Missing configured critical properties.
        missing_properties: Properties missing outside collections.
        missing_collection_elements: Properties missing from collection elements.
        order_differences: Collections whose elements appear reordered.
        consistent_value_differences: The same ``old -> new`` change seen
            repeatedly at one path.
        general_value_differences: Any value change at a path, per path.
        uncategorized: Residual pattern of differences no pass claimed.
        all_patterns: Every pattern above.
        file_classifications: Partition of the files with differences by their
            dominant kind of difference.  Every classification is present as a
            key, possibly with an empty list.
        unaccounted_files: Files with differences appearing in no pattern.
        total_files_analyzed: Number of file pairs in the folder.
        files_with_differences: Number of pairs not flagged equal.
        total_differences: Differences across those pairs.
        critical_differences_found: Missing-critical-property differences.
    """

    critical_missing: list[StructuralPattern] = field(default_factory=list)
    missing_properties: list[StructuralPattern] = field(default_factory=list)
    missing_collection_elements: list[StructuralPattern] = field(default_factory=list)
    order_differences: list[StructuralPattern] = field(default_factory=list)
    consistent_value_differences: list[StructuralPattern] = field(default_factory=list)
    general_value_differences: list[StructuralPattern] = field(default_factory=list)
    uncategorized: list[StructuralPattern] = field(default_factory=list)
    all_patterns: list[StructuralPattern] = field(default_factory=list)
    file_classifications: dict[FileClassification, list[str]] = field(default_factory=dict)
    unaccounted_files: list[str] = field(default_factory=list)
    total_files_analyzed: int = 0
    files_with_differences: int = 0
    total_differences: int = 0
    critical_differences_found: int = 0

    @property
    def patterns_computable(self) -> bool:
        """False when no file has differences, so no consistency is meaningful."""
        return self.files_with_differences > 0

    def classification_of(self, file_id: str) -> FileClassification | None:
        """Classification bucket holding *file_id*, or None for unknown files."""
        for classification, files in self.file_classifications.items():
            if file_id in files:
                return classification
        return None


# ---------------------------------------------------------------------------
# Enhanced analysis
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class EnhancedPattern:
    """A recurring structural problem, phrased for the person triaging it.

    Attributes:
        key:                   Pattern signature; unique within one analysis.
        path:                  Normalized path the pattern is about.
        description:           Human-readable description.
        category:              Enhanced category of the problem.
        occurrence_count:      Differences (or, for collection count
                               mismatches, distinct indices) behind it.
        affected_files:        File ids exhibiting the pattern, first seen
                               first.
        examples:              First few occurrences.
        is_collection_pattern: True when the path lies inside a collection.
        tester_guidance:       What to check first.
        potential_root_cause:  Most likely cause.
        consistency:           Percentage of files with differences showing
                               the pattern; set once all passes ran.
    """

    key: str
    path: str
    description: str
    category: EnhancedDifferenceCategory
    occurrence_count: int = 0
    affected_files: tuple[str, ...] = ()
    examples: tuple[Difference, ...] = ()
    is_collection_pattern: bool = False
    tester_guidance: str = ""
    potential_root_cause: str = ""
    consistency: float = 0.0

    @property
    def file_count(self) -> int:
        return len(self.affected_files)

    @property
    def impact(self) -> str:
        """``"High"`` above 75% consistency, ``"Medium"`` above 40%, else ``"Low"``."""
        if self.consistency > 75:
            return "High"
        if self.consistency > 40:
            return "Medium"
        return "Low"


@dataclass(frozen=True, slots=True)
class EnhancedAnalysisResult:
    """Enhanced-category breakdown and structural problems of one folder.

    Every pattern appears in exactly one of the three problem lists, and in
    ``high_impact_patterns`` as well when it is widespread.

    Attributes:
        recurring_missing_elements: Collection element problems: missing or
            extra element properties and element count mismatches.
        inconsistent_properties: Properties missing outside collections.
        structural_issues: Type mismatches, and unexpected extra properties
            outside collections.
        high_impact_patterns: Patterns above 40% consistency seen in more
            than one file, by consistency then file count.
        all_patterns: Every pattern, in discovery order.
        differences_by_category: Differences per enhanced category; every
            category is present.
        category_counts: Difference count per enhanced category; every
            category is present.
        differences_by_path: Differences per normalized path.
        total_differences: Differences across the pairs with differences.
        total_file_pairs: Number of file pairs in the folder.
        file_pairs_with_differences: Number of pairs not flagged equal.
    """

    recurring_missing_elements: list[EnhancedPattern] = field(default_factory=list)
    inconsistent_properties: list[EnhancedPattern] = field(default_factory=list)
    structural_issues: list[EnhancedPattern] = field(default_factory=list)
    high_impact_patterns: list[EnhancedPattern] = field(default_factory=list)
    all_patterns: list[EnhancedPattern] = field(default_factory=list)
    differences_by_category: dict[EnhancedDifferenceCategory, list[Difference]] = field(
        default_factory=dict
    )
    category_counts: dict[EnhancedDifferenceCategory, int] = field(default_factory=dict)
    differences_by_path: dict[str, list[Difference]] = field(default_factory=dict)
    total_differences: int = 0
    total_file_pairs: int = 0
    file_pairs_with_differences: int = 0


# ---------------------------------------------------------------------------
# Semantic grouping
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class SemanticGroup:
    """Differences sharing one meaning, e.g. "Status Changes".

    ``confidence_level`` is derived from the related properties and affected
    files once grouping is complete; it is never set independently.
    """

    name: str
    description: str
    differences: list[Difference] = field(default_factory=list)
    affected_files: set[str] = field(default_factory=set)
    related_properties: set[str] = field(default_factory=set)
    confidence_level: int = 0

    @property
    def difference_count(self) -> int:
        return len(self.differences)

    @property
    def file_count(self) -> int:
        return len(self.affected_files)

    @property
    def representative_difference(self) -> Difference | None:
        return self.differences[0] if self.differences else None

    def add(self, diff: Difference, file_id: str, normalized_path: str) -> None:
        self.differences.append(diff)
        self.affected_files.add(file_id)
        self.related_properties.add(normalized_path)


@dataclass(frozen=True, slots=True)
class SemanticDifferenceAnalysis:
    """Semantic groups of one folder, sorted by confidence then size."""

    semantic_groups: list[SemanticGroup] = field(default_factory=list)
    total_differences: int = 0

    @property
    def categorized_differences(self) -> int:
        return sum(group.difference_count for group in self.semantic_groups)

    @property
    def uncategorized_differences(self) -> int:
        return self.total_differences - self.categorized_differences

    @property
    def categorized_percentage(self) -> float:
        """Share of differences landing in some group, 0-100, rounded to 0.1."""
        if self.total_differences == 0:
            return 0.0
        return round(self.categorized_differences / self.total_differences * 100, 1)


# ---------------------------------------------------------------------------
# Clustering
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SimilarFileGroup:
    """Files whose difference fingerprints are similar.

    Attributes:
        name:                       Display name, ``"Group <n>"``.
        file_pairs:                 File ids in the group.
        common_paths:               Normalized paths every member shares.
        common_pattern_description: Summary of ``common_paths``.
    """

    name: str
    file_pairs: frozenset[str]
    common_paths: frozenset[str] = frozenset()
    common_pattern_description: str = ""

    @property
    def file_count(self) -> int:
        return len(self.file_pairs)


# ---------------------------------------------------------------------------
# Per-pair summary and cross-file frequency
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class PathPattern:
    """A normalized path seen more than once, with a few example occurrences."""

    path: str
    occurrence_count: int
    file_count: int = 1
    affected_files: tuple[str, ...] = ()
    examples: tuple[Difference, ...] = ()


@dataclass(frozen=True, slots=True)
class DifferenceSummary:
    """Breakdown of the differences of one file pair.

    Attributes:
        are_equal:            True when the pair has no differences.
        total_difference_count: Number of differences.
        by_category:          Differences grouped by basic category.
        by_root_object:       Differences grouped by normalized path.
        by_root_object_and_category: Both groupings combined.
        category_percentages: Share of each category, rounded to 0.1.
        root_object_percentages: Share of each normalized path, rounded to 0.1.
        common_patterns:      Normalized paths occurring more than once,
                              most frequent first.
    """

    are_equal: bool = True
    total_difference_count: int = 0
    by_category: dict[DifferenceCategory, list[Difference]] = field(default_factory=dict)
    by_root_object: dict[str, list[Difference]] = field(default_factory=dict)
    by_root_object_and_category: dict[str, dict[DifferenceCategory, list[Difference]]] = field(
        default_factory=dict
    )
    category_percentages: dict[DifferenceCategory, float] = field(default_factory=dict)
    root_object_percentages: dict[str, float] = field(default_factory=dict)
    common_patterns: list[PathPattern] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class PropertyChange:
    """One exact ``old -> new`` change at a normalized path, across files."""

    path: str
    old_value: str
    new_value: str
    occurrence_count: int
    affected_files: tuple[str, ...] = ()

    @property
    def file_count(self) -> int:
        return len(self.affected_files)


@dataclass(frozen=True, slots=True)
class PatternFrequency:
    """Differences sharing a normalized path and a basic category."""

    path: str
    category: DifferenceCategory
    occurrence_count: int
    affected_files: tuple[str, ...] = ()
    examples: tuple[Difference, ...] = ()

    @property
    def file_count(self) -> int:
        return len(self.affected_files)


@dataclass(frozen=True, slots=True)
class FieldImpact:
    """How many file pairs a field (or its parent collection) is changed in."""

    field_path: str
    affected_pair_count: int
    occurrence_count: int


@dataclass(frozen=True, slots=True)
class ComparisonPatternAnalysis:
    """Cross-file frequency view of one folder.

    Attributes:
        total_files_paired:      Number of file pairs in the folder.
        files_with_differences:  Pairs not flagged equal.
        total_differences:       Differences across those pairs.
        total_by_category:       Difference count per basic category; every
                                 category is present.
        common_path_patterns:    Paths changed in more than one file, top 20.
        common_property_changes: Exact changes seen in more than one file,
                                 top 20.
        pattern_frequencies:     Differences grouped by (path, category), most
                                 widespread first.
        similar_file_groups:     Files clustered by difference fingerprint.
    """

    total_files_paired: int = 0
    files_with_differences: int = 0
    total_differences: int = 0
    total_by_category: dict[DifferenceCategory, int] = field(default_factory=dict)
    common_path_patterns: list[PathPattern] = field(default_factory=list)
    common_property_changes: list[PropertyChange] = field(default_factory=list)
    pattern_frequencies: list[PatternFrequency] = field(default_factory=list)
    similar_file_groups: list[SimilarFileGroup] = field(default_factory=list)
