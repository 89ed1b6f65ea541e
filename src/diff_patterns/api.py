"""Public API functions for diff-patterns.

Each call creates fresh analyzer instances (and with them a fresh
normalization cache) to guarantee zero state shared between calls.
"""

from __future__ import annotations

from collections.abc import Mapping

from diff_patterns.analysis.categories import DifferenceCategory, EnhancedDifferenceCategory
from diff_patterns.analysis.categorizer import DifferenceCategorizer
from diff_patterns.analysis.enhanced import EnhancedDifferenceAnalyzer
from diff_patterns.analysis.frequency import PatternFrequencyAnalyzer
from diff_patterns.analysis.semantic import SemanticGrouper
from diff_patterns.analysis.structural import StructuralPatternMiner
from diff_patterns.analysis.summary import DifferenceSummarizer
from diff_patterns.clustering.grouping import FileSimilarityClusterer, build_fingerprints
from diff_patterns.config import AnalysisConfig, ClusteringConfig
from diff_patterns.models import Difference, FilePairResult, FolderResult
from diff_patterns.paths.normalizer import PathNormalizer
from diff_patterns.result import (
    ComparisonPatternAnalysis,
    DifferenceSummary,
    EnhancedAnalysisResult,
    FieldImpact,
    SemanticDifferenceAnalysis,
    SimilarFileGroup,
    StructuralAnalysisResult,
)

__all__ = [
    "analyze_enhanced",
    "analyze_patterns",
    "analyze_semantics",
    "analyze_structure",
    "categorize",
    "categorize_enhanced",
    "cluster_similar_files",
    "most_affected_fields",
    "normalize_path",
    "summarize_differences",
]


def normalize_path(raw_path: str | None) -> str:
    """Return the normalized form of a raw property path.

    Array indices become ``[*]``; namespace prefixes, backing-field wrappers
    and collection accessor boilerplate are removed.  ``None`` and ``""``
    give ``""``.
    """
    return PathNormalizer().normalize(raw_path)


def categorize(diff: Difference) -> DifferenceCategory:
    """Return the basic (value-shape) category of a single difference."""
    return DifferenceCategorizer().categorize(diff)


def categorize_enhanced(diff: Difference) -> EnhancedDifferenceCategory:
    """Return the enhanced (structure and field-name aware) category of a difference."""
    return DifferenceCategorizer().categorize_enhanced(diff)


def analyze_structure(
    folder: FolderResult,
    config: AnalysisConfig | None = None,
) -> StructuralAnalysisResult:
    """Mine structural patterns across every file pair of *folder*.

    Args:
        folder: Comparison results of a folder of file pairs.
        config: Critical properties, order suffix guard and limits.
                Defaults to ``AnalysisConfig()`` when None.

    Returns:
        A ``StructuralAnalysisResult`` with every pattern routed into exactly
        one bucket, the per-file classification and the summary counts.
    """
    return StructuralPatternMiner(config=config).analyze(folder)


def analyze_semantics(
    folder: FolderResult,
    config: AnalysisConfig | None = None,
) -> SemanticDifferenceAnalysis:
    """Group the differences of *folder* by meaning (status, ids, dates...).

    Args:
        folder: Comparison results of a folder of file pairs.
        config: Supplies the document sections.  Defaults to
                ``AnalysisConfig()`` when None.
    """
    return SemanticGrouper(config=config).analyze(folder)


def analyze_enhanced(
    folder: FolderResult,
    config: AnalysisConfig | None = None,
) -> EnhancedAnalysisResult:
    """Break *folder* down by enhanced category and find its structural problems.

    Args:
        folder: Comparison results of a folder of file pairs.
        config: Supplies the example cap and cache size.  Defaults to
                ``AnalysisConfig()`` when None.

    Returns:
        An ``EnhancedAnalysisResult`` with per-category counts, the
        collection, property and structural problem lists and the
        high-impact patterns, each carrying tester guidance.
    """
    return EnhancedDifferenceAnalyzer(config=config).analyze(folder)


def cluster_similar_files(
    folder: FolderResult | Mapping[str, frozenset[str]],
    config: ClusteringConfig | None = None,
) -> list[SimilarFileGroup]:
    """Partition file pairs into groups with similar difference fingerprints.

    Args:
        folder: Either a ``FolderResult`` (fingerprints are built from it) or
                a ready mapping of file id to normalized paths.
        config: Threshold, signature length and seed.  Defaults to
                ``ClusteringConfig()`` when None.

    Returns:
        Groups covering every file id exactly once.
    """
    fingerprints = build_fingerprints(folder) if isinstance(folder, FolderResult) else folder
    return FileSimilarityClusterer(config=config).cluster(fingerprints)


def analyze_patterns(
    folder: FolderResult,
    config: AnalysisConfig | None = None,
    clustering: ClusteringConfig | None = None,
) -> ComparisonPatternAnalysis:
    """Return cross-file frequency tables and similar-file groups for *folder*."""
    return PatternFrequencyAnalyzer(config=config, clustering=clustering).analyze(folder)


def most_affected_fields(
    folder: FolderResult,
    config: AnalysisConfig | None = None,
) -> list[FieldImpact]:
    """Rank fields by how many file pairs change them."""
    return PatternFrequencyAnalyzer(config=config).most_affected_fields(folder)


def summarize_differences(
    pair: FilePairResult,
    config: AnalysisConfig | None = None,
) -> DifferenceSummary:
    """Break the differences of one file pair down by category and path."""
    return DifferenceSummarizer(config=config).summarize_pair(pair)
