"""diff-patterns - cross-file pattern analysis of object-graph differences."""

from __future__ import annotations

from diff_patterns.analysis.categories import (
    DifferenceCategory,
    EnhancedDifferenceCategory,
    FileClassification,
)
from diff_patterns.api import (
    analyze_enhanced,
    analyze_patterns,
    analyze_semantics,
    analyze_structure,
    categorize,
    categorize_enhanced,
    cluster_similar_files,
    most_affected_fields,
    normalize_path,
    summarize_differences,
)
from diff_patterns.config import AnalysisConfig, ClusteringConfig
from diff_patterns.models import Difference, FilePairResult, FolderResult
from diff_patterns.result import (
    ComparisonPatternAnalysis,
    DifferenceSummary,
    EnhancedAnalysisResult,
    EnhancedPattern,
    SemanticDifferenceAnalysis,
    SemanticGroup,
    SimilarFileGroup,
    StructuralAnalysisResult,
    StructuralPattern,
)

__version__: str = "0.1.0"
__all__: list[str] = [
    "AnalysisConfig",
    "ClusteringConfig",
    "ComparisonPatternAnalysis",
    "Difference",
    "DifferenceCategory",
    "DifferenceSummary",
    "EnhancedAnalysisResult",
    "EnhancedDifferenceCategory",
    "EnhancedPattern",
    "FilePairResult",
    "FileClassification",
    "FolderResult",
    "SemanticDifferenceAnalysis",
    "SemanticGroup",
    "SimilarFileGroup",
    "StructuralAnalysisResult",
    "StructuralPattern",
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
