"""Difference analysis: category taxonomies and single-difference categorization.

The folder-level analyzers live in their own modules
(``diff_patterns.analysis.structural``, ``.semantic``, ``.frequency``...)
and are reached through ``diff_patterns.api``.
"""

from __future__ import annotations

from diff_patterns.analysis.categories import (
    DifferenceCategory,
    EnhancedDifferenceCategory,
    FileClassification,
    PatternBucket,
)
from diff_patterns.analysis.categorizer import (
    DifferenceCategorizer,
    categorize,
    categorize_enhanced,
    infer_value_change_category,
)

__all__ = [
    "DifferenceCategorizer",
    "DifferenceCategory",
    "EnhancedDifferenceCategory",
    "FileClassification",
    "PatternBucket",
    "categorize",
    "categorize_enhanced",
    "infer_value_change_category",
]
