"""Property path normalization and segment helpers."""

from __future__ import annotations

from diff_patterns.paths.normalizer import WILDCARD, PathNormalizer, normalize_path
from diff_patterns.paths.segments import (
    collection_name,
    element_property,
    ends_with_index,
    first_index,
    has_index,
    last_segment,
    parent_and_leaf,
    split_segments,
)

__all__ = [
    "WILDCARD",
    "PathNormalizer",
    "collection_name",
    "element_property",
    "ends_with_index",
    "first_index",
    "has_index",
    "last_segment",
    "normalize_path",
    "parent_and_leaf",
    "split_segments",
]
