"""MinHash-based similarity clustering of difference fingerprints."""

from __future__ import annotations

from diff_patterns.clustering.grouping import (
    FileSimilarityClusterer,
    build_fingerprints,
    describe_common_paths,
)
from diff_patterns.clustering.minhash import EMPTY_SLOT, MinHash, jaccard_similarity

__all__ = [
    "EMPTY_SLOT",
    "FileSimilarityClusterer",
    "MinHash",
    "build_fingerprints",
    "describe_common_paths",
    "jaccard_similarity",
]
