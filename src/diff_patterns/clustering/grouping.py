"""FileSimilarityClusterer: groups file pairs with similar difference fingerprints.

Clustering is greedy and order-sensitive by nature, not an optimal partition:

1. Every fingerprint gets a MinHash signature.
2. Pairwise similarity is the fraction of agreeing signature slots.  The
   hamming distances of all pairs come from ``scipy.spatial.distance.pdist``
   and are rounded back to integer agreement counts, so each similarity is
   the same float ``MinHash.estimate_jaccard`` returns for that pair.
3. Pairs are visited in descending similarity; ties keep enumeration order
   (``itertools.combinations`` over the input order).  Pairs below the
   threshold are skipped.
4. A surviving pair joins the first existing group holding either file; only
   files not yet grouped are added, so groups never overlap.  Otherwise the
   pair starts a new group.
5. Files no accepted pair touched become singleton groups.

Every file id therefore lands in exactly one ``SimilarFileGroup``.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Mapping

import numpy as np
from scipy.spatial.distance import pdist

from diff_patterns.cache import NormalizationCache
from diff_patterns.clustering.minhash import MinHash
from diff_patterns.config import ClusteringConfig
from diff_patterns.models import FolderResult
from diff_patterns.result import SimilarFileGroup

__all__ = ["FileSimilarityClusterer", "build_fingerprints", "describe_common_paths"]

logger = logging.getLogger(__name__)

_MAX_EXAMPLE_PATHS = 3


def build_fingerprints(
    folder: FolderResult,
    cache: NormalizationCache | None = None,
) -> dict[str, frozenset[str]]:
    """Map every pair not flagged equal to the set of normalized paths it touches."""
    if cache is None:
        cache = NormalizationCache()
    fingerprints: dict[str, frozenset[str]] = {}
    for pair in folder.pairs_with_differences:
        fingerprints[pair.identifier] = frozenset(
            cache.normalize(diff.property_path) for diff in pair.differences or ()
        )
    return fingerprints


def describe_common_paths(common: frozenset[str]) -> str:
    """Summarize the paths shared by a group: count plus up to three examples."""
    if not common:
        return "Files with similar difference patterns"
    examples = ", ".join(f"'{path}'" for path in sorted(common)[:_MAX_EXAMPLE_PATHS])
    return f"{len(common)} common difference pattern(s) including: {examples}"


class FileSimilarityClusterer:
    """Partitions file pairs into groups of similar difference fingerprints.

    Args:
        config: Threshold, signature length and seed.  Defaults to
            ``ClusteringConfig()`` (0.6, 64 hashes, seed 42).
    """

    def __init__(self, config: ClusteringConfig | None = None) -> None:
        self._config = config if config is not None else ClusteringConfig()
        self._minhash = MinHash(num_hashes=self._config.num_hashes, seed=self._config.seed)

    @property
    def minhash(self) -> MinHash:
        return self._minhash

    def pairwise_similarities(
        self,
        fingerprints: Mapping[str, frozenset[str]],
    ) -> list[tuple[str, str, float]]:
        """Estimated similarity of every file combination, in enumeration order."""
        file_ids = list(fingerprints)
        if len(file_ids) < 2:
            return []
        signatures = np.vstack([self._minhash.signature(fingerprints[f]) for f in file_ids])
        n = signatures.shape[1]
        # Exact slot counts; 1 - hamming can sit one ulp below count / n.
        mismatches = np.rint(pdist(signatures, metric="hamming") * n).astype(np.int64)
        return [
            (a, b, (n - int(diff)) / n)
            for (a, b), diff in zip(
                itertools.combinations(file_ids, 2), mismatches, strict=True
            )
        ]

    def cluster(self, fingerprints: Mapping[str, frozenset[str]]) -> list[SimilarFileGroup]:
        """Group the files of *fingerprints*; see the module docstring for the policy."""
        if not fingerprints:
            return []

        pairs = self.pairwise_similarities(fingerprints)
        order = np.argsort(-np.array([sim for _, _, sim in pairs]), kind="stable")

        members: list[list[str]] = []
        group_of: dict[str, int] = {}
        for k in order:
            a, b, sim = pairs[int(k)]
            if sim < self._config.similarity_threshold:
                # Visited in descending order, nothing further qualifies.
                break
            existing = [group_of[f] for f in (a, b) if f in group_of]
            if existing:
                target = min(existing)
            else:
                target = len(members)
                members.append([])
            for f in (a, b):
                if f not in group_of:
                    group_of[f] = target
                    members[target].append(f)

        groups: list[SimilarFileGroup] = []
        for files in members:
            common = frozenset.intersection(*(frozenset(fingerprints[f]) for f in files))
            groups.append(
                SimilarFileGroup(
                    name=f"Group {len(groups) + 1}",
                    file_pairs=frozenset(files),
                    common_paths=common,
                    common_pattern_description=describe_common_paths(common),
                )
            )

        for file_id, paths in fingerprints.items():
            if file_id in group_of:
                continue
            groups.append(
                SimilarFileGroup(
                    name=f"Group {len(groups) + 1}",
                    file_pairs=frozenset({file_id}),
                    common_paths=frozenset(paths),
                    common_pattern_description="Unique difference pattern",
                )
            )

        logger.info(
            "Clustered %d files into %d groups (%d singletons)",
            len(fingerprints),
            len(groups),
            len(fingerprints) - len(group_of),
        )
        return groups
