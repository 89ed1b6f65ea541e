"""Tests for FileSimilarityClusterer and fingerprint construction."""

from __future__ import annotations

from collections.abc import Callable

import numpy as np
import pytest

from diff_patterns.clustering import (
    FileSimilarityClusterer,
    build_fingerprints,
    describe_common_paths,
)
from diff_patterns.config import ClusteringConfig
from diff_patterns.models import Difference, FolderResult

FolderFactory = Callable[[dict[str, list[Difference]]], FolderResult]

_SHARED = frozenset({"Body.Status", "Body.Total", "Items[*].Name"})


class TestBuildFingerprints:
    def test_normalized_paths_per_pair(self, make_folder: FolderFactory) -> None:
        folder = make_folder(
            {
                "a": [Difference("Items[0].Name", "x", "y"), Difference("Items[1].Name", "y", "x")],
                "same": [],
            }
        )
        fingerprints = build_fingerprints(folder)
        assert fingerprints == {"a_expected.json vs a_actual.json": frozenset({"Items[*].Name"})}


class TestDescribeCommonPaths:
    def test_no_common_paths(self) -> None:
        assert describe_common_paths(frozenset()) == "Files with similar difference patterns"

    def test_lists_three_sorted_examples(self) -> None:
        common = frozenset({"D", "B", "A", "C"})
        assert describe_common_paths(common) == (
            "4 common difference pattern(s) including: 'A', 'B', 'C'"
        )


class TestCluster:
    def test_identical_fingerprints_grouped(self) -> None:
        groups = FileSimilarityClusterer().cluster(
            {"f1": _SHARED, "f2": _SHARED, "f3": frozenset({"Header.Id", "Footer.Note"})}
        )
        assert len(groups) == 2
        first, second = groups
        assert first.name == "Group 1"
        assert first.file_pairs == frozenset({"f1", "f2"})
        assert first.common_paths == _SHARED
        assert first.common_pattern_description == (
            "3 common difference pattern(s) including: 'Body.Status', 'Body.Total', "
            "'Items[*].Name'"
        )
        assert second.name == "Group 2"
        assert second.file_pairs == frozenset({"f3"})
        assert second.common_pattern_description == "Unique difference pattern"

    def test_empty_input(self) -> None:
        assert FileSimilarityClusterer().cluster({}) == []

    def test_single_file_is_singleton(self) -> None:
        groups = FileSimilarityClusterer().cluster({"only": _SHARED})
        assert len(groups) == 1
        assert groups[0].file_count == 1

    def test_empty_fingerprints_grouped(self) -> None:
        groups = FileSimilarityClusterer().cluster({"f1": frozenset(), "f2": frozenset()})
        assert len(groups) == 1
        assert groups[0].common_pattern_description == "Files with similar difference patterns"

    @pytest.mark.parametrize("threshold", [0.0, 0.3, 0.6, 1.0])
    def test_partition(self, threshold: float) -> None:
        fingerprints = {
            "f1": _SHARED,
            "f2": _SHARED | {"Extra.One"},
            "f3": frozenset({"Body.Status"}),
            "f4": frozenset({"Header.Id", "Footer.Note"}),
            "f5": frozenset({"Header.Id"}),
            "f6": frozenset(),
        }
        clusterer = FileSimilarityClusterer(ClusteringConfig(similarity_threshold=threshold))
        groups = clusterer.cluster(fingerprints)

        members = [f for group in groups for f in group.file_pairs]
        assert len(members) == len(fingerprints)
        assert set(members) == set(fingerprints)
        assert [g.name for g in groups] == [f"Group {n}" for n in range(1, len(groups) + 1)]

    def test_common_paths_shared_by_all_members(self) -> None:
        fingerprints = {"f1": _SHARED, "f2": _SHARED | {"Extra.One"}}
        clusterer = FileSimilarityClusterer(ClusteringConfig(similarity_threshold=0.0))
        (group,) = clusterer.cluster(fingerprints)
        assert group.common_paths == _SHARED

    def test_pairwise_similarities_in_enumeration_order(self) -> None:
        clusterer = FileSimilarityClusterer()
        pairs = clusterer.pairwise_similarities({"f1": _SHARED, "f2": _SHARED, "f3": _SHARED})
        assert [(a, b) for a, b, _ in pairs] == [("f1", "f2"), ("f1", "f3"), ("f2", "f3")]
        assert all(sim == pytest.approx(1.0) for _, _, sim in pairs)

    def test_deterministic(self) -> None:
        fingerprints = {
            "f1": _SHARED,
            "f2": frozenset({"Body.Status", "Body.Total"}),
            "f3": frozenset({"Header.Id"}),
        }
        first = FileSimilarityClusterer().cluster(fingerprints)
        second = FileSimilarityClusterer().cluster(fingerprints)
        assert first == second

    def test_pair_exactly_at_threshold_is_grouped(self, monkeypatch: pytest.MonkeyPatch) -> None:
        signatures = {
            frozenset({"x"}): np.array([1, 2, 3, 4, 5], dtype=np.uint32),
            frozenset({"y"}): np.array([1, 9, 9, 9, 9], dtype=np.uint32),
        }
        clusterer = FileSimilarityClusterer(
            ClusteringConfig(similarity_threshold=0.2, num_hashes=5)
        )
        monkeypatch.setattr(clusterer.minhash, "signature", lambda elements: signatures[elements])

        fingerprints = {"x": frozenset({"x"}), "y": frozenset({"y"})}
        ((_, _, sim),) = clusterer.pairwise_similarities(fingerprints)
        assert sim == clusterer.minhash.estimate_jaccard(
            signatures[frozenset({"x"})], signatures[frozenset({"y"})]
        )
        assert sim == 0.2

        groups = clusterer.cluster(fingerprints)
        assert len(groups) == 1
        assert groups[0].file_pairs == frozenset({"x", "y"})

    @pytest.mark.parametrize("num_hashes", [3, 5, 7, 10, 64])
    def test_similarities_match_estimate_jaccard(self, num_hashes: int) -> None:
        fingerprints = {
            "f1": _SHARED,
            "f2": frozenset({"Body.Status", "Body.Total"}),
            "f3": frozenset({"Header.Id", "Body.Status"}),
        }
        clusterer = FileSimilarityClusterer(ClusteringConfig(num_hashes=num_hashes))
        minhash = clusterer.minhash
        for a, b, sim in clusterer.pairwise_similarities(fingerprints):
            expected = minhash.estimate_jaccard(
                minhash.signature(fingerprints[a]), minhash.signature(fingerprints[b])
            )
            assert sim == expected
