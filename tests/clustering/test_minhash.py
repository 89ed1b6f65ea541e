"""Unit tests for MinHash signatures and Jaccard estimation."""

from __future__ import annotations

import numpy as np
import pytest

from diff_patterns.clustering import EMPTY_SLOT, MinHash, jaccard_similarity

_A = {"Body.Status", "Body.Total", "Items[*].Name", "Items[*].Qty"}
_B = {"Body.Status", "Body.Total", "Header.Id"}


class TestSignature:
    def test_shape_and_dtype(self) -> None:
        signature = MinHash(num_hashes=32).signature(_A)
        assert signature.shape == (32,)
        assert signature.dtype == np.uint32

    def test_order_independent(self) -> None:
        minhash = MinHash()
        assert np.array_equal(
            minhash.signature(["a", "b", "c"]), minhash.signature(["c", "a", "b", "a"])
        )

    def test_deterministic_for_same_seed(self) -> None:
        assert np.array_equal(MinHash(seed=7).signature(_A), MinHash(seed=7).signature(_A))

    def test_seed_changes_signature(self) -> None:
        assert not np.array_equal(MinHash(seed=1).signature(_A), MinHash(seed=2).signature(_A))

    def test_empty_set_sentinel(self) -> None:
        signature = MinHash(num_hashes=8).signature(set())
        assert np.all(signature == EMPTY_SLOT)

    def test_num_hashes_must_be_positive(self) -> None:
        with pytest.raises(ValueError, match="num_hashes"):
            MinHash(num_hashes=0)

    def test_properties(self) -> None:
        minhash = MinHash(num_hashes=16, seed=3)
        assert minhash.num_hashes == 16
        assert minhash.seed == 3


class TestEstimateJaccard:
    def test_self_similarity_is_one(self) -> None:
        minhash = MinHash()
        signature = minhash.signature(_A)
        assert minhash.estimate_jaccard(signature, signature) == pytest.approx(1.0)

    def test_symmetric(self) -> None:
        minhash = MinHash()
        a, b = minhash.signature(_A), minhash.signature(_B)
        assert minhash.estimate_jaccard(a, b) == minhash.estimate_jaccard(b, a)

    def test_disjoint_sets(self) -> None:
        minhash = MinHash()
        a = minhash.signature({"Body.Status", "Body.Total"})
        b = minhash.signature({"Header.Id", "Footer.Note"})
        assert minhash.estimate_jaccard(a, b) == pytest.approx(0.0)

    def test_estimate_tracks_exact_jaccard(self) -> None:
        left = {f"Field{i}" for i in range(100)}
        right = {f"Field{i}" for i in range(50, 150)}
        minhash = MinHash(num_hashes=256)
        estimate = minhash.estimate_jaccard(minhash.signature(left), minhash.signature(right))
        assert 0.0 < estimate < 1.0
        assert estimate == pytest.approx(jaccard_similarity(left, right), abs=0.2)

    def test_two_empty_sets_agree(self) -> None:
        minhash = MinHash()
        empty = minhash.signature(set())
        assert minhash.estimate_jaccard(empty, minhash.signature([])) == pytest.approx(1.0)

    def test_length_mismatch(self) -> None:
        with pytest.raises(ValueError, match="signature lengths differ"):
            MinHash().estimate_jaccard(np.zeros(4, dtype=np.uint32), np.zeros(5, dtype=np.uint32))


class TestJaccardSimilarity:
    def test_exact(self) -> None:
        assert jaccard_similarity(_A, _B) == pytest.approx(2 / 5)

    def test_identical(self) -> None:
        assert jaccard_similarity(_A, set(_A)) == pytest.approx(1.0)

    def test_both_empty(self) -> None:
        assert jaccard_similarity(set(), set()) == 0.0
