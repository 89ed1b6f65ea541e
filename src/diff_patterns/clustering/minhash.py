"""MinHash signatures and Jaccard similarity for difference fingerprints.

A fingerprint is the set of normalized paths one file pair's differences
touch.  ``MinHash`` compresses a fingerprint into a fixed-length ``uint32``
signature; the fraction of slots two signatures agree on estimates the
Jaccard similarity of the underlying sets.

Element hashes come from ``hashlib.blake2b`` rather than ``hash()``, so
signatures are identical across processes regardless of ``PYTHONHASHSEED``.
The per-slot seeds come from ``numpy.random.default_rng(seed)``; the same
``(num_hashes, seed)`` always yields the same signatures.
"""

from __future__ import annotations

import hashlib
from collections.abc import Iterable, Set

import numpy as np

__all__ = ["EMPTY_SLOT", "MinHash", "jaccard_similarity"]

# Slot value of an empty fingerprint's signature
EMPTY_SLOT = np.iinfo(np.uint32).max


def _element_hash(element: str) -> int:
    """Stable 32-bit hash of *element*."""
    digest = hashlib.blake2b(element.encode("utf-8"), digest_size=4).digest()
    return int.from_bytes(digest, "little")


class MinHash:
    """Fixed-seed MinHash over sets of strings.

    Slot ``i`` of a signature is ``min(hash(e) XOR seed[i])`` over all
    elements ``e``.  Signatures do not depend on element order.

    Args:
        num_hashes: Signature length.  Defaults to 64.
        seed: Seed of the generator drawing the per-slot seeds.  Defaults
            to 42.

    Example usage:
        minhash = MinHash(num_hashes=64, seed=42)
        a = minhash.signature({"Body.Status", "Body.Total"})
        b = minhash.signature({"Body.Status"})
        minhash.estimate_jaccard(a, b)   # close to 0.5
    """

    def __init__(self, num_hashes: int = 64, seed: int = 42) -> None:
        if num_hashes < 1:
            msg = f"num_hashes must be >= 1, got {num_hashes}"
            raise ValueError(msg)
        self._num_hashes = num_hashes
        self._seed = seed
        rng = np.random.default_rng(seed)
        self._seeds: np.ndarray = rng.integers(
            0, EMPTY_SLOT, size=num_hashes, dtype=np.uint32, endpoint=True
        )

    @property
    def num_hashes(self) -> int:
        return self._num_hashes

    @property
    def seed(self) -> int:
        return self._seed

    def signature(self, elements: Iterable[str]) -> np.ndarray:
        """Signature of *elements* as a ``(num_hashes,)`` ``uint32`` array.

        An empty set yields all ``EMPTY_SLOT`` values.
        """
        unique = set(elements)
        if not unique:
            return np.full(self._num_hashes, EMPTY_SLOT, dtype=np.uint32)
        hashes = np.fromiter(
            (_element_hash(e) for e in sorted(unique)), dtype=np.uint32, count=len(unique)
        )
        # (n_elements, num_hashes) -> per-slot minimum
        return np.bitwise_xor(hashes[:, None], self._seeds[None, :]).min(axis=0)

    def estimate_jaccard(self, sig_a: np.ndarray, sig_b: np.ndarray) -> float:
        """Fraction of slots on which the two signatures agree, in [0, 1].

        Raises:
            ValueError: If the signatures differ in length.
        """
        if len(sig_a) != len(sig_b):
            msg = f"signature lengths differ, got {len(sig_a)} and {len(sig_b)}"
            raise ValueError(msg)
        if len(sig_a) == 0:
            return 0.0
        return float(np.count_nonzero(np.asarray(sig_a) == np.asarray(sig_b)) / len(sig_a))


def jaccard_similarity(a: Set[str], b: Set[str]) -> float:
    """Exact Jaccard similarity ``|a & b| / |a | b|``; two empty sets give 0.0."""
    union = len(a | b)
    if union == 0:
        return 0.0
    return len(a & b) / union
