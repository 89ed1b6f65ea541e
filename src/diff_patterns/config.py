"""AnalysisConfig and ClusteringConfig: host-supplied analysis parameters.

Both are frozen (immutable) dataclasses.  Domain knowledge such as which
properties are critical or which path keywords make up a document section is
never compiled into the analyzers; it arrives here, from the host.  Missing
configuration degrades gracefully: no critical properties means no critical
patterns, no sections means no section groups.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

__all__ = ["AnalysisConfig", "ClusteringConfig"]


@dataclass(frozen=True, slots=True)
class AnalysisConfig:
    """Immutable configuration for the structural and semantic analyzers.

    Attributes:
        critical_properties: Property names whose absence is always surfaced
            as a high-priority pattern.  Matched case-insensitively against
            normalized path segments.
        document_sections: Ordered ``(section name, path keywords)`` pairs.
            A difference whose normalized path contains any keyword belongs to
            the ``"<section> Changes"`` semantic group.  A mapping is accepted
            and stored as a tuple of pairs so the config stays hashable.
        order_false_positive_suffixes: Collection-name suffixes naming a
            single-entity collection.  Such a collection touched at one index
            or fewer is never reported as an order difference.
        max_examples: Maximum example differences retained per pattern (>= 1).
        order_numeric_tolerance: Numeric distance under which two values are
            treated as a likely reorder by the per-difference heuristic (>= 0).
        significance_threshold: Share of a file's differences a kind must
            exceed to count as significant when classifying the file, in
            [0, 1).
        path_cache_size: Capacity of the per-call normalization cache (>= 1).
    """

    critical_properties: frozenset[str] = frozenset()
    document_sections: tuple[tuple[str, frozenset[str]], ...] = ()
    order_false_positive_suffixes: tuple[str, ...] = ()
    max_examples: int = 3
    order_numeric_tolerance: float = 10.0
    significance_threshold: float = 0.2
    path_cache_size: int = 4096

    def __post_init__(self) -> None:
        sections: Iterable[tuple[str, Iterable[str]]] = (
            self.document_sections.items()
            if isinstance(self.document_sections, Mapping)
            else self.document_sections
        )
        object.__setattr__(
            self,
            "document_sections",
            tuple((str(name), frozenset(keywords)) for name, keywords in sections),
        )
        if self.max_examples < 1:
            msg = f"max_examples must be >= 1, got {self.max_examples}"
            raise ValueError(msg)
        if self.order_numeric_tolerance < 0.0:
            msg = (
                "order_numeric_tolerance must be >= 0.0, "
                f"got {self.order_numeric_tolerance}"
            )
            raise ValueError(msg)
        if not 0.0 <= self.significance_threshold < 1.0:
            msg = (
                "significance_threshold must be in [0, 1), "
                f"got {self.significance_threshold}"
            )
            raise ValueError(msg)
        if self.path_cache_size < 1:
            msg = f"path_cache_size must be >= 1, got {self.path_cache_size}"
            raise ValueError(msg)

    def is_critical_name(self, name: str) -> bool:
        """Return True if *name* is a configured critical property (any case)."""
        lowered = name.lower()
        return any(lowered == prop.lower() for prop in self.critical_properties)


@dataclass(frozen=True, slots=True)
class ClusteringConfig:
    """Immutable configuration for MinHash similarity clustering.

    Attributes:
        similarity_threshold: Minimum estimated Jaccard similarity for two
            files to be grouped, in [0, 1].
        num_hashes: Signature length (number of hash functions, >= 1).
        seed: Seed of the generator that draws the per-slot hash seeds.  The
            same seed always yields the same signatures.
    """

    similarity_threshold: float = 0.6
    num_hashes: int = 64
    seed: int = 42

    def __post_init__(self) -> None:
        if not 0.0 <= self.similarity_threshold <= 1.0:
            msg = (
                "similarity_threshold must be in [0, 1], "
                f"got {self.similarity_threshold}"
            )
            raise ValueError(msg)
        if self.num_hashes < 1:
            msg = f"num_hashes must be >= 1, got {self.num_hashes}"
            raise ValueError(msg)
        if self.seed < 0:
            msg = f"seed must be >= 0, got {self.seed}"
            raise ValueError(msg)
