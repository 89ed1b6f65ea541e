"""PatternAccumulator: keyed, merge-able store of structural patterns.

The structural miner works per file pair (map) and combines the per-file
stores afterwards (reduce).  Merging is commutative for everything the
analysis reports as a number or a set: occurrence counts add up, affected
file sets are unioned and value-change tallies are summed.  Only the choice
of retained examples depends on merge order, and examples are capped.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Iterator
from typing import Any

from diff_patterns.models import Difference
from diff_patterns.result import StructuralPattern

__all__ = ["PatternAccumulator", "ValueChangeKey"]

# (normalized path, rendered old value, rendered new value)
ValueChangeKey = tuple[str, str, str]


class PatternAccumulator:
    """Patterns keyed by signature, plus the value-change tallies behind them.

    Args:
        max_examples: Cap on the examples retained per pattern.

    Example usage:
        acc = PatternAccumulator(max_examples=3)
        acc.upsert("Body.Total", diff, "a.json vs b.json",
                   full_pattern="Body.Total", parent_path="Body",
                   subject_property="Total", category=category)
        acc.merge(other_acc)
    """

    def __init__(self, max_examples: int = 3) -> None:
        self._max_examples = max_examples
        self._patterns: dict[str, StructuralPattern] = {}
        self.value_changes: Counter[ValueChangeKey] = Counter()
        self.claimed = 0
        self.critical_differences = 0

    # ------------------------------------------------------------------
    # Mapping surface
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._patterns)

    def __contains__(self, key: object) -> bool:
        return key in self._patterns

    def __iter__(self) -> Iterator[StructuralPattern]:
        return iter(self._patterns.values())

    def get(self, key: str) -> StructuralPattern | None:
        return self._patterns.get(key)

    @property
    def max_examples(self) -> int:
        return self._max_examples

    # ------------------------------------------------------------------
    # Accumulation
    # ------------------------------------------------------------------

    def upsert(
        self,
        key: str,
        diff: Difference,
        file_id: str,
        count: int = 1,
        **attrs: Any,
    ) -> StructuralPattern:
        """Fold *diff* into the pattern at *key*, creating it from *attrs* if new.

        Args:
            key:     Pattern signature.
            diff:    The occurrence; kept as an example while there is room.
            file_id: File the occurrence belongs to.
            count:   Occurrences to add (the order pass adds one per index).
            **attrs: ``StructuralPattern`` fields, used only on creation.

        Returns:
            The (possibly new) pattern.
        """
        pattern = self._patterns.get(key)
        if pattern is None:
            pattern = StructuralPattern(key=key, **attrs)
            self._patterns[key] = pattern
        pattern.record(diff, file_id, self._max_examples, count=count)
        return pattern

    def add_examples(self, key: str, diffs: Iterable[Difference]) -> None:
        """Append further examples to an existing pattern while there is room."""
        pattern = self._patterns[key]
        for diff in diffs:
            if len(pattern.examples) >= self._max_examples:
                break
            if diff not in pattern.examples:
                pattern.examples.append(diff)

    def merge(self, other: PatternAccumulator) -> PatternAccumulator:
        """Fold *other* into this accumulator and return ``self``.

        Patterns new to this accumulator are copied, so *other* is never
        mutated by later merges.
        """
        for key, theirs in other._patterns.items():
            ours = self._patterns.get(key)
            if ours is None:
                ours = StructuralPattern(
                    key=theirs.key,
                    full_pattern=theirs.full_pattern,
                    parent_path=theirs.parent_path,
                    subject_property=theirs.subject_property,
                    category=theirs.category,
                    collection_name=theirs.collection_name,
                    is_collection_element=theirs.is_collection_element,
                    is_critical=theirs.is_critical,
                    old_value=theirs.old_value,
                    new_value=theirs.new_value,
                    description=theirs.description,
                    recommended_action=theirs.recommended_action,
                )
                self._patterns[key] = ours
            ours.absorb(theirs, self._max_examples)
        self.value_changes.update(other.value_changes)
        self.claimed += other.claimed
        self.critical_differences += other.critical_differences
        return self

    def patterns(self) -> list[StructuralPattern]:
        """All patterns in first-seen order."""
        return list(self._patterns.values())
