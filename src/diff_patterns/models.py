"""Input data model: differences reported by an external object-graph comparator.

The engine never computes differences itself.  An upstream comparison service
produces one ``FilePairResult`` per compared document pair and hands the whole
batch over as a ``FolderResult``.  All analyzers treat these objects as
read-only snapshots.

Value conventions:
- ``None`` on either side means the property is absent on that side.
- ``bool`` is a distinct value type, never numeric (``bool`` subclasses ``int``
  in Python, so every numeric check must exclude it explicitly).
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

__all__ = ["Difference", "FilePairResult", "FolderResult"]


@dataclass(frozen=True, slots=True)
class Difference:
    """One reported mismatch between two documents at a property path.

    Attributes:
        property_path: Raw (un-normalized) property path, e.g.
            ``"Body.Response.Results[0].Score"``.
        old_value: Value in the first ("expected") document, or None if absent.
        new_value: Value in the second ("actual") document, or None if absent.
    """

    property_path: str
    old_value: Any = None
    new_value: Any = None


@dataclass(frozen=True, slots=True)
class FilePairResult:
    """Comparison outcome for one pair of documents.

    Attributes:
        file1_name:  Name of the first document.
        file2_name:  Name of the second document.
        are_equal:   True when the comparator found no differences.  Pairs
                     flagged equal are skipped by every analyzer.
        differences: Differences exactly as the comparator reported them.
    """

    file1_name: str
    file2_name: str
    are_equal: bool
    differences: Sequence[Difference] = field(default_factory=tuple)

    @property
    def identifier(self) -> str:
        """File id used throughout the engine: ``"<file1> vs <file2>"``."""
        return f"{self.file1_name} vs {self.file2_name}"


@dataclass(frozen=True, slots=True)
class FolderResult:
    """A batch of compared file pairs; the engine's sole input."""

    file_pair_results: Sequence[FilePairResult] = field(default_factory=tuple)

    @property
    def total_pairs(self) -> int:
        return len(self.file_pair_results or ())

    @property
    def pairs_with_differences(self) -> list[FilePairResult]:
        """Pairs the comparator did not flag as equal, in input order."""
        return [pair for pair in self.file_pair_results or () if not pair.are_equal]

    @property
    def total_differences(self) -> int:
        return sum(len(pair.differences or ()) for pair in self.pairs_with_differences)
