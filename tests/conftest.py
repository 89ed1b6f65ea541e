"""Shared folder builders for analyzer tests.

Test modules run under ``--import-mode=importlib`` and cannot import from
this file, so builders are exposed as fixtures returning factories.
"""

from __future__ import annotations

from collections.abc import Callable

import pytest

from diff_patterns.models import Difference, FilePairResult, FolderResult

PairFactory = Callable[..., FilePairResult]
FolderFactory = Callable[..., FolderResult]


def _make_pair(name: str, *differences: Difference) -> FilePairResult:
    """Pair ``<name>_expected.json vs <name>_actual.json`` holding *differences*."""
    return FilePairResult(
        file1_name=f"{name}_expected.json",
        file2_name=f"{name}_actual.json",
        are_equal=not differences,
        differences=tuple(differences),
    )


@pytest.fixture
def make_pair() -> PairFactory:
    return _make_pair


@pytest.fixture
def make_folder() -> FolderFactory:
    """Build a folder from ``{name: [differences]}`` in insertion order."""

    def _build(pairs: dict[str, list[Difference]]) -> FolderResult:
        return FolderResult(
            file_pair_results=tuple(_make_pair(name, *diffs) for name, diffs in pairs.items())
        )

    return _build


@pytest.fixture
def missing_score_folder() -> FolderResult:
    """Two pairs, each missing ``Score`` from one element of ``Results``."""
    return FolderResult(
        file_pair_results=(
            _make_pair("a", Difference("Body.Response.Results[0].Score", 5, None)),
            _make_pair("b", Difference("Body.Response.Results[2].Score", 3, None)),
        )
    )
