"""Tests for DifferenceSummarizer."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from diff_patterns.analysis.categories import DifferenceCategory
from diff_patterns.analysis.summary import DifferenceSummarizer
from diff_patterns.cache import NormalizationCache
from diff_patterns.models import Difference, FilePairResult

_DIFFS = (
    Difference("Results[0].Score", 1, 2),
    Difference("Results[1].Score", 3, None),
    Difference("Customer.Status", "Active", "Closed"),
    Difference("Customer.Name", "Ann", "Anna"),
)


class TestSummarizePair:
    def test_equal_pair(self, make_pair: Callable[..., FilePairResult]) -> None:
        summary = DifferenceSummarizer().summarize_pair(make_pair("same"))
        assert summary.are_equal is True
        assert summary.total_difference_count == 0
        assert summary.by_category == {}

    def test_breakdown_by_category(self, make_pair: Callable[..., FilePairResult]) -> None:
        summary = DifferenceSummarizer().summarize_pair(make_pair("a", *_DIFFS))
        assert summary.are_equal is False
        assert summary.total_difference_count == 4
        assert len(summary.by_category[DifferenceCategory.TEXT_CHANGED]) == 2
        assert summary.category_percentages[DifferenceCategory.TEXT_CHANGED] == pytest.approx(50.0)
        assert summary.category_percentages[DifferenceCategory.NUMERIC_CHANGED] == pytest.approx(
            25.0
        )
        assert summary.category_percentages[
            DifferenceCategory.NULL_VALUE_CHANGE
        ] == pytest.approx(25.0)

    def test_breakdown_by_root_object(self, make_pair: Callable[..., FilePairResult]) -> None:
        summary = DifferenceSummarizer().summarize_pair(make_pair("a", *_DIFFS))
        assert set(summary.by_root_object) == {
            "Results[*].Score",
            "Customer.Status",
            "Customer.Name",
        }
        assert summary.root_object_percentages["Results[*].Score"] == pytest.approx(50.0)
        nested = summary.by_root_object_and_category["Results[*].Score"]
        assert set(nested) == {
            DifferenceCategory.NUMERIC_CHANGED,
            DifferenceCategory.NULL_VALUE_CHANGE,
        }

    def test_common_patterns(self, make_pair: Callable[..., FilePairResult]) -> None:
        summary = DifferenceSummarizer().summarize_pair(make_pair("a", *_DIFFS))
        assert len(summary.common_patterns) == 1
        common = summary.common_patterns[0]
        assert common.path == "Results[*].Score"
        assert common.occurrence_count == 2
        assert common.examples == _DIFFS[:2]

    def test_summarize_no_differences(self) -> None:
        assert DifferenceSummarizer().summarize([]).are_equal is True

    def test_shared_cache(self) -> None:
        cache = NormalizationCache()
        summarizer = DifferenceSummarizer(cache=cache)
        summarizer.summarize(_DIFFS)
        assert cache.curr_size == len(_DIFFS)
