"""Unit tests for FileClassifier."""

from __future__ import annotations

from diff_patterns.analysis.categories import FileClassification
from diff_patterns.analysis.classification import FileClassifier
from diff_patterns.config import AnalysisConfig
from diff_patterns.models import Difference


class TestKindOf:
    def test_kinds(self) -> None:
        classifier = FileClassifier()
        assert classifier.kind_of(Difference("Total", 1, None)) == "missing"
        assert classifier.kind_of(Difference("Items[1].Qty", 10, 12)) == "order"
        assert classifier.kind_of(Difference("Total", 10, 12)) == "value"
        assert classifier.kind_of(Difference("Total", None, None)) == "other"


class TestClassify:
    def test_no_differences_is_uncategorized(self) -> None:
        assert FileClassifier().classify([]) is FileClassification.UNCATEGORIZED

    def test_single_dominant_kind(self) -> None:
        diffs = [Difference(f"Field{i}", i, None) for i in range(5)]
        assert FileClassifier().classify(diffs) is FileClassification.MISSING

    def test_value_only(self) -> None:
        diffs = [Difference("Status", "Active", "Closed")]
        assert FileClassifier().classify(diffs) is FileClassification.VALUE

    def test_two_significant_kinds_is_mixed(self) -> None:
        diffs = [
            Difference("A", 1, None),
            Difference("B", 1, None),
            Difference("C", "x", "y"),
            Difference("D", "x", "y"),
        ]
        assert FileClassifier().classify(diffs) is FileClassification.MIXED

    def test_minor_kind_below_threshold_ignored(self) -> None:
        diffs = [Difference(f"Field{i}", i, None) for i in range(9)]
        diffs.append(Difference("Status", "Active", "Closed"))
        assert FileClassifier().classify(diffs) is FileClassification.MISSING

    def test_only_absent_on_both_sides_is_uncategorized(self) -> None:
        diffs = [Difference("A", None, None), Difference("B", None, None)]
        assert FileClassifier().classify(diffs) is FileClassification.UNCATEGORIZED

    def test_threshold_from_config(self) -> None:
        diffs = [Difference(f"Field{i}", i, None) for i in range(7)]
        diffs += [Difference(f"Value{i}", "a", "b") for i in range(3)]
        assert FileClassifier().classify(diffs) is FileClassification.MIXED
        strict = FileClassifier(AnalysisConfig(significance_threshold=0.5))
        assert strict.classify(diffs) is FileClassification.MISSING


class TestPartition:
    def test_every_file_in_exactly_one_bucket(self) -> None:
        files = [
            ("f1", [Difference("A", 1, None)]),
            ("f2", [Difference("A", "x", "y")]),
            ("f3", [Difference("A", 1, None), Difference("B", "x", "y")]),
            ("f4", []),
        ]
        buckets = FileClassifier().partition(files)

        assert set(buckets) == set(FileClassification)
        placed = [file_id for members in buckets.values() for file_id in members]
        assert sorted(placed) == ["f1", "f2", "f3", "f4"]
        assert buckets[FileClassification.MISSING] == ["f1"]
        assert buckets[FileClassification.VALUE] == ["f2"]
        assert buckets[FileClassification.MIXED] == ["f3"]
        assert buckets[FileClassification.UNCATEGORIZED] == ["f4"]
