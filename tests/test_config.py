"""Unit tests for AnalysisConfig and ClusteringConfig."""

from __future__ import annotations

import dataclasses

import pytest

from diff_patterns.config import AnalysisConfig, ClusteringConfig


class TestAnalysisConfig:
    """Defaults, validation and immutability of AnalysisConfig."""

    def test_defaults(self) -> None:
        config = AnalysisConfig()
        assert config.critical_properties == frozenset()
        assert config.document_sections == ()
        assert config.order_false_positive_suffixes == ()
        assert config.max_examples == 3
        assert config.order_numeric_tolerance == pytest.approx(10.0)
        assert config.significance_threshold == pytest.approx(0.2)

    def test_frozen(self) -> None:
        config = AnalysisConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.max_examples = 5  # type: ignore[misc]

    def test_max_examples_must_be_positive(self) -> None:
        with pytest.raises(ValueError, match="max_examples"):
            AnalysisConfig(max_examples=0)

    def test_negative_tolerance_rejected(self) -> None:
        with pytest.raises(ValueError, match="order_numeric_tolerance"):
            AnalysisConfig(order_numeric_tolerance=-1.0)

    @pytest.mark.parametrize("threshold", [-0.1, 1.0, 1.5])
    def test_significance_threshold_range(self, threshold: float) -> None:
        with pytest.raises(ValueError, match="significance_threshold"):
            AnalysisConfig(significance_threshold=threshold)

    def test_path_cache_size_must_be_positive(self) -> None:
        with pytest.raises(ValueError, match="path_cache_size"):
            AnalysisConfig(path_cache_size=0)

    def test_critical_name_case_insensitive(self) -> None:
        config = AnalysisConfig(critical_properties=frozenset({"Header"}))
        assert config.is_critical_name("header") is True
        assert config.is_critical_name("HEADER") is True
        assert config.is_critical_name("Footer") is False

    def test_hashable(self) -> None:
        first = AnalysisConfig(
            critical_properties=frozenset({"Header"}),
            document_sections={"Billing": frozenset({"Invoice"})},
        )
        second = AnalysisConfig(
            critical_properties=frozenset({"Header"}),
            document_sections=(("Billing", frozenset({"Invoice"})),),
        )
        assert first == second
        assert hash(first) == hash(second)
        assert hash(AnalysisConfig()) == hash(AnalysisConfig())
        assert len({first, second, AnalysisConfig()}) == 2

    def test_document_sections_mapping_keeps_order(self) -> None:
        config = AnalysisConfig(
            document_sections={"Shipping": ["Address"], "Billing": {"Invoice", "Payment"}}
        )
        assert config.document_sections == (
            ("Shipping", frozenset({"Address"})),
            ("Billing", frozenset({"Invoice", "Payment"})),
        )


class TestClusteringConfig:
    """Defaults and validation of ClusteringConfig."""

    def test_defaults(self) -> None:
        config = ClusteringConfig()
        assert config.similarity_threshold == pytest.approx(0.6)
        assert config.num_hashes == 64
        assert config.seed == 42

    @pytest.mark.parametrize("threshold", [-0.01, 1.01])
    def test_threshold_range(self, threshold: float) -> None:
        with pytest.raises(ValueError, match="similarity_threshold"):
            ClusteringConfig(similarity_threshold=threshold)

    def test_threshold_bounds_accepted(self) -> None:
        assert ClusteringConfig(similarity_threshold=0.0).similarity_threshold == 0.0
        assert ClusteringConfig(similarity_threshold=1.0).similarity_threshold == 1.0

    def test_num_hashes_must_be_positive(self) -> None:
        with pytest.raises(ValueError, match="num_hashes"):
            ClusteringConfig(num_hashes=0)

    def test_negative_seed_rejected(self) -> None:
        with pytest.raises(ValueError, match="seed"):
            ClusteringConfig(seed=-1)
