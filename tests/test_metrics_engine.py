"""Tests for the aggregated metrics engine."""

import pytest

from bitprofile.exceptions import EmptySequenceError
from bitprofile.metrics.engine import compute_metrics
from bitprofile.models.metrics_models import summarize_result


class TestComputeMetrics:
    """Tests for compute_metrics function."""

    def test_empty_raises(self):
        """Test the engine refuses an empty clean sequence."""
        with pytest.raises(EmptySequenceError):
            compute_metrics("")

    def test_constant_sequence(self):
        """Test a constant sequence has zero entropy and one run."""
        metrics = compute_metrics("000000")

        assert metrics.entropy == 0.0
        assert metrics.longest_run == 6
        assert metrics.burstiness == 0.0
        assert metrics.run_lengths == (6,)

    def test_alternating_sequence(self):
        """Test '0101...01' has alternation ratio 1.0."""
        metrics = compute_metrics("01" * 10)

        assert metrics.alternation_ratio == 1.0
        assert metrics.entropy == pytest.approx(1.0)
        assert metrics.run_ratio == 0.0

    def test_single_symbol(self):
        """Test n = 1 edge values."""
        metrics = compute_metrics("1")

        assert metrics.autocorrelation_lag1 == 0.0
        assert metrics.symmetry == 1.0
        assert metrics.periodicity.best_period == 0
        assert metrics.window_densities[2] == ()

    def test_supplementary_fields(self):
        """Test ratios and integrity are populated."""
        metrics = compute_metrics("11001010")

        assert metrics.ones_ratio == 0.5
        assert metrics.block_integrity.valid
        assert metrics.pattern_density == (0.5,)
        assert len(metrics.hierarchical_patterns) == 4

    def test_mappings_read_only(self):
        """Test window densities and pattern counts cannot be mutated."""
        metrics = compute_metrics("0101")

        with pytest.raises(TypeError):
            metrics.pattern_counts["11"] = 5
        with pytest.raises(TypeError):
            metrics.window_densities[2] = (1.0,)
        with pytest.raises(TypeError):
            metrics.hierarchical_patterns[0].counts["00"] = 1
        assert "11" not in metrics.to_dict()["patternCounts"]

    def test_to_dict_camel_case(self):
        """Test serialization keys."""
        data = compute_metrics("110011001100").to_dict()

        assert data["periodicity"] == {"bestPeriod": 4, "matchScore": 1.0}
        assert data["longestRun"] == 2
        assert set(data["windowDensities"]) == {"2", "4", "8", "16"}
        assert data["blockIntegrity"]["blockCount"] == 2

    def test_deterministic(self):
        """Test repeated calls give equal results."""
        assert compute_metrics("0110100110") == compute_metrics("0110100110")


class TestSummarizeResult:
    """Tests for the textual summary."""

    def test_summary_lines(self, analyzer):
        result = analyzer.analyze("110011001100")
        lines = summarize_result(result)

        assert lines[0] == "Length: 12"
        assert "Best period: 4 (score 1.0000)" in lines
        assert lines[-1].startswith("Next 8 symbols: ")
