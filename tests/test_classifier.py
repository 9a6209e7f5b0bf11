"""Tests for pattern classification, confidence and insights."""

from dataclasses import replace

import pytest

from bitprofile.metrics.engine import compute_metrics
from bitprofile.models.classifier import (
    calculate_confidence,
    clamp_confidence,
    classify,
    complexity_level,
    generate_insights,
)
from bitprofile.models.metrics_models import Classification


def _classify(clean):
    return classify(clean, compute_metrics(clean))


class TestClassify:
    """Tests for classify function."""

    def test_all_zero(self):
        """Test '000000' is a zero sequence."""
        classification = _classify("000000")

        assert classification.kind == "zero"
        assert classification.is_zero
        assert classification.complexity_type is None
        assert classification.pattern_type == "zero"
        assert classification.level == 0.0

    def test_all_one(self):
        """Test '111111' is an infinite sequence."""
        classification = _classify("111111")

        assert classification.kind == "infinite"
        assert classification.is_infinite
        assert classification.pattern_type == "infinite"

    def test_alternating(self):
        """Test '10101010' is alternating with level entropy * (1 + 1/8)."""
        classification = _classify("10101010")

        assert classification.kind == "normal"
        assert classification.complexity_type == "alternating"
        assert classification.complexity_level == pytest.approx(1.125)

    def test_run_based(self):
        """Test long runs classify as run-based."""
        classification = _classify("000000111111")

        assert classification.complexity_type == "run-based"
        assert classification.complexity_level == pytest.approx(1.5)

    def test_mixed_when_below_both_thresholds(self):
        """Test the fallback type."""
        metrics = replace(compute_metrics("0110"), alternation_ratio=0.4, run_ratio=0.3)
        classification = classify("0110", metrics)

        assert classification.complexity_type == "mixed"

    def test_thresholds_are_strict(self):
        """Test a ratio exactly at the threshold does not qualify."""
        metrics = replace(compute_metrics("0110"), alternation_ratio=0.4, run_ratio=0.31)
        assert classify("0110", metrics).complexity_type == "run-based"

    def test_empty_rejected(self):
        with pytest.raises(ValueError):
            classify("", compute_metrics("0"))

    def test_classification_invariants(self):
        """Test kind and complexity type must agree."""
        with pytest.raises(ValueError):
            Classification(kind="normal")
        with pytest.raises(ValueError):
            Classification(kind="zero", complexity_type="mixed")

    def test_complexity_level_formula(self):
        metrics = compute_metrics("0011")
        assert complexity_level(metrics, 4) == pytest.approx(1.0 * (1 + 2 / 4))


class TestConfidence:
    """Tests for calculate_confidence and clamp_confidence."""

    def test_zero_sequence(self):
        """Test 0.4 * (1 - 0) + 0 + 0."""
        metrics = compute_metrics("000000")
        assert calculate_confidence(metrics, classify("000000", metrics)) == pytest.approx(0.4)

    def test_infinite_sequence(self):
        """Test autocorrelation of all-ones contributes 0.3."""
        metrics = compute_metrics("111111")
        assert calculate_confidence(metrics, classify("111111", metrics)) == pytest.approx(0.7)

    def test_alternating_sequence(self):
        metrics = compute_metrics("10101010")
        confidence = calculate_confidence(metrics, classify("10101010", metrics))
        assert confidence == pytest.approx(0.3 * 1.125)

    def test_not_clamped(self):
        """Test values above 1 are returned as computed."""
        metrics = replace(compute_metrics("0110"), entropy=0.9, autocorrelation_lag1=1.0)
        classification = Classification(
            kind="normal", complexity_type="mixed", complexity_level=3.0
        )

        confidence = calculate_confidence(metrics, classification)

        assert confidence == pytest.approx(0.04 + 0.9 + 0.3)
        assert confidence > 1.0
        assert clamp_confidence(confidence) == 1.0

    def test_clamp_lower_bound(self):
        assert clamp_confidence(-0.2) == 0.0
        assert clamp_confidence(0.5) == 0.5


class TestInsights:
    """Tests for generate_insights function."""

    def test_predictable_with_long_run(self):
        insights = generate_insights(compute_metrics("000000"))

        assert "Highly predictable pattern detected" in insights
        assert "Notable run lengths present (max: 6)" in insights

    def test_random(self):
        insights = generate_insights(compute_metrics("10101010"))
        assert insights == ["Highly random sequence observed"]

    def test_strong_correlation(self):
        insights = generate_insights(compute_metrics("1" * 10))
        assert "Strong sequential correlation detected" in insights
