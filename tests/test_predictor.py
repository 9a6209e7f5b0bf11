"""Tests for next-symbol prediction."""

import random

import pytest

from bitprofile.metrics.engine import compute_metrics
from bitprofile.models.classifier import classify
from bitprofile.models.metrics_models import Classification
from bitprofile.models.predictor import (
    predict,
    predict_composite,
    predict_next_bits,
    predict_pattern_based,
)

MIXED = Classification(kind="normal", complexity_type="mixed", complexity_level=1.0)


def _predict(clean, length=8, rng=None):
    metrics = compute_metrics(clean)
    return predict_next_bits(clean, classify(clean, metrics), metrics, length, rng)


class TestStatisticalPrediction:
    """Tests for predict_next_bits by complexity type."""

    def test_alternating_continues_alternation(self):
        """Test '10101010' continues with '1010'."""
        assert _predict("10101010", length=4) == "1010"

    def test_alternating_from_one(self):
        assert _predict("01010101", length=3) == "010"

    def test_zero_sequence_repeats_zero(self):
        assert _predict("000000", length=4) == "0000"

    def test_infinite_sequence_repeats_one(self):
        assert _predict("111111", length=4) == "1111"

    def test_run_based_long_trailing_run_flips(self):
        """Test a trailing run at least half the longest run is due to end."""
        assert _predict("000000111", length=4) == "0000"

    def test_run_based_short_trailing_run_repeats(self):
        """Test a short trailing run keeps going."""
        assert _predict("0000001", length=4) == "1111"

    def test_mixed_most_common_continuation(self):
        """Test the continuation after the earlier occurrence of the trailing window."""
        window = "01101001"
        clean = window + "11" + window
        metrics = compute_metrics(clean)

        assert predict_next_bits(clean, MIXED, metrics, length=2) == "11"
        assert predict_next_bits(clean, MIXED, metrics, length=8) == "11011010"

    def test_mixed_incomplete_continuation_ignored(self):
        """Test continuations running past the end are not used."""
        window = "01101001"
        clean = window + "11" + window
        metrics = compute_metrics(clean)

        # clean[8:20] is only 10 symbols long, so sampling is used
        rng_a, rng_b = random.Random(7), random.Random(7)
        first = predict_next_bits(clean, MIXED, metrics, length=12, rng=rng_a)
        second = predict_next_bits(clean, MIXED, metrics, length=12, rng=rng_b)

        assert first == second
        assert len(first) == 12

    def test_mixed_without_history_samples(self):
        """Test sampling is deterministic with a seeded rng."""
        clean = "0110100111"
        metrics = compute_metrics(clean)

        first = predict_next_bits(clean, MIXED, metrics, 16, random.Random(3))
        second = predict_next_bits(clean, MIXED, metrics, 16, random.Random(3))

        assert first == second
        assert set(first) <= {"0", "1"}

    def test_mixed_sampling_follows_frequency(self):
        """Test P('1') equals the ones fraction (degenerate case 1.0)."""
        clean = "1" * 9
        metrics = compute_metrics(clean)
        assert predict_next_bits(clean, MIXED, metrics, 5, random.Random(0)) == "11111"

    @pytest.mark.parametrize("length", [1, 3, 8, 13])
    @pytest.mark.parametrize(
        "clean", ["0", "1", "10101010", "000000111", "0110100111", "110011001100"]
    )
    def test_always_exact_length(self, clean, length):
        """Test the prediction has exactly the requested length."""
        prediction = _predict(clean, length=length, rng=random.Random(1))

        assert len(prediction) == length
        assert set(prediction) <= {"0", "1"}

    def test_zero_length(self):
        assert _predict("0101", length=0) == ""

    def test_empty_sequence_rejected(self):
        with pytest.raises(ValueError):
            predict_next_bits("", MIXED, compute_metrics("0"), 4)


class TestSecondaryPredictors:
    """Tests for the pattern-based and composite predictors."""

    def test_pattern_based_alternating_flips(self):
        clean = "10101010"
        metrics = compute_metrics(clean)
        assert predict_pattern_based(clean, classify(clean, metrics), metrics, 4) == "1111"

    def test_pattern_based_run_threshold(self):
        """Test a trailing run of 3 or more flips."""
        clean = "000000111"
        metrics = compute_metrics(clean)
        classification = classify(clean, metrics)

        assert predict_pattern_based(clean, classification, metrics, 2) == "00"

    def test_composite_uses_statistical_for_high_entropy(self):
        metrics = compute_metrics("10101010")
        assert predict_composite("1010", "1111", metrics) == "1010"

    def test_composite_uses_pattern_for_low_entropy(self):
        metrics = compute_metrics("00000001")
        assert predict_composite("1010", "1111", metrics) == "1111"

    def test_predict_bundles_strategies(self):
        clean = "10101010"
        metrics = compute_metrics(clean)
        prediction = predict(clean, classify(clean, metrics), metrics, 4, random.Random(0))

        assert prediction.statistical == "1010"
        assert prediction.pattern_based == "1111"
        assert prediction.composite == "1010"
        assert prediction.length == 4
        assert prediction.to_dict()["patternBased"] == "1111"
