"""Tests for autocorrelation, periodicity and symmetry."""

import pytest

from bitprofile.metrics.correlation import (
    autocorrelation_lag1,
    calculate_symmetry,
    detect_periodicity,
)


class TestAutocorrelation:
    """Tests for autocorrelation_lag1 function."""

    def test_single_symbol_zero(self):
        """Test n = 1 yields 0.0."""
        assert autocorrelation_lag1("1") == 0.0

    def test_all_ones(self):
        """Test every adjacent pair is (1, 1)."""
        assert autocorrelation_lag1("1111") == 1.0

    def test_uncentered(self):
        """Test the value is the fraction of (1, 1) pairs, not a Pearson coefficient."""
        assert autocorrelation_lag1("0000") == 0.0
        assert autocorrelation_lag1("1010") == 0.0
        assert autocorrelation_lag1("0110") == pytest.approx(1 / 3)


class TestDetectPeriodicity:
    """Tests for detect_periodicity function."""

    def test_period_four(self):
        """Test '110011001100' repeats every 4 symbols."""
        periodicity = detect_periodicity("110011001100")

        assert periodicity.best_period == 4
        assert periodicity.match_score == 1.0

    def test_short_sequence(self):
        """Test n < 2 has no period."""
        periodicity = detect_periodicity("1")

        assert periodicity.best_period == 0
        assert periodicity.match_score == 0.0

    def test_ties_keep_smallest_period(self):
        """Test a constant sequence reports period 1."""
        assert detect_periodicity("000000").best_period == 1

    def test_two_symbols_without_match(self):
        """Test the only candidate is reported even with score 0."""
        periodicity = detect_periodicity("01")

        assert periodicity.best_period == 1
        assert periodicity.match_score == 0.0

    def test_alternating_period_two(self):
        assert detect_periodicity("10101010").best_period == 2


class TestSymmetry:
    """Tests for calculate_symmetry function."""

    def test_single_symbol(self):
        assert calculate_symmetry("1") == 1.0

    def test_palindrome(self):
        assert calculate_symmetry("0110") == 1.0

    def test_mirror_opposite(self):
        assert calculate_symmetry("0011") == 0.0

    def test_odd_length_ignores_middle(self):
        """Test the middle symbol does not take part."""
        assert calculate_symmetry("10101") == 1.0
        assert calculate_symmetry("10001") == 1.0

    def test_partial(self):
        assert calculate_symmetry("0111") == 0.5
