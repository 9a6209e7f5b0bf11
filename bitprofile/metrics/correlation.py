"""
Self-similarity metrics: lag-1 autocorrelation, periodicity, symmetry.

Autocorrelation is uncentered:

    r1 = sum(x[i] * x[i-1] for i in 1..n-1) / (n - 1)

with '0' -> 0 and '1' -> 1. It is the fraction of adjacent pairs that are
both '1', not a Pearson coefficient.
"""

from __future__ import annotations

import numpy as np

from bitprofile.models.metrics_models import Periodicity


def _as_array(clean: str) -> np.ndarray:
    return np.frombuffer(clean.encode("ascii"), dtype=np.uint8) - ord("0")


def autocorrelation_lag1(clean: str) -> float:
    """Uncentered lag-1 correlation; 0.0 for sequences shorter than 2."""
    n = len(clean)
    if n < 2:
        return 0.0
    values = _as_array(clean).astype(np.int64)
    return float(np.dot(values[1:], values[:-1])) / (n - 1)


def detect_periodicity(clean: str) -> Periodicity:
    """Find the shift p (1 <= p <= n // 2) under which the sequence best agrees with itself.

    score(p) = #{i < n - p : clean[i] == clean[i + p]} / (n - p)

    Ties keep the smallest p. Sequences shorter than 2 have no candidate
    period and report Periodicity(0, 0.0).
    """
    n = len(clean)
    if n < 2:
        return Periodicity(best_period=0, match_score=0.0)

    best_period, best_score = 0, -1.0
    values = _as_array(clean)
    for period in range(1, n // 2 + 1):
        matches = int(np.count_nonzero(values[:-period] == values[period:]))
        score = matches / (n - period)
        if score > best_score:
            best_period, best_score = period, score

    return Periodicity(best_period=best_period, match_score=best_score)


def calculate_symmetry(clean: str) -> float:
    """Palindrome similarity of the two halves (middle symbol ignored for odd n)."""
    half = len(clean) // 2
    if half == 0:
        return 1.0
    first = clean[:half]
    second = clean[-half:][::-1]
    agree = sum(1 for a, b in zip(first, second) if a == b)
    return agree / half
