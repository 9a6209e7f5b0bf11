"""
Run-length statistics.

A run is a maximal block of one repeated symbol: "0011101" has runs
"00", "111", "0", "1" with lengths [2, 3, 1, 1].

Metrics:
    longest_run: max run length
    burstiness: population standard deviation of run lengths
    alternation_ratio: non-overlapping "01"/"10" pairs / (length / 2)
    run_ratio: positions inside a run of length >= 2 / length
    transition_rate: non-overlapping "01"/"10" pairs / length
    transition_balance: 1 - |0.5 - transition_rate|  (Y ratio)
"""

from __future__ import annotations

import re
from itertools import groupby
from typing import List

import numpy as np

_ALTERNATING_PAIR = re.compile(r"01|10")


def run_lengths(clean: str) -> List[int]:
    """Run-length encode `clean`, returning only the lengths."""
    return [len(list(group)) for _, group in groupby(clean)]


def trailing_run(clean: str) -> tuple:
    """Symbol and length of the last maximal run, ("", 0) when empty."""
    if not clean:
        return "", 0
    symbol = clean[-1]
    length = len(clean) - len(clean.rstrip(symbol))
    return symbol, length


def longest_run(clean: str) -> int:
    lengths = run_lengths(clean)
    return max(lengths) if lengths else 0


def calculate_burstiness(clean: str) -> float:
    """Population standard deviation of run lengths (0 for a single run)."""
    lengths = run_lengths(clean)
    if len(lengths) < 2:
        return 0.0
    return float(np.std(np.asarray(lengths, dtype=float)))


def alternation_ratio(clean: str) -> float:
    """Density of alternating pairs.

    Pairs are matched left to right without overlap, so "0101...01" of
    even length scores exactly 1.0 and "0110" scores 1.0 as well ("01",
    "10").
    """
    if not clean:
        return 0.0
    return transition_count(clean) / (len(clean) / 2)


def run_ratio(clean: str) -> float:
    """Fraction of positions that belong to a run of length >= 2."""
    if not clean:
        return 0.0
    in_runs = sum(length for length in run_lengths(clean) if length >= 2)
    return in_runs / len(clean)


def transition_count(clean: str) -> int:
    """Non-overlapping "01"/"10" pairs, matched left to right."""
    return len(_ALTERNATING_PAIR.findall(clean))


def transition_rate(clean: str) -> float:
    if not clean:
        return 0.0
    return transition_count(clean) / len(clean)


def transition_balance(clean: str) -> float:
    """Y ratio: 1.0 when transition_rate is exactly 0.5."""
    return 1 - abs(0.5 - transition_rate(clean))
