"""
Windowed density and substring frequency metrics.

- window_densities: for each size in (2, 4, 8, 16), the fraction of '1'
  in every non-overlapping window of that size (a trailing partial window
  is dropped).
- pattern_density: the same over windows of min(100, length) symbols.
- pattern_counts: occurrences of every overlapping substring of length
  2, 3 and 4.
- hierarchical_patterns: per size in (2, 4, 8, 16), the substring table
  with its unique-pattern count and three most common entries.
"""

from __future__ import annotations

from collections import Counter
from typing import Dict, Iterable, List, Tuple

import numpy as np

from bitprofile.models.metrics_models import PatternTable

WINDOW_SIZES = (2, 4, 8, 16)
PATTERN_LENGTHS = (2, 3, 4)
PATTERN_DENSITY_WINDOW = 100
MOST_COMMON_LIMIT = 3


def _window_fractions(clean: str, size: int) -> Tuple[float, ...]:
    count = len(clean) // size
    if count == 0:
        return ()
    bits = np.frombuffer(clean[: count * size].encode("ascii"), dtype=np.uint8) - ord("0")
    fractions = bits.reshape(count, size).sum(axis=1) / size
    return tuple(float(value) for value in fractions)


def window_densities(
    clean: str, sizes: Iterable[int] = WINDOW_SIZES
) -> Dict[int, Tuple[float, ...]]:
    """Fraction of '1' per non-overlapping window, for each window size."""
    return {size: _window_fractions(clean, size) for size in sizes}


def pattern_density(clean: str) -> Tuple[float, ...]:
    """Fraction of '1' per non-overlapping window of min(100, length) symbols."""
    if not clean:
        return ()
    return _window_fractions(clean, min(PATTERN_DENSITY_WINDOW, len(clean)))


def substring_counts(clean: str, size: int) -> Counter:
    """Overlapping occurrences of every substring of `size` symbols."""
    return Counter(clean[i : i + size] for i in range(len(clean) - size + 1))


def pattern_counts(
    clean: str, lengths: Iterable[int] = PATTERN_LENGTHS
) -> Dict[str, int]:
    """Occurrences of every substring of the given lengths (default 2-4)."""
    counts: Dict[str, int] = {}
    for size in lengths:
        counts.update(substring_counts(clean, size))
    return counts


def hierarchical_patterns(
    clean: str, sizes: Iterable[int] = WINDOW_SIZES
) -> Tuple[PatternTable, ...]:
    """Substring tables per window size with the most common entries."""
    tables: List[PatternTable] = []
    for size in sizes:
        counts = substring_counts(clean, size)
        tables.append(
            PatternTable(
                size=size,
                counts=dict(counts),
                unique_patterns=len(counts),
                most_common=tuple(counts.most_common(MOST_COMMON_LIMIT)),
            )
        )
    return tuple(tables)
