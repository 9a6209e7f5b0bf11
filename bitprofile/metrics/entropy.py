"""
Shannon symbol-frequency entropy.

Formula:
    p(s) = count(s) / length
    H = -sum(p(s) * log2(p(s)))

For a binary alphabet H is 0 for a constant sequence and 1 for an equal
mix of '0' and '1'. This is a frequency estimate, not a measure of
cryptographic randomness: "0101...01" has entropy 1.
"""

from __future__ import annotations

import math
from collections import Counter


def symbol_frequencies(clean: str) -> dict:
    """Probability of each symbol present in `clean`."""
    if not clean:
        return {}
    length = len(clean)
    return {symbol: count / length for symbol, count in Counter(clean).items()}


def calculate_entropy(clean: str) -> float:
    """Calculate Shannon entropy (log base 2) of the symbol distribution.

    Args:
        clean: Non-empty sequence of '0'/'1'

    Returns:
        Entropy in bits; exactly 0.0 when only one symbol occurs
    """
    entropy = 0.0
    for probability in symbol_frequencies(clean).values():
        entropy -= probability * math.log2(probability)
    # -1 * log2(1) is -0.0
    return 0.0 if entropy == 0 else entropy


def ones_ratio(clean: str) -> float:
    """Fraction of '1' symbols (X ratio)."""
    if not clean:
        return 0.0
    return clean.count("1") / len(clean)
