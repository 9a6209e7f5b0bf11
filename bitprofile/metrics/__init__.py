"""
Sequence metrics.

Pure functions over the clean ('0'/'1' only) view of a sequence, plus
compute_metrics() which assembles them into a Metrics value object.
"""

from bitprofile.metrics.cleaner import clean_sequence, decode_binary, encode_text, to_sequence
from bitprofile.metrics.correlation import (
    autocorrelation_lag1,
    calculate_symmetry,
    detect_periodicity,
)
from bitprofile.metrics.density import pattern_counts, pattern_density, window_densities
from bitprofile.metrics.engine import compute_metrics
from bitprofile.metrics.entropy import calculate_entropy
from bitprofile.metrics.runs import (
    alternation_ratio,
    calculate_burstiness,
    longest_run,
    run_lengths,
    run_ratio,
)

__all__ = [
    "clean_sequence",
    "to_sequence",
    "encode_text",
    "decode_binary",
    "calculate_entropy",
    "run_lengths",
    "longest_run",
    "calculate_burstiness",
    "alternation_ratio",
    "run_ratio",
    "autocorrelation_lag1",
    "detect_periodicity",
    "calculate_symmetry",
    "window_densities",
    "pattern_density",
    "pattern_counts",
    "compute_metrics",
]
