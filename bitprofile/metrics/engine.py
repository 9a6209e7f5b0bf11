"""
Metrics engine: the full statistical profile of a clean sequence.

Usage:
    from bitprofile.metrics.engine import compute_metrics

    metrics = compute_metrics("110011001100")
    metrics.periodicity.best_period  # 4
"""

from __future__ import annotations

import logging

from bitprofile.exceptions import EmptySequenceError
from bitprofile.metrics.correlation import (
    autocorrelation_lag1,
    calculate_symmetry,
    detect_periodicity,
)
from bitprofile.metrics.density import (
    hierarchical_patterns,
    pattern_counts,
    pattern_density,
    window_densities,
)
from bitprofile.metrics.entropy import calculate_entropy, ones_ratio
from bitprofile.metrics.integrity import validate_blocks
from bitprofile.metrics.runs import (
    alternation_ratio,
    calculate_burstiness,
    run_lengths,
    run_ratio,
    transition_balance,
    transition_rate,
)
from bitprofile.models.metrics_models import Metrics

logger = logging.getLogger(__name__)


def compute_metrics(clean: str) -> Metrics:
    """Compute every metric for a clean, non-empty sequence.

    Args:
        clean: Sequence containing only '0'/'1'

    Returns:
        Metrics value object

    Raises:
        EmptySequenceError: If `clean` is empty
    """
    if not clean:
        raise EmptySequenceError(clean)

    lengths = run_lengths(clean)
    metrics = Metrics(
        entropy=calculate_entropy(clean),
        longest_run=max(lengths),
        burstiness=calculate_burstiness(clean),
        alternation_ratio=alternation_ratio(clean),
        run_ratio=run_ratio(clean),
        autocorrelation_lag1=autocorrelation_lag1(clean),
        periodicity=detect_periodicity(clean),
        symmetry=calculate_symmetry(clean),
        window_densities=window_densities(clean),
        pattern_counts=pattern_counts(clean),
        run_lengths=tuple(lengths),
        ones_ratio=ones_ratio(clean),
        transition_rate=transition_rate(clean),
        transition_balance=transition_balance(clean),
        pattern_density=pattern_density(clean),
        hierarchical_patterns=hierarchical_patterns(clean),
        block_integrity=validate_blocks(clean),
    )

    logger.debug(
        f"Computed metrics: length={len(clean)}, entropy={metrics.entropy:.4f}, "
        f"longest_run={metrics.longest_run}, period={metrics.periodicity.best_period}"
    )
    return metrics
