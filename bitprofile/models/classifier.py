"""
Pattern classification and confidence scoring.

Rules:
    all '1'                    -> infinite
    all '0'                    -> zero
    alternation_ratio > 0.4    -> normal / alternating
    run_ratio > 0.3            -> normal / run-based
    otherwise                  -> normal / mixed

    complexity_level = entropy * (1 + longest_run / length)

Confidence:
    0.4 * (1 - entropy) + 0.3 * complexity_level + 0.3 * autocorrelation_lag1

The confidence blend is not bounded to [0, 1] (complexity_level alone can
reach 2) and is stored as computed. clamp_confidence() is for display.
"""

from __future__ import annotations

from typing import List

from bitprofile.models.metrics_models import Classification, Metrics

ALTERNATING_THRESHOLD = 0.4
RUN_BASED_THRESHOLD = 0.3

ENTROPY_WEIGHT = 0.4
COMPLEXITY_WEIGHT = 0.3
CORRELATION_WEIGHT = 0.3

# Insight thresholds
LOW_ENTROPY = 0.3
HIGH_ENTROPY = 0.8
NOTABLE_RUN = 5
STRONG_CORRELATION = 0.7


def complexity_level(metrics: Metrics, length: int) -> float:
    return metrics.entropy * (1 + metrics.longest_run / length)


def classify(clean: str, metrics: Metrics) -> Classification:
    """Map a clean sequence and its metrics to a Classification.

    Args:
        clean: Non-empty '0'/'1' sequence the metrics were computed from
        metrics: Output of compute_metrics(clean)
    """
    if not clean:
        raise ValueError("cannot classify an empty sequence")

    if "0" not in clean:
        return Classification(kind="infinite")
    if "1" not in clean:
        return Classification(kind="zero")

    if metrics.alternation_ratio > ALTERNATING_THRESHOLD:
        complexity_type = "alternating"
    elif metrics.run_ratio > RUN_BASED_THRESHOLD:
        complexity_type = "run-based"
    else:
        complexity_type = "mixed"

    return Classification(
        kind="normal",
        complexity_type=complexity_type,
        complexity_level=complexity_level(metrics, len(clean)),
    )


def calculate_confidence(metrics: Metrics, classification: Classification) -> float:
    """Raw (unclamped) confidence score for an analysis."""
    return (
        ENTROPY_WEIGHT * (1 - metrics.entropy)
        + COMPLEXITY_WEIGHT * classification.level
        + CORRELATION_WEIGHT * metrics.autocorrelation_lag1
    )


def clamp_confidence(confidence: float) -> float:
    """Bound a confidence score to [0, 1] for presentation."""
    return max(0.0, min(1.0, confidence))


def generate_insights(metrics: Metrics) -> List[str]:
    """Short human-readable observations about a profile."""
    insights = []
    if metrics.entropy < LOW_ENTROPY:
        insights.append("Highly predictable pattern detected")
    elif metrics.entropy > HIGH_ENTROPY:
        insights.append("Highly random sequence observed")

    if metrics.longest_run > NOTABLE_RUN:
        insights.append(f"Notable run lengths present (max: {metrics.longest_run})")

    if metrics.autocorrelation_lag1 > STRONG_CORRELATION:
        insights.append("Strong sequential correlation detected")

    return insights
