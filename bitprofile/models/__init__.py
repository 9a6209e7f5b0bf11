"""
Analysis value objects, classification, and prediction.
"""

from bitprofile.models.metrics_models import (
    AnalysisResult,
    BlockIntegrity,
    Classification,
    DegradedResult,
    Metrics,
    PatternTable,
    Periodicity,
    Prediction,
    Sequence,
)
from bitprofile.models.classifier import (
    calculate_confidence,
    clamp_confidence,
    classify,
    generate_insights,
)
from bitprofile.models.predictor import predict, predict_next_bits

__all__ = [
    "Sequence",
    "Metrics",
    "Periodicity",
    "PatternTable",
    "BlockIntegrity",
    "Classification",
    "Prediction",
    "AnalysisResult",
    "DegradedResult",
    "classify",
    "calculate_confidence",
    "clamp_confidence",
    "generate_insights",
    "predict",
    "predict_next_bits",
]
