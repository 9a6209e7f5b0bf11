"""
Sequence analysis entry point.

Pipeline:
    raw -> clean -> metrics -> classification -> prediction -> AnalysisResult

Usage:
    from bitprofile.analyzer import SequenceAnalyzer

    analyzer = SequenceAnalyzer()
    result = analyzer.analyze("1010 1010")
    result.pattern_type          # "alternating"
    result.prediction.statistical
"""

from __future__ import annotations

import logging
import random
from typing import Optional, Tuple, Union

from bitprofile.config.settings import BitProfileConfig
from bitprofile.exceptions import EmptySequenceError
from bitprofile.metrics.cleaner import clean_sequence, to_sequence
from bitprofile.metrics.engine import compute_metrics
from bitprofile.models.classifier import calculate_confidence, classify, generate_insights
from bitprofile.models.metrics_models import AnalysisResult, DegradedResult
from bitprofile.models.predictor import DEFAULT_PREDICTION_LENGTH, predict
from bitprofile.storage.record_store import RecordStore
from bitprofile.storage.records import ModelRecord

logger = logging.getLogger(__name__)

SAMPLE_SIZE = 50


class SequenceAnalyzer:
    """
    Stateless analysis service with an optional record store.

    The analysis itself is synchronous and pure apart from the random
    fallback of the mixed predictor; pass a seeded random.Random for
    reproducible predictions.
    """

    def __init__(
        self,
        prediction_length: int = DEFAULT_PREDICTION_LENGTH,
        rng: Optional[random.Random] = None,
        store: Optional[RecordStore] = None,
    ):
        if prediction_length < 0:
            raise ValueError(f"prediction_length must be >= 0, got {prediction_length}")
        self.prediction_length = prediction_length
        self.rng = rng or random.Random()
        self.store = store

    @classmethod
    def from_config(
        cls, config: BitProfileConfig, store: Optional[RecordStore] = None, **kwargs
    ) -> "SequenceAnalyzer":
        return cls(prediction_length=config.prediction_length, store=store, **kwargs)

    def analyze(self, raw: str, predict_next: bool = True) -> AnalysisResult:
        """
        Analyze a raw sequence.

        Args:
            raw: Input text; everything other than '0'/'1' is ignored
            predict_next: Also run the next-symbol predictors

        Returns:
            AnalysisResult

        Raises:
            EmptySequenceError: If `raw` contains no '0'/'1' symbols
        """
        sequence = to_sequence(raw)
        metrics = compute_metrics(sequence.clean)
        classification = classify(sequence.clean, metrics)

        prediction = None
        if predict_next:
            prediction = predict(
                sequence.clean,
                classification,
                metrics,
                length=self.prediction_length,
                rng=self.rng,
            )

        result = AnalysisResult(
            sequence=sequence,
            metrics=metrics,
            classification=classification,
            confidence=calculate_confidence(metrics, classification),
            prediction=prediction,
            insights=tuple(generate_insights(metrics)),
        )

        logger.info(
            f"Pattern analyzed: {result.pattern_type} with entropy {metrics.entropy:.4f}",
            extra={
                "extra_fields": {
                    "length": sequence.length,
                    "pattern_type": result.pattern_type,
                    "confidence": round(result.confidence, 4),
                }
            },
        )
        return result

    def analyze_safely(
        self, raw: str, predict_next: bool = True
    ) -> Union[AnalysisResult, DegradedResult]:
        """
        Like analyze(), but unexpected failures yield a DegradedResult.

        EmptySequenceError is still raised: it is a caller error, not an
        analysis failure.
        """
        try:
            return self.analyze(raw, predict_next=predict_next)
        except EmptySequenceError:
            raise
        except Exception as e:
            clean = clean_sequence(raw) if isinstance(raw, str) else ""
            logger.error(f"Analysis failed, returning degraded result: {e}", exc_info=True)
            return DegradedResult(
                length=len(clean),
                sample=clean[:SAMPLE_SIZE],
                error=str(e) or type(e).__name__,
            )

    async def analyze_and_save(
        self, raw: str, predict_next: bool = True
    ) -> Tuple[AnalysisResult, ModelRecord]:
        """
        Analyze and persist through the configured store.

        Raises:
            RuntimeError: If the analyzer has no store
            EmptySequenceError: If `raw` contains no '0'/'1' symbols
            PersistenceIOError: If the store cannot be written
        """
        if self.store is None:
            raise RuntimeError("SequenceAnalyzer was created without a RecordStore")
        result = self.analyze(raw, predict_next=predict_next)
        record = await self.store.save(result)
        return result, record
