"""
Heuristic next-symbol prediction.

Statistical strategy (the primary prediction), by complexity type:

- alternating: continue the alternation, starting with the flip of the
  last symbol ("...10" -> "1010...").
- run-based: look at the trailing run; if it is at least half as long as
  the longest run it is "due" to end, so predict the flipped symbol,
  otherwise keep repeating the run symbol.
- mixed: find every earlier occurrence of the trailing 8-symbol window
  and take the most frequent continuation that followed it (first
  encountered wins ties). Without history, sample each symbol
  independently with P('1') = fraction of '1' in the sequence.

Zero and infinite sequences simply continue their only symbol.

Two secondary strategies are also provided: a pattern-based rule and a
composite that picks between the two by entropy.
"""

from __future__ import annotations

import logging
import random
from collections import Counter
from typing import Optional

from bitprofile.metrics.entropy import ones_ratio
from bitprofile.metrics.runs import trailing_run
from bitprofile.models.metrics_models import Classification, Metrics, Prediction

logger = logging.getLogger(__name__)

DEFAULT_PREDICTION_LENGTH = 8
HISTORY_WINDOW = 8
PATTERN_TAIL = 16
PATTERN_RUN_THRESHOLD = 3
COMPOSITE_ENTROPY_THRESHOLD = 0.7


def _flip(symbol: str) -> str:
    return "1" if symbol == "0" else "0"


def _sample(probability_one: float, length: int, rng: random.Random) -> str:
    return "".join("1" if rng.random() < probability_one else "0" for _ in range(length))


def _continue_alternation(last: str, length: int) -> str:
    nxt = _flip(last)
    return "".join(nxt if i % 2 == 0 else last for i in range(length))


def _most_common_continuation(clean: str, length: int) -> Optional[str]:
    window = clean[-HISTORY_WINDOW:]
    continuations = Counter()
    for i in range(len(clean) - HISTORY_WINDOW):
        if clean[i : i + HISTORY_WINDOW] == window:
            follow = clean[i + HISTORY_WINDOW : i + HISTORY_WINDOW + length]
            if len(follow) == length:
                continuations[follow] += 1
    if not continuations:
        return None
    # most_common keeps first-encountered order among equal counts
    return continuations.most_common(1)[0][0]


def predict_next_bits(
    clean: str,
    classification: Classification,
    metrics: Metrics,
    length: int = DEFAULT_PREDICTION_LENGTH,
    rng: Optional[random.Random] = None,
) -> str:
    """Predict the next `length` symbols of `clean`.

    Args:
        clean: Non-empty '0'/'1' sequence
        classification: Classification of `clean`
        metrics: Metrics of `clean`
        length: Number of symbols to predict
        rng: Random source for the probabilistic fallback

    Returns:
        A string of exactly `length` symbols
    """
    if length <= 0:
        return ""
    if not clean:
        raise ValueError("cannot predict from an empty sequence")

    rng = rng or random.Random()
    last = clean[-1]

    if classification.kind != "normal":
        return last * length

    if classification.complexity_type == "alternating":
        return _continue_alternation(last, length)

    if classification.complexity_type == "run-based":
        symbol, run_length = trailing_run(clean)
        if run_length >= metrics.longest_run / 2:
            return _flip(symbol) * length
        return symbol * length

    continuation = _most_common_continuation(clean, length)
    if continuation is not None:
        return continuation

    logger.debug("No matching history for trailing window, sampling by symbol frequency")
    return _sample(ones_ratio(clean), length, rng)


def predict_pattern_based(
    clean: str,
    classification: Classification,
    metrics: Metrics,
    length: int = DEFAULT_PREDICTION_LENGTH,
    rng: Optional[random.Random] = None,
) -> str:
    """Simpler rule-of-thumb prediction from the last 16 symbols."""
    if length <= 0:
        return ""
    if not clean:
        raise ValueError("cannot predict from an empty sequence")

    rng = rng or random.Random()
    tail = clean[-PATTERN_TAIL:]

    if classification.complexity_type == "alternating":
        return _flip(tail[-1]) * length
    if classification.complexity_type == "run-based":
        symbol, run_length = trailing_run(tail)
        if run_length >= PATTERN_RUN_THRESHOLD:
            return _flip(symbol) * length
        return symbol * length
    return _sample(metrics.ones_ratio, length, rng)


def predict_composite(statistical: str, pattern_based: str, metrics: Metrics) -> str:
    """Use the statistical prediction for high-entropy sequences, the pattern one otherwise."""
    if metrics.entropy > COMPOSITE_ENTROPY_THRESHOLD:
        return statistical
    return pattern_based


def predict(
    clean: str,
    classification: Classification,
    metrics: Metrics,
    length: int = DEFAULT_PREDICTION_LENGTH,
    rng: Optional[random.Random] = None,
) -> Prediction:
    """Run every strategy and bundle the results."""
    rng = rng or random.Random()
    statistical = predict_next_bits(clean, classification, metrics, length, rng)
    pattern_based = predict_pattern_based(clean, classification, metrics, length, rng)
    return Prediction(
        statistical=statistical,
        length=length,
        pattern_based=pattern_based,
        composite=predict_composite(statistical, pattern_based, metrics),
    )
