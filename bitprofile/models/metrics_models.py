"""
Value objects produced by the analysis pipeline.

These dataclasses are frozen: an AnalysisResult is created once per
analysis call and nothing downstream (presentation, record store) mutates
it. Each exposes `to_dict()` for JSON serialization.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import List, Literal, Mapping, Optional, Tuple

SequenceKind = Literal["zero", "infinite", "normal"]
ComplexityType = Literal["alternating", "run-based", "mixed"]


@dataclass(frozen=True)
class Sequence:
    """
    A symbol sequence as given and as cleaned.

    Attributes:
        raw: Input exactly as supplied by the caller
        clean: Only the '0'/'1' symbols of `raw`, in original order
    """

    raw: str
    clean: str

    def __post_init__(self):
        if any(ch not in "01" for ch in self.clean):
            raise ValueError("clean view may only contain '0' and '1'")

    @property
    def length(self) -> int:
        return len(self.clean)

    def sample(self, size: int = 50) -> str:
        return self.clean[:size]


@dataclass(frozen=True)
class Periodicity:
    """Best integer shift under which the sequence agrees with itself."""

    best_period: int
    match_score: float

    def to_dict(self) -> dict:
        return {"bestPeriod": self.best_period, "matchScore": self.match_score}


@dataclass(frozen=True)
class PatternTable:
    """Substring frequency table for one window size."""

    size: int
    counts: Mapping[str, int]
    unique_patterns: int
    most_common: Tuple[Tuple[str, int], ...]

    def __post_init__(self):
        object.__setattr__(self, "counts", MappingProxyType(dict(self.counts)))

    def to_dict(self) -> dict:
        return {
            "size": self.size,
            "patterns": dict(self.counts),
            "uniquePatterns": self.unique_patterns,
            "mostCommon": [list(item) for item in self.most_common],
        }


@dataclass(frozen=True)
class BlockIntegrity:
    """8-symbol block structure check plus checksums of the clean text."""

    valid: bool
    errors: int
    block_count: int
    checksum: int
    crc32: int

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "errors": self.errors,
            "blockCount": self.block_count,
            "checksum": self.checksum,
            "crc32": self.crc32,
        }


@dataclass(frozen=True)
class Metrics:
    """
    Statistical profile of a clean sequence.

    Attributes:
        entropy: Shannon symbol-frequency entropy in bits (0..1)
        longest_run: Length of the longest maximal run
        burstiness: Population standard deviation of run lengths
        alternation_ratio: Non-overlapping "01"/"10" pairs / (length / 2)
        run_ratio: Fraction of positions inside a run of length >= 2
        autocorrelation_lag1: Uncentered lag-1 correlation
        periodicity: Best period and its match score
        symmetry: Palindrome similarity (0..1)
        window_densities: Window size -> fraction of '1' per window
        pattern_counts: Substring (length 2-4) -> occurrence count
    """

    entropy: float
    longest_run: int
    burstiness: float
    alternation_ratio: float
    run_ratio: float
    autocorrelation_lag1: float
    periodicity: Periodicity
    symmetry: float
    window_densities: Mapping[int, Tuple[float, ...]]
    pattern_counts: Mapping[str, int]
    run_lengths: Tuple[int, ...] = ()
    ones_ratio: float = 0.0
    transition_rate: float = 0.0
    transition_balance: float = 0.0
    pattern_density: Tuple[float, ...] = ()
    hierarchical_patterns: Tuple[PatternTable, ...] = ()
    block_integrity: Optional[BlockIntegrity] = None

    def __post_init__(self):
        # read-only views over copies of the mappings
        object.__setattr__(self, "window_densities", MappingProxyType(dict(self.window_densities)))
        object.__setattr__(self, "pattern_counts", MappingProxyType(dict(self.pattern_counts)))

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "entropy": self.entropy,
            "longestRun": self.longest_run,
            "burstiness": self.burstiness,
            "alternationRatio": self.alternation_ratio,
            "runRatio": self.run_ratio,
            "autocorrelationLag1": self.autocorrelation_lag1,
            "periodicity": self.periodicity.to_dict(),
            "symmetry": self.symmetry,
            "windowDensities": {
                str(size): list(values) for size, values in self.window_densities.items()
            },
            "patternCounts": dict(self.pattern_counts),
            "runLengths": list(self.run_lengths),
            "onesRatio": self.ones_ratio,
            "transitionRate": self.transition_rate,
            "transitionBalance": self.transition_balance,
            "patternDensity": list(self.pattern_density),
            "hierarchicalPatterns": [t.to_dict() for t in self.hierarchical_patterns],
            "blockIntegrity": self.block_integrity.to_dict()
            if self.block_integrity
            else None,
        }


@dataclass(frozen=True)
class Classification:
    """
    Coarse pattern classification.

    complexity_type and complexity_level are only set for normal sequences.
    """

    kind: SequenceKind
    complexity_type: Optional[ComplexityType] = None
    complexity_level: Optional[float] = None

    def __post_init__(self):
        if self.kind == "normal" and self.complexity_type is None:
            raise ValueError("normal classification requires a complexity_type")
        if self.kind != "normal" and self.complexity_type is not None:
            raise ValueError(f"{self.kind} classification has no complexity_type")

    @property
    def is_zero(self) -> bool:
        return self.kind == "zero"

    @property
    def is_infinite(self) -> bool:
        return self.kind == "infinite"

    @property
    def pattern_type(self) -> str:
        """Complexity type for normal sequences, otherwise the kind itself."""
        return self.complexity_type or self.kind

    @property
    def level(self) -> float:
        return self.complexity_level or 0.0

    def to_dict(self) -> dict:
        return {
            "kind": self.kind,
            "complexityType": self.complexity_type,
            "complexityLevel": self.complexity_level,
        }


@dataclass(frozen=True)
class Prediction:
    """Next-symbol predictions from the available strategies."""

    statistical: str
    length: int
    pattern_based: Optional[str] = None
    composite: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "statistical": self.statistical,
            "patternBased": self.pattern_based,
            "composite": self.composite,
            "length": self.length,
        }


@dataclass(frozen=True)
class AnalysisResult:
    """
    Outcome of one analysis call.

    confidence is the raw 0.4/0.3/0.3 blend and may fall outside [0, 1];
    clamp it at the presentation boundary with clamp_confidence().
    """

    sequence: Sequence
    metrics: Metrics
    classification: Classification
    confidence: float
    prediction: Optional[Prediction] = None
    insights: Tuple[str, ...] = ()
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def pattern_type(self) -> str:
        return self.classification.pattern_type

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "length": self.sequence.length,
            "sample": self.sequence.sample(),
            "metrics": self.metrics.to_dict(),
            "classification": self.classification.to_dict(),
            "confidence": self.confidence,
            "prediction": self.prediction.to_dict() if self.prediction else None,
            "insights": list(self.insights),
            "createdAt": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class DegradedResult:
    """
    Partial result returned when an analysis fails part-way.

    Carries just enough for a caller to report what was attempted.
    """

    length: int
    sample: str
    error: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        return {
            "length": self.length,
            "sample": self.sample,
            "error": self.error,
            "createdAt": self.created_at.isoformat(),
        }


def summarize_result(result: AnalysisResult) -> List[str]:
    """One-line-per-field textual summary used by reporting collaborators."""
    metrics = result.metrics
    lines = [
        f"Length: {result.sequence.length}",
        f"Pattern type: {result.pattern_type}",
        f"Entropy: {metrics.entropy:.4f}",
        f"Longest run: {metrics.longest_run}",
        f"Burstiness: {metrics.burstiness:.4f}",
        f"Best period: {metrics.periodicity.best_period} "
        f"(score {metrics.periodicity.match_score:.4f})",
        f"Confidence: {result.confidence:.4f}",
    ]
    if result.prediction:
        lines.append(f"Next {result.prediction.length} symbols: {result.prediction.statistical}")
    return lines
