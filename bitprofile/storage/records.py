"""
Pydantic models for persisted analysis records.

The on-disk format is a JSON array of ModelRecord objects with camelCase
keys:

    {
        "id": "9f1c...",
        "timestamp": 1760000000000,
        "patternType": "alternating",
        "metricsSnapshot": {"entropy": 1.0, "complexityLevel": 1.125, "burstiness": 0.0},
        "summary": "Pattern analyzed: alternating with entropy 1.0000",
        "mergedCount": 2
    }

`mergedCount` is omitted for records that were never merged.
"""

from __future__ import annotations

import math
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from bitprofile.exceptions import InvalidRecordError

PatternType = Literal["alternating", "run-based", "mixed", "zero", "infinite"]


def format_summary(pattern_type: str, entropy: float) -> str:
    return f"Pattern analyzed: {pattern_type} with entropy {entropy:.4f}"


class MetricsSnapshot(BaseModel):
    """Subset of metrics kept with every persisted record."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    entropy: float = Field(..., ge=0, description="Shannon entropy (bits)")
    complexity_level: float = Field(
        ..., ge=0, alias="complexityLevel", description="entropy * (1 + longestRun/length)"
    )
    burstiness: float = Field(..., ge=0, description="Stdev of run lengths")

    @field_validator("entropy", "complexity_level", "burstiness")
    @classmethod
    def validate_finite(cls, v: float) -> float:
        """Reject NaN and infinities."""
        if not math.isfinite(v):
            raise ValueError("Metric values must be finite")
        return v


class ModelRecord(BaseModel):
    """
    Persisted projection of one AnalysisResult.

    id is content-derived (see RecordStore.identity_hash); timestamp is
    epoch milliseconds.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    id: str = Field(..., min_length=1, description="Content-derived identity hash")
    timestamp: int = Field(..., ge=0, description="Creation time, epoch milliseconds")
    pattern_type: PatternType = Field(..., alias="patternType")
    metrics_snapshot: MetricsSnapshot = Field(..., alias="metricsSnapshot")
    summary: str = Field(..., description="Human-readable one-line summary")
    merged_count: Optional[int] = Field(
        None, ge=1, alias="mergedCount", description="Source records folded into this one"
    )

    @field_validator("timestamp", mode="before")
    @classmethod
    def reject_bool_timestamp(cls, v: Any) -> Any:
        """bool is an int subclass; a boolean timestamp is a corrupt entry."""
        if isinstance(v, bool):
            raise ValueError("timestamp must be an integer")
        return v

    @property
    def entropy(self) -> float:
        return self.metrics_snapshot.entropy

    @property
    def complexity_level(self) -> float:
        return self.metrics_snapshot.complexity_level

    @property
    def burstiness(self) -> float:
        return self.metrics_snapshot.burstiness

    def to_json_dict(self) -> dict:
        """Convert to the camelCase dictionary written to disk."""
        return self.model_dump(by_alias=True, exclude_none=True)


def parse_record(entry: Any) -> ModelRecord:
    """Validate one raw JSON entry.

    Raises:
        InvalidRecordError: If the entry is not a valid ModelRecord
    """
    if not isinstance(entry, dict):
        raise InvalidRecordError(f"expected object, got {type(entry).__name__}", entry)
    try:
        return ModelRecord.model_validate(entry)
    except ValidationError as e:
        raise InvalidRecordError(
            "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
            ),
            entry,
        ) from e
