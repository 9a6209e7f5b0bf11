"""
bitprofile - statistical profiling of binary symbol sequences.

Computes entropy, run and burst statistics, autocorrelation, periodicity
and window densities for a '0'/'1' sequence, classifies its pattern,
predicts the next symbols, and keeps a bounded, deduplicated store of
results on disk.
"""

from bitprofile.analyzer import SequenceAnalyzer
from bitprofile.exceptions import (
    BackupNotFoundError,
    BitProfileError,
    EmptySequenceError,
    InvalidRecordError,
    MalformedStoreError,
    PersistenceIOError,
)
from bitprofile.models.metrics_models import AnalysisResult, DegradedResult
from bitprofile.storage.record_store import ConsolidationReport, RecordStore
from bitprofile.storage.scheduler import ConsolidationScheduler

__version__ = "0.1.0"

__all__ = [
    "SequenceAnalyzer",
    "AnalysisResult",
    "DegradedResult",
    "RecordStore",
    "ConsolidationReport",
    "ConsolidationScheduler",
    "BitProfileError",
    "EmptySequenceError",
    "MalformedStoreError",
    "InvalidRecordError",
    "PersistenceIOError",
    "BackupNotFoundError",
]
