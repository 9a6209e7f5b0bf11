"""
Persistence layer: record schema, record store, background consolidation.
"""

from bitprofile.storage.records import MetricsSnapshot, ModelRecord, parse_record
from bitprofile.storage.record_store import ConsolidationReport, RecordStore, merge_group
from bitprofile.storage.scheduler import ConsolidationScheduler, SchedulerStats

__all__ = [
    "MetricsSnapshot",
    "ModelRecord",
    "parse_record",
    "RecordStore",
    "ConsolidationReport",
    "merge_group",
    "ConsolidationScheduler",
    "SchedulerStats",
]
