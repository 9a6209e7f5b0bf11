"""
Bounded, deduplicated on-disk store of analysis records.

The canonical store is a single JSON array (see records.py for the
schema). Records are content-addressed: two analyses with the same
entropy, pattern type and leading symbols get the same id, and saving the
second replaces the first.

Consolidation folds fragment files (older per-run dumps, other
directories) back into the canonical file and merges near-duplicates:
records sharing a pattern type and an entropy equal to 4 decimals become
one record whose complexity level and burstiness are recency-weighted
averages:

    value = sum(v_i * d^i) / sum(d^i)     i = 0 for the newest, d = 0.8

Usage:
    store = RecordStore(Path("data/models/model.json"))
    record = await store.save(result)
    report = await store.consolidate([Path("data/models")])
"""

from __future__ import annotations

import asyncio
import hashlib
import json
import logging
import os
import time
from collections import Counter, OrderedDict
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Set, Tuple

from bitprofile.config.settings import BitProfileConfig
from bitprofile.exceptions import (
    BackupNotFoundError,
    InvalidRecordError,
    MalformedStoreError,
    PersistenceIOError,
)
from bitprofile.models.metrics_models import AnalysisResult
from bitprofile.storage.records import (
    MetricsSnapshot,
    ModelRecord,
    format_summary,
    parse_record,
)
from bitprofile.utils.file_io import (
    atomic_write_bytes,
    atomic_write_json,
    gzip_copy,
    read_json_array,
    read_json_object,
    read_snapshot,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_RECORDS = 1000
DEFAULT_IDENTITY_PREFIX = 100
DEFAULT_MERGE_DECAY = 0.8
IDENTITY_ENTROPY_DECIMALS = 10
GROUP_ENTROPY_DECIMALS = 4
BACKUP_INDEX = "index.json"


def _epoch_millis() -> int:
    return int(time.time() * 1000)


@dataclass
class ConsolidationReport:
    """Outcome of one consolidation pass."""

    sources_scanned: int = 0
    entries_read: int = 0
    duplicates_dropped: int = 0
    invalid_skipped: int = 0
    records_written: int = 0
    files_removed: int = 0
    dirs_removed: int = 0
    duration_seconds: float = 0.0

    def to_dict(self) -> dict:
        return {
            "sources_scanned": self.sources_scanned,
            "entries_read": self.entries_read,
            "duplicates_dropped": self.duplicates_dropped,
            "invalid_skipped": self.invalid_skipped,
            "records_written": self.records_written,
            "files_removed": self.files_removed,
            "dirs_removed": self.dirs_removed,
            "duration_seconds": round(self.duration_seconds, 4),
        }


def merge_group(records: List[ModelRecord], decay: float = DEFAULT_MERGE_DECAY) -> ModelRecord:
    """
    Merge records of one (pattern type, entropy) group into a single record.

    The newest record is the base; its id, timestamp, pattern type and
    entropy are kept. A single-member group is returned unchanged.
    """
    if not records:
        raise ValueError("cannot merge an empty group")

    ordered = sorted(records, key=lambda r: r.timestamp, reverse=True)
    base = ordered[0]
    if len(ordered) == 1:
        return base

    weights = [decay**i for i in range(len(ordered))]
    total = sum(weights)
    complexity = sum(r.complexity_level * w for r, w in zip(ordered, weights)) / total
    burstiness = sum(r.burstiness * w for r, w in zip(ordered, weights)) / total

    return base.model_copy(
        update={
            "metrics_snapshot": MetricsSnapshot(
                entropy=base.entropy,
                complexity_level=complexity,
                burstiness=burstiness,
            ),
            "summary": format_summary(base.pattern_type, base.entropy),
            "merged_count": len(ordered),
        }
    )


class RecordStore:
    """
    Async facade over the canonical JSON store.

    One instance owns one canonical file. Every read-modify-write cycle
    holds the instance lock; file work runs in a worker thread.
    """

    def __init__(
        self,
        store_path: Path,
        max_records: int = DEFAULT_MAX_RECORDS,
        identity_prefix_length: int = DEFAULT_IDENTITY_PREFIX,
        merge_decay: float = DEFAULT_MERGE_DECAY,
        backup_dir: Optional[Path] = None,
        fragment_paths: Optional[Iterable[Path]] = None,
        clock: Optional[Callable[[], int]] = None,
    ):
        """
        Initialize the store. Nothing is read until first access.

        Args:
            store_path: Canonical JSON file
            max_records: Capacity of the store
            identity_prefix_length: Leading clean symbols included in the id
            merge_decay: Recency weight base used when merging
            backup_dir: Directory for snapshots (default: <store dir>/backups)
            fragment_paths: Default sources for consolidate()
            clock: Returns the current time in epoch milliseconds
        """
        if max_records < 1:
            raise ValueError(f"max_records must be >= 1, got {max_records}")
        if not 0 < merge_decay <= 1:
            raise ValueError(f"merge_decay must be in (0, 1], got {merge_decay}")

        self.store_path = Path(store_path)
        self.max_records = max_records
        self.identity_prefix_length = identity_prefix_length
        self.merge_decay = merge_decay
        self.backup_dir = Path(backup_dir) if backup_dir else self.store_path.parent / "backups"
        self.fragment_paths = [Path(p) for p in (fragment_paths or [])]
        self._clock = clock or _epoch_millis

        self._records: Optional[List[ModelRecord]] = None
        self._lock = asyncio.Lock()

        logger.debug(f"Initialized record store: {self.store_path}")

    @classmethod
    def from_config(cls, config: BitProfileConfig, **kwargs) -> "RecordStore":
        """Build a store from a BitProfileConfig."""
        return cls(
            store_path=config.store_path,
            max_records=config.max_records,
            identity_prefix_length=config.identity_prefix_length,
            merge_decay=config.merge_decay,
            backup_dir=config.backup_dir,
            fragment_paths=config.fragment_paths,
            **kwargs,
        )

    # ========================================
    # Identity and projection
    # ========================================

    def identity_hash(self, result: AnalysisResult) -> str:
        """
        Content-derived record id.

        md5 of "<entropy rounded to 10 places>-<pattern type>-<clean prefix>".
        Equal inputs always give equal ids.
        """
        entropy = round(result.metrics.entropy, IDENTITY_ENTROPY_DECIMALS)
        prefix = result.sequence.clean[: self.identity_prefix_length]
        key = f"{entropy}-{result.pattern_type}-{prefix}"
        return hashlib.md5(key.encode("utf-8")).hexdigest()

    def build_record(self, result: AnalysisResult) -> ModelRecord:
        """Project an AnalysisResult onto a persistable record."""
        entropy = result.metrics.entropy
        return ModelRecord(
            id=self.identity_hash(result),
            timestamp=self._clock(),
            pattern_type=result.pattern_type,
            metrics_snapshot=MetricsSnapshot(
                entropy=entropy,
                complexity_level=result.classification.level,
                burstiness=result.metrics.burstiness,
            ),
            summary=format_summary(result.pattern_type, entropy),
        )

    # ========================================
    # Load / save
    # ========================================

    async def records(self) -> List[ModelRecord]:
        """Current records, newest first. Loads the store on first access."""
        async with self._lock:
            await self._ensure_loaded()
            return list(self._records)

    async def load(self) -> List[ModelRecord]:
        """Re-read the canonical file, replacing the in-memory view."""
        async with self._lock:
            self._records = await asyncio.to_thread(self._read_canonical)
            return list(self._records)

    async def save(self, result: AnalysisResult) -> ModelRecord:
        """
        Persist one analysis result.

        A stored record with the same id is replaced. Only the most recent
        max_records are kept.

        Raises:
            PersistenceIOError: If the store file cannot be written
        """
        record = self.build_record(result)

        async with self._lock:
            await self._ensure_loaded()
            updated = [r for r in self._records if r.id != record.id]
            updated.append(record)
            updated = self._newest_first(updated)[: self.max_records]

            await asyncio.to_thread(self._write_records, self.store_path, updated)
            self._records = updated

        logger.info(
            f"Saved record {record.id[:8]} ({record.pattern_type})",
            extra={"extra_fields": {"record_id": record.id, "records": len(updated)}},
        )
        return record

    async def _ensure_loaded(self) -> None:
        if self._records is None:
            self._records = await asyncio.to_thread(self._read_canonical)

    @staticmethod
    def _newest_first(records: List[ModelRecord]) -> List[ModelRecord]:
        return sorted(records, key=lambda r: r.timestamp, reverse=True)

    def _read_canonical(self) -> List[ModelRecord]:
        try:
            entries = read_json_array(self.store_path)
        except MalformedStoreError as e:
            if self.store_path.exists():
                logger.warning(
                    f"Store unreadable, starting empty: {e.reason}",
                    extra={"extra_fields": {"path": str(self.store_path)}},
                )
            else:
                logger.info(f"No store at {self.store_path}, starting empty")
            return []

        records: Dict[str, ModelRecord] = {}
        for index, entry in enumerate(entries):
            try:
                record = parse_record(entry)
            except InvalidRecordError as e:
                logger.warning(
                    f"Skipping invalid record #{index}: {e.reason}",
                    extra={"extra_fields": {"path": str(self.store_path), "index": index}},
                )
                continue
            existing = records.get(record.id)
            if existing is None or record.timestamp > existing.timestamp:
                records[record.id] = record

        loaded = self._newest_first(list(records.values()))[: self.max_records]
        logger.debug(f"Loaded {len(loaded)} records from {self.store_path}")
        return loaded

    def _write_records(self, path: Path, records: List[ModelRecord]) -> None:
        try:
            atomic_write_json(path, [r.to_json_dict() for r in records])
        except OSError as e:
            raise PersistenceIOError(path, str(e)) from e

    # ========================================
    # Consolidation
    # ========================================

    async def consolidate(self, paths: Optional[Iterable[Path]] = None) -> ConsolidationReport:
        """
        Fold fragment files into the canonical store and merge near-duplicates.

        Args:
            paths: Files or directories to scan (default: fragment_paths).
                Directories are scanned recursively for *.json.

        Returns:
            ConsolidationReport describing the pass

        Raises:
            PersistenceIOError: If the consolidated store cannot be written
        """
        sources = list(self.fragment_paths if paths is None else paths)
        async with self._lock:
            work = asyncio.ensure_future(asyncio.to_thread(self._consolidate_sync, sources))
            try:
                report, records = await asyncio.shield(work)
            except asyncio.CancelledError:
                # The worker thread cannot be interrupted. Keep the lock until
                # it finishes and reload from disk on next access.
                self._records = None
                await asyncio.wait([work])
                if work.exception() is not None:
                    logger.warning(f"Cancelled consolidation pass failed: {work.exception()}")
                raise
            self._records = self._newest_first(records)

        logger.info(
            f"Consolidated {report.entries_read} entries into {report.records_written} records",
            extra={"extra_fields": report.to_dict()},
        )
        return report

    def _collect_sources(self, paths: List[Path]) -> Tuple[List[Path], List[Path]]:
        """Return (fragment files, scanned directories).

        The canonical file and anything under backup_dir are never sources.
        """
        canonical = self.store_path.resolve()
        backups = self.backup_dir.resolve()
        seen: Set[Path] = {canonical}
        files: List[Path] = []
        directories: List[Path] = []

        for path in paths:
            path = Path(path)
            if path.is_dir():
                directories.append(path)
                candidates = sorted(path.rglob("*.json"))
            elif path.is_file():
                candidates = [path]
            else:
                logger.debug(f"Consolidation source does not exist: {path}")
                continue

            for candidate in candidates:
                resolved = candidate.resolve()
                if resolved in seen or candidate.name == BACKUP_INDEX:
                    continue
                if resolved.is_relative_to(backups):
                    logger.debug(f"Skipping backup file: {candidate}")
                    continue
                seen.add(resolved)
                files.append(candidate)

        return files, directories

    def _consolidate_sync(self, paths: List[Path]) -> Tuple[ConsolidationReport, List[ModelRecord]]:
        started = time.monotonic()
        report = ConsolidationReport()
        fragments, directories = self._collect_sources(paths)

        raw_entries: List[object] = []
        consumed: List[Path] = []
        for source in [self.store_path] + fragments:
            try:
                entries = read_json_array(source)
            except MalformedStoreError as e:
                if source.exists():
                    logger.warning(f"Skipping unreadable source {source}: {e.reason}")
                continue
            report.sources_scanned += 1
            report.entries_read += len(entries)
            raw_entries.extend(entries)
            if source != self.store_path:
                consumed.append(source)

        unique: "OrderedDict[str, object]" = OrderedDict()
        for entry in raw_entries:
            unique.setdefault(json.dumps(entry, sort_keys=True), entry)
        report.duplicates_dropped = len(raw_entries) - len(unique)

        groups: "OrderedDict[Tuple[str, float], List[ModelRecord]]" = OrderedDict()
        for entry in unique.values():
            try:
                record = parse_record(entry)
            except InvalidRecordError as e:
                report.invalid_skipped += 1
                logger.warning(f"Skipping invalid record during consolidation: {e.reason}")
                continue
            key = (record.pattern_type, round(record.entropy, GROUP_ENTROPY_DECIMALS))
            groups.setdefault(key, []).append(record)

        merged = [merge_group(group, self.merge_decay) for group in groups.values()]
        merged.sort(key=lambda r: (r.entropy, r.timestamp), reverse=True)
        merged = merged[: self.max_records]

        self._write_records(self.store_path, merged)
        report.records_written = len(merged)

        for fragment in consumed:
            try:
                fragment.unlink()
                report.files_removed += 1
            except FileNotFoundError:
                continue
            except OSError as e:
                logger.warning(f"Could not remove consumed fragment {fragment}: {e}")

        for directory in directories:
            report.dirs_removed += self._prune_empty_dirs(directory)

        report.duration_seconds = time.monotonic() - started
        return report, merged

    def _prune_empty_dirs(self, root: Path) -> int:
        """Remove empty directories below `root` (root itself is kept)."""
        removed = 0
        protected = {self.store_path.parent.resolve(), self.backup_dir.resolve()}
        subdirs = sorted(
            (p for p in root.rglob("*") if p.is_dir()),
            key=lambda p: len(p.parts),
            reverse=True,
        )
        for subdir in subdirs:
            if subdir.resolve() in protected:
                continue
            try:
                subdir.rmdir()
                removed += 1
            except OSError:
                # not empty
                continue
        return removed

    # ========================================
    # Backups and statistics
    # ========================================

    async def backup(self, compress: bool = True) -> str:
        """
        Snapshot the canonical file into the backup directory.

        Returns:
            Backup key usable with restore()

        Raises:
            PersistenceIOError: If there is no store file or the copy fails
        """
        async with self._lock:
            key = await asyncio.to_thread(self._backup_sync, compress)
        logger.info(f"Created backup {key}")
        return key

    def _backup_sync(self, compress: bool) -> str:
        if not self.store_path.exists():
            raise PersistenceIOError(self.store_path, "no store file to back up")

        created = datetime.now(timezone.utc)
        key = f"{self.store_path.stem}-{self._clock()}"
        filename = f"{key}{self.store_path.suffix}" + (".gz" if compress else "")
        target = self.backup_dir / filename

        try:
            if compress:
                gzip_copy(self.store_path, target)
            else:
                atomic_write_bytes(target, self.store_path.read_bytes())

            index = read_json_object(self.backup_dir / BACKUP_INDEX)
            index[key] = {
                "file": filename,
                "created_at": created.isoformat(),
                "compressed": compress,
                "source": str(self.store_path),
                "size_bytes": self.store_path.stat().st_size,
            }
            atomic_write_json(self.backup_dir / BACKUP_INDEX, index)
        except OSError as e:
            raise PersistenceIOError(target, str(e)) from e
        return key

    async def list_backups(self) -> List[dict]:
        """Backups recorded in the index, newest first."""
        index = await asyncio.to_thread(read_json_object, self.backup_dir / BACKUP_INDEX)
        entries = [dict(meta, key=key) for key, meta in index.items()]
        return sorted(entries, key=lambda e: e.get("created_at", ""), reverse=True)

    async def restore(self, backup_key: str) -> List[ModelRecord]:
        """
        Atomically replace the canonical file with a snapshot and reload it.

        Raises:
            BackupNotFoundError: If the key is unknown or its file is gone
            PersistenceIOError: If the canonical file cannot be written
        """
        async with self._lock:
            await asyncio.to_thread(self._restore_sync, backup_key)
            self._records = await asyncio.to_thread(self._read_canonical)
            restored = list(self._records)

        logger.info(f"Restored backup {backup_key} ({len(restored)} records)")
        return restored

    def _restore_sync(self, backup_key: str) -> None:
        index = read_json_object(self.backup_dir / BACKUP_INDEX)
        meta = index.get(backup_key)
        if not meta:
            raise BackupNotFoundError(backup_key)

        snapshot = self.backup_dir / meta["file"]
        try:
            payload = read_snapshot(snapshot)
        except FileNotFoundError:
            raise BackupNotFoundError(backup_key) from None

        try:
            atomic_write_bytes(self.store_path, payload)
        except OSError as e:
            raise PersistenceIOError(self.store_path, str(e)) from e

    async def get_stats(self) -> dict:
        """Summary of the in-memory store."""
        records = await self.records()
        by_type = Counter(r.pattern_type for r in records)
        timestamps = [r.timestamp for r in records]
        return {
            "path": str(self.store_path),
            "record_count": len(records),
            "max_records": self.max_records,
            "by_pattern_type": dict(by_type),
            "merged_records": sum(1 for r in records if r.merged_count),
            "newest_timestamp": max(timestamps) if timestamps else None,
            "oldest_timestamp": min(timestamps) if timestamps else None,
            "file_exists": os.path.exists(self.store_path),
        }
