"""
Exception taxonomy for bitprofile.

Only EmptySequenceError and PersistenceIOError ever reach callers.
MalformedStoreError and InvalidRecordError are raised inside the record
store and recovered there (logged, then treated as "no data" / "skip this
record").
"""

from __future__ import annotations

from typing import Any, Optional


class BitProfileError(Exception):
    """Base class for all bitprofile errors."""


class EmptySequenceError(BitProfileError, ValueError):
    """The cleaned sequence has no symbols left to analyse."""

    def __init__(self, raw: Optional[str] = None):
        self.raw = raw
        sample = "" if raw is None else raw[:50]
        super().__init__(
            f"Sequence contains no '0'/'1' symbols after cleaning (raw sample: {sample!r})"
        )


class MalformedStoreError(BitProfileError):
    """A store file is missing or cannot be parsed as a JSON array."""

    def __init__(self, path: Any, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Malformed store file {path}: {reason}")


class InvalidRecordError(BitProfileError):
    """A single persisted record failed schema validation."""

    def __init__(self, reason: str, entry: Any = None):
        self.reason = reason
        self.entry = entry
        super().__init__(f"Invalid record: {reason}")


class PersistenceIOError(BitProfileError, OSError):
    """Writing or replacing a store file failed."""

    def __init__(self, path: Any, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to persist {path}: {reason}")


class BackupNotFoundError(BitProfileError, KeyError):
    """Requested backup key is not present in the backup index."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Backup not found: {key}")

    def __str__(self) -> str:
        return f"Backup not found: {self.key}"
