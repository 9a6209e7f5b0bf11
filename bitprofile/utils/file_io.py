"""
Blocking JSON file helpers used by the record store.

All writes go through atomic_write_json(): the payload is written to a
temporary file in the destination directory, flushed and fsynced, then
moved over the destination with os.replace(). A crash at any point leaves
either the old file or the new file, never a truncated one.

These functions are synchronous; the store calls them via
asyncio.to_thread().
"""

from __future__ import annotations

import gzip
import json
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any, List

from bitprofile.exceptions import MalformedStoreError
from bitprofile.utils.retry_decorator import retry_file_io

logger = logging.getLogger(__name__)

TMP_SUFFIX = ".tmp"


@retry_file_io()
def _replace(src: Path, dst: Path) -> None:
    os.replace(src, dst)


def atomic_write_bytes(path: Path, payload: bytes) -> None:
    """Write `payload` to `path` atomically (temp file + rename).

    Raises:
        OSError: If the temporary file cannot be written or renamed
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.name}.", suffix=TMP_SUFFIX, dir=str(path.parent)
    )
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(payload)
            handle.flush()
            os.fsync(handle.fileno())
        _replace(tmp_path, path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise


def atomic_write_json(path: Path, data: Any) -> None:
    """Serialize `data` as indented JSON and write it atomically."""
    payload = json.dumps(data, indent=2, ensure_ascii=False).encode("utf-8")
    atomic_write_bytes(path, payload)


def read_json_array(path: Path) -> List[Any]:
    """Read a JSON file that must contain a top-level array.

    Raises:
        MalformedStoreError: If the file is missing, unreadable, not valid
            JSON, or not an array
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise MalformedStoreError(path, "file does not exist") from None
    except (OSError, UnicodeDecodeError) as e:
        raise MalformedStoreError(path, f"unreadable: {e}") from e

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedStoreError(path, f"invalid JSON: {e}") from e

    if not isinstance(data, list):
        raise MalformedStoreError(path, f"expected JSON array, got {type(data).__name__}")
    return data


def read_json_object(path: Path) -> dict:
    """Read a JSON object, returning {} when the file is missing or corrupt."""
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as e:
        logger.warning(f"Ignoring unreadable JSON object {path}: {e}")
        return {}
    return data if isinstance(data, dict) else {}


def gzip_copy(src: Path, dst: Path) -> None:
    """Compress `src` into `dst` atomically."""
    dst = Path(dst)
    dst.parent.mkdir(parents=True, exist_ok=True)
    tmp = dst.with_name(dst.name + TMP_SUFFIX)
    try:
        with open(src, "rb") as source, gzip.open(tmp, "wb", compresslevel=9) as target:
            shutil.copyfileobj(source, target)
        _replace(tmp, dst)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise


def read_snapshot(path: Path) -> bytes:
    """Read a backup snapshot, decompressing .gz files."""
    path = Path(path)
    if path.suffix == ".gz":
        with gzip.open(path, "rb") as handle:
            return handle.read()
    return path.read_bytes()
