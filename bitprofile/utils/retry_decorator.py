"""
Retry policy for store file operations, built on tenacity.

Replacing a file can fail transiently on some platforms (an indexer or
antivirus holding a handle during os.replace, a network filesystem
hiccup). Those errors are retried a few times with a short exponential
backoff. Errors that will not go away by waiting (missing directory,
path is a directory, read-only filesystem) propagate immediately.
"""

import errno
import logging

from tenacity import (
    after_log,
    before_sleep_log,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)

PERMANENT_ERRNOS = frozenset({errno.ENOENT, errno.EISDIR, errno.ENOTDIR, errno.EROFS, errno.ENOSPC})


def is_transient_os_error(exc: BaseException) -> bool:
    """True for OSErrors worth retrying."""
    if not isinstance(exc, OSError):
        return False
    return exc.errno not in PERMANENT_ERRNOS


def retry_file_io(
    max_attempts: int = 3,
    min_wait: float = 0.05,
    max_wait: float = 0.5,
):
    """
    Retry decorator for file system writes

    The last error is re-raised unchanged once attempts are exhausted.

    Args:
        max_attempts: Maximum number of attempts (default: 3)
        min_wait: First backoff in seconds (default: 0.05)
        max_wait: Backoff ceiling in seconds (default: 0.5)

    Returns:
        Decorated function with retry logic

    Example:
        @retry_file_io(max_attempts=3)
        def replace_file(tmp_path, path):
            os.replace(tmp_path, path)
    """
    return retry(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=min_wait, min=min_wait, max=max_wait),
        retry=retry_if_exception(is_transient_os_error),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        after=after_log(logger, logging.DEBUG),
        reraise=True,
    )
