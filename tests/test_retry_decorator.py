"""Tests for the file I/O retry policy."""

import errno

import pytest

from bitprofile.utils.retry_decorator import is_transient_os_error, retry_file_io


class TestRetryFileIO:
    """Tests for retry_file_io decorator."""

    def test_transient_error_retried(self):
        """Test a transient OSError is retried until success."""
        calls = []

        @retry_file_io(max_attempts=3, min_wait=0.001, max_wait=0.002)
        def flaky():
            calls.append(1)
            if len(calls) < 3:
                raise PermissionError(errno.EACCES, "locked")
            return "ok"

        assert flaky() == "ok"
        assert len(calls) == 3

    def test_last_error_reraised(self):
        calls = []

        @retry_file_io(max_attempts=2, min_wait=0.001, max_wait=0.002)
        def always_busy():
            calls.append(1)
            raise BlockingIOError(errno.EAGAIN, "busy")

        with pytest.raises(BlockingIOError):
            always_busy()
        assert len(calls) == 2

    def test_permanent_error_not_retried(self):
        """Test a missing directory fails on the first attempt."""
        calls = []

        @retry_file_io(max_attempts=3, min_wait=0.001, max_wait=0.002)
        def missing():
            calls.append(1)
            raise FileNotFoundError(errno.ENOENT, "no such directory")

        with pytest.raises(FileNotFoundError):
            missing()
        assert len(calls) == 1

    def test_non_os_errors_not_retried(self):
        assert not is_transient_os_error(ValueError("bad"))
        assert is_transient_os_error(OSError("busy"))
        assert not is_transient_os_error(OSError(errno.ENOSPC, "disk full"))
