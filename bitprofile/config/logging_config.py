"""
Logging configuration for bitprofile.

Library modules only ever call `logging.getLogger(__name__)` and attach
structured fields with `extra={"extra_fields": {...}}`. Applications that
embed bitprofile call `setup_logging()` (or `configure_from_config()`)
once to decide where those records go and how they are rendered:

- development: coloured one-line records on stdout
- production: one JSON document per record, on stdout and in a rotating file

Usage:
    from bitprofile.config import get_config
    from bitprofile.config.logging_config import configure_from_config, LogContext

    logger = configure_from_config(get_config())
    with LogContext(store_path="data/models/model.json"):
        await store.consolidate()
"""

import contextvars
import json
import logging
import logging.handlers
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

DEFAULT_LOGGER_NAME = "bitprofile"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(threadName)s] %(message)s"

_context_fields: contextvars.ContextVar[dict] = contextvars.ContextVar(
    "bitprofile_log_context", default={}
)


def structured_fields(record: logging.LogRecord) -> dict:
    """Merge LogContext fields with per-call `extra_fields` (per-call wins)."""
    fields = dict(getattr(record, "context_fields", None) or {})
    fields.update(getattr(record, "extra_fields", None) or {})
    return fields


class JSONFormatter(logging.Formatter):
    """One JSON object per record, for log shippers."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            # store I/O runs in worker threads
            "thread": record.threadName,
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
        }
        payload.update(structured_fields(record))
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class HumanReadableFormatter(logging.Formatter):
    """Compact coloured records for interactive use."""

    LEVEL_COLORS = {
        logging.DEBUG: "\033[2m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[1;31m",
    }
    RESET = "\033[0m"

    def __init__(self, use_color: bool = True):
        super().__init__(datefmt="%H:%M:%S")
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        level = f"{record.levelname:<7}"
        if self.use_color:
            level = f"{self.LEVEL_COLORS.get(record.levelno, '')}{level}{self.RESET}"

        line = f"{self.formatTime(record, self.datefmt)} {level} {record.name}: {record.getMessage()}"

        fields = structured_fields(record)
        if fields:
            line += " [" + " ".join(f"{key}={value}" for key, value in fields.items()) + "]"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def _formatter_for(mode: str, to_file: bool = False) -> logging.Formatter:
    if mode == "production":
        return JSONFormatter()
    if to_file:
        return logging.Formatter(FILE_FORMAT)
    return HumanReadableFormatter(use_color=sys.stdout.isatty())


def setup_logging(
    name: str = DEFAULT_LOGGER_NAME,
    level: str = "INFO",
    mode: str = "development",
    log_dir: Optional[str] = "logs",
    max_bytes: int = 5 * 1024 * 1024,
    backup_count: int = 3,
) -> logging.Logger:
    """
    Attach handlers to the `name` logger (child loggers inherit them).

    Calling it again replaces the handlers installed by the previous call.

    Args:
        name: Logger name, "bitprofile" covers every module of the package
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        mode: "development" (human-readable) or "production" (JSON)
        log_dir: Directory for `<name>.log`; None logs to stdout only
        max_bytes: Size at which the log file is rotated
        backup_count: Rotated files to keep

    Returns:
        The configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(level.upper())

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(_formatter_for(mode))
    logger.addHandler(stream_handler)

    if log_dir:
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            Path(log_dir) / f"{name}.log",
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(_formatter_for(mode, to_file=True))
        logger.addHandler(file_handler)

    logger.debug(f"Logging configured (mode={mode}, level={level}, log_dir={log_dir})")
    return logger


def configure_from_config(config) -> logging.Logger:
    """Set up the package logger from a BitProfileConfig."""
    return setup_logging(
        level=config.log_level, mode=config.log_mode, log_dir=config.log_dir or None
    )


def get_logger(
    name: Optional[str] = None, level: Optional[str] = None, mode: Optional[str] = None
) -> logging.Logger:
    """
    Return `name`, configuring it from LOG_* variables if it has no handlers yet.
    """
    name = name or DEFAULT_LOGGER_NAME
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    return setup_logging(
        name=name,
        level=level or os.environ.get("LOG_LEVEL", "INFO"),
        mode=mode or os.environ.get("LOG_MODE", "development"),
        log_dir=os.environ.get("LOG_DIR"),
    )


class LogContext:
    """
    Attach fields to every record logged inside the block.

    Fields live in a context variable, so concurrent asyncio tasks (a
    consolidation pass and a save, say) each see only their own context.
    Nested contexts add to the enclosing one.
    """

    _factory_installed = False

    def __init__(self, **fields):
        self.fields = fields
        self._token: Optional[contextvars.Token] = None

    @classmethod
    def _install_factory(cls) -> None:
        if cls._factory_installed:
            return
        base_factory = logging.getLogRecordFactory()

        def record_factory(*args, **kwargs):
            record = base_factory(*args, **kwargs)
            fields = _context_fields.get()
            if fields:
                record.context_fields = dict(fields)
            return record

        logging.setLogRecordFactory(record_factory)
        cls._factory_installed = True

    def __enter__(self) -> "LogContext":
        self._install_factory()
        self._token = _context_fields.set({**_context_fields.get(), **self.fields})
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        _context_fields.reset(self._token)
        self._token = None
