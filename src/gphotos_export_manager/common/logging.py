"""Logging setup shared by the gphotos-organize and gphotos-dates commands.

Console lines are plain text; the optional log file gets one JSON object per
record. Fields attached with LogContext (the asset key while an asset is
materialized) appear in both.
"""

import logging
import logging.handlers
import json
import sys
from typing import Any, Dict, Optional
from datetime import datetime, timezone
from pathlib import Path

CONSOLE_FORMAT = "%(levelname)-8s | %(name)s | %(message)s"

# Chatty at DEBUG: Pillow logs every PNG chunk, asyncio every subprocess
QUIET_LOGGERS = ("PIL", "asyncio")


def context_fields(record: logging.LogRecord) -> Dict[str, Any]:
    return getattr(record, "extra_fields", None) or {}


class StructuredFormatter(logging.Formatter):
    """One JSON object per record, context fields merged in."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info),
            }

        log_data.update(context_fields(record))
        return json.dumps(log_data, default=str)


class ConsoleFormatter(logging.Formatter):
    """Level, logger and message; context fields are appended as {'key': value}."""

    def __init__(self) -> None:
        super().__init__(fmt=CONSOLE_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = context_fields(record)
        if not fields:
            return line
        # Keep a traceback on the lines after the context
        first, _, rest = line.partition("\n")
        first = f"{first} {fields}"
        return f"{first}\n{rest}" if rest else first


def setup_logging(
    level: str = "INFO",
    format: str = "simple",
    log_file: Optional[Path] = None,
    max_file_size_mb: int = 10,
    backup_count: int = 5,
) -> None:
    """Configure the root logger for a CLI run.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        format: Console format, 'simple' text or 'json' lines
        log_file: Optional log file path, always JSON lines
        max_file_size_mb: Max log file size in MB before rotation
        backup_count: Number of rotated files to keep
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(StructuredFormatter() if format == "json" else ConsoleFormatter())
    root_logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max_file_size_mb * 1024 * 1024,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(StructuredFormatter())
        root_logger.addHandler(file_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


class LogContext:
    """Attach fields to every record created inside the block.

    Swaps the process-wide record factory, so it must only wrap sequential code.

    Example:
        with LogContext(asset_key="IMG_1"):
            logger.info("Copied")  # INFO | ... | Copied {'asset_key': 'IMG_1'}
    """

    def __init__(self, **fields: Any) -> None:
        self.fields = fields
        self.old_factory = None

    def __enter__(self) -> "LogContext":
        self.old_factory = logging.getLogRecordFactory()
        old_factory = self.old_factory
        fields = self.fields

        def record_factory(*args: Any, **kwargs: Any) -> logging.LogRecord:
            record = old_factory(*args, **kwargs)
            record.extra_fields = {**context_fields(record), **fields}
            return record

        logging.setLogRecordFactory(record_factory)
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        logging.setLogRecordFactory(self.old_factory)
