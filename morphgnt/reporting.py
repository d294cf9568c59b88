"""Logging setup and end-of-run reporting for the builder."""

from __future__ import annotations

import json
import logging
import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import TextIO

from .builder import BookStatus, BuildResult
from .errors import ConfigError

LOGGER_NAME = "morphgnt"
SUMMARY_SEPARATOR = "=" * 80
LOG_FORMAT_HUMAN = "%(asctime)s.%(msecs)03d | %(levelname)8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"


class JSONLogFormatter(logging.Formatter):
    """Formatter that emits JSON lines for machine readability."""

    RESERVED_KEYS = {
        "args",
        "asctime",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "message",
        "module",
        "msecs",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "taskName",
        "thread",
        "threadName",
    }

    def format(self, record: logging.LogRecord) -> str:
        data = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc)
            .astimezone()
            .isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key in self.RESERVED_KEYS:
                continue
            data[key] = self._serialize(value)

        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(data, ensure_ascii=False)

    @staticmethod
    def _serialize(value: object) -> object:
        if isinstance(value, Path):
            return value.as_posix()
        if isinstance(value, datetime):
            return value.astimezone().isoformat(timespec="milliseconds")
        if isinstance(value, Enum):
            return value.value
        if isinstance(value, (list, tuple, set)):
            return [JSONLogFormatter._serialize(item) for item in value]
        return value


def _make_formatter(log_format: str) -> logging.Formatter:
    if log_format == "jsonl":
        return JSONLogFormatter()
    return logging.Formatter(LOG_FORMAT_HUMAN, datefmt=LOG_DATE_FORMAT)


def configure_logging(
    log_level: int,
    log_format: str = "human",
    log_file: Path | None = None,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Attach handlers to the package logger and return it."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(log_level)
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    stream_handler = logging.StreamHandler(stream=stream or sys.stdout)
    stream_handler.setLevel(log_level)
    stream_handler.setFormatter(_make_formatter(log_format))
    logger.addHandler(stream_handler)

    if log_file:
        parent = log_file.expanduser().resolve().parent
        if not parent.is_dir():
            raise ConfigError(f"Log file directory does not exist: {parent.as_posix()}")
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(log_level)
        file_handler.setFormatter(_make_formatter(log_format))
        logger.addHandler(file_handler)

    return logger


def format_duration(seconds: float | None) -> str:
    """Format a duration in seconds with two decimals."""
    if seconds is None:
        return "N/A"
    return f"{seconds:.2f}s"


@dataclass
class RunStatistics:
    """Wall-clock timing for a builder run."""

    start_time: datetime
    end_time: datetime | None = None

    @classmethod
    def start(cls) -> RunStatistics:
        return cls(start_time=datetime.now(tz=timezone.utc).astimezone())

    def finish(self) -> None:
        self.end_time = datetime.now(tz=timezone.utc).astimezone()

    @property
    def duration_seconds(self) -> float | None:
        if self.end_time is None:
            return None
        return round((self.end_time - self.start_time).total_seconds(), 2)


def build_summary(result: BuildResult, stats: RunStatistics, out_dir: Path) -> str:
    """Render the end-of-run summary block."""
    status = "SUCCESS" if result.succeeded else "FAILED"
    lines = [
        SUMMARY_SEPARATOR,
        "MORPHGNT BUILD SUMMARY".center(len(SUMMARY_SEPARATOR)),
        SUMMARY_SEPARATOR,
        f"Status:           {status}",
        f"Output Directory: {out_dir.as_posix()}",
        f"Total Duration:   {format_duration(stats.duration_seconds)}",
        f"Books:            {len(result.outcomes)}",
        f"Built:            {result.persisted}",
        f"Skipped:          {result.skipped}",
        f"Errors:           {result.error_count}",
    ]

    failed = [o for o in result.outcomes if o.status is BookStatus.FAILED]
    if failed:
        lines.extend(["", "Failed Books:"])
        for outcome in failed:
            lines.append(f"  [{outcome.book.code}] {outcome.book.name} ({outcome.failed_stage}): {outcome.error}")
    if result.manifest_error:
        lines.extend(["", f"Manifest Error: {result.manifest_error}"])

    manifest_display = result.manifest_path.as_posix() if result.manifest_path else "not written"
    lines.extend(["", f"Manifest: {manifest_display}"])
    if failed:
        lines.append("\nSuggestion: Run with --force to retry.")
    lines.append(SUMMARY_SEPARATOR)
    return "\n".join(lines)


__all__ = [
    "JSONLogFormatter",
    "RunStatistics",
    "build_summary",
    "configure_logging",
    "format_duration",
    "LOGGER_NAME",
]
