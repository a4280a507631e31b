"""Logging helpers for extract-helps runs."""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Optional

__all__ = [
    "JsonLogFormatter",
    "configure_logger",
]


class JsonLogFormatter(logging.Formatter):
    """Emit log records as structured JSON lines."""

    _RESERVED = set(
        logging.LogRecord("", 0, "", 0, "", (), None).__dict__
    ) | {"message", "asctime"}

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        extras = {
            key: _coerce_value(value)
            for key, value in record.__dict__.items()
            if key not in self._RESERVED
        }
        if extras:
            payload["extra"] = extras
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            payload["stack"] = record.stack_info
        return json.dumps(payload, ensure_ascii=True)


class ConsoleFormatter(logging.Formatter):
    """Single-line console output with ``extra`` fields appended."""

    def format(self, record: logging.LogRecord) -> str:
        line = f"{record.levelname.lower()}: {record.getMessage()}"
        extras = {
            key: value
            for key, value in record.__dict__.items()
            if key not in JsonLogFormatter._RESERVED
        }
        if extras:
            fields = " ".join(
                f"{key}={value}" for key, value in sorted(extras.items())
            )
            line = f"{line} ({fields})"
        return line


def configure_logger(
    name: str,
    *,
    level: str = "WARNING",
    log_dir: Optional[Path] = None,
    verbose: bool = False,
    max_bytes: int = 5 * 1024 * 1024,
    backup_count: int = 3,
    filename: str | None = None,
) -> tuple[logging.Logger, Optional[Path]]:
    """Configure a namespaced logger.

    Records go to stderr at ``level`` (``DEBUG`` when ``verbose``). When
    ``log_dir`` is given they are also appended as JSON lines to a rotating
    file, whose path is returned alongside the logger.
    """

    logger = logging.getLogger(name)
    logger.propagate = False
    logger.setLevel(logging.DEBUG)

    handler_level = logging.DEBUG if verbose else _coerce_level(level)
    _ensure_console_handler(logger).setLevel(handler_level)

    if log_dir is None:
        _remove_file_handler(logger)
        return logger, None

    log_dir.mkdir(parents=True, exist_ok=True)
    file_path = log_dir / (filename or f"{name.rsplit('.', 1)[-1]}.log")
    file_handler = _ensure_file_handler(
        logger=logger,
        path=file_path,
        max_bytes=max_bytes,
        backup_count=backup_count,
    )
    file_handler.setLevel(handler_level)
    return logger, file_path


def _coerce_level(level: str) -> int:
    numeric = logging.getLevelName(level.upper())
    if isinstance(numeric, int):
        return numeric
    return logging.WARNING


def _ensure_console_handler(logger: logging.Logger) -> logging.Handler:
    for handler in logger.handlers:
        if getattr(handler, "_extract_helps_console", False):
            handler.setStream(sys.stderr)  # type: ignore[attr-defined]
            return handler
    console = logging.StreamHandler(stream=sys.stderr)
    console.setFormatter(ConsoleFormatter())
    console._extract_helps_console = True  # type: ignore[attr-defined]
    logger.addHandler(console)
    return console


def _ensure_file_handler(
    *,
    logger: logging.Logger,
    path: Path,
    max_bytes: int,
    backup_count: int,
) -> RotatingFileHandler:
    for handler in logger.handlers:
        if getattr(handler, "_extract_helps_file", False):
            if Path(handler.baseFilename) == path:  # type: ignore[attr-defined]
                return handler  # type: ignore[return-value]
            logger.removeHandler(handler)
            handler.close()
            break
    managed = RotatingFileHandler(
        path,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    managed.setFormatter(JsonLogFormatter())
    managed._extract_helps_file = True  # type: ignore[attr-defined]
    logger.addHandler(managed)
    return managed


def _remove_file_handler(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        if getattr(handler, "_extract_helps_file", False):
            logger.removeHandler(handler)
            handler.close()


def _coerce_value(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, dict):
        return {str(key): _coerce_value(val) for key, val in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [_coerce_value(item) for item in value]
    return repr(value)
