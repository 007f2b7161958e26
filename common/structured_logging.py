"""
Structured Logging
Perimeter

Logging setup shared by the library's packages: a console handler, and an
optional rotating file handler writing one JSON object per line.
"""

import json
import logging
import logging.handlers
from pathlib import Path
from typing import Any

# Top-level packages whose module loggers are configured together
PACKAGE_LOGGERS = ("contracts", "middleware", "models", "common")

CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class JsonFormatter(logging.Formatter):
    """Formats log records as single-line JSON for file output."""

    def format(self, record):
        log_entry = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if hasattr(record, "extra_fields"):
            log_entry.update(record.extra_fields)
        return json.dumps(log_entry, default=str)


def log_with_fields(logger: logging.Logger, level: int, message: str, **fields: Any) -> None:
    """
    Log ``message`` with structured fields.

    Console output gets the fields appended as ``[key=value ...]``; the JSON
    formatter emits them as top-level keys.
    """
    if not logger.isEnabledFor(level):
        return

    extra_fields = {k: v for k, v in fields.items() if v is not None}
    context_str = " ".join(f"{k}={v}" for k, v in extra_fields.items())
    formatted = f"{message} [{context_str}]" if context_str else message

    logger.log(level, formatted, extra={"extra_fields": extra_fields})


def configure_logging(
    level: str | int = "INFO",
    log_dir: str | Path | None = None,
    json_output: bool = False,
    max_bytes: int = 10_485_760,
    backup_count: int = 5,
) -> list[logging.Logger]:
    """
    Attach handlers to the package loggers.

    Args:
        level: Log level name or number
        log_dir: If set, also write JSON lines to ``<log_dir>/perimeter.log``
        json_output: Use JSON on the console too
        max_bytes: Rotation size for the file handler
        backup_count: Rotated files kept

    Returns:
        The configured loggers
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    handlers: list[logging.Handler] = []

    console = logging.StreamHandler()
    console.setFormatter(JsonFormatter() if json_output else logging.Formatter(CONSOLE_FORMAT))
    handlers.append(console)

    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_path / "perimeter.log",
            maxBytes=max_bytes,
            backupCount=backup_count,
        )
        file_handler.setFormatter(JsonFormatter())
        handlers.append(file_handler)

    loggers = []
    for name in PACKAGE_LOGGERS:
        package_logger = logging.getLogger(name)
        for existing in list(package_logger.handlers):
            package_logger.removeHandler(existing)
            existing.close()
        for handler in handlers:
            package_logger.addHandler(handler)
        package_logger.setLevel(level)
        loggers.append(package_logger)

    return loggers
