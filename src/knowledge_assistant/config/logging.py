"""Logging setup for the API server and the CLI.

All application loggers live under the ``knowledge_assistant`` namespace
(modules call ``logging.getLogger(__name__)``), so one call to
``setup_logging`` configures the whole package.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Any

ROOT_LOGGER_NAME = "knowledge_assistant"

# Client libraries that log every request at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "qdrant_client", "google_genai")

# Attributes every LogRecord has; anything else came in through ``extra=``
_RECORD_ATTRIBUTES = set(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

HUMAN_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s | %(message)s"


class JSONExceptionFormatter(logging.Formatter):
    """One JSON object per line, for Cloud Logging, Loki or ELK.

    Fields passed with ``extra=`` are emitted under ``context``; exceptions
    carry their type, message and traceback.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": {
                "file": record.filename,
                "function": record.funcName,
                "line": record.lineno,
            },
        }

        context = {k: v for k, v in vars(record).items() if k not in _RECORD_ATTRIBUTES}
        if context:
            entry["context"] = context

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc_value, _ = record.exc_info
            entry["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value) if exc_value else None,
                "traceback": self.formatException(record.exc_info),
            }

        return json.dumps(entry, default=str)


def setup_logging(
    level: str = "INFO",
    log_file: Path | None = None,
    json_format: bool = False,
) -> logging.Logger:
    """Configure the ``knowledge_assistant`` logger.

    Safe to call more than once (the CLI calls it per command, the API once
    at import); previous handlers are replaced.

    Args:
        level: DEBUG shows pipeline state transitions; INFO shows timings.
        log_file: Also write to this file, creating its directory.
        json_format: Emit JSON lines instead of the human format.

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter: logging.Formatter
    if json_format:
        formatter = JSONExceptionFormatter()
    else:
        formatter = logging.Formatter(HUMAN_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return logger
