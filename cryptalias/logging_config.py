"""Logging configuration.

Provides JSON-formatted logging for the cryptalias CLI. The library itself
only emits records on named loggers and never configures handlers.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone


class JsonFormatter(logging.Formatter):
    """One JSON object per record.

    Resolution context passed via ``extra=`` (ticker, domain, error code) is
    copied into the object when set.
    """

    EXTRA_FIELDS = ("ticker", "domain", "code")

    def format(self, record):
        entry = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        entry.update(
            (field, getattr(record, field))
            for field in self.EXTRA_FIELDS
            if getattr(record, field, None) is not None
        )
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def configure_logging(
    log_file: str = None,
    log_level: str = None,
):
    """Configure logging with JSON formatter.

    Args:
        log_file: Optional path to a log file. Defaults to CRYPTALIAS_LOG_FILE
            env var; no file handler when neither is set.
        log_level: Log level. Defaults to CRYPTALIAS_LOG_LEVEL env var or 'WARNING'.
    """
    # Console handler (stderr, so CLI output on stdout stays machine-readable)
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(JsonFormatter())
    handlers = [console_handler]

    # File handler for debugging (always append)
    log_file = log_file or os.getenv("CRYPTALIAS_LOG_FILE")
    if log_file:
        file_handler = logging.FileHandler(log_file, mode='a')
        file_handler.setFormatter(JsonFormatter())
        handlers.append(file_handler)

    root = logging.getLogger()
    # Allow DEBUG level via environment variable (default: WARNING)
    log_level = (log_level or os.getenv("CRYPTALIAS_LOG_LEVEL", "WARNING")).upper()
    root.setLevel(getattr(logging, log_level, logging.WARNING))
    root.handlers = handlers
