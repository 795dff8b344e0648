"""
Logging configuration for scanadvisor.

Log records emitted by the enrichment pipeline carry structured ``extra``
fields (event, rule, fingerprint, attempt, ...). The JSON formatter keeps
them machine-readable for CI log collection; the plain formatter is the
default for interactive use.
"""

import json
import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import Any

PLAIN_FORMAT = "[%(asctime)s] %(name)s %(levelname)s: %(message)s"
PLAIN_DATE_FORMAT = "%H:%M:%S"

# Structured fields copied from a record's ``extra`` into the JSON entry
STRUCTURED_FIELDS = (
    "event",
    "rule",
    "fingerprint",
    "severity",
    "attempt",
    "max_attempts",
    "delay",
    "cache",
    "error",
    "findings",
    "raw_findings",
    "path",
)


class EnrichmentLogFormatter(logging.Formatter):
    """Custom formatter for enrichment pipeline logs."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log records with structured data."""
        log_entry: dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for field in STRUCTURED_FIELDS:
            if hasattr(record, field):
                log_entry[field] = getattr(record, field)

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


def configure_logging(
    log_level: str = "INFO",
    json_format: bool = False,
    log_file: str | None = None,
) -> None:
    """
    Configure the ``scanadvisor`` logger.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        json_format: Emit one JSON object per line instead of plain text
        log_file: Optional path of a size-rotated log file
    """
    logger = logging.getLogger("scanadvisor")
    logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    logger.propagate = False

    # Clear existing handlers
    logger.handlers.clear()

    formatter: logging.Formatter
    if json_format:
        formatter = EnrichmentLogFormatter()
    else:
        formatter = logging.Formatter(PLAIN_FORMAT, datefmt=PLAIN_DATE_FORMAT)

    # stdout is reserved for the report when no output path is given
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=5 * 1024 * 1024,
            backupCount=3,
            encoding="utf-8",
        )
        file_handler.setFormatter(EnrichmentLogFormatter())
        logger.addHandler(file_handler)
