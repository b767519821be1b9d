"""
Logging Configuration
Structured JSON or text logging for monthly reconstruction runs.

Context passed through log_with_context (year, month, consumption, month
counts) becomes top-level keys in JSON output and a key=value suffix in text
output.
"""
import json
import logging
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Mapping

# Marks handlers installed by setup_logging so a second call replaces them
HANDLER_TAG = "_meter_reconstruction"


def _context(record: logging.LogRecord) -> Dict[str, Any]:
    return getattr(record, "extra_fields", None) or {}


class JSONFormatter(logging.Formatter):
    """One JSON object per line"""

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry = {
            "timestamp": created.isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        entry.update(_context(record))
        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable lines for console output, context appended as key=value"""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = _context(record)
        if context:
            line += " | " + " ".join(f"{k}={v}" for k, v in context.items())
        return line


def _logging_section(config: Any) -> Mapping[str, Any]:
    # EngineSettings or LoggingSettings instance, or a plain config dict
    if hasattr(config, "model_dump"):
        config = config.model_dump()
    if "logging" in config:
        return config["logging"] or {}
    return config


def setup_logging(config: Any) -> None:
    """
    Configure the root logger from the "logging" settings

    Args:
        config: EngineSettings, LoggingSettings, or a dict holding a "logging"
                section with:
            - level: DEBUG, INFO, WARNING or ERROR (default INFO)
            - format: json or text (default json)
            - file: optional log file, rotated by size
            - max_bytes: size before rotation (default 10 MB)
            - backup_count: rotated files to keep (default 5)

    Handlers from an earlier call are replaced; handlers installed by others
    (e.g. pytest's caplog) are left alone.
    """
    section = _logging_section(config)
    level_name = str(section.get("level", "INFO")).upper()
    log_format = str(section.get("format", "json")).lower()
    log_file = section.get("file")

    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO
    formatter = JSONFormatter() if log_format == "json" else TextFormatter()

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in list(root_logger.handlers):
        if getattr(handler, HANDLER_TAG, False):
            root_logger.removeHandler(handler)
            handler.close()

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                log_path,
                maxBytes=section.get("max_bytes", 10485760),
                backupCount=section.get("backup_count", 5),
            )
        )

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        setattr(handler, HANDLER_TAG, True)
        root_logger.addHandler(handler)

    log_with_context(
        root_logger,
        logging.INFO,
        "Logging configured",
        log_level=level_name,
        log_format=log_format,
        log_file=log_file or "disabled",
    )


def log_with_context(logger: logging.Logger, level: int, message: str, **context):
    """
    Log a message with structured context fields

    Args:
        logger: Logger instance
        level: Logging level (logging.INFO, logging.WARNING, etc.)
        message: Log message
        **context: Key-value pairs added to JSON output / the text suffix
    """
    logger.log(level, message, extra={"extra_fields": context}, stacklevel=2)
