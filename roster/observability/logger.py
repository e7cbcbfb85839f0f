"""
Structured logging for student-roster

Every module logs through a child of the "student-roster" logger (see
get_logger), so setup_logger() configures the whole package in one call.
Console records are JSON lines by default, rendered with python-json-logger;
"text" gives a plain one-line format. When a log file is given it receives
the same records.

Only record ids and counts are logged, never names, emails or phone numbers.
"""
import logging
import os
import sys
import time
from contextlib import contextmanager
from pathlib import Path

from pythonjsonlogger import jsonlogger

DEFAULT_LOGGER_NAME = "student-roster"

JSON_FIELDS = "%(timestamp)s %(level)s %(logger)s %(module)s %(function)s %(message)s"
TEXT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


class RosterJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter emitting timestamp, level, logger, module and function keys"""

    def add_fields(self, log_record: dict, record: logging.LogRecord, message_dict: dict) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = log_record.get("timestamp") or self.formatTime(record, self.datefmt)
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["module"] = record.module
        log_record["function"] = record.funcName


def _formatter(format_type: str) -> logging.Formatter:
    if format_type == "text":
        return logging.Formatter(TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    return RosterJsonFormatter(JSON_FIELDS, datefmt="%Y-%m-%dT%H:%M:%S")


def setup_logger(
    name: str = DEFAULT_LOGGER_NAME,
    level: str | None = None,
    format_type: str = "json",
    log_file: str | Path | None = None,
) -> logging.Logger:
    """
    Configure the package logger; safe to call more than once.

    Args:
        name: Logger to configure
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL; falls back to the
               LOG_LEVEL environment variable, then INFO. Unknown names mean INFO.
        format_type: "json" or "text"
        log_file: Optional file mirroring the console output; its directory
                  is created when missing

    Returns:
        The configured logger
    """
    level_name = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    log_level = logging.getLevelName(level_name)
    if not isinstance(log_level, int):
        log_level = logging.INFO

    logger = logging.getLogger(name)
    logger.setLevel(log_level)
    logger.propagate = False

    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file is not None:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path, encoding="utf-8"))

    formatter = _formatter(format_type)
    for handler in handlers:
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Logger for a module, nested under the package logger.

    get_logger("roster.batch.transfer") -> "student-roster.roster.batch.transfer"
    """
    if not name or name == DEFAULT_LOGGER_NAME:
        return logging.getLogger(DEFAULT_LOGGER_NAME)
    return logging.getLogger(f"{DEFAULT_LOGGER_NAME}.{name}")


@contextmanager
def log_operation(operation_name: str, logger: logging.Logger | None = None, **extra_fields):
    """
    Log the start and end of an operation with its duration

    Exceptions are logged with their type and message, then re-raised.

    Usage:
        with log_operation("Importing students", logger=logger, file="students.csv"):
            ...
    """
    logger = logger or get_logger()
    fields = {"operation": operation_name, **extra_fields}
    started = time.perf_counter()

    logger.info(f"Starting: {operation_name}", extra=fields)
    try:
        yield
    except Exception as e:
        logger.error(
            f"Failed: {operation_name}",
            extra={
                **fields,
                "duration_seconds": round(time.perf_counter() - started, 3),
                "status": "error",
                "error_type": type(e).__name__,
                "error_message": str(e),
            },
            exc_info=True,
        )
        raise

    logger.info(
        f"Completed: {operation_name}",
        extra={
            **fields,
            "duration_seconds": round(time.perf_counter() - started, 3),
            "status": "success",
        },
    )
