"""Logging setup.

Human readable lines while developing, one JSON object per line otherwise.
Tokens and request bodies are never logged.
"""
from datetime import datetime, timezone
from typing import Any, Dict, Tuple
import logging
import sys

from pythonjsonlogger import jsonlogger

PRETTY_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Libraries that are too chatty at INFO
QUIET_LOGGERS = {
    "sqlalchemy": logging.ERROR,
    "uvicorn.access": logging.ERROR,
}


class FleetJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter adding an RFC-3339 UTC timestamp and source location."""

    def add_fields(
        self,
        log_record: Dict[str, Any],
        record: logging.LogRecord,
        message_dict: Dict[str, Any]
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = datetime.fromtimestamp(record.created, timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["source"] = {
            "file": record.filename,
            "line": record.lineno,
            "function": record.funcName,
        }


def _to_level(name: str) -> int:
    name = name.strip().upper()
    if name == "TRACE":
        return logging.DEBUG
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {name!r}")
    return level


def parse_log_filter(directives: str) -> Tuple[int, Dict[str, int]]:
    """Parse a filter such as ``"warning,nodefleet=debug,sqlalchemy.engine=info"``.

    A bare entry sets the root level, ``name=level`` entries set per-logger
    levels. Returns ``(root_level, {logger_name: level})``.
    """
    root_level = logging.INFO
    overrides: Dict[str, int] = {}
    for part in directives.split(","):
        part = part.strip()
        if not part:
            continue
        if "=" in part:
            name, _, level = part.partition("=")
            overrides[name.strip()] = _to_level(level)
        else:
            root_level = _to_level(part)
    return root_level, overrides


def setup_logging(level: str = "info", json_logs: bool = False) -> None:
    """Configure the root logger from a level filter string."""
    root_level, overrides = parse_log_filter(level)

    handler = logging.StreamHandler(sys.stdout)
    if json_logs:
        handler.setFormatter(FleetJsonFormatter(fmt="%(timestamp)s %(level)s %(name)s %(message)s"))
    else:
        handler.setFormatter(logging.Formatter(PRETTY_FORMAT))

    root_logger = logging.getLogger()
    root_logger.setLevel(root_level)
    root_logger.handlers = [handler]

    for name, quiet_level in QUIET_LOGGERS.items():
        if name not in overrides:
            logging.getLogger(name).setLevel(quiet_level)
    for name, logger_level in overrides.items():
        logging.getLogger(name).setLevel(logger_level)
