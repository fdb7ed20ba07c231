"""
Logging setup for LiteRecord.

The library itself only creates loggers under the ``literecord`` namespace and
attaches context through ``extra=`` (database, table, sql, param_count...).
Applications, the CLI and the seeding script call `configure_logging` once to
route those records to stderr, either as console lines or as one JSON object
per line.

    from literecord.utils.logging import configure_logging, get_logger

    configure_logging(level="DEBUG", json_logs=True)
    log = get_logger(__name__)
    log.debug("Executing statement", extra={"sql": sql, "param_count": 2})
"""

from __future__ import annotations

import json
import logging
import logging.config
from typing import Any, Dict, Optional

# Attributes every LogRecord carries; anything else came in through `extra=`.
_RESERVED = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime", "extra"}

_CONSOLE_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def _json_formatter(record: logging.LogRecord) -> str:
    """Serialize `record` and its ``extra=`` context as one JSON line."""
    payload: Dict[str, Any] = {
        "level": record.levelname,
        "logger": record.name,
        "message": record.getMessage(),
    }
    payload.update(
        (key, value)
        for key, value in vars(record).items()
        if key not in _RESERVED and not key.startswith("_")
    )
    # Older call sites pass extra={"extra": {...}}.
    nested = vars(record).get("extra")
    if isinstance(nested, dict):
        payload.update(nested)
    if record.exc_info:
        payload["exc_info"] = logging.Formatter().formatException(record.exc_info)
    if record.stack_info:
        payload["stack_info"] = record.stack_info
    return json.dumps(payload, default=str)


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        return _json_formatter(record)


def _logging_config(level: str, json_logs: bool) -> Dict[str, Any]:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "console": {"format": _CONSOLE_FORMAT, "datefmt": "%H:%M:%S"},
            "json": {"()": JsonFormatter},
        },
        "handlers": {
            "stderr": {
                "class": "logging.StreamHandler",
                "formatter": "json" if json_logs else "console",
                "level": level,
            }
        },
        "loggers": {
            "literecord": {"level": level},
        },
        "root": {"handlers": ["stderr"], "level": level},
    }


def configure_logging(level: str = "INFO", json_logs: bool = False) -> None:
    """
    Route log records to stderr.

    Parameters
    ----------
    level : str
        Level name applied to the handler, the root logger and ``literecord``.
        ``DEBUG`` shows every statement executed (SQL text and parameter
        count, never the values).
    json_logs : bool
        Emit one JSON object per record instead of console lines.
    """
    logging.config.dictConfig(_logging_config(level.upper(), json_logs))


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name)


__all__ = ["configure_logging", "get_logger", "JsonFormatter"]
