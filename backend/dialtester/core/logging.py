"""
Logging configuration.

Records go to stdout, as JSON lines by default or as plain text for local
runs. Session-scoped code logs through ``get_logger(name, session_id=...)``
so every record it emits carries the session id.
"""
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional, Union

from dialtester.core.config import settings

# Keys callers may attach with ``extra=`` that the JSON formatter keeps
STRUCTURED_KEYS = ("request", "response", "session_id", "data_point")

# Third-party loggers and the most verbose level they may emit at
_QUIET_LOGGERS = {
    "sqlalchemy.engine": logging.WARNING,
    "sqlalchemy.pool": logging.WARNING,
    "aiosqlite": logging.WARNING,
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "uvicorn": logging.INFO,
    "uvicorn.error": logging.INFO,
    "uvicorn.access": logging.INFO,
}


class JSONFormatter(logging.Formatter):
    """One JSON object per record, tagged with service and environment."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "service": settings.APP_NAME,
            "environment": settings.ENVIRONMENT,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
        }

        for key in STRUCTURED_KEYS:
            value = getattr(record, key, None)
            if value is not None:
                log_data[key] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class SessionLoggerAdapter(logging.LoggerAdapter):
    """Adds ``session_id`` to every record without dropping caller extras."""

    def process(self, msg, kwargs):
        kwargs["extra"] = {**self.extra, **(kwargs.get("extra") or {})}
        return msg, kwargs


def setup_logging(level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """
    Install a single stdout handler on the root logger.

    Args:
        level: Overrides ``LOG_LEVEL``
        log_format: ``json`` or ``text``; overrides ``LOG_FORMAT``
    """
    log_level = getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO)

    if (log_format or settings.LOG_FORMAT) == "json":
        formatter: logging.Formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    for name, ceiling in _QUIET_LOGGERS.items():
        quiet = logging.getLogger(name)
        # Let uvicorn's records reach the root handler instead of its own
        quiet.handlers.clear()
        quiet.propagate = True
        quiet.setLevel(max(ceiling, log_level))


def get_logger(name: str, session_id: Optional[str] = None) -> Union[logging.Logger, SessionLoggerAdapter]:
    """Get a logger, bound to a session when ``session_id`` is given."""
    logger = logging.getLogger(name)
    if session_id is None:
        return logger
    return SessionLoggerAdapter(logger, {"session_id": session_id})
