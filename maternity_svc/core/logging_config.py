"""
Structured logging configuration.

Every log line is a single JSON object (or a readable text line when
LOG_FORMAT=text). Lines emitted while a request is being served carry that
request's id, which LoggingMiddleware binds for the duration of the request.

Log Structure (JSON):
{
    "timestamp": "2025-01-15T10:30:00.000Z",
    "level": "INFO",
    "logger": "maternity_svc.services.health_service",
    "message": "Health record submitted",
    "request_id": "1f2e3d4c",
    "extra": {"patient_id": "1736935800000", "record_type": "blood_pressure"}
}

Usage:
    from maternity_svc.core.logging_config import setup_logging

    setup_logging()
    logger.info("Submitting record", extra={"patient_id": patient_id})
"""
import json
import logging
import logging.config
import os
from contextvars import ContextVar, Token
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from maternity_svc.core.datetime_utils import format_iso

_request_id: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

# Attributes every LogRecord carries; anything else came in through extra={...}.
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {
    "message", "asctime", "request_id",
}


def current_request_id() -> Optional[str]:
    return _request_id.get()


def bind_request_id(request_id: str) -> Token:
    """Attach a request id to the current context; pass the token to reset_request_id."""
    return _request_id.set(request_id)


def reset_request_id(token: Token) -> None:
    _request_id.reset(token)


class RequestIdFilter(logging.Filter):
    """Stamps each record with the id of the request being served ("-" outside one)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = current_request_id() or "-"
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per line, timestamps in UTC with millisecond precision."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": format_iso(datetime.fromtimestamp(record.created, tz=timezone.utc)),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        request_id = getattr(record, "request_id", None) or current_request_id()
        if request_id and request_id != "-":
            entry["request_id"] = request_id

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        extra = {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        }
        if extra:
            entry["extra"] = extra

        return json.dumps(entry, default=str, ensure_ascii=False)


def setup_logging(
    level: str = "INFO",
    json_format: bool = True,
    include_uvicorn: bool = True
) -> None:
    """
    Configure the root logger once at startup.

    Args:
        level: Log level name.
        json_format: JSON lines if True, human-readable text otherwise.
        include_uvicorn: Route uvicorn's loggers through the same handler.

    Environment Variables:
        LOG_LEVEL: Overrides ``level``.
        LOG_FORMAT: "json" or "text"; overrides ``json_format``.
    """
    level = os.environ.get("LOG_LEVEL", level).upper()
    use_json = os.environ.get("LOG_FORMAT", "json" if json_format else "text").lower() == "json"

    loggers: Dict[str, Dict[str, Any]] = {
        "maternity_svc": {"level": level, "handlers": [], "propagate": True},
    }
    if include_uvicorn:
        for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
            loggers[name] = {"handlers": [], "propagate": True}

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {"request_id": {"()": RequestIdFilter}},
        "formatters": {
            "json": {"()": JSONFormatter},
            "text": {
                "format": "%(asctime)s | %(levelname)-8s | %(request_id)s | %(name)s | %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "stdout": {
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stdout",
                "formatter": "json" if use_json else "text",
                "filters": ["request_id"],
            },
        },
        "root": {"level": level, "handlers": ["stdout"]},
        "loggers": loggers,
    })

    logging.getLogger(__name__).info(
        "Logging configured",
        extra={"level": level, "format": "json" if use_json else "text"}
    )
