from __future__ import annotations

import contextvars
import logging
import time
from typing import Optional
from uuid import uuid4

from runpace.logging_config import JSONFormatter, setup_logging


_request_id_var: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar("request_id", default=None)
_logging_configured = False
_STANDARD_LOG_RECORD_FIELDS = set(logging.makeLogRecord({}).__dict__.keys())


def get_request_id() -> Optional[str]:
    return _request_id_var.get()


def set_request_id(value: Optional[str]):
    return _request_id_var.set(value)


def reset_request_id(token) -> None:
    _request_id_var.reset(token)


def new_request_id() -> str:
    return uuid4().hex


class JsonFormatter(JSONFormatter):
    """Engine log format plus the current request id and top-level request fields."""

    def base_entry(self, record: logging.LogRecord) -> dict[str, object]:
        payload = super().base_entry(record)
        request_id = get_request_id()
        if request_id:
            payload["request_id"] = request_id
        for key, value in record.__dict__.items():
            if key in _STANDARD_LOG_RECORD_FIELDS or key.startswith(("_", "ctx_")):
                continue
            if key in payload:
                continue
            payload[key] = value
        return payload


def configure_logging(level: str = "INFO") -> None:
    global _logging_configured
    if _logging_configured:
        return

    # Replace default handlers so uvicorn and app lines share one JSON stream
    logging.getLogger().handlers.clear()
    setup_logging(str(level), formatter=JsonFormatter())

    for logger_name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logger = logging.getLogger(logger_name)
        logger.handlers.clear()
        logger.propagate = True

    _logging_configured = True


def request_log_fields(*, method: str, path: str, status_code: int, duration_ms: float, client_ip: Optional[str]) -> dict[str, object]:
    return {
        "method": method,
        "path": path,
        "status_code": int(status_code),
        "duration_ms": round(float(duration_ms), 2),
        "client_ip": client_ip or "",
    }


def monotonic_ms() -> float:
    return time.perf_counter() * 1000.0
