"""Structured JSON logging with trace_id support.

Every record is one JSON line.  Attributes passed through ``extra=`` (for
example the deliverable count of a parse) are copied into the line next to
the standard fields.
"""
from __future__ import annotations

import contextvars
import json
import logging
import uuid
from datetime import datetime, timezone
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

TRACE_HEADER = "X-Trace-ID"

# Context variable for trace_id
trace_id_var: contextvars.ContextVar[str] = contextvars.ContextVar(
    "trace_id", default=""
)

# Attributes every LogRecord carries; anything else came in through ``extra=``.
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime", "taskName"}


class JSONFormatter(logging.Formatter):
    """Render each record as a single JSON object per line."""

    def __init__(self, service_name: str = "unknown") -> None:
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "service_name": self.service_name,
            "logger": record.name,
            "trace_id": trace_id_var.get(""),
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRS and not key.startswith("_"):
                log_entry.setdefault(key, value)
        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = str(record.exc_info[1])
        return json.dumps(log_entry, default=str)


def setup_logging(service_name: str, level: str = "INFO") -> logging.Logger:
    """Install the JSON handler on the *service_name* logger tree.

    Child loggers (``<service_name>.parser`` and friends) propagate to the
    handler installed here; the tree itself does not propagate to root.
    Calling this again replaces the handler rather than adding a second one.
    """
    logger = logging.getLogger(service_name)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.handlers.clear()

    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter(service_name=service_name))
    logger.addHandler(handler)
    logger.propagate = False

    return logger


class TraceIDMiddleware(BaseHTTPMiddleware):
    """Bind a trace_id to each request.

    A caller-supplied ``X-Trace-ID`` header is reused so one id follows a
    description through every service that touches it; otherwise a fresh
    UUID is minted.
    """

    async def dispatch(self, request: Request, call_next: Any) -> Response:
        request_trace_id = request.headers.get(TRACE_HEADER) or str(uuid.uuid4())
        token = trace_id_var.set(request_trace_id)
        try:
            response = await call_next(request)
        finally:
            trace_id_var.reset(token)
        response.headers[TRACE_HEADER] = request_trace_id
        return response
