"""Tests for structured JSON logging and trace-id propagation."""
from __future__ import annotations

import json
import logging
import sys

from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.shared.logging import (
    JSONFormatter,
    TraceIDMiddleware,
    setup_logging,
    trace_id_var,
)


def _record(message: str = "hello %s", args=("world",), exc_info=None) -> logging.LogRecord:
    return logging.LogRecord(
        name="intake.parser",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=message,
        args=args,
        exc_info=exc_info,
    )


class TestJSONFormatter:
    """Tests for JSONFormatter."""

    def test_fields(self):
        payload = json.loads(JSONFormatter(service_name="intake").format(_record()))
        assert payload["level"] == "INFO"
        assert payload["service_name"] == "intake"
        assert payload["logger"] == "intake.parser"
        assert payload["message"] == "hello world"
        assert payload["trace_id"] == ""
        assert "timestamp" in payload
        assert "exception" not in payload

    def test_trace_id_from_context(self):
        token = trace_id_var.set("abc-123")
        try:
            payload = json.loads(JSONFormatter().format(_record()))
        finally:
            trace_id_var.reset(token)
        assert payload["trace_id"] == "abc-123"

    def test_exception_included(self):
        try:
            raise RuntimeError("bad things")
        except RuntimeError:
            record = _record(exc_info=sys.exc_info())
        payload = json.loads(JSONFormatter().format(record))
        assert payload["exception"] == "bad things"

    def test_extra_fields_included(self):
        record = _record()
        record.deliverable_count = 3
        payload = json.loads(JSONFormatter().format(record))
        assert payload["deliverable_count"] == 3
        assert "args" not in payload
        assert "levelno" not in payload


class TestSetupLogging:
    """Tests for setup_logging()."""

    def test_configures_single_json_handler(self):
        logger = setup_logging("intake-test", "debug")
        setup_logging("intake-test", "debug")
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, JSONFormatter)
        assert logger.propagate is False

    def test_unknown_level_defaults_to_info(self):
        logger = setup_logging("intake-test-level", "verbose")
        assert logger.level == logging.INFO


class TestTraceIDMiddleware:
    def test_header_matches_context(self):
        app = FastAPI()
        app.add_middleware(TraceIDMiddleware)

        @app.get("/trace")
        async def trace():
            return {"trace_id": trace_id_var.get()}

        response = TestClient(app).get("/trace")
        assert response.headers["X-Trace-ID"] == response.json()["trace_id"]
        assert trace_id_var.get() == ""

    def test_incoming_trace_id_reused(self):
        app = FastAPI()
        app.add_middleware(TraceIDMiddleware)

        @app.get("/trace")
        async def trace():
            return {"trace_id": trace_id_var.get()}

        response = TestClient(app).get("/trace", headers={"X-Trace-ID": "upstream-7"})
        assert response.headers["X-Trace-ID"] == "upstream-7"
        assert response.json()["trace_id"] == "upstream-7"
