"""Tests for structured logging of errors."""

from __future__ import annotations

import io

import orjson
import pytest

import errx
from errx import Code
from errx.config import ErrxSettings, LoggingSettings
from errx.observability import (
    BoundLogger,
    ConsoleRenderer,
    JsonRenderer,
    LogEntry,
    NoOpRenderer,
    configure_from_settings,
    configure_logging,
    get_logger,
)


class CaptureRenderer:
    """Collects entries instead of printing them."""

    def __init__(self) -> None:
        self.entries: list[LogEntry] = []

    def render(self, entry: LogEntry) -> None:
        self.entries.append(entry)


def _json_lines(buf: io.StringIO) -> list[dict]:
    return [orjson.loads(line) for line in buf.getvalue().splitlines()]


# ═════════════════════════════════════════════════════════════════════════════
# Bound Logger
# ═════════════════════════════════════════════════════════════════════════════


def test_bind_is_immutable() -> None:
    log = BoundLogger(context={"service": "api"})
    child = log.bind(request_id="r-1")

    assert log.context == {"service": "api"}
    assert child.context == {"service": "api", "request_id": "r-1"}
    assert child.unbind("service").context == {"request_id": "r-1"}


def test_level_filtering() -> None:
    capture = CaptureRenderer()
    log = BoundLogger(_renderer=capture, _level=30)

    log.info("dropped")
    log.warning("kept")

    assert [e.event for e in capture.entries] == ["kept"]


def test_errors_are_projected() -> None:
    capture = CaptureRenderer()
    err = errx.create(Code.NOT_FOUND, "missing").with_source("repo")

    BoundLogger(_renderer=capture).error("lookup failed", error=err, attempt=2)

    entry = capture.entries[0]
    assert entry.level == "error"
    assert entry.context == {"error": {"code": "not_found", "message": "missing", "source": "repo"}, "attempt": 2}


def test_error_value_adds_code() -> None:
    capture = CaptureRenderer()
    err = errx.wrap(ValueError("x"), Code.UNAVAILABLE, "db down")

    BoundLogger(_renderer=capture).error_value("query failed", err, table="users")

    ctx = capture.entries[0].context
    assert ctx["error.code"] == "unavailable"
    assert ctx["error"] == {"code": "unavailable", "message": "db down", "cause": "x"}
    assert ctx["table"] == "users"


def test_error_value_foreign_exception() -> None:
    capture = CaptureRenderer()

    BoundLogger(_renderer=capture).error_value("oops", RuntimeError("plain"))

    ctx = capture.entries[0].context
    assert ctx["error.code"] == "unknown"
    assert isinstance(ctx["error"], RuntimeError)


# ═════════════════════════════════════════════════════════════════════════════
# Renderers
# ═════════════════════════════════════════════════════════════════════════════


def test_json_renderer_keeps_projection_order() -> None:
    buf = io.StringIO()
    configure_logging(format="json", output=buf)
    err = (errx.wrap(errx.create(Code.DATA_LOSS, "inner"), Code.INTERNAL, "outer")
           .with_meta("k", 1)
           .with_source("svc"))

    get_logger("billing").error_value("charge failed", err)

    (line,) = _json_lines(buf)
    assert line["event"] == "charge failed"
    assert line["logger"] == "billing"
    assert line["level"] == "error"
    assert list(line["error"]) == ["code", "message", "source", "metadata", "cause"]
    assert line["error"]["cause"] == {"code": "data_loss", "message": "inner"}


def test_json_renderer_stringifies_unknown_values() -> None:
    buf = io.StringIO()
    JsonRenderer(output=buf).render(LogEntry(0.0, "info", "evt", {"obj": object}))

    assert _json_lines(buf)[0]["obj"] == str(object)


def test_console_renderer() -> None:
    buf = io.StringIO()
    renderer = ConsoleRenderer(output=buf, colors=False, show_timestamp=False)
    err = errx.create(Code.NOT_FOUND, "missing")

    BoundLogger(_renderer=renderer).error_value("lookup failed", err, attempt=2)

    assert buf.getvalue() == (
        '[error] lookup failed attempt=2 error={code="not_found" message="missing"} error.code="not_found"\n'
    )


def test_configure_logging_formats() -> None:
    assert isinstance(configure_logging(format="none"), NoOpRenderer)
    assert isinstance(configure_logging(format="json"), JsonRenderer)
    assert isinstance(configure_logging(format="console", colors=False), ConsoleRenderer)

    with pytest.raises(ValueError, match="Unknown format"):
        configure_logging(format="xml")


def test_configure_from_settings() -> None:
    buf = io.StringIO()
    settings = ErrxSettings(logging=LoggingSettings(format="json", level="WARNING"))

    renderer = configure_from_settings(settings, output=buf)
    log = get_logger("svc")
    log.info("hidden")
    log.warning("shown")

    assert isinstance(renderer, JsonRenderer)
    assert [line["event"] for line in _json_lines(buf)] == ["shown"]


# ═════════════════════════════════════════════════════════════════════════════
# Library Events
# ═════════════════════════════════════════════════════════════════════════════


def test_ensure_logs_wrapping_at_debug() -> None:
    buf = io.StringIO()
    configure_logging(format="json", level="DEBUG", output=buf)

    errx.ensure(ValueError("x"), Code.INTERNAL, "unexpected")
    errx.ensure(errx.create(Code.NOT_FOUND, "known"), Code.INTERNAL, "unexpected")

    (line,) = _json_lines(buf)
    assert line["event"] == "wrapping unclassified error"
    assert line["error_type"] == "ValueError"
    assert line["fallback"] == "internal"


def test_ensure_silent_by_default() -> None:
    buf = io.StringIO()
    configure_logging(format="json", output=buf)

    errx.ensure(ValueError("x"), Code.INTERNAL, "unexpected")

    assert buf.getvalue() == ""
