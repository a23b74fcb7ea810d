"""Tests for the structured JSON logger."""

import json
import logging

import pytest

from nomina_extractor.logger import (
    StructuredFormatter,
    clear_context,
    set_context,
)


def _record(msg: str, **fields) -> logging.LogRecord:
    record = logging.LogRecord(
        name="nomina_extractor",
        level=logging.ERROR,
        pathname="page_processor.py",
        lineno=42,
        msg=msg,
        args=(),
        exc_info=None,
        func="process_document",
    )
    if fields:
        record.extra_fields = fields
    return record


@pytest.fixture(autouse=True)
def reset_context():
    clear_context()
    yield
    clear_context()


class TestStructuredFormatter:
    def test_slog_shape(self):
        entry = json.loads(StructuredFormatter().format(_record("page extraction failed")))
        assert entry["level"] == "ERROR"
        assert entry["msg"] == "page extraction failed"
        assert entry["source"] == {
            "function": "process_document",
            "file": "page_processor.py",
            "line": 42,
        }
        assert "time" in entry

    def test_includes_fields_and_context(self):
        set_context(request_id="4f1c9a")
        line = StructuredFormatter().format(
            _record("page extraction failed", page_number=2, error="cannot decode font")
        )
        entry = json.loads(line)
        assert entry["request_id"] == "4f1c9a"
        assert entry["page_number"] == 2
        assert entry["error"] == "cannot decode font"

    def test_keeps_non_ascii(self):
        line = StructuredFormatter().format(_record("página", detalle="contraseña"))
        assert "contraseña" in line


class TestContext:
    def test_set_merges_fields(self):
        set_context(request_id="a")
        set_context(path="/api/extract-nomina")
        entry = json.loads(StructuredFormatter().format(_record("request started")))
        assert entry["request_id"] == "a"
        assert entry["path"] == "/api/extract-nomina"

    def test_clear(self):
        set_context(request_id="a")
        clear_context()
        entry = json.loads(StructuredFormatter().format(_record("request finished")))
        assert "request_id" not in entry
