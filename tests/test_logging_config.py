"""Tests for structured logging and low-stock subscriber isolation."""

import io
import json
import logging

import pytest

from mapcraft.logging_config import configure_logging, get_logger, reset_logging
from tests.builders import ledger_with


@pytest.fixture
def log_stream():
    stream = io.StringIO()
    configure_logging(level=logging.DEBUG, stream=stream)
    yield stream
    reset_logging()


def _lines(stream):
    return [json.loads(line) for line in stream.getvalue().splitlines()]


def test_extra_fields_become_json_keys(log_stream):
    get_logger("test").info("material_checked", extra={"material_id": "WOOD_OAK", "units": 3})

    [entry] = _lines(log_stream)
    assert entry["logger"] == "mapcraft.test"
    assert entry["message"] == "material_checked"
    assert entry["material_id"] == "WOOD_OAK"
    assert entry["units"] == 3


def test_failing_subscriber_is_logged_and_others_still_run(log_stream):
    ledger, _, _ = ledger_with(("WOOD_OAK", 5, 0, 2))
    received = []

    def broken(event):
        raise RuntimeError("pager offline")

    ledger.subscribe(broken)
    ledger.subscribe(received.append)

    ledger.reserve({"WOOD_OAK": 4})

    assert len(received) == 1
    failures = [e for e in _lines(log_stream) if e["message"] == "low_stock_subscriber_failed"]
    assert failures[0]["exc_type"] == "RuntimeError"
    assert failures[0]["level"] == "ERROR"
