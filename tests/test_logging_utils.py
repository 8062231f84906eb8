import logging

from todo_api.logging_utils import (
    CorrelationFilter,
    get_request_id,
    reset_request_id,
    set_request_id,
)


def _record() -> logging.LogRecord:
    return logging.LogRecord("t", logging.INFO, __file__, 1, "msg", None, None)


def test_filter_stamps_current_request_id():
    token = set_request_id("req-1")
    try:
        record = _record()
        assert CorrelationFilter().filter(record) is True
        assert record.request_id == "req-1"
        assert get_request_id() == "req-1"
    finally:
        reset_request_id(token)


def test_filter_uses_dash_outside_a_request():
    record = _record()
    CorrelationFilter().filter(record)
    assert record.request_id == "-"
