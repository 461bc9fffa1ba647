import logging

from core.context import reset_current_request_id, set_current_request_id
from core.logging import RequestIdFilter


def _record():
    return logging.LogRecord("loyalty", logging.INFO, __file__, 1, "hello", None, None)


def test_filter_stamps_current_request_id():
    set_current_request_id("req-1")
    try:
        record = _record()
        assert RequestIdFilter().filter(record) is True
        assert record.request_id == "req-1"
    finally:
        reset_current_request_id()


def test_filter_uses_dash_outside_requests():
    record = _record()
    RequestIdFilter().filter(record)

    assert record.request_id == "-"
