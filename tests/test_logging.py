"""
Structured logger - level routing and message shape.
"""

import logging

from util.logging import StructuredLogger


def test_status_selects_level(caplog):
    structured = StructuredLogger("usersync.test")
    with caplog.at_level(logging.INFO, logger="usersync.test"):
        structured.log_operation("sync.insert", "success")
        structured.log_operation("sync.skip", "skipped")
        structured.log_operation("sync.update", "failed")

    levels = [record.levelno for record in caplog.records]
    assert levels == [logging.INFO, logging.WARNING, logging.ERROR]


def test_sync_summary_message(caplog):
    structured = StructuredLogger("usersync.test")
    with caplog.at_level(logging.INFO, logger="usersync.test"):
        structured.log_sync_summary("saveUsers", {"inserted": 2, "errors": 0})

    message = caplog.records[-1].getMessage()
    assert "Operation: sync.batch" in message
    assert "'source': 'saveUsers'" in message
    assert "'inserted': 2" in message


def test_record_error_is_truncated(caplog):
    structured = StructuredLogger("usersync.test")
    with caplog.at_level(logging.INFO, logger="usersync.test"):
        structured.log_sync_record("insert", 7, status="failed", error="x" * 500)

    message = caplog.records[-1].getMessage()
    assert "x" * 100 in message
    assert "x" * 101 not in message


def test_use_handler_replaces_handlers():
    structured = StructuredLogger("usersync.test.handlers")
    handler = logging.NullHandler()
    structured.use_handler(handler)
    assert structured.logger.handlers == [handler]
