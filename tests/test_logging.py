"""Tests for the structured logging system (payroll_kernel/logging_config.py)."""

import json
import logging
from datetime import date
from decimal import Decimal
from io import StringIO
from uuid import uuid4

import pytest

from payroll_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    get_logger,
    reset_logging,
)


@pytest.fixture(autouse=True)
def _clean_logging():
    """Reset logging state between tests."""
    reset_logging()
    LogContext.clear()
    yield
    LogContext.clear()
    reset_logging()
    configure_logging(level=logging.DEBUG)


def _make_handler() -> tuple[logging.Handler, StringIO]:
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    return handler, stream


def _parse_log(stream: StringIO) -> dict:
    """Parse the first JSON log line from a stream."""
    line = stream.getvalue().strip().split("\n")[0]
    return json.loads(line)


def _parse_all_logs(stream: StringIO) -> list[dict]:
    lines = stream.getvalue().strip().split("\n")
    return [json.loads(line) for line in lines if line]


# ---------------------------------------------------------------------------
# StructuredFormatter tests
# ---------------------------------------------------------------------------


class TestStructuredFormatter:
    """Tests for JSON log output format."""

    def test_basic_json_output(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        get_logger("test").info("hello")

        record = _parse_log(stream)
        assert record["level"] == "INFO"
        assert record["message"] == "hello"
        assert record["logger"] == "payroll_kernel.test"
        assert "ts" in record

    def test_extra_fields_included(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        get_logger("test").info("employee_created", extra={"employee_id": 7, "kind": "horista"})

        record = _parse_log(stream)
        assert record["employee_id"] == 7
        assert record["kind"] == "horista"

    def test_context_fields_included(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        LogContext.set(command_name="post_sale", run_date="2005-01-07")
        get_logger("test").info("msg")

        record = _parse_log(stream)
        assert record["command_name"] == "post_sale"
        assert record["run_date"] == "2005-01-07"

    def test_payroll_exception_fields_extracted(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        from payroll_kernel.exceptions import WrongEmployeeTypeError

        try:
            raise WrongEmployeeTypeError(3, "comissionado", "horista")
        except WrongEmployeeTypeError:
            get_logger("test").error("wrong_type", exc_info=True)

        record = _parse_log(stream)
        assert record["exc_code"] == "WRONG_EMPLOYEE_TYPE"
        assert record["exc_type"] == "WrongEmployeeTypeError"
        assert record["exc_employee_id"] == 3
        assert record["exc_expected"] == "comissionado"
        assert "traceback" in record

    def test_uuid_date_and_decimal_serialized(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        uid = uuid4()
        get_logger("test").info(
            "typed",
            extra={"receipt_id": uid, "work_date": date(2005, 1, 3), "hours": Decimal("7.5")},
        )

        record = _parse_log(stream)
        assert record["receipt_id"] == str(uid)
        assert record["work_date"] == "2005-01-03"
        assert record["hours"] == "7.5"

    def test_debug_suppressed_at_info(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        logger.info("first")
        logger.debug("second")

        assert [r["message"] for r in _parse_all_logs(stream)] == ["first"]


# ---------------------------------------------------------------------------
# LogContext tests
# ---------------------------------------------------------------------------


class TestLogContext:

    def test_set_and_get(self):
        LogContext.set(correlation_id="x", employee_id="5")
        assert LogContext.get_all() == {"correlation_id": "x", "employee_id": "5"}

    def test_clear(self):
        LogContext.set(command_id="x")
        LogContext.clear()
        assert LogContext.get_all() == {}

    def test_bind_restores_previous(self):
        LogContext.set(command_name="outer")
        with LogContext.bind(command_name="inner"):
            assert LogContext.get_all()["command_name"] == "inner"
        assert LogContext.get_all()["command_name"] == "outer"

    def test_bind_skips_none(self):
        with LogContext.bind(command_name="x", employee_id=None):
            assert "employee_id" not in LogContext.get_all()


# ---------------------------------------------------------------------------
# configure_logging
# ---------------------------------------------------------------------------


class TestConfigureLogging:

    def test_idempotent(self):
        handler, _ = _make_handler()
        configure_logging(handler=handler)
        configure_logging(handler=handler)
        assert len(logging.getLogger("payroll_kernel").handlers) == 1

    def test_reset_clears_handlers(self):
        handler, _ = _make_handler()
        configure_logging(handler=handler)
        reset_logging()
        assert logging.getLogger("payroll_kernel").handlers == []
