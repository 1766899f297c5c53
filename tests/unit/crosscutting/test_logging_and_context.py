"""
Name: Logging and Operation Context Tests

Responsibilities:
  - JSONFormatter: payload shape, redaction of personal data, context ids
  - setup_logger: idempotent handler configuration
  - operation_scope: binds and restores the operation context
"""

import io
import json
import logging
import sys

import pytest

from orgdir.context import get_context_dict, operation_scope
from orgdir.crosscutting.logger import JSONFormatter, setup_logger


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="orgdir.test",
        level=logging.INFO,
        pathname="test.py",
        lineno=1,
        msg="User created. user_id=%s",
        args=("u1",),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.mark.unit
class TestJSONFormatter:
    def test_payload_fields(self):
        payload = json.loads(JSONFormatter().format(_record()))

        assert payload["level"] == "INFO"
        assert payload["logger"] == "orgdir.test"
        assert payload["message"] == "User created. user_id=u1"

    def test_email_value_redacted(self):
        """R: Personal data never reaches the log line."""
        output = JSONFormatter().format(_record(email="ana@acme.io"))

        assert "ana@acme.io" not in output
        assert "***REDACTED***" in output

    def test_extra_fields_are_logged(self):
        payload = json.loads(
            JSONFormatter().format(
                _record(user_id="u1", violations=["SymmetryViolation"])
            )
        )

        assert payload["user_id"] == "u1"
        assert payload["violations"] == ["SymmetryViolation"]

    def test_sets_are_serialized_sorted(self):
        payload = json.loads(JSONFormatter().format(_record(ids={"b", "a"})))
        assert payload["ids"] == ["a", "b"]

    def test_includes_operation_context(self):
        with operation_scope("set_manager") as op_id:
            payload = json.loads(JSONFormatter().format(_record()))

        assert payload["operation"] == "set_manager"
        assert payload["operation_id"] == op_id

    def test_includes_exception(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = _record()
            record.exc_info = sys.exc_info()

        payload = json.loads(JSONFormatter().format(record))

        assert payload["exception"]["type"] == "ValueError"
        assert payload["exception"]["message"] == "boom"


@pytest.mark.unit
class TestSetupLogger:
    def test_does_not_duplicate_handlers(self):
        name = "orgdir.tests.setup"
        first = setup_logger(name, level="debug")
        second = setup_logger(name, level="WARNING", use_json=False)

        marked = [h for h in second.handlers if getattr(h, "_orgdir_handler", False)]
        assert first is second
        assert len(marked) == 1
        assert second.level == logging.WARNING
        assert not isinstance(marked[0].formatter, JSONFormatter)

    def test_writes_json_to_given_stream(self):
        stream = io.StringIO()
        log = setup_logger("orgdir.tests.stream", stream=stream)
        log.propagate = False

        log.info("hello", extra={"user_id": "u9"})

        line = json.loads(stream.getvalue().strip())
        assert line["message"] == "hello"
        assert line["user_id"] == "u9"


@pytest.mark.unit
class TestOperationContext:
    def test_scope_restores_previous_values(self):
        with operation_scope("outer") as outer_id:
            with operation_scope("inner") as inner_id:
                assert get_context_dict() == {
                    "operation_id": inner_id,
                    "operation": "inner",
                }
            assert inner_id != outer_id
            assert get_context_dict() == {"operation_id": outer_id, "operation": "outer"}

    def test_empty_outside_any_scope(self):
        assert get_context_dict() == {}
