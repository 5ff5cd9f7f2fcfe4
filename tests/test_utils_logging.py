"""
Tests for utils.logging module.

Tests cover:
- JSON log line structure and optional fields
- Secret redaction in messages, args and context
- Level selection in setup_logging()
- log_with_context() extras
"""

import json
import logging
import sys

import pytest

from ai_visibility_tracker.utils.logging import (
    JSONFormatter,
    SecretRedactingFilter,
    get_logger,
    log_with_context,
    setup_logging,
)


def make_record(msg, args=None, **extra):
    record = logging.LogRecord(
        name="ai_visibility_tracker.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=args,
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


class TestJSONFormatter:
    def test_basic_fields(self):
        entry = json.loads(JSONFormatter().format(make_record("Loaded %d brands", (4,))))

        assert entry["level"] == "INFO"
        assert entry["component"] == "ai_visibility_tracker.test"
        assert entry["message"] == "Loaded 4 brands"
        assert entry["timestamp"].endswith("Z")
        assert "context" not in entry
        assert "run_id" not in entry

    def test_context_and_run_id(self):
        record = make_record("done", context={"prompts": 10}, run_id="2025-11-02T08-00-00Z")

        entry = json.loads(JSONFormatter().format(record))

        assert entry["context"] == {"prompts": 10}
        assert entry["run_id"] == "2025-11-02T08-00-00Z"

    def test_exception_included(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = make_record("failed")
            record.exc_info = sys.exc_info()

        entry = json.loads(JSONFormatter().format(record))

        assert "RuntimeError: boom" in entry["exception"]


class TestSecretRedactingFilter:
    def test_redacts_openai_key_in_message(self):
        record = make_record("Using key sk-proj-abcdefghijklmnopqrstuvwxyz1234")

        SecretRedactingFilter().filter(record)

        assert record.msg == "Using key sk-...1234"

    def test_redacts_bearer_token_in_args(self):
        record = make_record("Header: %s", ("Bearer abcdefghijklmnopqrstuvwxyz9876",))

        SecretRedactingFilter().filter(record)

        assert record.args == ("Bearer ***9876",)

    def test_redacts_nested_context(self):
        record = make_record(
            "ctx",
            context={"provider": {"key": "xai-abcdefghijklmnopqrstuvwxyz5555"}, "n": 3},
        )

        SecretRedactingFilter().filter(record)

        assert record.context == {"provider": {"key": "xai-...5555"}, "n": 3}

    def test_short_values_untouched(self):
        record = make_record("sk-short is not a key")

        assert SecretRedactingFilter().filter(record) is True
        assert record.msg == "sk-short is not a key"


class TestSetupLogging:
    @pytest.mark.parametrize(
        ("verbose", "quiet_logs", "expected"),
        [
            (False, False, logging.INFO),
            (True, False, logging.DEBUG),
            (False, True, logging.WARNING),
            (True, True, logging.DEBUG),
        ],
    )
    def test_levels(self, restore_root_logger, verbose, quiet_logs, expected):
        setup_logging(verbose=verbose, quiet_logs=quiet_logs)

        assert logging.getLogger().level == expected

    def test_single_redacting_handler(self, restore_root_logger):
        setup_logging()
        setup_logging()

        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0].formatter, JSONFormatter)
        assert any(isinstance(f, SecretRedactingFilter) for f in handlers[0].filters)


class TestLogWithContext:
    def test_passes_extras(self, caplog):
        logger = get_logger("ai_visibility_tracker.ctx")

        with caplog.at_level(logging.INFO, logger="ai_visibility_tracker.ctx"):
            log_with_context(logger, logging.INFO, "Collected", context={"n": 2}, run_id="r1")

        record = caplog.records[-1]
        assert record.getMessage() == "Collected"
        assert record.context == {"n": 2}
        assert record.run_id == "r1"

    def test_without_extras(self, caplog):
        logger = get_logger("ai_visibility_tracker.ctx")

        with caplog.at_level(logging.INFO, logger="ai_visibility_tracker.ctx"):
            log_with_context(logger, logging.INFO, "Plain")

        assert not hasattr(caplog.records[-1], "context")
