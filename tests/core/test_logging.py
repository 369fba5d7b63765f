"""Logging configuration tests."""

import json
import logging

from workout_tracker.core.config import Settings
from workout_tracker.core.logging import (
    REDACTED,
    ColoredConsoleFormatter,
    JSONFormatter,
    SensitiveDataFilter,
    get_logger,
    setup_logging,
)


def _record(msg: str, context: dict | None = None, level: int = logging.INFO):
    record = logging.LogRecord(
        name="workout_tracker.test",
        level=level,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=None,
        exc_info=None,
    )
    if context is not None:
        record.context = context
    return record


class TestSensitiveDataFilter:
    def test_redacts_password_in_message(self):
        record = _record("User password: secret123")
        SensitiveDataFilter().filter(record)

        assert "secret123" not in record.getMessage()
        assert REDACTED in record.getMessage()

    def test_redacts_token_assignment(self):
        record = _record("issued token=abc.def.ghi for user")
        SensitiveDataFilter().filter(record)

        assert "abc.def.ghi" not in record.getMessage()

    def test_redacts_sensitive_context_keys(self):
        record = _record(
            "Login attempt",
            context={
                "username": "runner",
                "password": "hunter2",
                "nested": {"access_token": "xyz"},
            },
        )
        SensitiveDataFilter().filter(record)

        assert record.context["username"] == "runner"
        assert record.context["password"] == REDACTED
        assert record.context["nested"]["access_token"] == REDACTED

    def test_keeps_ordinary_messages(self):
        record = _record("Workout created")
        assert SensitiveDataFilter().filter(record) is True
        assert record.getMessage() == "Workout created"


class TestFormatters:
    def test_json_formatter_includes_context(self):
        formatter = JSONFormatter("Workout Tracker API", "0.1.0")
        output = formatter.format(_record("Workout created", context={"workout_id": "w1"}))
        data = json.loads(output)

        assert data["message"] == "Workout created"
        assert data["level"] == "INFO"
        assert data["service"] == "Workout Tracker API"
        assert data["context"] == {"workout_id": "w1"}
        assert data["timestamp"].endswith("Z")

    def test_json_formatter_adds_source_for_errors(self):
        formatter = JSONFormatter("svc", "1")
        data = json.loads(formatter.format(_record("boom", level=logging.ERROR)))

        assert "source" in data

    def test_colored_formatter_appends_context(self):
        output = ColoredConsoleFormatter().format(
            _record("Workout created", context={"workout_id": "w1"})
        )
        assert "Context:" in output
        assert "w1" in output


class TestSetupLogging:
    def test_setup_logging_sets_level(self):
        logger = setup_logging(Settings(LOG_LEVEL="WARNING"), enable_console=False)
        assert logger.level == logging.WARNING

    def test_setup_logging_writes_json_file(self, tmp_path):
        log_file = tmp_path / "logs" / "app.log"
        settings = Settings(LOG_LEVEL="INFO", LOG_FILE=str(log_file), LOG_JSON_FORMAT=True)

        root = setup_logging(settings, enable_console=False)
        get_logger("workout_tracker.test").info(
            "Login attempt", extra={"context": {"password": "hunter2"}}
        )
        for handler in root.handlers:
            handler.flush()

        lines = log_file.read_text(encoding="utf-8").strip().splitlines()
        last = json.loads(lines[-1])
        assert last["message"] == "Login attempt"
        assert last["context"]["password"] == REDACTED

        for handler in list(root.handlers):
            handler.close()
            root.removeHandler(handler)
