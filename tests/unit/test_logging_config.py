"""Tests for structured logging helpers."""

import json
import logging

import pytest

from scribe_agent.observability import add_context, clear_context, get_context, get_logger
from scribe_agent.observability.logging_config import ContextualFormatter, JSONFormatter


@pytest.fixture(autouse=True)
def reset_context():
    clear_context()
    yield
    clear_context()


def make_record(message: str = "hello", **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="scribe_agent.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg=message,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestLogContext:
    def test_add_and_clear(self):
        add_context(session_id="s1")
        add_context(tool="read_file")
        assert get_context() == {"session_id": "s1", "tool": "read_file"}

        clear_context()
        assert get_context() == {}

    def test_get_context_returns_copy(self):
        add_context(session_id="s1")
        get_context()["session_id"] = "changed"
        assert get_context() == {"session_id": "s1"}


class TestFormatters:
    def test_contextual_formatter_appends_fields(self):
        add_context(session_id="s1")
        formatted = ContextualFormatter("%(message)s").format(make_record())
        assert formatted == "hello [session_id=s1]"

    def test_contextual_formatter_without_context(self):
        assert ContextualFormatter("%(message)s").format(make_record()) == "hello"

    def test_json_formatter(self):
        add_context(session_id="s1")
        data = json.loads(JSONFormatter().format(make_record(path="notes/a.md")))

        assert data["message"] == "hello"
        assert data["level"] == "INFO"
        assert data["logger"] == "scribe_agent.test"
        assert data["context"] == {"session_id": "s1"}
        assert data["path"] == "notes/a.md"


def test_get_logger_uses_name():
    assert get_logger("scribe_agent.agent").name == "scribe_agent.agent"


class TestSetupLogging:
    @pytest.fixture(autouse=True)
    def restore_logger(self):
        logger = logging.getLogger("scribe_agent")
        yield
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
        logger.propagate = True
        logger.setLevel(logging.NOTSET)

    def test_json_to_file(self, tmp_path):
        log_file = tmp_path / "agent.log"
        from scribe_agent.observability import setup_logging

        setup_logging(level="debug", format_type="json", log_file=str(log_file))
        add_context(session_id="s1")
        get_logger("scribe_agent.tools").info("Executing tool")
        for handler in logging.getLogger("scribe_agent").handlers:
            handler.flush()

        record = json.loads(log_file.read_text(encoding="utf-8").splitlines()[-1])
        assert record["message"] == "Executing tool"
        assert record["logger"] == "scribe_agent.tools"
        assert record["context"] == {"session_id": "s1"}

    def test_configure_from_env(self, tmp_path, monkeypatch):
        log_file = tmp_path / "env.log"
        monkeypatch.setenv("LOG_LEVEL", "WARNING")
        monkeypatch.setenv("LOG_FORMAT", "text")
        monkeypatch.setenv("LOG_FILE", str(log_file))
        from scribe_agent.observability import configure_from_env

        configure_from_env()
        logger = get_logger("scribe_agent.agent")
        logger.info("hidden")
        logger.warning("shown")
        for handler in logging.getLogger("scribe_agent").handlers:
            handler.flush()

        text = log_file.read_text(encoding="utf-8")
        assert "shown" in text
        assert "hidden" not in text
        assert logging.getLogger("scribe_agent").level == logging.WARNING
