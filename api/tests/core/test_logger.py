"""Unit tests for core.logger module.

- configure_logging() installs a single root handler
- LOG_LEVEL and LOG_FORMAT environment variables are honored
- Noisy third-party loggers are quieted
"""

import json
import logging

import pytest

from core.logger import configure_logging, get_logger


@pytest.fixture(autouse=True)
def _clean_root_logger():
    """Save and restore root logger state around each test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)


@pytest.mark.unit
class TestConfigureLogging:
    def test_installs_single_root_handler(self):
        configure_logging()

        assert len(logging.getLogger().handlers) == 1

    def test_log_level_from_environment(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")

        configure_logging()

        assert logging.getLogger().level == logging.DEBUG

    def test_unknown_log_level_falls_back_to_info(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "chatty")

        configure_logging()

        assert logging.getLogger().level == logging.INFO

    def test_quiets_third_party_loggers(self):
        configure_logging()

        assert logging.getLogger("uvicorn.access").level == logging.WARNING
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING

    def test_json_format_renders_structured_fields(self, monkeypatch, capsys):
        monkeypatch.setenv("LOG_FORMAT", "json")
        configure_logging()

        get_logger("test.module").info("gate.profile.approved", user_id="u1")

        line = capsys.readouterr().out.strip().splitlines()[-1]
        parsed = json.loads(line)
        assert parsed["event"] == "gate.profile.approved"
        assert parsed["user_id"] == "u1"
        assert parsed["level"] == "info"
        assert "timestamp" in parsed

    def test_stdlib_extra_fields_are_rendered(self, monkeypatch, capsys):
        monkeypatch.setenv("LOG_FORMAT", "json")
        configure_logging()

        logging.getLogger("test.stdlib").warning(
            "db.rollback.failed", extra={"error": "boom"}
        )

        parsed = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
        assert parsed["event"] == "db.rollback.failed"
        assert parsed["error"] == "boom"
