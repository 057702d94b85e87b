"""Tests for the console/file logging setup and the color-aware logger."""

import logging
import os

import pytest

from shared.logging.logging_setup import ColorLogger, ColoredFormatter, CustomFormatter, setup_logging


def make_record(level, msg, args=(), color=None):
    record = logging.LogRecord("note_assistant", level, __file__, 1, msg, args, None)
    if color is not None:
        record.color = color
    return record


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    httpx_level = logging.getLogger("httpx").level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
    logging.getLogger("httpx").setLevel(httpx_level)


class TestFormatters:
    def test_prefixes_and_merges_args(self):
        formatter = CustomFormatter("UTC", "%(message)s")
        assert formatter.format(make_record(logging.WARNING, "chunk %d failed", (3,))) == "⚠️ chunk 3 failed"
        assert formatter.format(make_record(logging.ERROR, "boom")) == "⛔ boom"
        assert formatter.format(make_record(logging.INFO, "ready")) == "ready"

    def test_malformed_args_keep_template(self):
        formatter = CustomFormatter("UTC", "%(message)s")
        assert formatter.format(make_record(logging.INFO, "%d chunks", ("many",))) == "%d chunks"

    def test_console_color(self):
        formatter = ColoredFormatter("UTC", "%(message)s")
        assert formatter.format(make_record(logging.INFO, "ready", color="green")) == "\033[32mready\033[0m"
        assert formatter.format(make_record(logging.INFO, "ready", color="unknown")) == "ready"
        assert formatter.format(make_record(logging.INFO, "ready")) == "ready"


class TestColorLogger:
    def test_color_is_passed_as_record_attribute(self, caplog):
        logger = ColorLogger(logging.getLogger("note_assistant.test"))
        with caplog.at_level(logging.INFO):
            logger.info("Index ready: %d chunks", 4, color="green")
            logger.warning("plain")

        first, second = caplog.records
        assert first.getMessage() == "Index ready: 4 chunks"
        assert first.color == "green"
        assert not hasattr(second, "color")
        assert first.funcName == "test_color_is_passed_as_record_attribute"

    def test_delegates_logger_attributes(self):
        wrapped = logging.getLogger("note_assistant.delegate")
        assert ColorLogger(wrapped).name == "note_assistant.delegate"


class TestSetupLogging:
    def test_creates_log_file_and_quiets_httpx(self, tmp_path, monkeypatch, restore_root_logger):
        monkeypatch.setenv("ROOT_DIR", str(tmp_path))
        monkeypatch.setenv("TIMEZONE", "UTC")
        monkeypatch.setenv("LOG_LEVEL", "info")

        logger = setup_logging()
        logger.info("hello from the test", color="cyan")
        for handler in logging.getLogger().handlers:
            handler.flush()

        log_file = tmp_path / "logs" / "app.log"
        assert os.path.exists(log_file)
        content = log_file.read_text(encoding="utf-8")
        assert "INFO - hello from the test" in content
        assert "\033[" not in content
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_debug_mode(self, tmp_path, monkeypatch, restore_root_logger):
        monkeypatch.setenv("ROOT_DIR", str(tmp_path))
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")

        setup_logging()

        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger("httpx").level == logging.DEBUG
