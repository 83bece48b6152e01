import io
import logging

import pytest

from finance_tracker.utils import app_config
from finance_tracker.utils.logging_setup import (
    PKG_LOGGER_NAME,
    configure_logging,
    get_logger,
    parse_level,
    reset_logging,
)


@pytest.fixture(autouse=True)
def _restore_logging():
    yield
    reset_logging()


def test_parse_level(monkeypatch):
    monkeypatch.delenv("FINANCE_TRACKER_LOG_LEVEL", raising=False)
    assert parse_level("debug") == logging.DEBUG
    assert parse_level(" Warning ") == logging.WARNING
    assert parse_level("15") == 15
    assert parse_level(logging.ERROR) == logging.ERROR
    assert parse_level("chatty") == logging.INFO
    assert parse_level(None) == logging.INFO

    monkeypatch.setenv("FINANCE_TRACKER_LOG_LEVEL", "error")
    assert parse_level(None) == logging.ERROR


def test_console_and_file_handlers(tmp_path):
    stream = io.StringIO()
    log_file = tmp_path / "logs" / "tracker.log"

    configure_logging("INFO", log_file=str(log_file), stream=stream)
    get_logger("finance_tracker.services.demo").info("Imported %d transaction(s)", 3)
    get_logger("finance_tracker.services.demo").debug("hidden")

    assert stream.getvalue() == "INFO finance_tracker.services.demo: Imported 3 transaction(s)\n"
    assert "Imported 3 transaction(s)" in log_file.read_text(encoding="utf-8")
    assert "hidden" not in log_file.read_text(encoding="utf-8")


def test_reconfigure_replaces_handlers():
    first, second = io.StringIO(), io.StringIO()

    configure_logging("INFO", stream=first)
    configure_logging("WARNING", stream=second)
    logger = get_logger("finance_tracker.x")
    logger.info("quiet")
    logger.warning("loud")

    assert first.getvalue() == ""
    assert second.getvalue() == "WARNING finance_tracker.x: loud\n"
    assert len(logging.getLogger(PKG_LOGGER_NAME).handlers) == 1


def test_reset_restores_propagation():
    configure_logging("INFO", stream=io.StringIO())
    assert logging.getLogger(PKG_LOGGER_NAME).propagate is False

    reset_logging()

    assert logging.getLogger(PKG_LOGGER_NAME).propagate is True


def test_log_file_from_config():
    assert app_config.get_log_file() is None

    app_config.save_config({"log_file": "tracker.log"})
    assert app_config.get_log_file() == str(app_config.config_dir() / "tracker.log")

    app_config.save_config({"log_file": "/var/log/tracker.log"})
    assert app_config.get_log_file() == "/var/log/tracker.log"
