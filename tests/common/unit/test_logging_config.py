"""
Tests for the centralized logging setup.
"""

import logging
import logging.handlers

import pytest

import config
from utils.logging_config import LOG_FORMAT, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    level = root.level
    yield
    for handler in root.handlers[:]:
        if handler.formatter and handler.formatter._fmt == LOG_FORMAT:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


class TestSetupLogging:

    def test_file_and_console_handlers(self, tmp_path, monkeypatch, restore_root_logger):
        monkeypatch.setattr(config, "LOG_DIR", str(tmp_path))
        monkeypatch.setattr(config, "LOG_LEVEL", "WARNING")
        monkeypatch.setattr(config, "LOG_RETENTION_DAYS", 3)

        root = setup_logging("register.log")

        rotating = [h for h in root.handlers if isinstance(h, logging.handlers.TimedRotatingFileHandler)]
        assert len(rotating) == 1
        assert rotating[0].backupCount == 3
        assert len(root.handlers) == 2
        assert root.level == logging.WARNING
        assert (tmp_path / "register.log").exists()

    def test_repeated_setup_does_not_duplicate_handlers(self, tmp_path, monkeypatch, restore_root_logger):
        monkeypatch.setattr(config, "LOG_DIR", str(tmp_path))

        setup_logging()
        root = setup_logging()

        assert len(root.handlers) == 2

    def test_sqlalchemy_engine_is_quiet(self, tmp_path, monkeypatch, restore_root_logger):
        monkeypatch.setattr(config, "LOG_DIR", str(tmp_path))
        monkeypatch.setattr(config, "LOG_LEVEL", "DEBUG")

        setup_logging()

        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
