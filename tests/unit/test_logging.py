"""Tests for logging setup."""

import logging

import pytest

from shaderdocs.utilities import get_logger, setup_logging
from shaderdocs.utilities import logging as log_setup


@pytest.fixture
def fresh_root(monkeypatch):
    """Let setup_logging run again and drop the handlers it adds."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    monkeypatch.setattr(log_setup, "_configured", False)
    yield root
    for handler in root.handlers[:]:
        if handler not in handlers:
            handler.close()
            root.removeHandler(handler)
    root.setLevel(level)


class TestSetupLogging:
    def test_console_only(self, fresh_root):
        before = len(fresh_root.handlers)
        setup_logging(log_level="warning")
        assert len(fresh_root.handlers) == before + 1
        assert fresh_root.level == logging.WARNING

    def test_log_files(self, fresh_root, tmp_path):
        log_dir = tmp_path / "logs"
        setup_logging(str(log_dir), "DEBUG")
        get_logger("shaderdocs.test").error("catalog broken")
        for handler in fresh_root.handlers:
            handler.flush()
        assert "catalog broken" in (log_dir / "shaderdocs.log").read_text(encoding="utf-8")
        assert "catalog broken" in (log_dir / "shaderdocs_errors.log").read_text(encoding="utf-8")

    def test_second_call_is_ignored(self, fresh_root):
        setup_logging()
        count = len(fresh_root.handlers)
        setup_logging()
        assert len(fresh_root.handlers) == count

    def test_unknown_level_falls_back_to_info(self, fresh_root):
        setup_logging(log_level="chatty")
        assert fresh_root.level == logging.INFO
