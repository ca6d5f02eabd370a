"""
Tests for observability — level resolution and logging setup.
"""

import logging

import pytest

from src.core.observability.logging_config import (
    LOG_FILE_ENV,
    LOG_LEVEL_ENV,
    resolve_level,
    setup_from_env,
    setup_logging,
)


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for h in root.handlers:
        if h not in handlers:
            h.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestResolveLevel:
    def test_default(self, monkeypatch):
        monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)
        assert resolve_level() == "WARNING"

    def test_env(self, monkeypatch):
        monkeypatch.setenv(LOG_LEVEL_ENV, "INFO")
        assert resolve_level() == "INFO"

    def test_flags_beat_env(self, monkeypatch):
        monkeypatch.setenv(LOG_LEVEL_ENV, "INFO")
        assert resolve_level(quiet=True) == "ERROR"
        assert resolve_level(verbose=True) == "INFO"

    def test_precedence(self):
        assert resolve_level(debug=True, verbose=True, quiet=True) == "DEBUG"
        assert resolve_level(verbose=True, quiet=True) == "INFO"


class TestSetupLogging:
    def test_console_level(self):
        setup_logging("INFO")
        root = logging.getLogger()
        assert root.level == logging.INFO
        assert len(root.handlers) == 1
        assert root.handlers[0].level == logging.INFO

    def test_bad_level_falls_back_to_warning(self):
        setup_logging("LOUD")
        assert logging.getLogger().level == logging.WARNING

    def test_noisy_loggers_quieted(self):
        setup_logging("INFO")
        assert logging.getLogger("urllib3").level == logging.WARNING
        assert logging.getLogger("pip").level == logging.WARNING

    def test_file_handler_lowers_root(self, tmp_path):
        log_file = tmp_path / "setup.log"
        setup_logging("WARNING", log_file=str(log_file), log_file_level="DEBUG")
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 2

        logging.getLogger("src.test").debug("cloning nvdiffrast")
        for h in root.handlers:
            h.flush()
        assert "cloning nvdiffrast" in log_file.read_text()

    def test_setup_from_env(self, tmp_path, monkeypatch):
        log_file = tmp_path / "env.log"
        monkeypatch.setenv(LOG_FILE_ENV, str(log_file))
        setup_from_env("ERROR")
        logging.getLogger("src.test").error("flash-attn build failed")
        for h in logging.getLogger().handlers:
            h.flush()
        assert "flash-attn build failed" in log_file.read_text()

    def test_unwritable_log_file_falls_back_to_console(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setenv(LOG_FILE_ENV, str(tmp_path / "no-such-dir" / "setup.log"))
        setup_from_env("WARNING")
        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert not isinstance(root.handlers[0], logging.FileHandler)
        assert "logging to console only" in capsys.readouterr().err
