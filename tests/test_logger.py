"""
Tests for logger.py - setup_ipsview_logger.
"""

import logging
from logging.handlers import RotatingFileHandler

import pytest

from ipsview.logger import setup_ipsview_logger


@pytest.fixture(autouse=True)
def reset_logger():
    yield
    logging.getLogger("ipsview").handlers.clear()


class TestLoggerSetup:
    """Tests for logger configuration."""

    def test_console_handler(self):
        """Test the default console-only setup."""
        logger = setup_ipsview_logger()
        assert logger.name == "ipsview"
        assert logger.level == logging.INFO
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], logging.StreamHandler)

    def test_rerun_replaces_handlers(self):
        """Test that calling setup twice doesn't duplicate handlers."""
        setup_ipsview_logger()
        logger = setup_ipsview_logger(logging.DEBUG)
        assert len(logger.handlers) == 1
        assert logger.level == logging.DEBUG

    def test_file_handler(self, tmp_path):
        """Test that log_to_file adds a rotating file handler."""
        log_file = tmp_path / "logs" / "ipsview.log"
        logger = setup_ipsview_logger(log_to_file=True, log_to_console=False, log_file=str(log_file))
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], RotatingFileHandler)

        logging.getLogger("ipsview.crash_report.decoder").info("decoded")
        logger.handlers[0].flush()
        assert "decoded" in log_file.read_text()

    def test_default_log_file(self, isolated_home):
        """Test that a missing log_file falls back to ~/.ipsview/ipsview.log."""
        logger = setup_ipsview_logger(log_to_file=True, log_to_console=False, log_file=None)
        logger.info("to the default file")
        logger.handlers[0].flush()
        assert "to the default file" in (isolated_home / ".ipsview" / "ipsview.log").read_text()

    def test_console_and_file_together(self, tmp_path):
        """Test that both handlers are installed when requested."""
        logger = setup_ipsview_logger(log_to_file=True, log_file=str(tmp_path / "both.log"))
        assert [type(h) for h in logger.handlers][1] is RotatingFileHandler
        assert len(logger.handlers) == 2

    def test_plain_formatter_without_color(self, capsys):
        """Test the uncoloured console format."""
        setup_ipsview_logger(use_color=False)
        logging.getLogger("ipsview.test").warning("careful")
        assert "[WARNING] ipsview.test - careful" in capsys.readouterr().err

    def test_child_loggers_respect_level(self, capsys):
        """Test that module loggers are filtered by the package level."""
        setup_ipsview_logger(logging.WARNING, use_color=False)
        logging.getLogger("ipsview.crash_report.sections").info("hidden")
        assert "hidden" not in capsys.readouterr().err
