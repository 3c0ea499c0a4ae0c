"""Tests for copyembed logging module."""

import logging
import sys

from copyembed import logging as copyembed_logging


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_returns_logger(self):
        logger = copyembed_logging.setup_logging()
        assert isinstance(logger, logging.Logger)
        assert logger.name == "copyembed"

    def test_verbose_sets_debug_level(self):
        logger = copyembed_logging.setup_logging(verbose=True)
        assert logger.level == logging.DEBUG

    def test_default_is_info_level(self):
        logger = copyembed_logging.setup_logging()
        assert logger.level == logging.INFO

    def test_quiet_wins_over_verbose(self):
        """quiet=True only lets errors through, even with verbose."""
        logger = copyembed_logging.setup_logging(verbose=True, quiet=True)
        assert logger.level == logging.ERROR

    def test_clears_existing_handlers(self):
        """Repeated calls do not stack handlers."""
        copyembed_logging.setup_logging()
        logger = copyembed_logging.setup_logging()
        assert len(logger.handlers) == 2


class TestGetLogger:
    """Tests for get_logger function."""

    def test_initializes_if_needed(self):
        assert copyembed_logging._logger is None
        logger = copyembed_logging.get_logger()
        assert copyembed_logging._logger is logger

    def test_returns_same_logger(self):
        assert copyembed_logging.get_logger() is copyembed_logging.get_logger()


class TestLoggingOutput:
    """Tests for output formatting and routing."""

    def test_info_goes_to_stdout(self, capsys):
        copyembed_logging.setup_logging()
        copyembed_logging.info("plain message")
        captured = capsys.readouterr()
        assert captured.out.strip() == "plain message"
        assert captured.err == ""

    def test_info_redirected_to_stderr(self, capsys):
        """The CLI moves info output off stdout when printing the note."""
        copyembed_logging.setup_logging(stdout=sys.stderr)
        copyembed_logging.info("progress")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "progress" in captured.err

    def test_warning_has_prefix(self, capsys):
        copyembed_logging.setup_logging()
        copyembed_logging.warning("something")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err.strip() == "Warning: something"

    def test_error_has_prefix(self, capsys):
        copyembed_logging.setup_logging()
        copyembed_logging.error("something")
        assert capsys.readouterr().err.strip() == "Error: something"

    def test_debug_hidden_without_verbose(self, capsys):
        copyembed_logging.setup_logging()
        copyembed_logging.debug("debug message")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == ""

    def test_debug_shown_with_verbose(self, capsys):
        copyembed_logging.setup_logging(verbose=True)
        copyembed_logging.debug("debug message")
        assert "debug message" in capsys.readouterr().out

    def test_quiet_hides_warnings(self, capsys):
        copyembed_logging.setup_logging(quiet=True)
        copyembed_logging.warning("hidden")
        copyembed_logging.error("shown")
        err = capsys.readouterr().err
        assert "hidden" not in err
        assert "Error: shown" in err


class TestException:
    """Tests for exception()."""

    def test_traceback_only_with_verbose(self, capsys):
        """Details of the active exception are logged at debug level."""
        copyembed_logging.setup_logging()
        try:
            raise ValueError("secret detail")
        except ValueError:
            copyembed_logging.exception("Conversion failed")
        captured = capsys.readouterr()
        assert "Error: Conversion failed" in captured.err
        assert "secret detail" not in captured.out + captured.err

    def test_traceback_shown_with_verbose(self, capsys):
        copyembed_logging.setup_logging(verbose=True)
        try:
            raise ValueError("secret detail")
        except ValueError:
            copyembed_logging.exception("Conversion failed")
        assert "ValueError: secret detail" in capsys.readouterr().out
