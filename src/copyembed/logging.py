"""Logging utilities for copyembed.

All modules log through a single ``copyembed`` logger:
- info/debug go to stdout without decoration
- warnings/errors go to stderr prefixed with their level
- ``--verbose`` enables debug output, ``--quiet`` hides everything below errors
"""

import logging
import sys

LOGGER_NAME = "copyembed"

_logger: logging.Logger | None = None

DEBUG = logging.DEBUG
INFO = logging.INFO
WARNING = logging.WARNING
ERROR = logging.ERROR


class CleanFormatter(logging.Formatter):
    """Formatter that outputs the bare message, plus traceback if attached."""

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return message


class PrefixFormatter(logging.Formatter):
    """Formatter that prefixes warnings and errors with the level name."""

    def format(self, record: logging.LogRecord) -> str:
        if record.levelno >= logging.WARNING:
            return f"{record.levelname.capitalize()}: {record.getMessage()}"
        return record.getMessage()


def _level_for(verbose: bool, quiet: bool) -> int:
    if quiet:
        return logging.ERROR
    if verbose:
        return logging.DEBUG
    return logging.INFO


def setup_logging(
    verbose: bool = False, quiet: bool = False, stdout=None
) -> logging.Logger:
    """Configure the copyembed logger.

    Args:
        verbose: Show debug-level messages.
        quiet: Only show errors. Takes precedence over verbose.
        stdout: Stream for info/debug output (default: sys.stdout). The CLI
            passes sys.stderr here when the converted note itself is
            written to stdout.

    Returns:
        The configured logger instance.
    """
    global _logger

    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.setLevel(_level_for(verbose, quiet))

    stdout_handler = logging.StreamHandler(stdout or sys.stdout)
    stdout_handler.setLevel(logging.DEBUG)
    stdout_handler.addFilter(lambda r: r.levelno < logging.WARNING)
    stdout_handler.setFormatter(CleanFormatter())

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.WARNING)
    stderr_handler.setFormatter(PrefixFormatter())

    logger.addHandler(stdout_handler)
    logger.addHandler(stderr_handler)
    logger.propagate = False

    _logger = logger
    return logger


def get_logger() -> logging.Logger:
    """Get the copyembed logger, initializing with defaults if needed."""
    global _logger
    if _logger is None:
        _logger = setup_logging()
    return _logger


def debug(msg: str) -> None:
    """Log a debug message (only shown with --verbose)."""
    get_logger().debug(msg)


def info(msg: str) -> None:
    """Log an info message."""
    get_logger().info(msg)


def warning(msg: str) -> None:
    """Log a warning message to stderr."""
    get_logger().warning(msg)


def error(msg: str) -> None:
    """Log an error message to stderr."""
    get_logger().error(msg)


def exception(msg: str) -> None:
    """Log an error with the active exception's traceback at debug level."""
    logger = get_logger()
    logger.error(msg)
    logger.debug("Details:", exc_info=True)
