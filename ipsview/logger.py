# ipsview/logger.py

import logging
import os
import sys
from logging.handlers import RotatingFileHandler

try:
    import colorlog
    HAS_COLORLOG = True
except ImportError:
    HAS_COLORLOG = False


LOGGER_NAME = "ipsview"
DEFAULT_LOG_FILE = "~/.ipsview/ipsview.log"

CONSOLE_FORMAT = "[%(levelname)s] %(name)s - %(message)s"
FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"
LEVEL_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "bold_red",
}


def _console_handler(level, use_color: bool) -> logging.Handler:
    """Handler on stderr; stdout is reserved for the rendered report."""
    handler = logging.StreamHandler(sys.stderr)
    if use_color and HAS_COLORLOG:
        formatter = colorlog.ColoredFormatter(
            fmt="%(log_color)s[%(levelname)s]%(reset)s %(name)s - %(message)s",
            log_colors=LEVEL_COLORS,
        )
    else:
        formatter = logging.Formatter(CONSOLE_FORMAT)
    handler.setFormatter(formatter)
    handler.setLevel(level)
    return handler


def _file_handler(log_file: str, level, max_bytes: int, backup_count: int) -> logging.Handler:
    log_path = os.path.expanduser(log_file)
    log_dir = os.path.dirname(log_path)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
    handler = RotatingFileHandler(log_path, maxBytes=max_bytes, backupCount=backup_count)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    handler.setLevel(level)
    return handler


def setup_ipsview_logger(
    log_level=logging.INFO,
    log_to_file=False,
    log_to_console=True,
    max_bytes=5 * 1024 * 1024,
    backup_count=5,
    use_color=True,
    log_file=DEFAULT_LOG_FILE
):
    """
    Configure the ``ipsview`` logger that every module logger propagates to.

    Safe to call repeatedly: existing handlers are replaced, not stacked.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(log_level)
    logger.handlers.clear()

    if log_to_console:
        logger.addHandler(_console_handler(log_level, use_color))
    if log_to_file:
        logger.addHandler(_file_handler(log_file or DEFAULT_LOG_FILE, log_level, max_bytes, backup_count))

    logger.debug("ipsview logger configured. Colorlog: %s, log_to_file: %s", HAS_COLORLOG, log_to_file)
    return logger
