"""Centralized logging configuration for the timein CLI.

Log records go to stderr, never stdout: Alfred parses stdout as Script Filter
JSON, so a stray log line there breaks the workflow. An optional rotating log
file keeps a history across the many short-lived invocations a launcher makes.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

DEFAULT_LOG_LEVEL = logging.WARNING
DEFAULT_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_FILE_MAX_BYTES = 512 * 1024
LOG_FILE_BACKUPS = 2

# HTTP client libraries log every request at INFO; only show them when debugging
NOISY_LOGGERS = ("httpx", "httpcore")


def _attach(root_logger: logging.Logger, handler: logging.Handler, level: int, formatter: logging.Formatter) -> None:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)


def setup_logging(
    log_level: int = DEFAULT_LOG_LEVEL,
    log_format: str = DEFAULT_LOG_FORMAT,
    log_file: Optional[str] = None,
) -> None:
    """Configures the root logger for one CLI invocation.

    Calling it again replaces the handlers from the previous call.

    Args:
        log_level: The minimum logging level (e.g., logging.DEBUG).
        log_format: The format string for log messages.
        log_file: Optional path of a size-rotated log file.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(log_format)
    _attach(root_logger, logging.StreamHandler(sys.stderr), log_level, formatter)

    if log_file:
        try:
            file_handler = RotatingFileHandler(
                log_file, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS, encoding='utf-8'
            )
        except OSError as e:
            logging.error(f"Failed to set up file logging to {log_file}: {e}")
        else:
            _attach(root_logger, file_handler, log_level, formatter)

    library_level = logging.DEBUG if log_level <= logging.DEBUG else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)

    logging.debug(f"Logging configured. Level={logging.getLevelName(log_level)}, file={log_file or '-'}")
