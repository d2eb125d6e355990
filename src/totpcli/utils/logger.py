"""
Logger Module

Provides standardized logging functionality using Python's built-in logging module.
Messages go to the console and, when enabled, to a timestamped log file.

Module loggers are created with logging.getLogger(__name__); since every
module lives under the 'totpcli' package they propagate into the application
logger configured here.
"""

import os
import logging
import datetime

from .. import config

APP_LOGGER_NAME = 'totpcli'

# Default log levels
DEFAULT_CONSOLE_LEVEL = logging.DEBUG if config.DEBUG else logging.WARNING
DEFAULT_FILE_LEVEL = logging.DEBUG      # File always logs everything (when enabled)

CONSOLE_FORMAT = '%(levelname)s [%(filename)s:%(lineno)d]: %(message)s'
FILE_FORMAT = '[%(asctime)s] %(levelname)s [%(filename)s:%(lineno)d]: %(message)s'

# Global logger instance
logger = None
log_file_path = None


def setup_logger(name=APP_LOGGER_NAME,
                 console_level=None,
                 file_level=None,
                 log_to_file=config.LOG_TO_FILE,
                 log_dir=None):
    """
    Set up the logger with handlers for console and file output.

    Args:
        name (str): Logger name
        console_level (int): Logging level for console output (e.g., logging.DEBUG)
        file_level (int): Logging level for file output
        log_to_file (bool): Whether to log to a file
        log_dir (str): Directory for log files, defaults to config.get_log_directory()

    Returns:
        logging.Logger: Configured logger instance
    """
    global logger, log_file_path

    if console_level is None:
        console_level = DEFAULT_CONSOLE_LEVEL
    if file_level is None:
        file_level = DEFAULT_FILE_LEVEL

    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)  # Handlers decide what is emitted

    # Remove any existing handlers to avoid duplicates
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console_handler)

    # Don't propagate to root logger to avoid duplicate messages
    logger.propagate = False

    log_file_path = None
    if log_to_file:
        try:
            if log_dir is None:
                log_dir = config.get_log_directory()
            os.makedirs(log_dir, exist_ok=True)

            timestamp = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
            log_file_path = os.path.join(log_dir, f"totpcli_{timestamp}.log")

            file_handler = logging.FileHandler(log_file_path, mode='w', encoding='utf-8')
            file_handler.setLevel(file_level)
            file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
            logger.addHandler(file_handler)

            logger.info(f"=== {config.APP_NAME} log started at {datetime.datetime.now().isoformat()} ===")
        except OSError as e:
            # Fall back to console-only logging
            log_file_path = None
            logger.warning(f"Could not set up file logging: {e}")

    return logger


def get_logger():
    """
    Get the configured logger instance or set up a new one if not configured.

    Returns:
        logging.Logger: Logger instance
    """
    if logger is None:
        return setup_logger()
    return logger


def get_log_file_path():
    """
    Get the path to the current log file.

    Returns:
        str: Path to the log file or None if file logging is disabled
    """
    return log_file_path


def close_logging():
    """Flush and detach all handlers of the application logger."""
    global logger, log_file_path
    if logger is None:
        return
    for handler in logger.handlers[:]:
        handler.flush()
        logger.removeHandler(handler)
        handler.close()
    logger = None
    log_file_path = None


# Convenience functions that map to logging methods
def debug(msg, *args, **kwargs):
    """Log a debug message"""
    get_logger().debug(msg, *args, **kwargs)


def info(msg, *args, **kwargs):
    """Log an info message"""
    get_logger().info(msg, *args, **kwargs)
