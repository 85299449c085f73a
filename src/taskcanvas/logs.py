import logging
import os
import sys
from pathlib import Path

LOGGER_NAME = 'taskcanvas'
LOG_FILENAME = 'taskcanvas.log'

FILE_FORMAT = '[%(asctime)s] %(levelname)-8s [%(name)s:%(funcName)s:%(lineno)d] %(message)s'
FILE_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def _log_dir() -> Path:
    override = os.getenv('TASKCANVAS_LOG_DIR', '')
    if override:
        return Path(override)
    return Path.home() / ".local" / "share" / "taskcanvas" / "logs"


def _debug_enabled() -> bool:
    return os.getenv('TASKCANVAS_DEBUG', '').lower() in ('1', 'true', 'yes')


def _console_level() -> int:
    """TASKCANVAS_DEBUG wins over TASKCANVAS_LOG_LEVEL; unknown names fall back to WARNING."""
    if _debug_enabled():
        return logging.DEBUG
    name = os.getenv('TASKCANVAS_LOG_LEVEL', '').upper()
    if not name:
        return logging.WARNING
    return getattr(logging, name, logging.WARNING)


def _console_handler() -> logging.Handler:
    # stdout belongs to the CLI output
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(_console_level())
    if _debug_enabled():
        handler.setFormatter(logging.Formatter('%(levelname)-8s [%(name)s] %(message)s'))
    else:
        handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
    return handler


def _file_handler(log_dir: Path) -> logging.Handler:
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_dir / LOG_FILENAME)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, FILE_DATE_FORMAT))
    handler.setLevel(logging.DEBUG)
    return handler


def setup_logging():
    """
    Configure the package logger.

    Console output is filtered by TASKCANVAS_LOG_LEVEL / TASKCANVAS_DEBUG
    (warnings and errors by default); the log file under TASKCANVAS_LOG_DIR
    always receives everything.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)  # Logger accepts all, handlers filter
    logger.handlers.clear()
    logger.addHandler(_console_handler())

    log_dir = _log_dir()
    try:
        logger.addHandler(_file_handler(log_dir))
    except OSError as e:
        logger.warning(f"File logging disabled, cannot use {log_dir}: {e}")

    logger.propagate = False
    return logger

# Initialize logging when package is imported
setup_logging()

def get_logger(name: str = None):
    """Get a logger instance for a specific module."""
    if name:
        return logging.getLogger(f'{LOGGER_NAME}.{name}')
    return logging.getLogger(LOGGER_NAME)
