"""Logging setup shared by the webhook and the watcher."""

import logging
import logging.handlers
import sys

LOG_FORMAT = '%(levelname)s [%(asctime)s] %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Rotate at 1 MB, keep 5 files
MAX_BYTES = 1024 * 1024
BACKUP_COUNT = 5


def parse_level(level: str) -> int:
    value = logging.getLevelName(level.strip().upper())
    if isinstance(value, int):
        return value
    if level.strip().lower() == 'warn':
        return logging.WARNING
    return logging.INFO


def configure_logging(level: str = 'info', log_file: str = '') -> None:
    """Log to stdout and, when possible, to a size-rotated file"""
    handlers = [logging.StreamHandler(sys.stdout)]
    file_error = None
    if log_file:
        try:
            handlers.append(logging.handlers.RotatingFileHandler(
                log_file, maxBytes=MAX_BYTES, backupCount=BACKUP_COUNT
            ))
        except OSError as e:
            file_error = e

    logging.basicConfig(
        level=parse_level(level),
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        handlers=handlers,
        force=True,
    )

    if file_error is not None:
        logging.getLogger(__name__).warning(
            f"Cannot write log file {log_file}, logging to stdout only: {file_error}"
        )
