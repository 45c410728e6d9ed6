import logging
import os
import sys
from logging.handlers import RotatingFileHandler

FORMAT = '%(asctime)s %(levelname)s [%(threadName)s] %(name)s: %(message)s'


def setup_logger(name: str = None, level: str = None, log_file: str = None,
                 max_bytes: int = None, backup_count: int = None) -> logging.Logger:
    """Build the package logger, falling back to the LOG_* environment.

    Handlers are only attached once per logger name. A rotating file handler
    is added only when a log file is configured.
    """
    name = name or os.getenv('LOG_NAME', 'cbuf')
    level = level or os.getenv('LOG_LEVEL', 'INFO')
    log_file = log_file if log_file is not None else os.getenv('LOG_FILE', '')
    if max_bytes is None:
        max_bytes = int(os.getenv('LOG_MAX_BYTES', 10 * 1024 * 1024))
    if backup_count is None:
        backup_count = int(os.getenv('LOG_BACKUP_COUNT', 3))

    log = logging.getLogger(name)
    if log.handlers:
        return log

    log.setLevel(getattr(logging, level.upper(), logging.INFO))
    fmt = logging.Formatter(FORMAT)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(fmt)
    log.addHandler(console)

    if log_file:
        rotating = RotatingFileHandler(log_file, maxBytes=max_bytes, backupCount=backup_count)
        rotating.setFormatter(fmt)
        log.addHandler(rotating)
    return log


logger = setup_logger()
