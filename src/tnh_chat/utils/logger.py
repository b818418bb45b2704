"""Logging utility module for the service.

This module provides a centralized logging utility that creates and manages
a single logger instance for the service. The logger can be imported
and used from anywhere in the codebase.
"""

import logging
import os
import sys
from typing import Optional


# Module-level variable to store the logger instance
_app_logger: Optional[logging.Logger] = None

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def _resolve_level(level: Optional[str]) -> int:
    name = (level or os.getenv('LOG_LEVEL') or 'INFO').upper()
    resolved = logging.getLevelName(name)
    return resolved if isinstance(resolved, int) else logging.INFO


def get_logger(
    name: Optional[str] = None,
    log_file_path: Optional[str] = None,
    level: Optional[str] = None,
) -> logging.Logger:
    """Get or create the service logger.

    Only one logger instance exists for the service. If a logger has already
    been created it is returned as-is; otherwise a new logger is created with
    the standard configuration.

    Args:
        name: Optional name for the logger. Defaults to 'tnh_chat'.
              Ignored once the logger exists.
        log_file_path: Optional local log file path. Falls back to the
                       ``LOG_FILE`` environment variable. Ignored once the
                       logger exists.
        level: Optional level name (e.g. 'DEBUG'). Falls back to the
               ``LOG_LEVEL`` environment variable, then INFO.

    Returns:
        logging.Logger: The service logger instance.

    Raises:
        OSError: If the log file directory cannot be created.
    """
    global _app_logger

    if _app_logger is not None:
        return _app_logger

    logger_name = name if name is not None else 'tnh_chat'
    _app_logger = logging.getLogger(logger_name)

    # Only configure if logger doesn't have handlers (avoid duplicate handlers)
    if not _app_logger.handlers:
        log_level = _resolve_level(level)
        _app_logger.setLevel(log_level)

        formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(log_level)
        console_handler.setFormatter(formatter)
        _app_logger.addHandler(console_handler)

        log_file_path = log_file_path or os.getenv('LOG_FILE')
        if log_file_path:
            log_dir = os.path.dirname(log_file_path)
            if log_dir and not os.path.exists(log_dir):
                os.makedirs(log_dir, exist_ok=True)

            file_handler = logging.FileHandler(log_file_path)
            file_handler.setLevel(log_level)
            file_handler.setFormatter(formatter)
            _app_logger.addHandler(file_handler)

        # Prevent propagation to root logger to avoid duplicate logs
        _app_logger.propagate = False

    return _app_logger
