"""
Structured logging for the pool manager.

Use :func:`getLogger` in place of :func:`logging.getLogger` so that every
module emits JSON records in the same shape, at the level set by ``LOGLEVEL``
and to ``LOGFILE`` if one is configured.
"""

import logging
import sys
from typing import IO

from pythonjsonlogger.json import JsonFormatter

from .context import get_application_config

FORMAT = '%(asctime)s %(levelname)s %(name)s %(message)s'
RENAMED = {'levelname': 'level', 'asctime': 'timestamp'}


def getLogger(name: str, stream: IO = sys.stderr) -> logging.Logger:
    """Get a logger with JSON formatting, configured from the application."""
    config = get_application_config()
    log_level = int(config.get('LOGLEVEL', logging.INFO))
    log_file_path = config.get('LOGFILE')

    logger = logging.getLogger(name)
    logger.setLevel(log_level)
    if not logger.handlers:
        handler: logging.Handler
        if log_file_path:
            handler = logging.FileHandler(log_file_path)
        else:
            handler = logging.StreamHandler(stream)
        handler.setFormatter(
            JsonFormatter(FORMAT, rename_fields=RENAMED)
        )
        logger.addHandler(handler)
        logger.propagate = False
    return logger
