import logging
import sys
from typing import Optional
from pythonjsonlogger import jsonlogger

from vectorkg.config import settings

def get_logger(name: str, level: Optional[str] = None):
    """
    Returns a logger that writes one JSON object per record to stdout.
    Fields passed through ``extra=`` appear as top-level keys.
    """
    logger = logging.getLogger(name)

    # Prevent duplicate handlers if the logger is already configured
    if logger.handlers:
        return logger

    logger.setLevel((level or settings.LOG_LEVEL).upper())
    logger.propagate = False

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(jsonlogger.JsonFormatter(
        '%(asctime)s %(name)s %(levelname)s %(message)s',
        rename_fields={'asctime': 'timestamp', 'levelname': 'level'},
    ))
    logger.addHandler(handler)

    return logger
