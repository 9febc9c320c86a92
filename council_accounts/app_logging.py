"""Structured logging for the council accounts service."""

import logging

from pythonjsonlogger.json import JsonFormatter


def setup_logger(level: str = 'INFO') -> logging.Logger:
    """Send ``council_accounts`` log records to stderr as JSON lines."""
    logger = logging.getLogger('council_accounts')
    if not any(isinstance(handler.formatter, JsonFormatter)
               for handler in logger.handlers):
        log_handler = logging.StreamHandler()
        formatter = JsonFormatter(
            '%(asctime)s %(levelname)s %(name)s %(message)s',
            rename_fields={'levelname': 'level', 'asctime': 'timestamp'}
        )
        log_handler.setFormatter(formatter)
        logger.addHandler(log_handler)
    logger.setLevel(level.upper())
    return logger
