"""
logs.py
-------
Logging setup for the resort web client. Every module logs through its own
``logging.getLogger(__name__)``; this only wires the root handler once.
"""

import logging

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(level='INFO'):
    """Setup logging configuration"""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    logging.getLogger('resort_web').setLevel(level)
    # urllib3 is chatty at DEBUG
    logging.getLogger('urllib3').setLevel(logging.WARNING)


def mask_token(token):
    return '[TOKEN]' if token else None
