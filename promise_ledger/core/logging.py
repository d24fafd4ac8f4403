"""
Logging setup: one stdout handler, level from settings.LOG_LEVEL.

Gunicorn captures stdout, so nothing is written to files here.
"""
import logging
import sys
from typing import Optional

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_handler: Optional[logging.Handler] = None


def configure_logging(level: str = "INFO") -> logging.Handler:
    """Install the stdout handler on the root logger once; later calls only set the level."""
    global _handler
    root = logging.getLogger()
    if _handler is None:
        _handler = logging.StreamHandler(sys.stdout)
        _handler.setFormatter(logging.Formatter(_FORMAT))
    if _handler not in root.handlers:
        root.addHandler(_handler)
    root.setLevel(level.upper())
    return _handler
