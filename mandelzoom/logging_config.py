"""
Logging setup shared by the batch renderer and the viewer.

Only the 'mandelzoom' logger tree is configured; the root logger and other
libraries are left alone.
"""
import logging
import sys

LOG_FORMAT = '%(asctime)s %(levelname)-7s %(name)s: %(message)s'
DATE_FORMAT = '%H:%M:%S'


def setup_logging(level: int = logging.INFO, stream=None) -> logging.Logger:
    """
    Send 'mandelzoom.*' records at `level` or above to `stream` (stdout by default).

    Calling it again replaces the previous handler instead of adding a second one.
    """
    logger = logging.getLogger("mandelzoom")
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)
    return logger
