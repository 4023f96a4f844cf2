import logging
import sys

from .constants import LOGGER_NAME

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_handler: logging.Handler | None = None


def setup_logging(debug: bool = False) -> logging.Logger:
    """Configure the package logger.

    A single stream handler is attached the first time this is called;
    later calls only adjust the level.
    """
    global _handler

    logger = logging.getLogger(LOGGER_NAME)
    if _handler is None:
        _handler = logging.StreamHandler(sys.stderr)
        _handler.setFormatter(logging.Formatter(_FORMAT))
        logger.addHandler(_handler)

    logger.setLevel(logging.DEBUG if debug else logging.WARNING)
    return logger
