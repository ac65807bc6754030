from __future__ import annotations

import logging


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_console_handler: logging.Handler | None = None


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Attach a console handler to the package logger once."""
    global _console_handler

    logger = logging.getLogger("pairwatch")
    logger.setLevel(level.upper())
    if _console_handler is None:
        _console_handler = logging.StreamHandler()
        _console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    if _console_handler not in logger.handlers:
        logger.addHandler(_console_handler)
    return logger
