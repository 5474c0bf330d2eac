"""
Logging configuration for the Meals Finder API.

``setup_logging`` attaches a console handler, and optionally a file
handler, to the root logger.  Each record carries the timestamp, level,
logger name and message.  Calling it more than once is harmless: the
first call wins, which keeps repeated ``create_app`` calls in the test
suite from stacking duplicate handlers.
"""

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
# Debug records also carry the source location.
DEBUG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s (%(filename)s:%(lineno)d): %(message)s"


def setup_logging(level: str = "INFO", logfile: Optional[str] = None, debug: bool = False) -> None:
    """Configure the root logger.

    Parameters
    ----------
    level : str
        Logging level name (e.g. ``"DEBUG"``, ``"INFO"``).  Case
        insensitive; unknown names fall back to ``INFO``.
    logfile : Optional[str]
        Path of a file that should receive a copy of every record.
        Relative paths are resolved against the working directory.
    debug : bool
        The application runs in debug mode; ``level`` is ignored and the
        root logger emits ``DEBUG`` records.  The HTTP server's access
        log stays at ``INFO`` so request lines do not drown the service
        records.
    """
    root = logging.getLogger()
    if root.handlers:
        return

    if debug:
        root.setLevel(logging.DEBUG)
    else:
        root.setLevel(getattr(logging, level.upper(), logging.INFO))
    formatter = logging.Formatter(fmt=DEBUG_FORMAT if debug else LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if logfile:
        file_handler = logging.FileHandler(Path(logfile).resolve(), encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    if debug:
        logging.getLogger("uvicorn.access").setLevel(logging.INFO)
    logging.getLogger(__name__).debug("Logging configured (debug=%s, logfile=%s)", debug, logfile)
