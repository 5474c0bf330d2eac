"""
Tests for the root logger setup.
pytest attaches its own capture handlers to the root logger, so each test
detaches them for the duration of the check and puts them back afterwards.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from meals_finder_api.app.core.logging_config import DEBUG_FORMAT, LOG_FORMAT, setup_logging


@contextmanager
def bare_root_logger() -> Iterator[logging.Logger]:
    root = logging.getLogger()
    access = logging.getLogger("uvicorn.access")
    saved_handlers, saved_level, saved_access_level = root.handlers[:], root.level, access.level
    root.handlers.clear()
    try:
        yield root
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
        access.setLevel(saved_access_level)


def test_level_name_is_applied() -> None:
    with bare_root_logger() as root:
        setup_logging("warning")

        assert root.level == logging.WARNING
        assert root.handlers[0].formatter._fmt == LOG_FORMAT


def test_unknown_level_falls_back_to_info() -> None:
    with bare_root_logger() as root:
        setup_logging("chatty")

        assert root.level == logging.INFO


def test_debug_mode_overrides_level() -> None:
    with bare_root_logger() as root:
        setup_logging("WARNING", debug=True)

        assert root.level == logging.DEBUG
        assert root.handlers[0].formatter._fmt == DEBUG_FORMAT
        assert logging.getLogger("uvicorn.access").level == logging.INFO


def test_file_handler_and_single_setup(tmp_path) -> None:
    logfile = tmp_path / "service.log"

    with bare_root_logger() as root:
        setup_logging("INFO", str(logfile))
        setup_logging("DEBUG", debug=True)

        assert len(root.handlers) == 2
        assert root.level == logging.INFO
        logging.getLogger("meals_finder_api.tests").info("written to file")
        root.handlers[1].flush()

    assert "written to file" in logfile.read_text(encoding="utf-8")
