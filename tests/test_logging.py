# tests/test_logging.py

from __future__ import annotations

import logging

import pytest

from taskboard.logging_setup import _ConsoleNoiseFilter


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


@pytest.mark.parametrize(
    "name,level,shown",
    [
        ("taskboard.pipeline.executor", logging.DEBUG, True),
        ("taskboard.store.rest", logging.INFO, False),
        ("taskboard.store.rest", logging.WARNING, True),
        ("httpx", logging.INFO, False),
        ("httpx", logging.ERROR, True),
        ("py.warnings", logging.WARNING, False),
        ("py.warnings", logging.ERROR, True),
    ],
)
def test_console_filter(name: str, level: int, shown: bool) -> None:
    assert _ConsoleNoiseFilter().filter(_record(name, level)) is shown
