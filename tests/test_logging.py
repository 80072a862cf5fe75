"""Tests for docsite logging configuration."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import pytest

from docsite.logging import configure_logging, get_logger


@pytest.fixture(autouse=True)
def _reset_logger() -> Iterator[None]:
    yield
    logger = logging.getLogger("docsite")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


def test_get_logger_uses_docsite_hierarchy() -> None:
    assert get_logger("links").name == "docsite.links"
    assert get_logger().name == "docsite"


@pytest.mark.parametrize(
    "verbose, quiet, level",
    [(False, False, logging.INFO), (True, False, logging.DEBUG), (False, True, logging.WARNING)],
)
def test_configure_logging_levels(verbose: bool, quiet: bool, level: int) -> None:
    logger = configure_logging(verbose=verbose, quiet=quiet)
    assert logger.level == level
    assert len(logger.handlers) == 1


def test_configure_logging_does_not_stack_handlers() -> None:
    configure_logging()
    logger = configure_logging()
    assert len(logger.handlers) == 1


def test_configure_logging_writes_debug_to_file(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "docsite.log"
    configure_logging(quiet=True, log_file=log_file)

    get_logger("routes").debug("Composed %d routes", 3)
    for handler in logging.getLogger("docsite").handlers:
        handler.flush()

    assert "docsite.routes: Composed 3 routes" in log_file.read_text(encoding="utf-8")
