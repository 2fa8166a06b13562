"""Pytest fixtures for btcrpc_errors tests."""

import logging
from pathlib import Path
from typing import Generator

import pytest
import structlog

from btcrpc_errors.patterns import PatternSpec


@pytest.fixture(autouse=True)
def reset_logging_state() -> Generator[None, None, None]:
    """Reset structlog and root handlers around each test.

    CLI invocations configure logging against CliRunner's streams, which
    are closed once the invocation returns.
    """
    structlog.reset_defaults()

    root_logger = logging.getLogger()
    original_handlers = root_logger.handlers[:]
    original_level = root_logger.level
    for handler in original_handlers:
        root_logger.removeHandler(handler)

    yield

    structlog.reset_defaults()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    for handler in original_handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(original_level)


@pytest.fixture
def greeting_specs() -> list[PatternSpec]:
    """Three cases without a catch-all."""
    return [
        PatternSpec("Variant1", 2, ("^Hello (.*) (.*)$", "^(.*) World (.*)!$")),
        PatternSpec("Variant2", 0, ("^two", "regexs$")),
        PatternSpec("Variant3", 1, ("^single (.*) regex$",)),
    ]


@pytest.fixture
def moin_specs() -> list[PatternSpec]:
    """Two cases plus a Generic catch-all."""
    return [
        PatternSpec("Variant1", 0, ("^moin$",)),
        PatternSpec("Variant2", 1, ("^moin moin (.*)!$",)),
        PatternSpec("Generic", 1),
    ]


@pytest.fixture
def tables_yaml(tmp_path: Path) -> Path:
    """A small case table file with one classified and one plain code."""
    path = tmp_path / "cases.yaml"
    path.write_text(
        """\
tables:
  VERIFY_ERROR:
    code: -25
    cases:
      - name: MissingOrSpend
        templates:
          - Input not found or already spent
      - name: BlockValidityFailed
        templates:
          - "TestBlockValidity failed: {}"
  TYPE_ERROR:
    code: -3
    options:
      anchored: false
    cases:
      - name: Missing
        templates:
          - Missing {}
      - name: Generic
        arity: 1
""",
        encoding="utf-8",
    )
    return path
