"""Shared pytest fixtures for render tests.

Fixtures are organized by category:
- Function fixtures: the assembled function registry
- Input fixtures: fake standard input and sample files on disk
- Logging fixtures: reset of the render logger between tests
"""

import io
import logging
import sys
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from render.functions import FunctionRegistry, build_functions

# =============================================================================
# Function Fixtures
# =============================================================================


@pytest.fixture
def functions() -> FunctionRegistry:
    """Return the standard function registry."""
    return build_functions()


# =============================================================================
# Input Fixtures
# =============================================================================


@pytest.fixture
def stdin(monkeypatch: pytest.MonkeyPatch) -> Callable[[str], None]:
    """Return a function that replaces standard input with the given text."""

    def feed(text: str) -> None:
        stream = io.TextIOWrapper(io.BytesIO(text.encode("utf-8")), encoding="utf-8")
        monkeypatch.setattr(sys, "stdin", stream)

    return feed


@pytest.fixture
def conf_dir(tmp_path: Path) -> Path:
    """Create a directory of small text files.

    Layout:
        conf/a.conf        "alpha"
        conf/b.conf        "bravo"
        conf/notes.txt     "notes"
        conf/sub/c.conf    "charlie"
    """
    root = tmp_path / "conf"
    (root / "sub").mkdir(parents=True)
    (root / "a.conf").write_text("alpha")
    (root / "b.conf").write_text("bravo")
    (root / "notes.txt").write_text("notes")
    (root / "sub" / "c.conf").write_text("charlie")
    return root


# =============================================================================
# Logging Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    """Undo CLI logging setup so handlers never outlive a test's streams."""
    yield
    logger = logging.getLogger("render")
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
