"""Whole-content reads from files and standard input."""

import sys
from pathlib import Path

from render.exceptions import RenderIOError

STDIN_PATH = "-"


def read_stdin() -> bytes:
    """Read standard input to completion."""
    try:
        stream = getattr(sys.stdin, "buffer", None)
        if stream is not None:
            return stream.read()
        return sys.stdin.read().encode("utf-8")
    except OSError as e:
        raise RenderIOError(f"cannot read standard input: {e}") from e


def read_bytes(path: str | Path) -> bytes:
    """Read a file to completion; ``-`` reads standard input."""
    if str(path) == STDIN_PATH:
        return read_stdin()
    try:
        return Path(path).read_bytes()
    except OSError as e:
        raise RenderIOError(f"cannot read {path}: {e.strerror or e}") from e


def read_text(path: str | Path) -> str:
    """Read a file as UTF-8 text; ``-`` reads standard input."""
    data = read_bytes(path)
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise RenderIOError(f"cannot read {path}: not valid UTF-8 ({e})") from e
