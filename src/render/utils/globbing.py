"""Shell-style glob patterns with path-separator aware matching.

Supported syntax:
- ``*`` matches any run of characters within one path segment
- ``**`` matches any run of characters, separators included
- ``?`` matches one character other than the separator
- ``[abc]``, ``[a-z]``, ``[!abc]`` character classes
- ``{foo,bar}`` alternatives (may nest)
- ``\\`` escapes the next character
"""

import os
import re
from collections.abc import Iterator

from render.exceptions import CompileError

_MAGIC = frozenset("*?[{\\")


class Glob:
    """A compiled glob pattern.

    Attributes:
        pattern: The source pattern
        separator: Path separator treated as a segment boundary
    """

    def __init__(self, pattern: str, separator: str = os.sep) -> None:
        self.pattern = pattern
        self.separator = separator
        regex, _ = _parse(pattern, 0, separator, in_braces=False)
        self._regex = re.compile(regex + r"\Z", re.DOTALL)

    def match(self, name: str) -> bool:
        """Return True if the whole name matches the pattern."""
        return self._regex.match(name) is not None

    def __repr__(self) -> str:
        return f"Glob({self.pattern!r})"


def _parse_class(pattern: str, i: int, separator: str) -> tuple[str, int]:
    """Translate a ``[...]`` class starting at ``pattern[i] == '['``."""
    n = len(pattern)
    j = i + 1
    negate = j < n and pattern[j] in "!^"
    if negate:
        j += 1
    start = j
    # A leading ']' is a literal member of the class
    if j < n and pattern[j] == "]":
        j += 1
    end = pattern.find("]", j)
    if end < 0:
        raise CompileError(f"unclosed '[' in pattern {pattern!r}")

    body = pattern[start:end]
    chunks: list[str] = []
    for k, ch in enumerate(body):
        if ch == "-" and 0 < k < len(body) - 1:
            chunks.append("-")
        else:
            chunks.append(re.escape(ch))

    if negate:
        return f"[^{''.join(chunks)}{re.escape(separator)}]", end + 1
    return f"[{''.join(chunks)}]", end + 1


def _parse(pattern: str, i: int, separator: str, in_braces: bool) -> tuple[str, int]:
    not_sep = f"[^{re.escape(separator)}]"
    n = len(pattern)
    alternatives: list[list[str]] = []
    current: list[str] = []

    while i < n:
        c = pattern[i]
        if c == "\\":
            if i + 1 >= n:
                raise CompileError(f"trailing backslash in pattern {pattern!r}")
            current.append(re.escape(pattern[i + 1]))
            i += 2
        elif c == "*":
            if pattern.startswith("**", i):
                current.append(".*")
                i += 2
            else:
                current.append(not_sep + "*")
                i += 1
        elif c == "?":
            current.append(not_sep)
            i += 1
        elif c == "[":
            chunk, i = _parse_class(pattern, i, separator)
            current.append(chunk)
        elif c == "{":
            chunk, i = _parse(pattern, i + 1, separator, in_braces=True)
            current.append(chunk)
        elif in_braces and c == ",":
            alternatives.append(current)
            current = []
            i += 1
        elif in_braces and c == "}":
            alternatives.append(current)
            return "(?:" + "|".join("".join(alt) for alt in alternatives) + ")", i + 1
        else:
            current.append(re.escape(c))
            i += 1

    if in_braces:
        raise CompileError(f"unclosed '{{' in pattern {pattern!r}")
    return "".join(current), i


def compile_glob(pattern: str, separator: str = os.sep) -> Glob:
    """Compile a glob pattern.

    Args:
        pattern: Glob pattern
        separator: Path separator treated as a segment boundary

    Returns:
        Compiled Glob

    Raises:
        CompileError: If the pattern is malformed
    """
    return Glob(pattern, separator)


def has_magic(pattern: str) -> bool:
    """Return True if the pattern contains any glob syntax."""
    return any(c in _MAGIC for c in pattern)


def _literal_root(pattern: str) -> str:
    """Leading directories of a pattern that contain no glob syntax."""
    segments = pattern.split(os.sep)
    root: list[str] = []
    for segment in segments[:-1]:
        if has_magic(segment):
            break
        root.append(segment)
    if root == [""]:
        return os.sep
    return os.sep.join(root)


def _walk_files(root: str, limit: int | None) -> Iterator[str]:
    top = root or os.curdir
    for dirpath, dirnames, filenames in os.walk(top):
        directory = dirpath if root else os.path.relpath(dirpath, top)
        if directory == os.curdir:
            directory = ""
        # Files below this level would have more separators than the pattern
        if limit is not None and os.path.join(directory, "x").count(os.sep) >= limit:
            dirnames.clear()
        for name in filenames:
            yield os.path.join(directory, name)


def expand(pattern: str) -> list[str]:
    """Expand a glob against the filesystem.

    Files are matched with the same rules as ``compile_glob``: the tree is
    walked from the pattern's leading literal directories and every regular
    file whose path matches is kept. Paths come back sorted, hidden files
    included.

    Raises:
        CompileError: If the pattern is malformed
    """
    matcher = compile_glob(pattern)
    if not has_magic(pattern):
        return [pattern] if os.path.isfile(pattern) else []

    limit = None if "**" in pattern else pattern.count(os.sep)
    return sorted(
        path for path in _walk_files(_literal_root(pattern), limit) if matcher.match(path)
    )
