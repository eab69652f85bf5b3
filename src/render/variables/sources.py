"""Variable sources: where one batch of variables comes from.

Each source kind is a small frozen dataclass. A source may carry a
``namespace`` key, in which case its variables are nested one level down
under that key instead of being written at the top level.

Source kinds:
- literal: one key/value pair
- file: a JSON, YAML or TOML mapping read from a file
- stdin: a JSON, YAML or TOML mapping read from standard input
- file_slurp: one variable holding a file's raw text
- files_slurp: every file matching a glob, keyed by path
- env: environment variables selected by name prefix or glob
"""

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, ClassVar

from render.exceptions import DecodeError
from render.formats import decode
from render.tagged import Tagged
from render.utils.globbing import compile_glob, expand, has_magic
from render.utils.reading import read_bytes, read_stdin, read_text
from render.variables.store import Files, Vars


@dataclass(frozen=True)
class VarsSource(Tagged, ABC, family="variable source"):
    """Base class for variable sources.

    Attributes:
        namespace: Key to nest the loaded variables under (empty = top level)
    """

    namespace: str = field(default="", kw_only=True)

    def load(self, variables: Vars) -> None:
        """Load this source into the store, honoring the namespace."""
        self.load_into(variables.namespace(self.namespace))

    @abstractmethod
    def load_into(self, target: dict[str, Any]) -> None:
        """Write this source's variables into a mapping."""


def _merge_decoded(target: dict[str, Any], data: bytes, origin: str) -> None:
    try:
        decoded = decode(data)
    except DecodeError as e:
        e.locate(origin)
        raise
    for key, value in decoded.items():
        target[key] = value


@dataclass(frozen=True)
class LiteralVarsSource(VarsSource):
    """A single variable given directly."""

    kind: ClassVar[str] = "literal"

    key: str
    value: Any = ""

    def load_into(self, target: dict[str, Any]) -> None:
        target[self.key] = self.value


@dataclass(frozen=True)
class FileVarsSource(VarsSource):
    """Variables decoded from a JSON, YAML or TOML file."""

    kind: ClassVar[str] = "file"

    path: str

    def load_into(self, target: dict[str, Any]) -> None:
        _merge_decoded(target, read_bytes(self.path), self.path)


@dataclass(frozen=True)
class StdinVarsSource(VarsSource):
    """Variables decoded from JSON, YAML or TOML on standard input."""

    kind: ClassVar[str] = "stdin"

    def load_into(self, target: dict[str, Any]) -> None:
        _merge_decoded(target, read_stdin(), "<stdin>")


@dataclass(frozen=True)
class FileSlurpVarsSource(VarsSource):
    """One variable holding the raw text of a file (``-`` for stdin)."""

    kind: ClassVar[str] = "file_slurp"

    name: str
    path: str

    def load_into(self, target: dict[str, Any]) -> None:
        target[self.name] = read_text(self.path)


@dataclass(frozen=True)
class FilesSlurpVarsSource(VarsSource):
    """The raw text of every file matching a glob, keyed by path.

    With a namespace the resulting Files mapping replaces whatever is
    stored under the namespace key; without one each path becomes a
    top-level variable.
    """

    kind: ClassVar[str] = "files_slurp"

    glob: str

    def read(self) -> Files:
        """Read every matching file."""
        return Files({path: read_text(path) for path in expand(self.glob)})

    def load(self, variables: Vars) -> None:
        files = self.read()
        if self.namespace:
            variables[self.namespace] = files
        else:
            variables.overwrite_with(files)

    def load_into(self, target: dict[str, Any]) -> None:
        for key, value in self.read().items():
            target[key] = value


@dataclass(frozen=True)
class EnvVarsSource(VarsSource):
    """Environment variables selected by name.

    A plain prefix selects every variable whose name starts with it, and an
    empty prefix selects the whole environment. A prefix containing glob
    syntax (``APP_*_HOST``) has to match the whole name instead.
    """

    kind: ClassVar[str] = "env"

    prefix: str = ""

    def load_into(self, target: dict[str, Any]) -> None:
        if has_magic(self.prefix):
            selects = compile_glob(self.prefix).match
        else:
            selects = self._has_prefix
        for key, value in os.environ.items():
            if selects(key):
                target[key] = value

    def _has_prefix(self, key: str) -> bool:
        return key.startswith(self.prefix)


__all__ = [
    "VarsSource",
    "LiteralVarsSource",
    "FileVarsSource",
    "StdinVarsSource",
    "FileSlurpVarsSource",
    "FilesSlurpVarsSource",
    "EnvVarsSource",
]
