"""Template sources: where the text of named templates comes from.

Source kinds:
- literal: text given directly
- file: text read from a file
- file_glob: one template per file matching a glob, named by its path
- env: text read from an environment variable
- stdin: text read from standard input
"""

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from render.tagged import Tagged
from render.utils.globbing import expand
from render.utils.reading import STDIN_PATH, read_text

if TYPE_CHECKING:
    from render.templates.renderer import Templates


@dataclass(frozen=True)
class TemplateSource(Tagged, ABC, family="template source"):
    """Base class for template sources."""

    @abstractmethod
    def load(self, templates: "Templates") -> list[str]:
        """Compile this source's templates into the registry.

        Returns:
            Names registered, in registration order

        Raises:
            CompileError: If a template's syntax is invalid
            RenderIOError: If the text cannot be read
        """


@dataclass(frozen=True)
class LiteralTemplateSource(TemplateSource):
    """Template text given directly."""

    kind: ClassVar[str] = "literal"

    name: str
    text: str

    def load(self, templates: "Templates") -> list[str]:
        return [templates.add(self.name, self.text)]


@dataclass(frozen=True)
class FileTemplateSource(TemplateSource):
    """Template text read from a file."""

    kind: ClassVar[str] = "file"

    name: str
    path: str

    def load(self, templates: "Templates") -> list[str]:
        return [templates.add(self.name, read_text(self.path))]


@dataclass(frozen=True)
class FileGlobTemplateSource(TemplateSource):
    """One template per file matching a glob, each named by its path.

    Loading stops at the first file that fails; templates registered from
    earlier matches stay registered.
    """

    kind: ClassVar[str] = "file_glob"

    glob: str

    def load(self, templates: "Templates") -> list[str]:
        names: list[str] = []
        for path in expand(self.glob):
            names.append(templates.add(path, read_text(path)))
        return names


@dataclass(frozen=True)
class EnvTemplateSource(TemplateSource):
    """Template text read from an environment variable (unset = empty)."""

    kind: ClassVar[str] = "env"

    name: str
    key: str

    def load(self, templates: "Templates") -> list[str]:
        return [templates.add(self.name, os.environ.get(self.key, ""))]


@dataclass(frozen=True)
class StdinTemplateSource(TemplateSource):
    """Template text read from standard input."""

    kind: ClassVar[str] = "stdin"

    name: str = "stdin"

    def load(self, templates: "Templates") -> list[str]:
        return [templates.add(self.name, read_text(STDIN_PATH))]
