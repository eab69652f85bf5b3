"""Variable store: the namespace templates are rendered against.

Sources write into the store in order. Writes are shallow: a later source
replaces a top-level value set by an earlier one, it never merges into it.
"""

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any, TextIO

from render.exceptions import EngineError
from render.formats import dump
from render.utils.globbing import compile_glob
from render.utils.logging import get_logger

if TYPE_CHECKING:
    from render.config import Config
    from render.variables.sources import VarsSource

logger = get_logger(__name__)


class Files(dict[str, Any]):
    """Slurped file contents keyed by path.

    Templates can narrow the set further, e.g.
    ``{% for path, text in files.glob("conf/*.ini").items() %}``.
    """

    def get_bytes(self, name: str) -> bytes:
        """Get a file's content as bytes."""
        return str(self[name]).encode("utf-8")

    def glob(self, pattern: str) -> "Files":
        """Get the files whose path matches a glob pattern."""
        matcher = compile_glob(pattern)
        return Files({name: text for name, text in self.items() if matcher.match(name)})


class Vars(dict[str, Any]):
    """Top-level variable mapping, mutated in place by variable sources."""

    def overwrite_with(self, other: Mapping[str, Any]) -> None:
        """Shallow merge: every key in ``other`` replaces ours."""
        for key, value in other.items():
            self[key] = value

    def namespace(self, key: str | None) -> dict[str, Any]:
        """Get the mapping a namespaced source writes into.

        An empty key means the top level. Otherwise the mapping stored under
        ``key`` is reused; if there is none, or the value there is not a
        mapping, a fresh mapping replaces it.

        Args:
            key: Namespace key

        Returns:
            The mapping to write into
        """
        if not key:
            return self

        destination = self.get(key)
        if not isinstance(destination, dict):
            if key in self:
                logger.debug("Replacing non-mapping value at namespace %r", key)
            destination = {}
            self[key] = destination
        return destination

    def load(self, sources: Iterable["VarsSource"]) -> None:
        """Load variable sources in order, stopping at the first error.

        Raises:
            EngineError: The first failure, located at its source
        """
        for index, source in enumerate(sources, start=1):
            try:
                source.load(self)
            except EngineError as e:
                e.locate(f"variable source #{index} ({source.describe()})")
                raise
            logger.debug("Loaded variable source #%d (%s)", index, source.describe())

    @classmethod
    def from_config(cls, config: "Config") -> "Vars":
        """Build the store from a configuration's variable sources."""
        variables = cls()
        variables.load(config.vars_sources)
        return variables

    def save(self, stream: TextIO) -> None:
        """Write the variables as pretty JSON (YAML if JSON cannot encode them)."""
        dump(self, stream)
