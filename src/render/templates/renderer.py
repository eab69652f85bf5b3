"""Template registry and renderer.

All templates of one run share a Jinja2 environment: the same delimiters,
the same function registry and the same variables. Templates can include
each other by name (``{% include "header" %}``).

Missing variables render as empty values (``ChainableUndefined``), so
``{{ service.port }}`` is blank when ``service`` is not set.
"""

import os
from collections.abc import Callable, Iterable, Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any, TextIO

from jinja2 import ChainableUndefined, DictLoader, Environment, Template, TemplateSyntaxError

from render.exceptions import CompileError, EngineError, RenderError, RenderIOError
from render.utils.globbing import compile_glob
from render.utils.logging import get_logger

if TYPE_CHECKING:
    from render.config import Config
    from render.templates.sources import TemplateSource

logger = get_logger(__name__)

DEFAULT_LEFT_DELIM = "{{"
DEFAULT_RIGHT_DELIM = "}}"


def create_environment(
    functions: Mapping[str, Callable[..., Any]],
    sources: dict[str, str],
    left_delim: str = DEFAULT_LEFT_DELIM,
    right_delim: str = DEFAULT_RIGHT_DELIM,
) -> Environment:
    """Create the shared Jinja2 environment.

    ``left_delim``/``right_delim`` delimit expressions. Statement and comment
    tags reuse their outer characters: ``<<``/``>>`` gives ``<% %>`` and
    ``<# #>``, the defaults give the usual ``{% %}`` and ``{# #}``.

    Args:
        functions: Function registry exposed as template globals
        sources: Template texts by name, shared with the registry
        left_delim: Left expression delimiter
        right_delim: Right expression delimiter

    Returns:
        Configured Environment

    Raises:
        CompileError: If the delimiters are empty
    """
    if not left_delim or not right_delim:
        raise CompileError("template delimiters must not be empty")

    env = Environment(
        loader=DictLoader(sources),
        variable_start_string=left_delim,
        variable_end_string=right_delim,
        block_start_string=left_delim[0] + "%",
        block_end_string="%" + right_delim[-1],
        comment_start_string=left_delim[0] + "#",
        comment_end_string="#" + right_delim[-1],
        undefined=ChainableUndefined,
        keep_trailing_newline=True,
        autoescape=False,
    )
    env.globals.update(functions)
    return env


def _excluder(pattern: str | None) -> Callable[[str], bool]:
    if not pattern:
        return lambda name: False
    return compile_glob(pattern).match


def _output_path(directory: str | Path, name: str) -> Path:
    # Template names may be absolute paths (from file globs); keep them
    # inside the output directory.
    return Path(directory) / name.lstrip("/" + os.sep)


class Templates:
    """Named templates compiled against shared delimiters and functions.

    Usage:
        templates = Templates(functions, variables)
        templates.add("greeting", "Hello {{ name }}")
        templates.render(sys.stdout)

    Attributes:
        functions: Function registry available to every template
        variables: Mapping templates are rendered against
        names: Template names in registration order
    """

    def __init__(
        self,
        functions: Mapping[str, Callable[..., Any]],
        variables: Mapping[str, Any] | None = None,
        left_delim: str = DEFAULT_LEFT_DELIM,
        right_delim: str = DEFAULT_RIGHT_DELIM,
    ) -> None:
        self.functions = functions
        self.variables: Mapping[str, Any] = variables if variables is not None else {}
        self.left_delim = left_delim
        self.right_delim = right_delim
        self.names: list[str] = []
        self._sources: dict[str, str] = {}
        self._compiled: dict[str, Template] = {}
        self._env = create_environment(functions, self._sources, left_delim, right_delim)

    # =========================================================================
    # Registration
    # =========================================================================

    def add(self, name: str, text: str) -> str:
        """Compile a template and register it under a name.

        Re-adding a name replaces its body but keeps its place in the
        registration order.

        Returns:
            The registered name

        Raises:
            CompileError: If the text is not a valid template
        """
        previous = self._sources.get(name)
        self._sources[name] = text
        try:
            template = self._env.get_template(name)
        except TemplateSyntaxError as e:
            if previous is None:
                del self._sources[name]
            else:
                self._sources[name] = previous
            raise CompileError(f"line {e.lineno}: {e.message}", source=name) from e

        self._compiled[name] = template
        if name not in self.names:
            self.names.append(name)
        logger.debug("Compiled template %s", name)
        return name

    def load(self, sources: Iterable["TemplateSource"]) -> list[str]:
        """Load template sources in order, stopping at the first error.

        Returns:
            Names registered by all sources
        """
        names: list[str] = []
        for index, source in enumerate(sources, start=1):
            try:
                names.extend(source.load(self))
            except EngineError as e:
                e.locate(f"template source #{index} ({source.describe()})")
                raise
        return names

    @classmethod
    def from_config(
        cls,
        functions: Mapping[str, Callable[..., Any]],
        config: "Config",
        variables: Mapping[str, Any] | None = None,
    ) -> "Templates":
        """Build and load the registry described by a configuration."""
        templates = cls(
            functions,
            variables,
            left_delim=config.template_left_delim or DEFAULT_LEFT_DELIM,
            right_delim=config.template_right_delim or DEFAULT_RIGHT_DELIM,
        )
        templates.load(config.template_sources)
        return templates

    def __contains__(self, name: object) -> bool:
        return name in self._compiled

    def __len__(self) -> int:
        return len(self.names)

    # =========================================================================
    # Rendering
    # =========================================================================

    def _context(self) -> dict[str, Any]:
        return {"vars": self.variables, **self.variables}

    def _execute(self, template: Template, name: str) -> str:
        try:
            return template.render(self._context())
        except EngineError as e:
            # Dispatch failures keep their kind (NotFoundError, InvocationError)
            e.locate(name)
            raise
        except Exception as e:
            raise RenderError(f"{type(e).__name__}: {e}", source=name) from e

    def render_one(self, name: str) -> str:
        """Render a single registered template to a string."""
        if name not in self._compiled:
            raise RenderError(f"no such template: {name!r}")
        return self._execute(self._compiled[name], name)

    def render(self, sink: TextIO, separator: str = "", exclude: str | None = None) -> None:
        """Render all templates, in registration order, to one stream.

        The separator is itself a template, rendered between consecutive
        templates that are not excluded.

        Args:
            sink: Stream to write to
            separator: Separator template text
            exclude: Glob of template names to skip

        Raises:
            CompileError: If the separator or exclude pattern is invalid
            RenderError: If a template fails to execute
            NotFoundError, InvocationError: If map or filter dispatch fails
            RenderIOError: If writing to the sink fails
        """
        excluded = _excluder(exclude)
        try:
            separator_template = self._env.from_string(separator)
        except TemplateSyntaxError as e:
            raise CompileError(f"line {e.lineno}: {e.message}", source="separator") from e

        first = True
        for name in self.names:
            if excluded(name):
                logger.debug("Excluded template %s", name)
                continue
            if not first:
                self._write(sink, self._execute(separator_template, "separator"))
            self._write(sink, self.render_one(name))
            first = False

    def render_to_dir(self, directory: str | Path, exclude: str | None = None) -> list[Path]:
        """Render each template to ``directory/<template name>``.

        Parent directories are created and existing files replaced. Files
        written before a failure are left in place.

        Returns:
            Paths written, in registration order

        Raises:
            CompileError: If the exclude pattern is invalid
            RenderError: If a template fails to execute
            NotFoundError, InvocationError: If map or filter dispatch fails
            RenderIOError: If a directory or file cannot be written
        """
        excluded = _excluder(exclude)
        written: list[Path] = []
        for name in self.names:
            if excluded(name):
                logger.debug("Excluded template %s", name)
                continue
            path = _output_path(directory, name)
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
                path.unlink(missing_ok=True)
            except OSError as e:
                raise RenderIOError(f"cannot prepare {path}: {e.strerror or e}", source=name) from e

            text = self.render_one(name)
            try:
                path.write_text(text, encoding="utf-8")
            except OSError as e:
                raise RenderIOError(f"cannot write {path}: {e.strerror or e}", source=name) from e
            logger.debug("Wrote %s", path)
            written.append(path)
        return written

    @staticmethod
    def _write(sink: TextIO, text: str) -> None:
        try:
            sink.write(text)
        except OSError as e:
            raise RenderIOError(f"cannot write output: {e}") from e
