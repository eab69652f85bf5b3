"""Parsing of command-line source flag values.

Each ``--var*`` / ``--template*`` flag value is a small ``[key=]value``
string. These functions turn one such string into a source, raising
ValueError with the expected syntax when it does not fit.
"""

import re

from render.templates.sources import (
    EnvTemplateSource,
    FileGlobTemplateSource,
    FileTemplateSource,
    LiteralTemplateSource,
    StdinTemplateSource,
    TemplateSource,
)
from render.utils.reading import STDIN_PATH
from render.variables.sources import (
    EnvVarsSource,
    FilesSlurpVarsSource,
    FileSlurpVarsSource,
    FileVarsSource,
    LiteralVarsSource,
    StdinVarsSource,
    VarsSource,
)

# "name=" prefix of an inline template; the text itself may contain "="
_TEMPLATE_NAME = re.compile(r"([\w./-]+)=(.*)\Z", re.DOTALL)


def _split_required(value: str, syntax: str) -> tuple[str, str]:
    key, sep, rest = value.partition("=")
    if not sep or not key:
        raise ValueError(f"syntax: {syntax}")
    return key, rest


def _split_optional(value: str) -> tuple[str, str]:
    key, sep, rest = value.partition("=")
    if not sep:
        return "", value
    return key, rest


def parse_var(value: str) -> VarsSource:
    """``KEY=VALUE``: a literal variable."""
    key, text = _split_required(value, "key=value")
    return LiteralVarsSource(key=key, value=text)


def parse_var_file(value: str) -> VarsSource:
    """``[NAMESPACE=]PATH``: a variables file, ``-`` for stdin."""
    namespace, path = _split_optional(value)
    if path == STDIN_PATH:
        return StdinVarsSource(namespace=namespace)
    return FileVarsSource(path=path, namespace=namespace)


def parse_var_file_slurp(value: str) -> VarsSource:
    """``NAME=PATH``: one variable holding a file's text."""
    name, path = _split_required(value, "name=path")
    return FileSlurpVarsSource(name=name, path=path)


def parse_var_files_slurp(value: str) -> VarsSource:
    """``[NAMESPACE=]GLOB``: the text of every matching file, keyed by path."""
    namespace, pattern = _split_optional(value)
    return FilesSlurpVarsSource(glob=pattern, namespace=namespace)


def parse_var_env(value: str) -> VarsSource:
    """``[NAMESPACE=]PREFIX``: environment variables with a name prefix."""
    namespace, prefix = _split_optional(value)
    return EnvVarsSource(prefix=prefix, namespace=namespace)


def parse_template(value: str, position: int) -> TemplateSource:
    """``[NAME=]TEXT``: an inline template, auto-named when unnamed."""
    match = _TEMPLATE_NAME.match(value)
    if match:
        return LiteralTemplateSource(name=match.group(1), text=match.group(2))
    return LiteralTemplateSource(name=f"_param_{position}", text=value)


def parse_template_file(value: str) -> TemplateSource:
    """``[NAME=]PATH``: a template file named by its path unless named."""
    name, path = _split_optional(value)
    if path == STDIN_PATH:
        return StdinTemplateSource(name=name or "stdin")
    return FileTemplateSource(name=name or path, path=path)


def parse_template_files(value: str) -> TemplateSource:
    """``GLOB``: one template per matching file."""
    return FileGlobTemplateSource(glob=value)


def parse_template_env(value: str) -> TemplateSource:
    """``[NAME=]VAR``: a template read from an environment variable."""
    name, key = _split_optional(value)
    if not key:
        raise ValueError("syntax: [name=]variable")
    return EnvTemplateSource(name=name or key, key=key)
