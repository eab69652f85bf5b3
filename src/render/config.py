"""render configuration.

A configuration document captures a whole run: variable sources, template
sources, delimiters, output destinations, the exclusion pattern and the
separator. It is saved as pretty JSON (YAML if JSON cannot encode it) and
loaded through the same JSON / YAML / TOML cascade as variable files, so a
saved configuration can be replayed with ``render --config``.

Example (YAML):

    vars_sources:
      - kind: file
        path: values.yaml
      - kind: env
        prefix: APP_
        namespace: env
    template_sources:
      - kind: file_glob
        glob: templates/*.conf
    template_out_path: out
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, TextIO

from render.exceptions import DecodeError
from render.formats import decode, dump
from render.templates.renderer import DEFAULT_LEFT_DELIM, DEFAULT_RIGHT_DELIM
from render.templates.sources import TemplateSource
from render.utils.logging import get_logger
from render.variables.sources import VarsSource

logger = get_logger(__name__)


@dataclass
class Config:
    """Run-time configuration.

    Attributes:
        config_out_path: Path to write this configuration to
        template_out_exclude: Glob of template names not to output
        template_out_print_separator: Separator template between printed templates
        template_out_print: Print rendered templates to stdout
        template_out_path: Directory to write rendered templates to
        template_left_delim: Left expression delimiter
        template_right_delim: Right expression delimiter
        template_sources: Template sources, in load order
        vars_out_print: Print variables to stdout and stop
        vars_out_path: Path to write variables to
        vars_sources: Variable sources, in load order
    """

    config_out_path: str = ""
    template_out_exclude: str = ""
    template_out_print_separator: str = ""
    template_out_print: bool = False
    template_out_path: str = ""
    template_left_delim: str = DEFAULT_LEFT_DELIM
    template_right_delim: str = DEFAULT_RIGHT_DELIM
    template_sources: list[TemplateSource] = field(default_factory=list)
    vars_out_print: bool = False
    vars_out_path: str = ""
    vars_sources: list[VarsSource] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization, omitting empty values."""
        data: dict[str, Any] = {
            "config_out_path": self.config_out_path,
            "template_out_exclude": self.template_out_exclude,
            "template_out_print_separator": self.template_out_print_separator,
            "template_out_print": self.template_out_print,
            "template_out_path": self.template_out_path,
            "template_left_delim": self.template_left_delim,
            "template_right_delim": self.template_right_delim,
            "template_sources": [s.to_dict() for s in self.template_sources],
            "vars_out_print": self.vars_out_print,
            "vars_out_path": self.vars_out_path,
            "vars_sources": [s.to_dict() for s in self.vars_sources],
        }
        return {key: value for key, value in data.items() if value}

    def save(self, stream: TextIO) -> None:
        """Write the configuration as pretty JSON (YAML as fallback)."""
        dump(self.to_dict(), stream)


def _string(data: dict[str, Any], key: str, default: str = "") -> str:
    value = data.get(key, default)
    return default if value is None else str(value)


def _sources(data: dict[str, Any], key: str) -> list[Any]:
    value = data.get(key) or []
    if not isinstance(value, list):
        raise DecodeError(f"{key} must be a list, got {type(value).__name__}")
    return value


def load_config_from_dict(data: dict[str, Any]) -> Config:
    """Load configuration from a dictionary.

    Args:
        data: Configuration dictionary

    Returns:
        Config instance

    Raises:
        DecodeError: If a field or source entry is malformed
    """
    known = set(Config.__dataclass_fields__)
    for key in data:
        if key not in known:
            logger.warning("Ignoring unknown config key: %s", key)

    return Config(
        config_out_path=_string(data, "config_out_path"),
        template_out_exclude=_string(data, "template_out_exclude"),
        template_out_print_separator=_string(data, "template_out_print_separator"),
        template_out_print=bool(data.get("template_out_print", False)),
        template_out_path=_string(data, "template_out_path"),
        template_left_delim=_string(data, "template_left_delim", DEFAULT_LEFT_DELIM),
        template_right_delim=_string(data, "template_right_delim", DEFAULT_RIGHT_DELIM),
        template_sources=[
            TemplateSource.from_dict(s) for s in _sources(data, "template_sources")
        ],
        vars_out_print=bool(data.get("vars_out_print", False)),
        vars_out_path=_string(data, "vars_out_path"),
        vars_sources=[VarsSource.from_dict(s) for s in _sources(data, "vars_sources")],
    )


def load_config(config_path: Path) -> Config:
    """Load configuration from a JSON, YAML or TOML file.

    Args:
        config_path: Path to the config file

    Returns:
        Config instance

    Raises:
        FileNotFoundError: If config_path doesn't exist
        DecodeError: If the file is not a valid configuration document
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        return load_config_from_dict(decode(config_path.read_bytes()))
    except DecodeError as e:
        e.locate(str(config_path))
        raise
