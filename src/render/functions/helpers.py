"""Serialization and mutable-map helpers provided by the engine."""

import csv
import io
import json
import tomllib
from collections.abc import Callable
from typing import Any

import tomli_w
import yaml

from render.formats import normalize, to_json, to_yaml


def to_csv(value: Any) -> str:
    """Encode one record (list of strings) or many (list of lists) as CSV."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    if isinstance(value, list | tuple) and all(isinstance(v, str) for v in value):
        writer.writerow(value)
    elif isinstance(value, list | tuple) and all(isinstance(v, list | tuple) for v in value):
        writer.writerows(value)
    else:
        raise TypeError("wrong type: must be either a list of strings or a list of lists of strings")
    return buffer.getvalue()


def from_csv(value: str) -> list[list[str]]:
    return list(csv.reader(io.StringIO(value)))


def to_toml(value: Any) -> str:
    if not isinstance(value, dict):
        raise TypeError(f"TOML documents must be tables, not {type(value).__name__}")
    return tomli_w.dumps(value)


def from_json(value: str) -> Any:
    return json.loads(value)


def from_yaml(value: str) -> Any:
    return normalize(yaml.safe_load(value))


def from_toml(value: str) -> dict[str, Any]:
    return tomllib.loads(value)


def set_(d: dict[str, Any], *pairs: Any) -> dict[str, Any]:
    """Set key/value pairs on a mapping in place and return it."""
    if len(pairs) % 2:
        raise ValueError("set expects key/value pairs")
    for i in range(0, len(pairs), 2):
        d[str(pairs[i])] = pairs[i + 1]
    return d


def unset(d: dict[str, Any], *keys: str) -> dict[str, Any]:
    """Remove keys from a mapping in place and return it."""
    for key in keys:
        d.pop(key, None)
    return d


ENGINE_HELPERS: dict[str, Callable[..., Any]] = {
    "toCSV": to_csv,
    "fromCSV": from_csv,
    "toJSON": to_json,
    "toYAML": to_yaml,
    "toTOML": to_toml,
    "fromJSON": from_json,
    "fromYAML": from_yaml,
    "fromTOML": from_toml,
    "set": set_,
    "unset": unset,
}
