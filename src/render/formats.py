"""Cascading decoding and encoding of variable payloads.

Payloads are untyped bytes. Decoding tries each format in a fixed order and
keeps the first one that yields a mapping:

1. JSON (object)
2. YAML (mapping), normalized to string keys
3. TOML (table)

Encoding writes pretty JSON and falls back to YAML for values JSON cannot
represent (dates and times from YAML or TOML payloads).
"""

import json
import tomllib
from collections.abc import Callable
from typing import Any, TextIO

import yaml
from yaml.representer import SafeRepresenter

from render.exceptions import DecodeError


class _Dumper(yaml.SafeDumper):
    """Safe dumper that also accepts dict and list subclasses."""


_Dumper.add_multi_representer(dict, SafeRepresenter.represent_dict)
_Dumper.add_multi_representer(list, SafeRepresenter.represent_list)


def normalize(value: Any) -> Any:
    """Narrow generic-keyed mappings to string-keyed ones, recursively.

    String keys are kept, integer keys become their decimal form and any
    other key (booleans, floats, nulls, sequences) is dropped.

    Args:
        value: Decoded value tree

    Returns:
        Value tree whose mappings all have string keys
    """
    if isinstance(value, dict):
        result: dict[str, Any] = {}
        for key, item in value.items():
            if isinstance(key, str):
                result[key] = normalize(item)
            elif isinstance(key, int) and not isinstance(key, bool):
                result[str(key)] = normalize(item)
        return result

    if isinstance(value, list):
        return [normalize(item) for item in value]

    return value


def _text(data: bytes) -> str:
    return data.decode("utf-8-sig")


def _from_json(data: bytes) -> dict[str, Any]:
    value = json.loads(_text(data))
    if not isinstance(value, dict):
        raise ValueError(f"expected a JSON object, got {type(value).__name__}")
    return value


def _from_yaml(data: bytes) -> dict[str, Any]:
    value = yaml.safe_load(_text(data))
    if not isinstance(value, dict):
        raise ValueError(f"expected a YAML mapping, got {type(value).__name__}")
    return normalize(value)


def _from_toml(data: bytes) -> dict[str, Any]:
    return tomllib.loads(_text(data))


# Trial order matters: a payload valid in several formats is decoded by the
# first one listed.
FORMATS: list[tuple[str, Callable[[bytes], dict[str, Any]]]] = [
    ("json", _from_json),
    ("yaml", _from_yaml),
    ("toml", _from_toml),
]


def decode(data: bytes) -> dict[str, Any]:
    """Decode raw bytes into a string-keyed mapping.

    Args:
        data: Raw payload

    Returns:
        Decoded mapping from the first format that accepts the payload

    Raises:
        DecodeError: If no format accepts it. Only the error of the last
            format tried is reported.
    """
    last_error: Exception | None = None
    for _name, parse in FORMATS:
        try:
            return parse(data)
        except (ValueError, yaml.YAMLError) as e:
            # UnicodeDecodeError and tomllib.TOMLDecodeError are ValueErrors
            last_error = e

    name = FORMATS[-1][0]
    raise DecodeError(
        f"cannot decode as JSON, YAML or TOML ({name}: {last_error})"
    ) from last_error


def to_json(value: Any, indent: int | None = None) -> str:
    """Encode a value as JSON with sorted keys."""
    if indent is None:
        return json.dumps(value, sort_keys=True, separators=(",", ":"))
    return json.dumps(value, sort_keys=True, indent=indent)


def to_yaml(value: Any) -> str:
    """Encode a value as block-style YAML."""
    return yaml.dump(value, Dumper=_Dumper, default_flow_style=False, allow_unicode=True)


def dump(value: Any, stream: TextIO) -> None:
    """Write a value as pretty JSON, or as YAML if JSON cannot encode it.

    Args:
        value: Value tree to write
        stream: Text stream to write to
    """
    try:
        text = to_json(value, indent=2) + "\n"
    except (TypeError, ValueError):
        text = to_yaml(value)
    stream.write(text)
