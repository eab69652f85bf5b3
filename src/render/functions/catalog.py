"""Base catalog of template utility functions.

String, list, dict, math, date, path, regex and encoding helpers, named and
ordered the pipeline-friendly way: the value being operated on comes last,
so ``mapFlip("trimPrefix", "v", versions)`` strips a prefix from every item.

A few catalog entries (``env``, ``expandenv``, ``hello``, ``toJson``,
``toPrettyJson``) are removed again when the function registry is built.
"""

import base64
import hashlib
import math
import os
import posixpath
import re
import uuid
from collections.abc import Callable, Mapping
from copy import deepcopy
from datetime import UTC, datetime
from typing import Any

from render.formats import to_json

# =============================================================================
# Strings
# =============================================================================


def _words(s: str) -> list[str]:
    s = re.sub(r"([a-z0-9])([A-Z])", r"\1 \2", str(s))
    return [w for w in re.split(r"[\s_\-]+", s) if w]


def camelcase(s: str) -> str:
    return "".join(w[:1].upper() + w[1:] for w in _words(s))


def snakecase(s: str) -> str:
    return "_".join(w.lower() for w in _words(s))


def kebabcase(s: str) -> str:
    return "-".join(w.lower() for w in _words(s))


def untitle(s: str) -> str:
    return " ".join(w[:1].lower() + w[1:] for w in str(s).split(" "))


def substr(start: int, end: int, s: str) -> str:
    if start < 0:
        return s[:end]
    if end < 0 or end > len(s):
        return s[start:]
    return s[start:end]


def trunc(n: int, s: str) -> str:
    if n < 0:
        return s[n:]
    return s[:n]


def indent(spaces: int, s: str) -> str:
    pad = " " * spaces
    return pad + str(s).replace("\n", "\n" + pad)


def nindent(spaces: int, s: str) -> str:
    return "\n" + indent(spaces, s)


def quote(*args: Any) -> str:
    return " ".join(f'"{a}"' for a in args if a is not None)


def squote(*args: Any) -> str:
    return " ".join(f"'{a}'" for a in args if a is not None)


def cat(*args: Any) -> str:
    return " ".join(str(a) for a in args if a is not None)


def split_list(sep: str, s: str) -> list[str]:
    return str(s).split(sep)


def join(sep: str, items: Any) -> str:
    if isinstance(items, str):
        return items
    return sep.join(str(i) for i in items)


# =============================================================================
# Lists
# =============================================================================


def list_(*items: Any) -> list[Any]:
    return list(items)


def first(items: Any) -> Any:
    return items[0] if items else None


def last(items: Any) -> Any:
    return items[-1] if items else None


def rest(items: Any) -> list[Any]:
    return list(items[1:])


def initial(items: Any) -> list[Any]:
    return list(items[:-1])


def append(items: Any, value: Any) -> list[Any]:
    return [*items, value]


def prepend(items: Any, value: Any) -> list[Any]:
    return [value, *items]


def concat(*lists: Any) -> list[Any]:
    return [item for items in lists for item in items]


def uniq(items: Any) -> list[Any]:
    result: list[Any] = []
    for item in items:
        if item not in result:
            result.append(item)
    return result


def compact(items: Any) -> list[Any]:
    return [item for item in items if not empty(item)]


def without(items: Any, *values: Any) -> list[Any]:
    return [item for item in items if item not in values]


def until(n: int) -> list[int]:
    return list(range(n)) if n >= 0 else list(range(0, n, -1))


# =============================================================================
# Dicts
# =============================================================================


def dict_(*pairs: Any) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for i in range(0, len(pairs), 2):
        value = pairs[i + 1] if i + 1 < len(pairs) else ""
        result[str(pairs[i])] = value
    return result


def get(d: Mapping[str, Any], key: str) -> Any:
    return d.get(key, "")


def keys(*dicts: Mapping[str, Any]) -> list[str]:
    return [key for d in dicts for key in d]


def pick(d: Mapping[str, Any], *names: str) -> dict[str, Any]:
    return {k: v for k, v in d.items() if k in names}


def omit(d: Mapping[str, Any], *names: str) -> dict[str, Any]:
    return {k: v for k, v in d.items() if k not in names}


def merge(destination: dict[str, Any], *sources: Mapping[str, Any]) -> dict[str, Any]:
    """Deep merge sources into destination; existing keys win."""
    for source in sources:
        for key, value in source.items():
            if key not in destination:
                destination[key] = value
            elif isinstance(destination[key], dict) and isinstance(value, Mapping):
                merge(destination[key], value)
    return destination


def pluck(key: str, *dicts: Mapping[str, Any]) -> list[Any]:
    return [d[key] for d in dicts if key in d]


# =============================================================================
# Defaults and logic
# =============================================================================


def empty(value: Any) -> bool:
    return not value


def default(fallback: Any, *value: Any) -> Any:
    if not value or empty(value[0]):
        return fallback
    return value[0]


def coalesce(*values: Any) -> Any:
    for value in values:
        if not empty(value):
            return value
    return None


def ternary(if_true: Any, if_false: Any, condition: Any) -> Any:
    return if_true if condition else if_false


def fail(message: str) -> None:
    raise ValueError(message)


# =============================================================================
# Math
# =============================================================================


def add(*numbers: Any) -> Any:
    return sum(numbers)


def mul(*numbers: Any) -> Any:
    return math.prod(numbers)


def div(a: Any, b: Any) -> Any:
    if isinstance(a, int) and isinstance(b, int):
        return int(a / b)
    return a / b


def to_int(value: Any) -> int:
    if isinstance(value, str):
        try:
            return int(value, 0)
        except ValueError:
            return int(float(value))
    return int(value)


def round_(value: float, precision: int = 0) -> float:
    return round(float(value), precision)


# =============================================================================
# Dates
# =============================================================================


def _as_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, int | float):
        return datetime.fromtimestamp(value, UTC)
    return datetime.fromisoformat(str(value))


def now() -> datetime:
    return datetime.now(UTC)


def date(fmt: str, value: Any) -> str:
    return _as_datetime(value).strftime(fmt)


def to_date(fmt: str, s: str) -> datetime:
    return datetime.strptime(s, fmt)


def unix_epoch(value: Any) -> str:
    return str(int(_as_datetime(value).timestamp()))


# =============================================================================
# Regular expressions
# =============================================================================


def regex_match(pattern: str, s: str) -> bool:
    return re.search(pattern, s) is not None


def regex_find_all(pattern: str, s: str, n: int = -1) -> list[str]:
    found = [m.group(0) for m in re.finditer(pattern, s)]
    return found if n < 0 else found[:n]


def regex_replace_all(pattern: str, s: str, replacement: str) -> str:
    return re.sub(pattern, replacement, s)


def regex_split(pattern: str, s: str, n: int = -1) -> list[str]:
    return re.split(pattern, s, maxsplit=0 if n < 0 else max(n - 1, 0))


# =============================================================================
# Encoding and environment
# =============================================================================


def b64enc(s: str) -> str:
    return base64.b64encode(str(s).encode("utf-8")).decode("ascii")


def b64dec(s: str) -> str:
    return base64.b64decode(s).decode("utf-8")


def sha256sum(s: str) -> str:
    return hashlib.sha256(str(s).encode("utf-8")).hexdigest()


def sha1sum(s: str) -> str:
    return hashlib.sha1(str(s).encode("utf-8")).hexdigest()


def env(name: str) -> str:
    return os.environ.get(name, "")


def hello() -> str:
    return "Hello!"


def to_pretty_json(value: Any) -> str:
    return to_json(value, indent=2)


CATALOG: dict[str, Callable[..., Any]] = {
    # Strings
    "upper": lambda s: str(s).upper(),
    "lower": lambda s: str(s).lower(),
    "title": lambda s: str(s).title(),
    "untitle": untitle,
    "camelcase": camelcase,
    "snakecase": snakecase,
    "kebabcase": kebabcase,
    "trim": lambda s: str(s).strip(),
    "trimAll": lambda cutset, s: str(s).strip(cutset),
    "trimPrefix": lambda prefix, s: str(s).removeprefix(prefix),
    "trimSuffix": lambda suffix, s: str(s).removesuffix(suffix),
    "replace": lambda old, new, s: str(s).replace(old, new),
    "repeat": lambda count, s: str(s) * count,
    "substr": substr,
    "trunc": trunc,
    "nospace": lambda s: re.sub(r"\s+", "", str(s)),
    "contains": lambda sub, s: sub in str(s),
    "hasPrefix": lambda prefix, s: str(s).startswith(prefix),
    "hasSuffix": lambda suffix, s: str(s).endswith(suffix),
    "indent": indent,
    "nindent": nindent,
    "quote": quote,
    "squote": squote,
    "cat": cat,
    "splitList": split_list,
    "join": join,
    "toString": str,
    # Lists
    "list": list_,
    "first": first,
    "last": last,
    "rest": rest,
    "initial": initial,
    "append": append,
    "prepend": prepend,
    "concat": concat,
    "reverse": lambda items: list(reversed(items)),
    "uniq": uniq,
    "compact": compact,
    "has": lambda needle, items: needle in items,
    "without": without,
    "sortAlpha": lambda items: sorted(str(i) for i in items),
    "until": until,
    # Dicts
    "dict": dict_,
    "get": get,
    "hasKey": lambda d, key: key in d,
    "keys": keys,
    "values": lambda d: list(d.values()),
    "pick": pick,
    "omit": omit,
    "merge": merge,
    "pluck": pluck,
    "deepCopy": deepcopy,
    # Defaults and logic
    "default": default,
    "empty": empty,
    "coalesce": coalesce,
    "ternary": ternary,
    "fail": fail,
    # Math
    "add": add,
    "add1": lambda n: n + 1,
    "sub": lambda a, b: a - b,
    "mul": mul,
    "div": div,
    "mod": lambda a, b: a % b,
    "max": max,
    "min": min,
    "floor": lambda x: math.floor(float(x)),
    "ceil": lambda x: math.ceil(float(x)),
    "round": round_,
    "int": to_int,
    "float64": float,
    "atoi": to_int,
    # Dates
    "now": now,
    "date": date,
    "toDate": to_date,
    "unixEpoch": unix_epoch,
    # Paths
    "base": posixpath.basename,
    "dir": posixpath.dirname,
    "ext": lambda p: posixpath.splitext(p)[1],
    "clean": posixpath.normpath,
    "isAbs": posixpath.isabs,
    # Regular expressions
    "regexMatch": regex_match,
    "regexFindAll": regex_find_all,
    "regexReplaceAll": regex_replace_all,
    "regexSplit": regex_split,
    # Encoding
    "b64enc": b64enc,
    "b64dec": b64dec,
    "sha1sum": sha1sum,
    "sha256sum": sha256sum,
    "uuidv4": lambda: str(uuid.uuid4()),
    "toJson": to_json,
    "toPrettyJson": to_pretty_json,
    # Environment
    "env": env,
    "expandenv": os.path.expandvars,
    "hello": hello,
}
