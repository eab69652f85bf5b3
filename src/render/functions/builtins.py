"""Template-engine primitives as ordinary named functions.

Boolean logic, comparisons, indexing, escaping and formatting are syntax
or operators inside a template, so ``map`` and ``filter`` could not refer to
them by name. These native versions give them names with the familiar
call shapes: ``eq(x, a, b)`` is true when ``x`` equals ``a`` or ``b``,
``index(m, "a", 0)`` is ``m["a"][0]``, ``and``/``or`` return the deciding
operand.
"""

import re
from collections.abc import Callable, Mapping
from typing import Any
from urllib.parse import quote_plus

from markupsafe import escape


def and_(*args: Any) -> Any:
    """Return the first falsy argument, or the last one."""
    for arg in args[:-1]:
        if not arg:
            return arg
    return args[-1]


def or_(*args: Any) -> Any:
    """Return the first truthy argument, or the last one."""
    for arg in args[:-1]:
        if arg:
            return arg
    return args[-1]


def not_(arg: Any) -> bool:
    return not arg


def len_(item: Any) -> int:
    if item is None:
        raise TypeError("len of nil value")
    return len(item)


def index(item: Any, *indices: Any) -> Any:
    """Index through nested mappings and sequences.

    A missing mapping key yields None; a sequence index out of range fails.
    """
    for key in indices:
        if item is None:
            raise TypeError(f"index of nil value with {key!r}")
        if isinstance(item, Mapping):
            item = item.get(key)
        else:
            item = item[key]
    return item


def eq(arg: Any, *others: Any) -> bool:
    if not others:
        raise TypeError("eq expects at least two arguments")
    return any(arg == other for other in others)


def ne(a: Any, b: Any) -> bool:
    return a != b


def lt(a: Any, b: Any) -> bool:
    return a < b


def le(a: Any, b: Any) -> bool:
    return a <= b


def gt(a: Any, b: Any) -> bool:
    return a > b


def ge(a: Any, b: Any) -> bool:
    return a >= b


def print_(*args: Any) -> str:
    """Concatenate operands, spacing those where neither side is a string."""
    out: list[str] = []
    for i, arg in enumerate(args):
        if i > 0 and not isinstance(arg, str) and not isinstance(args[i - 1], str):
            out.append(" ")
        out.append(str(arg))
    return "".join(out)


def println(*args: Any) -> str:
    return " ".join(str(arg) for arg in args) + "\n"


def printf(fmt: str, *args: Any) -> str:
    """printf-style formatting; ``%v`` is accepted as an alias for ``%s``."""
    fmt = re.sub(r"%(-?\d*)v", r"%\1s", fmt)
    return fmt % args


def html(*args: Any) -> str:
    return str(escape(print_(*args)))


_JS_ESCAPES = {
    "\\": "\\\\",
    "'": "\\'",
    '"': '\\"',
    "<": "\\u003C",
    ">": "\\u003E",
    "&": "\\u0026",
    "=": "\\u003D",
}


def js(*args: Any) -> str:
    """Escape text for embedding in a JavaScript string literal."""
    out: list[str] = []
    for ch in print_(*args):
        if ch in _JS_ESCAPES:
            out.append(_JS_ESCAPES[ch])
        elif ord(ch) < 0x20:
            out.append(f"\\u{ord(ch):04X}")
        else:
            out.append(ch)
    return "".join(out)


def urlquery(*args: Any) -> str:
    return quote_plus(print_(*args))


def call(fn: Any, *args: Any) -> Any:
    if not callable(fn):
        raise TypeError(f"non-function of type {type(fn).__name__}")
    return fn(*args)


PRIMITIVES: dict[str, Callable[..., Any]] = {
    "and": and_,
    "or": or_,
    "not": not_,
    "len": len_,
    "index": index,
    "eq": eq,
    "ne": ne,
    "lt": lt,
    "le": le,
    "gt": gt,
    "ge": ge,
    "print": print_,
    "printf": printf,
    "println": println,
    "html": html,
    "js": js,
    "urlquery": urlquery,
    "call": call,
}
