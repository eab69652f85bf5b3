"""Function registry and name-based higher-order dispatch.

Templates call ``map``, ``filter``, ``mapFlip`` and ``filterFlip`` with the
*name* of a registered function, any fixed leading arguments, and the
sequence to walk as the last argument:

    {{ map("upper", names) }}                   upper(name) per element
    {{ map("index", "host", servers) }}         index(server, "host")
    {{ mapFlip("printf", "%s.conf", names) }}   printf("%s.conf", name)
    {{ filter("hasKey", "port", services) }}    hasKey(service, "port")
    {{ filterFlip("hasPrefix", "v", tags) }}    hasPrefix("v", tag)

The plain variants pass the element first, the Flip variants pass it last.
"""

from collections.abc import Callable, Iterator, Mapping
from typing import Any

from render.exceptions import InvocationError, NotFoundError


class FunctionRegistry(Mapping[str, Callable[..., Any]]):
    """Immutable mapping of function name to callable."""

    def __init__(self, functions: Mapping[str, Callable[..., Any]]) -> None:
        self._functions = dict(functions)

    def __getitem__(self, name: str) -> Callable[..., Any]:
        return self._functions[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._functions)

    def __len__(self) -> int:
        return len(self._functions)

    def lookup(self, name: str) -> Callable[..., Any]:
        """Get a function by name.

        Raises:
            NotFoundError: If no function has that name
        """
        try:
            return self._functions[name]
        except (KeyError, TypeError):
            raise NotFoundError(str(name)) from None


def _as_list(operation: str, value: Any) -> list[Any]:
    if isinstance(value, Mapping):
        raise InvocationError(f"{operation}: cannot iterate over a mapping")
    try:
        return list(value)
    except TypeError:
        raise InvocationError(
            f"{operation}: last argument must be a sequence, not {type(value).__name__}"
        ) from None


def _invoke(
    operation: str,
    name: str,
    fn: Callable[..., Any],
    fixed: tuple[Any, ...],
    element: Any,
    flip: bool,
) -> Any:
    args = (*fixed, element) if flip else (element, *fixed)
    try:
        return fn(*args)
    except Exception as e:
        raise InvocationError(f"{operation}: {name}({element!r}) failed: {e}") from e


def map_values(
    name: str,
    fn: Callable[..., Any],
    fixed: tuple[Any, ...],
    items: list[Any],
    flip: bool = False,
) -> list[Any]:
    """Apply a function to every element, keeping input order."""
    operation = "mapFlip" if flip else "map"
    return [_invoke(operation, name, fn, fixed, item, flip) for item in items]


def filter_values(
    name: str,
    fn: Callable[..., Any],
    fixed: tuple[Any, ...],
    items: list[Any],
    flip: bool = False,
) -> list[Any]:
    """Keep the elements for which a predicate returns True.

    Raises:
        InvocationError: If the predicate fails or returns a non-boolean
    """
    operation = "filterFlip" if flip else "filter"
    kept: list[Any] = []
    for item in items:
        keep = _invoke(operation, name, fn, fixed, item, flip)
        if not isinstance(keep, bool):
            raise InvocationError(
                f"{operation}: {name} must return a boolean, got {type(keep).__name__}"
            )
        if keep:
            kept.append(item)
    return kept


def higher_order_functions(registry: Mapping[str, Callable[..., Any]]) -> dict[str, Callable[..., Any]]:
    """Create map/filter functions that resolve names against a registry.

    Names are resolved at call time, so the returned functions can be added
    to the very mapping they dispatch into.
    """

    def lookup(name: str) -> Callable[..., Any]:
        try:
            return registry[name]
        except (KeyError, TypeError):
            raise NotFoundError(str(name)) from None

    def split(operation: str, args: tuple[Any, ...]) -> tuple[tuple[Any, ...], list[Any]]:
        if not args:
            raise InvocationError(f"{operation}: missing sequence argument")
        return args[:-1], _as_list(operation, args[-1])

    def map_(name: str, *args: Any) -> list[Any]:
        fn = lookup(name)
        fixed, items = split("map", args)
        return map_values(name, fn, fixed, items)

    def map_flip(name: str, *args: Any) -> list[Any]:
        fn = lookup(name)
        fixed, items = split("mapFlip", args)
        return map_values(name, fn, fixed, items, flip=True)

    def filter_(name: str, *args: Any) -> list[Any]:
        fn = lookup(name)
        fixed, items = split("filter", args)
        return filter_values(name, fn, fixed, items)

    def filter_flip(name: str, *args: Any) -> list[Any]:
        fn = lookup(name)
        fixed, items = split("filterFlip", args)
        return filter_values(name, fn, fixed, items, flip=True)

    return {
        "map": map_,
        "mapFlip": map_flip,
        "filter": filter_,
        "filterFlip": filter_flip,
    }
