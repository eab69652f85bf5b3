"""Functions available to templates.

The registry is assembled once per run from, in order:
1. the utility catalog, minus BLOCKLIST
2. engine helpers (serialization, mutable maps)
3. engine primitives (logic, comparison, indexing, escaping, formatting)
4. caller-supplied extras
5. map / filter / mapFlip / filterFlip, which dispatch to all of the above
"""

from collections.abc import Callable, Mapping
from typing import Any

from render.functions.builtins import PRIMITIVES
from render.functions.catalog import CATALOG
from render.functions.dispatch import FunctionRegistry, higher_order_functions
from render.functions.helpers import ENGINE_HELPERS

# Catalog entries that leak the process environment or duplicate the
# engine's own serialization helpers
BLOCKLIST = frozenset({"hello", "toJson", "toPrettyJson", "env", "expandenv"})


def build_functions(
    extra: Mapping[str, Callable[..., Any]] | None = None,
) -> FunctionRegistry:
    """Build the function registry.

    Args:
        extra: Additional functions, e.g. run metadata exposed by the CLI

    Returns:
        Immutable FunctionRegistry
    """
    functions: dict[str, Callable[..., Any]] = {
        name: fn for name, fn in CATALOG.items() if name not in BLOCKLIST
    }
    functions.update(ENGINE_HELPERS)
    functions.update(PRIMITIVES)
    if extra:
        functions.update(extra)
    functions.update(higher_order_functions(functions))
    return FunctionRegistry(functions)


__all__ = ["BLOCKLIST", "FunctionRegistry", "build_functions"]
