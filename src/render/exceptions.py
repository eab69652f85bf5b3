"""Errors raised while resolving variables and rendering templates.

Every error is fatal to the operation that raised it. Errors carry an
optional ``source`` describing where they happened (a variable source, a
template name) so the CLI can print a single-line diagnostic.
"""


class EngineError(Exception):
    """Base class for all render errors."""

    def __init__(self, message: str, source: str | None = None) -> None:
        self.message = message
        self.source = source
        super().__init__(message)

    def __str__(self) -> str:
        if self.source:
            return f"{self.source}: {self.message}"
        return self.message

    def locate(self, source: str) -> "EngineError":
        """Attach a location unless a more specific one is already set."""
        if not self.source:
            self.source = source
        return self


class DecodeError(EngineError):
    """Raised when content is neither a JSON, YAML nor TOML mapping."""


class NotFoundError(EngineError):
    """Raised when a function name is not in the function registry."""

    def __init__(self, name: str, source: str | None = None) -> None:
        self.name = name
        super().__init__(f"no such function: '{name}'", source)


class InvocationError(EngineError):
    """Raised when a dynamically dispatched function fails."""


class CompileError(EngineError):
    """Raised for invalid template syntax or an invalid glob pattern."""


class RenderIOError(EngineError):
    """Raised when reading a source or writing output fails."""


class RenderError(EngineError):
    """Raised when executing a compiled template fails."""
