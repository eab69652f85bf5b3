"""Template loading and rendering.

Templates are Jinja2 templates compiled into one shared registry and
rendered in registration order, to a stream or to a directory tree.
"""

from render.templates.renderer import Templates, create_environment
from render.templates.sources import (
    EnvTemplateSource,
    FileGlobTemplateSource,
    FileTemplateSource,
    LiteralTemplateSource,
    StdinTemplateSource,
    TemplateSource,
)

__all__ = [
    "Templates",
    "create_environment",
    "TemplateSource",
    "EnvTemplateSource",
    "FileGlobTemplateSource",
    "FileTemplateSource",
    "LiteralTemplateSource",
    "StdinTemplateSource",
]
