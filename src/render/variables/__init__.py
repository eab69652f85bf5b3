"""Variable resolution.

Variable sources are loaded in order into one Vars store; later sources win.
"""

from render.variables.sources import (
    EnvVarsSource,
    FilesSlurpVarsSource,
    FileSlurpVarsSource,
    FileVarsSource,
    LiteralVarsSource,
    StdinVarsSource,
    VarsSource,
)
from render.variables.store import Files, Vars

__all__ = [
    "Files",
    "Vars",
    "VarsSource",
    "EnvVarsSource",
    "FilesSlurpVarsSource",
    "FileSlurpVarsSource",
    "FileVarsSource",
    "LiteralVarsSource",
    "StdinVarsSource",
]
