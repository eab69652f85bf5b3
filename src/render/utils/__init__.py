"""render utility modules.

- globbing: Separator-aware glob patterns and filesystem expansion
- logging: Standardized logging with human/verbose/JSON modes
"""

from render.utils.globbing import Glob, compile_glob, expand
from render.utils.logging import configure_from_cli, get_logger, setup_logging

__all__ = [
    "Glob",
    "compile_glob",
    "expand",
    "configure_from_cli",
    "get_logger",
    "setup_logging",
]
