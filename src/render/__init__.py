"""render - Variable resolution and template composition.

render collects variables from literals, files, the environment, standard
input and globs of files into one namespace, then renders named Jinja2
templates against it, either to a single stream or to a directory tree.

Core principles:
- Ordered: sources load and templates render strictly in configured order
- Later wins: variable sources overwrite earlier ones, shallowly
- Fail fast: the first error aborts the run with a single-line diagnostic
"""

__version__ = "0.1.0"
__author__ = "Render Contributors"
