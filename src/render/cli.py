"""render CLI interface.

Builds a configuration from an optional config file plus command-line
flags, resolves variables, and renders templates to stdout or a directory.

Variable flags:
- --var KEY=VALUE, --var-file [NS=]PATH, --var-file-slurp NAME=PATH,
  --var-files-slurp [NS=]GLOB, --var-env [NS=]PREFIX

Template flags:
- --template/-t [NAME=]TEXT, --template-file/-f [NAME=]PATH,
  --template-files GLOB, --template-env [NAME=]VAR

Sources from --config load first. Flag sources follow, grouped by flag in
the order the flags are listed above for templates and, for variables,
env, file, files-slurp, file-slurp, then literal values (so --var always
has the last word). Order within one flag is kept.
"""

import inspect
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Annotated, Any

import typer

from render import __version__
from render.config import Config, load_config
from render.exceptions import EngineError
from render.functions import FunctionRegistry, build_functions
from render.params import (
    parse_template,
    parse_template_env,
    parse_template_file,
    parse_template_files,
    parse_var,
    parse_var_env,
    parse_var_file,
    parse_var_file_slurp,
    parse_var_files_slurp,
)
from render.templates import StdinTemplateSource, Templates
from render.utils.logging import configure_from_cli, get_logger
from render.variables import Vars

app = typer.Typer(
    name="render",
    help="Render named templates against variables from files, environment and stdin",
    add_completion=False,
)

_logger = get_logger()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"render {__version__}")
        raise typer.Exit()


def _parse_all(
    values: list[str] | None,
    parse: Callable[[str], Any],
    flag: str,
) -> list[Any]:
    parsed = []
    for value in values or []:
        try:
            parsed.append(parse(value))
        except ValueError as e:
            raise typer.BadParameter(str(e), param_hint=flag) from e
    return parsed


def _fail(message: str) -> typer.Exit:
    _logger.error(message)
    return typer.Exit(1)


def _write_file(path: str, write: Callable[[Any], None]) -> None:
    try:
        with open(path, "w", encoding="utf-8") as f:
            write(f)
    except OSError as e:
        raise _fail(f"cannot write {path}: {e.strerror or e}") from e


def print_funcs(functions: FunctionRegistry) -> None:
    """Print available function names and their signatures."""
    width = max((len(name) for name in functions), default=0)
    for name in sorted(functions):
        try:
            signature = str(inspect.signature(functions[name]))
        except (TypeError, ValueError):
            signature = "(...)"
        typer.echo(f"{name:<{width}} {signature}")


@app.command()
def main(
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Path to a config file", dir_okay=False),
    ] = None,
    var: Annotated[
        list[str] | None,
        typer.Option("--var", help="A single variable definition (KEY=VALUE)"),
    ] = None,
    var_file: Annotated[
        list[str] | None,
        typer.Option(
            "--var-file",
            help="Load variables from a JSON/YAML/TOML file, - for stdin ([NS=]PATH)",
        ),
    ] = None,
    var_file_slurp: Annotated[
        list[str] | None,
        typer.Option(
            "--var-file-slurp",
            help="Set a variable to a file's contents, - for stdin (NAME=PATH)",
        ),
    ] = None,
    var_files_slurp: Annotated[
        list[str] | None,
        typer.Option(
            "--var-files-slurp",
            help="Load the contents of all matching files, keyed by path ([NS=]GLOB)",
        ),
    ] = None,
    var_env: Annotated[
        list[str] | None,
        typer.Option(
            "--var-env",
            help="Load environment variables by name prefix or glob ([NS=]PREFIX)",
        ),
    ] = None,
    template: Annotated[
        list[str] | None,
        typer.Option("--template", "-t", help="A template given inline ([NAME=]TEXT)"),
    ] = None,
    template_file: Annotated[
        list[str] | None,
        typer.Option(
            "--template-file",
            "-f",
            help="Load a template from a file, - for stdin ([NAME=]PATH)",
        ),
    ] = None,
    template_files: Annotated[
        list[str] | None,
        typer.Option("--template-files", help="Load one template per matching file (GLOB)"),
    ] = None,
    template_env: Annotated[
        list[str] | None,
        typer.Option(
            "--template-env",
            help="Load a template from an environment variable ([NAME=]VAR)",
        ),
    ] = None,
    set_config_output_file: Annotated[
        str | None,
        typer.Option("--set-config-output-file", help="Path to write the configuration to"),
    ] = None,
    set_vars_output_file: Annotated[
        str | None,
        typer.Option("--set-vars-output-file", help="Path to write variable values to"),
    ] = None,
    set_template_excludes: Annotated[
        str | None,
        typer.Option(
            "--set-template-excludes",
            help="Exclude templates matching the given glob from output",
        ),
    ] = None,
    set_output_dir: Annotated[
        str | None,
        typer.Option(
            "--set-output-dir",
            "-o",
            help="Directory to write rendered templates to (- for stdout)",
        ),
    ] = None,
    set_left_delim: Annotated[
        str | None,
        typer.Option("--set-left-delim", help="Left template delimiter (default {{)"),
    ] = None,
    set_right_delim: Annotated[
        str | None,
        typer.Option("--set-right-delim", help="Right template delimiter (default }})"),
    ] = None,
    set_separator: Annotated[
        str | None,
        typer.Option(
            "--set-separator",
            help="Separator template printed between templates on stdout",
        ),
    ] = None,
    print_config: Annotated[
        bool,
        typer.Option("--print-config", help="Print the configuration and exit"),
    ] = False,
    print_vars: Annotated[
        bool,
        typer.Option("--print-vars", help="Print variables and exit"),
    ] = False,
    print_functions: Annotated[
        bool,
        typer.Option("--print-funcs", help="Print available functions and exit"),
    ] = False,
    print_templates: Annotated[
        bool,
        typer.Option("--print-templates", help="Print rendered templates to stdout"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose output with timestamps"),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Only report errors"),
    ] = False,
    ci: Annotated[
        bool,
        typer.Option("--ci", help="Enable CI mode with JSON log output"),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
) -> None:
    """Render templates against variables.

    With no template flags the template is read from stdin. With no output
    directory rendered templates are printed to stdout.

    Exit codes:
        0: Success
        1: A source, template or output failed
        2: Invalid command-line usage
    """
    configure_from_cli(verbose=verbose, quiet=quiet, ci=ci)

    # Load configuration
    try:
        settings = load_config(config) if config else Config()
        if config:
            _logger.debug(f"Loaded config from: {config}")
    except FileNotFoundError as e:
        raise _fail(str(e)) from e
    except EngineError as e:
        raise _fail(f"Failed to load config: {e}") from e

    # Apply CLI overrides to config
    if set_config_output_file is not None:
        settings.config_out_path = set_config_output_file
    if set_vars_output_file is not None:
        settings.vars_out_path = set_vars_output_file
    if set_template_excludes is not None:
        settings.template_out_exclude = set_template_excludes
    if set_output_dir is not None:
        settings.template_out_path = set_output_dir
    if set_left_delim is not None:
        settings.template_left_delim = set_left_delim
    if set_right_delim is not None:
        settings.template_right_delim = set_right_delim
    if set_separator is not None:
        settings.template_out_print_separator = set_separator
    settings.vars_out_print = settings.vars_out_print or print_vars
    settings.template_out_print = settings.template_out_print or print_templates

    settings.vars_sources.extend(_parse_all(var_env, parse_var_env, "--var-env"))
    settings.vars_sources.extend(_parse_all(var_file, parse_var_file, "--var-file"))
    settings.vars_sources.extend(
        _parse_all(var_files_slurp, parse_var_files_slurp, "--var-files-slurp")
    )
    settings.vars_sources.extend(
        _parse_all(var_file_slurp, parse_var_file_slurp, "--var-file-slurp")
    )
    settings.vars_sources.extend(_parse_all(var, parse_var, "--var"))

    settings.template_sources.extend(
        _parse_all(template_files, parse_template_files, "--template-files")
    )
    settings.template_sources.extend(
        _parse_all(template_file, parse_template_file, "--template-file")
    )
    settings.template_sources.extend(
        _parse_all(template_env, parse_template_env, "--template-env")
    )
    for text in template or []:
        settings.template_sources.append(parse_template(text, len(settings.template_sources)))

    if settings.config_out_path:
        _write_file(settings.config_out_path, settings.save)
        _logger.info(f"Wrote configuration to {settings.config_out_path}")

    if print_config:
        settings.save(sys.stdout)
        raise typer.Exit(0)

    args = list(sys.argv)
    functions = build_functions(
        extra={
            "renderArgs": lambda: list(args),
            "renderConfig": settings.to_dict,
        }
    )

    if print_functions:
        print_funcs(functions)
        raise typer.Exit(0)

    # Resolve variables
    try:
        variables = Vars.from_config(settings)
    except EngineError as e:
        raise _fail(str(e)) from e
    _logger.debug(f"Resolved {len(variables)} top-level variable(s)")

    if settings.vars_out_path:
        _write_file(settings.vars_out_path, variables.save)
        _logger.info(f"Wrote variables to {settings.vars_out_path}")

    if settings.vars_out_print:
        variables.save(sys.stdout)
        raise typer.Exit(0)

    # No templates specified: read one from stdin
    if not settings.template_sources:
        settings.template_sources.append(StdinTemplateSource(name="stdin"))

    try:
        templates = Templates.from_config(functions, settings, variables)
    except EngineError as e:
        raise _fail(str(e)) from e
    _logger.debug(f"Loaded {len(templates)} template(s)")

    # "-o -" means print
    if settings.template_out_path == "-":
        settings.template_out_path = ""
        settings.template_out_print = True

    try:
        if settings.template_out_path:
            written = templates.render_to_dir(
                settings.template_out_path,
                exclude=settings.template_out_exclude,
            )
            _logger.info(f"Wrote {len(written)} file(s) to {settings.template_out_path}")
        else:
            settings.template_out_print = True

        if settings.template_out_print:
            templates.render(
                sys.stdout,
                separator=settings.template_out_print_separator,
                exclude=settings.template_out_exclude,
            )
    except EngineError as e:
        raise _fail(str(e)) from e
