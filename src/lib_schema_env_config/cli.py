"""CLI adapter for ``lib_schema_env_config`` built on ``lib_cli_exit_tools``.

Purpose
-------
Expose the schema driven environment loader via a command line interface so
operators can see which env vars a schema accepts and what configuration the
current environment produces, without writing Python code.

Contents
--------
* :data:`CLICK_CONTEXT_SETTINGS` – shared Click settings ensuring ``-h`` works.
* :func:`cli` – root command that wires global traceback handling into
  ``lib_cli_exit_tools``.
* :func:`cli_info` – prints distribution metadata for quick diagnostics.
* :func:`cli_env_vars` – lists the env vars a schema accepts.
* :func:`cli_load` – calls :func:`lib_schema_env_config.core.load_from_env`.
* :func:`cli_override` – calls :func:`lib_schema_env_config.core.override_array_values`.
* :func:`main` – entry point used by ``console_scripts`` registration.

System Role
-----------
The CLI lives in the outermost layer. It reads documents through the
structured file loaders, invokes the composition root and prints JSON.
``lib_cli_exit_tools`` centralises the exit code strategy so all commands
behave consistently across shells and CI.
"""

from __future__ import annotations

import json
import sys
from importlib import metadata
from pathlib import Path
from typing import Final, Optional, Sequence

import lib_cli_exit_tools
import rich_click as click

from .adapters.file_loaders.structured import load_document
from .core import describe_env_vars, load_from_env, override_array_values
from .domain.options import CASE_STYLES, ArrayOverrideOptions, EnvVarNamingOptions

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
_TRACEBACK_SUMMARY_LIMIT: Final[int] = 500
_TRACEBACK_VERBOSE_LIMIT: Final[int] = 10_000

_DOCUMENT_PATH = click.Path(path_type=Path, exists=True, file_okay=True, dir_okay=False, readable=True)


def _resolve_version() -> str:
    """Return the installed package version with sensible fallbacks.

    Why
        ``click.version_option`` requires a string at decoration time. Fetching
        metadata lazily avoids hard-coding the version and keeps editable installs
        working without additional wiring.
    """

    try:
        return metadata.version("lib_schema_env_config")
    except metadata.PackageNotFoundError:
        return "0.0.0"


def _naming_options(func):
    """Attach the ``--case``/``--separator``/``--prefix`` options shared by all schema commands."""

    func = click.option(
        "--prefix",
        default=None,
        help="Prefix prepended to every env var name (joined with the separator)",
    )(func)
    func = click.option(
        "--separator",
        default=None,
        help="Separator between path segments [default: '_' for load, '__' for override]",
    )(func)
    func = click.option(
        "--case",
        type=click.Choice(CASE_STYLES),
        default=None,
        help="Case style for property names [default: SCREAMING_SNAKE_CASE for load, snake_case for override]",
    )(func)
    return func


def _indent_option(func):
    return click.option(
        "--indent",
        type=int,
        default=None,
        help="Pretty-print JSON output with the provided indent size",
    )(func)


@click.group(
    help="Load JSON-schema described configuration from environment variables",
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=False,
)
@click.version_option(
    version=_resolve_version(),
    prog_name="lib_schema_env_config",
    message="lib_schema_env_config version %(version)s",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool) -> None:
    """Root command configuring traceback handling for all subcommands.

    Side Effects
        Mutates ``lib_cli_exit_tools.config.traceback`` and
        ``lib_cli_exit_tools.config.traceback_force_color``.
    """

    ctx.ensure_object(dict)
    ctx.obj["traceback"] = traceback
    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print basic distribution metadata so users can confirm installation."""

    try:
        meta = metadata.metadata("lib_schema_env_config")
    except metadata.PackageNotFoundError:
        click.echo("lib_schema_env_config (metadata unavailable)")
        return
    click.echo(f"Info for {meta.get('Name', 'lib_schema_env_config')}:")
    click.echo(f"  Version         : {meta.get('Version', _resolve_version())}")
    click.echo(f"  Requires-Python : {meta.get('Requires-Python', '>=3.10')}")
    summary = meta.get("Summary")
    if summary:
        click.echo(f"  Summary         : {summary}")


@cli.command("env-vars", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option("--schema", "schema_path", type=_DOCUMENT_PATH, required=True, help="JSON/TOML/YAML schema document")
@_naming_options
@_indent_option
def cli_env_vars(
    schema_path: Path,
    case: Optional[str],
    separator: Optional[str],
    prefix: Optional[str],
    indent: Optional[int],
) -> None:
    """List the env vars the schema accepts as a JSON array.

    Wildcard entries (``kind`` ``pattern`` or ``additional``) stand for
    properties discovered from the env var names themselves.
    """

    options = _build_loader_options(case, separator, prefix)
    descriptors = describe_env_vars(load_document(schema_path), options)
    click.echo(json.dumps([descriptor.as_dict() for descriptor in descriptors], indent=indent))


@cli.command("load", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option("--schema", "schema_path", type=_DOCUMENT_PATH, required=True, help="JSON/TOML/YAML schema document")
@_naming_options
@_indent_option
def cli_load(
    schema_path: Path,
    case: Optional[str],
    separator: Optional[str],
    prefix: Optional[str],
    indent: Optional[int],
) -> None:
    """Build the configuration described by the current environment and print it as JSON."""

    options = _build_loader_options(case, separator, prefix)
    config = load_from_env(None, load_document(schema_path), options)
    click.echo(json.dumps(config, indent=indent, ensure_ascii=False))


@cli.command("override", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option("--schema", "schema_path", type=_DOCUMENT_PATH, required=True, help="JSON/TOML/YAML schema document")
@click.option("--config", "config_path", type=_DOCUMENT_PATH, required=True, help="Configuration to override")
@_naming_options
@click.option(
    "--extend/--no-extend",
    default=False,
    show_default=True,
    help="Append elements when an 'each' list is longer than the target array",
)
@click.option(
    "--truncate/--no-truncate",
    default=False,
    show_default=True,
    help="Drop elements when an 'each' list is shorter than the target array",
)
@_indent_option
def cli_override(
    schema_path: Path,
    config_path: Path,
    case: Optional[str],
    separator: Optional[str],
    prefix: Optional[str],
    extend: bool,
    truncate: bool,
    indent: Optional[int],
) -> None:
    """Apply ``every``/``each`` env var overrides to a configuration document."""

    options = _build_override_options(case, separator, prefix, extend=extend, truncate=truncate)
    result = override_array_values(load_document(config_path), None, load_document(schema_path), options)
    click.echo(json.dumps(result, indent=indent, ensure_ascii=False))


def _build_loader_options(case: Optional[str], separator: Optional[str], prefix: Optional[str]) -> EnvVarNamingOptions:
    """Return loader naming options, keeping defaults for unset flags.

    Examples
    --------
    >>> _build_loader_options(None, None, 'APP')
    EnvVarNamingOptions(case='SCREAMING_SNAKE_CASE', property_separator='_', prefix='APP')
    """

    defaults = EnvVarNamingOptions()
    return EnvVarNamingOptions(
        case=case or defaults.case,  # type: ignore[arg-type]
        property_separator=_normalize_separator(separator, defaults.property_separator),
        prefix=prefix or None,
    )


def _build_override_options(
    case: Optional[str],
    separator: Optional[str],
    prefix: Optional[str],
    *,
    extend: bool,
    truncate: bool,
) -> ArrayOverrideOptions:
    """Return override options, keeping defaults for unset naming flags."""

    defaults = ArrayOverrideOptions()
    return ArrayOverrideOptions(
        case=case or defaults.case,  # type: ignore[arg-type]
        property_separator=_normalize_separator(separator, defaults.property_separator),
        prefix=prefix or None,
        truncate_target_arrays=truncate,
        extend_target_arrays=extend,
    )


def _normalize_separator(separator: Optional[str], default: str) -> str:
    """Return *separator* or *default*; an empty separator is rejected."""

    if separator is None:
        return default
    if not separator:
        raise click.BadParameter("Separator must not be empty.", param_hint="--separator")
    return separator


def main(argv: Optional[Sequence[str]] = None, *, restore_traceback: bool = True) -> int:
    """Execute the CLI with shared exit handling and return the exit code."""

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        try:
            return lib_cli_exit_tools.run_cli(
                cli,
                argv=list(argv) if argv is not None else None,
                prog_name="lib_schema_env_config",
            )
        except BaseException as exc:  # noqa: BLE001 - funnel through shared printers
            lib_cli_exit_tools.print_exception_message(
                trace_back=lib_cli_exit_tools.config.traceback,
                length_limit=(
                    _TRACEBACK_VERBOSE_LIMIT if lib_cli_exit_tools.config.traceback else _TRACEBACK_SUMMARY_LIMIT
                ),
            )
            return lib_cli_exit_tools.get_system_exit_code(exc)
    finally:
        if restore_traceback:
            lib_cli_exit_tools.config.traceback = previous_traceback
            lib_cli_exit_tools.config.traceback_force_color = previous_force_color


if __name__ == "__main__":  # pragma: no cover - exercised via console entry point
    raise SystemExit(main(sys.argv[1:]))
