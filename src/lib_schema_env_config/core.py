"""Composition root for ``lib_schema_env_config``.

Purpose
-------
Provide the entry points that wire the environment adapter, the schema walker
and the loaders together, defaulting to the process environment and the
per-operation naming options.

Contents
--------
* :func:`load_from_env` – build a configuration object from env vars.
* :func:`override_array_values` – override array element properties.
* :func:`describe_env_vars` – list the env vars a schema accepts.

System Role
-----------
This module connects the adapters with the application layer while emitting
structured observability signals. Each call creates its own
:class:`DefaultEnvReader`, so no state survives between calls.
"""

from __future__ import annotations

from typing import Any, Mapping

from .adapters.env.default import DefaultEnvReader
from .application import inventory, loading, override
from .application.inventory import EnvVarDescriptor
from .domain.errors import ConfigError, IncompatibleConfig, InvalidFormat, NotFound, UnsupportedSchema
from .domain.options import DEFAULT_OPTIONS, DEFAULT_OVERRIDE_OPTIONS, ArrayOverrideOptions, EnvVarNamingOptions
from .domain.schema import JSONSchema
from .observability import log_info


def load_from_env(
    env: Mapping[str, str] | None,
    schema: JSONSchema,
    options: EnvVarNamingOptions | None = None,
) -> dict[str, Any]:
    """Return the configuration object described by *env* for *schema*.

    Why
    ----
    Applications define their configuration once as a JSON schema and get
    env var support (names, type conversion, ``*_FILE`` secrets) for free.

    Parameters
    ----------
    env:
        Environment mapping; ``None`` reads :data:`os.environ`.
    schema:
        Fully dereferenced JSON schema describing the configuration.
    options:
        Naming options; defaults to ``SCREAMING_SNAKE_CASE`` joined by ``_``.

    Returns
    -------
    dict[str, Any]
        Only the properties whose env vars were set and parsed successfully.

    Raises
    ------
    UnsupportedSchema
        When *schema* uses a construct that cannot be interpreted.

    Examples
    --------
    >>> schema = {"type": "object", "properties": {"int": {"type": "integer"}}}
    >>> load_from_env({"INT": "3"}, schema)
    {'int': 3}
    >>> load_from_env({"INT": "3.14"}, schema)
    {}
    """

    options = options or DEFAULT_OPTIONS
    reader = DefaultEnvReader(options, environ=env)
    config = loading.load_from_env(schema, reader, options)
    log_info("configuration_loaded", consumed=sorted(reader.consumed), keys=sorted(config))
    return config


def override_array_values(
    config: Mapping[str, Any],
    env: Mapping[str, str] | None,
    schema: JSONSchema,
    options: ArrayOverrideOptions | None = None,
) -> dict[str, Any]:
    """Return a copy of *config* with array element properties overridden.

    Parameters
    ----------
    config:
        Existing configuration; it is deep-copied and never mutated.
    env:
        Environment mapping; ``None`` reads :data:`os.environ`.
    schema:
        Fully dereferenced JSON schema describing *config*.
    options:
        Naming and length options; defaults to ``snake_case`` joined by ``__``.

    Examples
    --------
    >>> schema = {"type": "object", "properties": {"array": {"type": "array", "items": {
    ...     "type": "object", "properties": {"prop1": {"type": "string"}, "prop2": {"type": "number"}}}}}}
    >>> override_array_values(
    ...     {"array": [{"prop1": "a", "prop2": 0}, {"prop1": "b"}]}, {"array__every__prop_2": "1"}, schema
    ... )
    {'array': [{'prop1': 'a', 'prop2': 1}, {'prop1': 'b', 'prop2': 1}]}
    """

    options = options or DEFAULT_OVERRIDE_OPTIONS
    reader = DefaultEnvReader(options, environ=env)
    result = override.override_array_values(config, schema, reader, options)
    log_info("array_overrides_applied", consumed=sorted(reader.consumed))
    return result


def describe_env_vars(
    schema: JSONSchema,
    options: EnvVarNamingOptions | ArrayOverrideOptions | None = None,
) -> list[EnvVarDescriptor]:
    """List every env var *schema* accepts under *options* (loader defaults)."""

    return inventory.describe_env_vars(schema, options or DEFAULT_OPTIONS)


__all__ = [
    "ArrayOverrideOptions",
    "ConfigError",
    "EnvVarDescriptor",
    "EnvVarNamingOptions",
    "IncompatibleConfig",
    "InvalidFormat",
    "NotFound",
    "UnsupportedSchema",
    "describe_env_vars",
    "load_from_env",
    "override_array_values",
]
