"""Public package surface for ``lib_schema_env_config``.

Exports the composition root helpers (:func:`load_from_env`,
:func:`override_array_values`, :func:`describe_env_vars`), their option types,
the error hierarchy and the logging hooks, so ``import lib_schema_env_config``
is all a host application needs.
"""

from __future__ import annotations

from .core import (
    ArrayOverrideOptions,
    ConfigError,
    EnvVarDescriptor,
    EnvVarNamingOptions,
    IncompatibleConfig,
    InvalidFormat,
    NotFound,
    UnsupportedSchema,
    describe_env_vars,
    load_from_env,
    override_array_values,
)
from .observability import bind_trace_id, get_logger

__all__ = [
    "ArrayOverrideOptions",
    "ConfigError",
    "EnvVarDescriptor",
    "EnvVarNamingOptions",
    "IncompatibleConfig",
    "InvalidFormat",
    "NotFound",
    "UnsupportedSchema",
    "bind_trace_id",
    "describe_env_vars",
    "get_logger",
    "load_from_env",
    "override_array_values",
]
