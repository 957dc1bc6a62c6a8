"""Domain-level exception hierarchy.

Purpose
-------
Expose the stable error taxonomy shared by the schema walker, the loaders, the
composition root, and consuming applications.

Contents
--------
* :class:`ConfigError` – umbrella base class for all library failures.
* :class:`UnsupportedSchema` – the input schema cannot be processed.
* :class:`IncompatibleConfig` – a configuration object cannot hold a value at
  the requested path.
* :class:`InvalidFormat` – a schema or configuration document is malformed.
* :class:`NotFound` – a schema or configuration document is missing.

System Role
-----------
Only structural problems are raised. Values that are missing, malformed, or
unreadable are soft outcomes: they are logged and leave the property unset.
"""

from __future__ import annotations


class ConfigError(Exception):
    """Base type for all exceptions emitted by ``lib_schema_env_config``.

    Why
    ----
    Provide a single catch-all type for consumers that do not need fine-grained
    handling.
    """


class UnsupportedSchema(ConfigError):
    """Raised when a schema uses a construct the walker cannot interpret.

    Typical Sources
    ---------------
    A boolean where a schema object is required (``properties``, ``items``,
    ``anyOf`` elements, ...), a ``type`` outside the supported set, or a
    ``patternProperties`` key that is not a valid regular expression.
    """


class IncompatibleConfig(ConfigError):
    """Raised when a non-mapping value sits where a mapping must be descended.

    Why
    ----
    Writing ``a.b.c`` into ``{"a": 5}`` has no meaningful result. A well-formed
    configuration built by this library never triggers it.
    """


class InvalidFormat(ConfigError):
    """Raised when a schema or configuration document cannot be parsed.

    Typical Sources
    ---------------
    Structured file loaders (:mod:`tomllib`, :mod:`json`, :mod:`yaml`) used by
    the CLI.
    """


class NotFound(ConfigError):
    """Represents a schema or configuration document that does not exist."""
