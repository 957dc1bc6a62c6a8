"""Build a configuration object from environment variables.

Purpose
-------
Walk a JSON schema, derive the env var name of every property it can address,
and write each successfully parsed value into a fresh configuration tree.
Unnamed properties are discovered from the env var names themselves.
"""

from __future__ import annotations

from typing import Any

from ..domain.path import ConfigPropertyPath
from ..domain.schema import JSONSchema
from ..domain.values import MISSING
from .discovery import DiscoveredProperty, discover_additional_properties, discover_pattern_properties
from .merge import assign_path
from .ports import EnvReader, NamingOptions
from .walking import walk_config_properties


class LoadVisitor:
    """Walker visitor that copies parsed env values into :attr:`config`."""

    def __init__(self, reader: EnvReader, options: NamingOptions) -> None:
        self.config: dict[str, Any] = {}
        self._reader = reader
        self._options = options

    def visit_schema(self, schema: JSONSchema, path: ConfigPropertyPath) -> None:
        if not path:
            return
        value = self._reader.read(schema, path)
        if value is MISSING:
            return
        assign_path(self.config, path, value)

    def visit_pattern_property(self, pattern: str, schema: JSONSchema, parent_path: ConfigPropertyPath) -> None:
        self._walk(discover_pattern_properties(pattern, schema, parent_path, self._reader.environ, self._options))

    def visit_additional_properties(self, schema: JSONSchema, parent_path: ConfigPropertyPath) -> None:
        self._walk(discover_additional_properties(schema, parent_path, self._reader.environ, self._options))

    def _walk(self, discovered: list[DiscoveredProperty]) -> None:
        for item in discovered:
            walk_config_properties(item.schema, item.path, self)


def load_from_env(schema: JSONSchema, reader: EnvReader, options: NamingOptions) -> dict[str, Any]:
    """Return the configuration that *reader*'s environment describes for *schema*.

    Properties are visited in schema declaration order; an env var derived for
    two paths is only consumed by the first one that parses it.

    Examples
    --------
    >>> from lib_schema_env_config.adapters.env.default import DefaultEnvReader
    >>> from lib_schema_env_config.domain.options import EnvVarNamingOptions
    >>> schema = {"type": "object", "properties": {"camelCased": {"type": "object",
    ...           "properties": {"propertyName": {"type": "string"}}}}}
    >>> options = EnvVarNamingOptions()
    >>> reader = DefaultEnvReader(options, environ={"CAMEL_CASED_PROPERTY_NAME": "test"})
    >>> load_from_env(schema, reader, options)
    {'camelCased': {'propertyName': 'test'}}
    """

    visitor = LoadVisitor(reader, options)
    walk_config_properties(schema, (), visitor)
    return visitor.config
