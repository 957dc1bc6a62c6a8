"""Enumerate the environment variables a schema can consume.

Declared properties yield concrete names (plus their ``FILE`` variant);
``patternProperties`` and ``additionalProperties`` yield one wildcard entry
each, named after the shared prefix followed by ``*``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..domain.path import FILE, ConfigPropertyPath, format_path
from ..domain.schema import Applicator, JSONSchema, classify
from .naming import get_env_var_name, get_env_var_name_prefix
from .ports import NamingOptions
from .walking import walk_config_properties


@dataclass(frozen=True, slots=True)
class EnvVarDescriptor:
    """One env var (or wildcard family of env vars) accepted by a schema."""

    name: str
    property_path: str
    types: tuple[str, ...]
    kind: str = "property"
    file_variant: str | None = None
    pattern: str | None = None

    def as_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "property_path": self.property_path,
            "types": list(self.types),
            "kind": self.kind,
            "file_variant": self.file_variant,
            "pattern": self.pattern,
        }


class InventoryVisitor:
    def __init__(self, options: NamingOptions) -> None:
        self._options = options
        self._entries: dict[tuple[str, str], EnvVarDescriptor] = {}

    @property
    def descriptors(self) -> list[EnvVarDescriptor]:
        return list(self._entries.values())

    def visit_schema(self, schema: JSONSchema, path: ConfigPropertyPath) -> None:
        if not path:
            return
        name = get_env_var_name(path, self._options)
        self._add(
            EnvVarDescriptor(
                name=name,
                property_path=format_path(path),
                types=declared_types(schema),
                file_variant=get_env_var_name(path + (FILE,), self._options),
            )
        )

    def visit_pattern_property(self, pattern: str, schema: JSONSchema, parent_path: ConfigPropertyPath) -> None:
        self._add_wildcard("pattern", schema, parent_path, pattern)

    def visit_additional_properties(self, schema: JSONSchema, parent_path: ConfigPropertyPath) -> None:
        self._add_wildcard("additional", schema, parent_path, None)

    def _add_wildcard(self, kind: str, schema: JSONSchema, parent_path: ConfigPropertyPath, pattern: str | None) -> None:
        prefix = get_env_var_name_prefix(parent_path, self._options)
        self._add(
            EnvVarDescriptor(
                name=prefix + "*",
                property_path=f"{format_path(parent_path)}.*" if parent_path else "*",
                types=declared_types(schema),
                kind=kind,
                pattern=pattern,
            )
        )

    def _add(self, descriptor: EnvVarDescriptor) -> None:
        key = (descriptor.name, descriptor.pattern or "")
        existing = self._entries.get(key)
        if existing is None:
            self._entries[key] = descriptor
            return
        merged = existing.types + tuple(t for t in descriptor.types if t not in existing.types)
        self._entries[key] = EnvVarDescriptor(
            name=existing.name,
            property_path=existing.property_path,
            types=merged,
            kind=existing.kind,
            file_variant=existing.file_variant,
            pattern=existing.pattern,
        )


def declared_types(schema: JSONSchema) -> tuple[str, ...]:
    """Return the ``type`` values *schema* accepts, flattening applicators.

    Examples
    --------
    >>> declared_types({"anyOf": [{"type": "integer"}, {"type": ["string", "integer"]}]})
    ('integer', 'string')
    """

    shape = classify(schema)
    if isinstance(shape, Applicator):
        collected: list[str] = []
        for element in shape.schemas:
            collected.extend(t for t in declared_types(element) if t not in collected)
        return tuple(collected)
    return tuple(json_type.value for json_type in shape.types)


def describe_env_vars(schema: JSONSchema, options: NamingOptions) -> list[EnvVarDescriptor]:
    """List the env vars *schema* accepts, in walk order.

    Entries derived for the same name through several applicator branches are
    merged and their types combined.

    Examples
    --------
    >>> from lib_schema_env_config.domain.options import EnvVarNamingOptions
    >>> schema = {"type": "object", "properties": {"db": {"type": "object",
    ...     "properties": {"hostName": {"type": "string"}}, "additionalProperties": {"type": "integer"}}}}
    >>> [(d.name, d.kind) for d in describe_env_vars(schema, EnvVarNamingOptions())]
    [('DB', 'property'), ('DB_HOST_NAME', 'property'), ('DB_*', 'additional')]
    """

    visitor = InventoryVisitor(options)
    walk_config_properties(schema, (), visitor)
    return visitor.descriptors
