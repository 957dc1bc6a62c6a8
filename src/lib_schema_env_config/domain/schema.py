"""Closed classification of the JSON Schema subset the library interprets.

Purpose
-------
Resolve each schema node exactly once into either an in-place applicator or a
typed node so the walker, parser and discovery code dispatch over a fixed set
of shapes instead of probing dictionaries ad hoc.

Contents
--------
* :class:`JSONType` – the seven supported ``type`` keyword values.
* :class:`Applicator` / :class:`Typed` – the two shapes a schema node can take.
* :func:`classify` – turn a raw schema mapping into one of the shapes.
* :func:`require_schema` – reject booleans (and other non-mappings) where a
  schema object is required.

System Role
-----------
Only ``type``, ``properties``, ``patternProperties``, ``additionalProperties``,
``items``, ``additionalItems``, ``anyOf``, ``oneOf`` and ``allOf`` are
interpreted; every other keyword is inert. Schemas must be fully dereferenced.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Final, Union

from .errors import UnsupportedSchema

JSONSchema = Mapping[str, Any]

IN_PLACE_APPLICATOR_KEYWORDS: Final[tuple[str, ...]] = ("anyOf", "oneOf", "allOf")
"""Applicator keywords in the fixed priority order used by the walker."""


class JSONType(str, Enum):
    """Supported values of the ``type`` keyword."""

    NULL = "null"
    BOOLEAN = "boolean"
    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    ARRAY = "array"
    OBJECT = "object"


@dataclass(frozen=True, slots=True)
class Applicator:
    """A node carrying ``anyOf``/``oneOf``/``allOf``; its siblings are ignored."""

    keyword: str
    schemas: tuple[JSONSchema, ...]


@dataclass(frozen=True, slots=True)
class Typed:
    """A node addressed directly; ``types`` is empty when ``type`` is absent.

    ``types`` keeps the declared order so parsers can try each member in turn.
    """

    schema: JSONSchema
    types: tuple[JSONType, ...]

    @property
    def is_untyped(self) -> bool:
        return not self.types


SchemaShape = Union[Applicator, Typed]


def classify(schema: JSONSchema) -> SchemaShape:
    """Resolve *schema* into an :class:`Applicator` or a :class:`Typed` node.

    The first applicator keyword present wins, even when it is an empty list.
    Unknown ``type`` values are rejected here, before any value is parsed.

    Examples
    --------
    >>> classify({"type": ["integer", "string"]}).types
    (<JSONType.INTEGER: 'integer'>, <JSONType.STRING: 'string'>)
    >>> classify({"oneOf": [{"type": "null"}], "type": "string"}).keyword
    'oneOf'
    >>> classify({"type": "date"})
    Traceback (most recent call last):
    ...
    lib_schema_env_config.domain.errors.UnsupportedSchema: Cannot handle JSON schema type 'date'
    """

    for keyword in IN_PLACE_APPLICATOR_KEYWORDS:
        elements = schema.get(keyword)
        if elements is None:
            continue
        if not isinstance(elements, (list, tuple)):
            raise UnsupportedSchema(f'"{keyword}" keyword values must be lists of schemas')
        return Applicator(keyword, tuple(require_schema(element, keyword) for element in elements))
    return Typed(schema, _resolve_types(schema.get("type")))


def require_schema(value: object, keyword: str) -> JSONSchema:
    """Return *value* when it is a schema object, otherwise raise :class:`UnsupportedSchema`.

    Examples
    --------
    >>> require_schema({"type": "string"}, "items")
    {'type': 'string'}
    >>> require_schema(True, "items")
    Traceback (most recent call last):
    ...
    lib_schema_env_config.domain.errors.UnsupportedSchema: Boolean "items" keyword values are not supported
    """

    if isinstance(value, bool):
        raise UnsupportedSchema(f'Boolean "{keyword}" keyword values are not supported')
    if not isinstance(value, Mapping):
        raise UnsupportedSchema(f'"{keyword}" keyword values must be schema objects, got {type(value).__name__}')
    return value


def with_type(schema: JSONSchema, json_type: JSONType) -> dict[str, Any]:
    """Return a copy of *schema* narrowed to a single ``type``."""

    narrowed = dict(schema)
    narrowed["type"] = json_type.value
    return narrowed


def _resolve_types(declared: object) -> tuple[JSONType, ...]:
    if declared is None:
        return ()
    if isinstance(declared, str):
        return (_to_json_type(declared),)
    if isinstance(declared, (list, tuple)):
        return tuple(_to_json_type(member) for member in declared)
    raise UnsupportedSchema(f"Cannot handle JSON schema type {declared!r}")


def _to_json_type(value: object) -> JSONType:
    try:
        return JSONType(value)
    except ValueError as exc:
        raise UnsupportedSchema(f"Cannot handle JSON schema type {value!r}") from exc
