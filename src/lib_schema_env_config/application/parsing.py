"""Typed interpretation of raw environment variable values.

Purpose
-------
Convert the string value of an environment variable into the JSON value its
schema describes. Malformed input never raises: it yields :data:`MISSING` and
a debug event. Only structurally unsupported schemas raise
:class:`~lib_schema_env_config.domain.errors.UnsupportedSchema`.

Grammar
-------
* ``null`` – exactly ``null``.
* ``boolean`` – exactly ``true`` or ``false`` (case-sensitive).
* ``number`` – JSON number syntax, surrounding whitespace allowed.
* ``integer`` – a ``number`` without a fractional part.
* ``string`` – the raw value verbatim.
* ``object`` – a JSON document whose top level is an object.
* ``array`` – a JSON array, or comma-separated values parsed per item schema.
"""

from __future__ import annotations

import json
import math
import re
from typing import Any, Final

from ..domain.errors import UnsupportedSchema
from ..domain.schema import JSONSchema, JSONType, Typed, classify, require_schema, with_type
from ..domain.values import MISSING, Maybe
from ..observability import log_debug

_NUMBER_PATTERN: Final[re.Pattern[str]] = re.compile(r"-?(?:0|[1-9][0-9]*)(?:\.[0-9]+)?(?:[eE][+-]?[0-9]+)?")
_JSON_WHITESPACE: Final[str] = " \t\n\r"


def parse_env_var_value(env_var_name: str, raw_value: str, schema: JSONSchema) -> Maybe:
    """Parse *raw_value* according to the ``type`` of *schema*.

    A list of types is tried in order and the first successful parse wins. A
    schema without ``type`` never yields a value.

    Examples
    --------
    >>> parse_env_var_value('N', '-1.23e-1', {'type': 'number'})
    -0.123
    >>> parse_env_var_value('N', '3.14', {'type': ['integer', 'string']})
    '3.14'
    >>> parse_env_var_value('N', '012', {'type': 'number'})
    MISSING
    >>> parse_env_var_value('L', '1,2', {'type': 'array', 'items': {'type': 'integer'}})
    [1, 2]
    """

    shape = classify(schema)
    if not isinstance(shape, Typed):
        log_debug("env_var_unparsed", env_var=env_var_name, reason=f"{shape.keyword} schemas are walked, not parsed")
        return MISSING
    if shape.is_untyped:
        log_debug("env_var_unparsed", env_var=env_var_name, reason="schema has no type")
        return MISSING
    if len(shape.types) > 1:
        log_debug("env_var_parse_attempt", env_var=env_var_name, types=[t.value for t in shape.types])
        for json_type in shape.types:
            value = _parse_typed(env_var_name, raw_value, json_type, with_type(schema, json_type))
            if value is not MISSING:
                return value
        return MISSING
    return _parse_typed(env_var_name, raw_value, shape.types[0], schema)


def _parse_typed(env_var_name: str, raw_value: str, json_type: JSONType, schema: JSONSchema) -> Maybe:
    if json_type is JSONType.NULL:
        value: Maybe = None if raw_value == "null" else MISSING
    elif json_type is JSONType.BOOLEAN:
        value = _parse_boolean(raw_value)
    elif json_type is JSONType.STRING:
        value = raw_value
    elif json_type is JSONType.NUMBER:
        value = _parse_number(raw_value)
    elif json_type is JSONType.INTEGER:
        value = _parse_integer(raw_value)
    elif json_type is JSONType.OBJECT:
        value = _parse_object(env_var_name, raw_value)
    elif json_type is JSONType.ARRAY:
        value = _parse_array(env_var_name, raw_value, schema)
    else:  # pragma: no cover - JSONType is closed
        raise UnsupportedSchema(f"Cannot handle JSON schema type {json_type!r}")

    if value is MISSING:
        log_debug("env_var_unparsed", env_var=env_var_name, raw=raw_value, type=json_type.value)
    return value


def _parse_boolean(raw_value: str) -> Maybe:
    if raw_value == "true":
        return True
    if raw_value == "false":
        return False
    return MISSING


def _parse_number(raw_value: str) -> Maybe:
    """Accept JSON number syntax only: no leading zeros, hex, ``Infinity`` or ``.5``.

    Examples
    --------
    >>> _parse_number(' 12 '), _parse_number('12.00'), _parse_number('0x11')
    (12, 12.0, MISSING)
    """

    candidate = raw_value.strip(_JSON_WHITESPACE)
    if not _NUMBER_PATTERN.fullmatch(candidate):
        return MISSING
    number = json.loads(candidate)
    if isinstance(number, float) and not math.isfinite(number):
        return MISSING
    return number


def _parse_integer(raw_value: str) -> Maybe:
    number = _parse_number(raw_value)
    if number is MISSING or number % 1 != 0:
        return MISSING
    return int(number)


def _parse_object(env_var_name: str, raw_value: str) -> Maybe:
    value = _load_json(env_var_name, raw_value)
    if not isinstance(value, dict):
        return MISSING
    return value


def _parse_array(env_var_name: str, raw_value: str, schema: JSONSchema) -> Maybe:
    """Prefer a JSON array; fall back to comma-separated values."""

    value = _load_json(env_var_name, raw_value)
    if isinstance(value, list):
        return value
    log_debug("env_var_csv_fallback", env_var=env_var_name, raw=raw_value)
    return _parse_csv_array(env_var_name, raw_value, schema)


def _parse_csv_array(env_var_name: str, raw_value: str, schema: JSONSchema) -> Maybe:
    items = schema.get("items")
    if items is None:
        log_debug("env_var_unparsed", env_var=env_var_name, reason="array has no items schema")
        return MISSING
    if not isinstance(items, (list, tuple)):
        items = require_schema(items, "items")

    parsed: list[Any] = []
    for index, element in enumerate(raw_value.split(",")):
        item_schema = _item_schema(items, schema.get("additionalItems"), index)
        if item_schema is None:
            log_debug("env_var_unparsed", env_var=env_var_name, reason=f"no schema for element {index}")
            return MISSING
        value = parse_env_var_value(f"{env_var_name}[{index}]", element, item_schema)
        if value is MISSING:
            return MISSING
        parsed.append(value)
    return parsed


def _item_schema(items: object, additional_items: object, index: int) -> JSONSchema | None:
    if not isinstance(items, (list, tuple)):
        return items  # type: ignore[return-value]
    candidate = items[index] if index < len(items) else additional_items
    if candidate is None or isinstance(candidate, bool):
        return None
    return require_schema(candidate, "items")


def _load_json(env_var_name: str, raw_value: str) -> Any:
    try:
        return json.loads(raw_value, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as exc:
        log_debug("env_var_not_json", env_var=env_var_name, error=str(exc))
        return MISSING


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")
