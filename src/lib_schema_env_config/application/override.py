"""Override properties of array elements from environment variables.

Purpose
-------
Arrays whose items are homogeneous objects can have one property set on every
element (``<array><sep>every<sep><property>``) or a positional list of values
spread across elements (``<array><sep>each<sep><property>``).

Contents
--------
* :func:`is_array_of_homogeneous_objects` / :func:`get_item_schema` – decide
  whether an array schema takes part in overrides.
* :class:`OverrideVisitor` – collects overrides while walking the schema.
* :func:`override_array_values` – walk, then apply ``each`` before ``every``.

System Role
-----------
``every`` and ``each`` markers may not be nested across arrays; a path with
more than one marker (or both kinds) is ignored.
"""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from ..domain.errors import IncompatibleConfig
from ..domain.options import ArrayOverrideOptions
from ..domain.path import EACH, EVERY, ConfigPropertyPath, PathSegment, find_only_index, format_path
from ..domain.schema import JSONSchema, JSONType
from ..domain.values import MISSING
from ..observability import log_debug, make_event
from .discovery import DiscoveredProperty, discover_additional_properties, discover_pattern_properties
from .merge import build_fragment, merge_override
from .ports import EnvReader
from .walking import walk_config_properties


@dataclass(frozen=True, slots=True)
class PendingOverride:
    """A parsed override waiting to be applied once the walk completes."""

    path: ConfigPropertyPath
    marker_index: int
    value: Any


def is_array_of_homogeneous_objects(schema: JSONSchema) -> bool:
    """Return ``True`` when every item schema is the same object schema.

    Examples
    --------
    >>> item = {"type": "object", "properties": {"a": {"type": "string"}}}
    >>> is_array_of_homogeneous_objects({"type": "array", "items": item})
    True
    >>> is_array_of_homogeneous_objects({"type": "array", "items": [item, item], "additionalItems": item})
    True
    >>> is_array_of_homogeneous_objects({"type": "array", "items": [item, {"type": "object"}]})
    False
    >>> is_array_of_homogeneous_objects({"type": "array", "items": {"type": "string"}})
    False
    """

    items = schema.get("items")
    additional = schema.get("additionalItems")
    has_items = items is not None and items is not False
    has_additional = additional is not None and additional is not False
    if not has_items and not has_additional:
        return False

    candidates: list[Any] = []
    if has_additional:
        candidates.append(additional)
    if has_items:
        candidates.extend(items if isinstance(items, (list, tuple)) else [items])
    if not candidates or not _describes_object(candidates[0]):
        return False
    return all(candidate == candidates[0] for candidate in candidates[1:])


def get_item_schema(schema: JSONSchema) -> JSONSchema | None:
    """Return the single item schema of a homogeneous array schema."""

    additional = schema.get("additionalItems")
    if isinstance(additional, Mapping):
        return additional
    items = schema.get("items")
    if isinstance(items, (list, tuple)):
        if items and isinstance(items[0], Mapping):
            return items[0]
        return None
    if isinstance(items, Mapping):
        return items
    return None


def _describes_object(schema: object) -> bool:
    return isinstance(schema, Mapping) and schema.get("type") == JSONType.OBJECT.value


class OverrideVisitor:
    """Walker visitor that reads ``every``/``each`` env vars into pending overrides."""

    def __init__(self, reader: EnvReader, options: ArrayOverrideOptions) -> None:
        self.every: list[PendingOverride] = []
        self.each: list[PendingOverride] = []
        self._reader = reader
        self._options = options

    def visit_schema(self, schema: JSONSchema, path: ConfigPropertyPath) -> None:
        if not path:
            return

        every_index = find_only_index(path, EVERY)
        each_index = find_only_index(path, EACH)

        if every_index is not None and EACH not in path:
            value = self._reader.read(schema, path)
            if value is not MISSING:
                self.every.append(PendingOverride(path, every_index, value))

        if each_index is not None and EVERY not in path:
            value = self._reader.read({"type": JSONType.ARRAY.value, "items": schema}, path)
            if isinstance(value, list):
                self.each.append(PendingOverride(path, each_index, value))
            elif value is not MISSING:
                log_debug("array_override_skipped", **make_event(None, path, {"reason": "value is not an array"}))

        self._walk_object_array(schema, path)

    def visit_pattern_property(self, pattern: str, schema: JSONSchema, parent_path: ConfigPropertyPath) -> None:
        self._walk(discover_pattern_properties(pattern, schema, parent_path, self._reader.environ, self._options))

    def visit_additional_properties(self, schema: JSONSchema, parent_path: ConfigPropertyPath) -> None:
        self._walk(discover_additional_properties(schema, parent_path, self._reader.environ, self._options))

    def _walk(self, discovered: list[DiscoveredProperty]) -> None:
        for item in discovered:
            walk_config_properties(item.schema, item.path, self)

    def _walk_object_array(self, schema: JSONSchema, path: ConfigPropertyPath) -> None:
        if schema.get("type") != JSONType.ARRAY.value:
            return
        if not is_array_of_homogeneous_objects(schema):
            log_debug("array_override_skipped", **make_event(None, path, {"reason": "items are not homogeneous objects"}))
            return
        item_schema = get_item_schema(schema)
        if item_schema is None:
            return
        walk_config_properties(item_schema, path + (EVERY,), self)
        walk_config_properties(item_schema, path + (EACH,), self)


def override_array_values(
    config: Mapping[str, Any],
    schema: JSONSchema,
    reader: EnvReader,
    options: ArrayOverrideOptions,
) -> dict[str, Any]:
    """Return a deep copy of *config* with array element overrides applied.

    All ``each`` overrides are applied before any ``every`` override so that an
    array extended by ``each`` still receives ``every`` values on its new
    elements.

    Examples
    --------
    >>> from lib_schema_env_config.adapters.env.default import DefaultEnvReader
    >>> schema = {"type": "object", "properties": {"array": {"type": "array", "items": {
    ...     "type": "object", "properties": {"prop1": {"type": "string"}, "prop2": {"type": "number"}}}}}}
    >>> options = ArrayOverrideOptions()
    >>> reader = DefaultEnvReader(options, environ={"array__each__prop_2": "1,2"})
    >>> override_array_values({"array": [{"prop1": "a", "prop2": 0}, {"prop1": "b"}]}, schema, reader, options)
    {'array': [{'prop1': 'a', 'prop2': 1}, {'prop1': 'b', 'prop2': 2}]}
    """

    result = deepcopy(dict(config))
    visitor = OverrideVisitor(reader, options)
    walk_config_properties(schema, (), visitor)

    for pending in visitor.each:
        _apply_to_each_element(result, pending, options)
    for pending in visitor.every:
        _apply_to_every_element(result, pending)
    return result


def _apply_to_every_element(config: dict[str, Any], pending: PendingOverride) -> None:
    target = _get_array_to_override(config, pending.path[: pending.marker_index])
    if target is None:
        return
    fragment = build_fragment(pending.path[pending.marker_index + 1 :], pending.value)
    for index, element in enumerate(target):
        target[index] = merge_override(element, fragment)
    log_debug("array_override_applied", **make_event(None, pending.path, {"elements": len(target)}))


def _apply_to_each_element(config: dict[str, Any], pending: PendingOverride, options: ArrayOverrideOptions) -> None:
    target = _get_array_to_override(config, pending.path[: pending.marker_index])
    if target is None:
        return
    values: list[Any] = pending.value
    if options.extend_target_arrays and len(target) < len(values):
        target.extend({} for _ in range(len(values) - len(target)))
    if options.truncate_target_arrays and len(target) > len(values):
        del target[len(values) :]

    relative = pending.path[pending.marker_index + 1 :]
    count = min(len(target), len(values))
    for index in range(count):
        target[index] = merge_override(target[index], build_fragment(relative, values[index]))
    log_debug("array_override_applied", **make_event(None, pending.path, {"elements": count}))


def _get_array_to_override(config: dict[str, Any], path: Sequence[PathSegment]) -> list[Any] | None:
    """Return the list at *path*, ``None`` when absent or not a list."""

    current: Any = config
    for segment in path:
        if not isinstance(current, dict):
            raise IncompatibleConfig(
                f"Cannot recurse into non-object property {segment.value!r} in path {format_path(path)!r}"
            )
        if segment.value not in current:
            log_debug("array_override_skipped", **make_event(None, path, {"reason": "property not set"}))
            return None
        current = current[segment.value]
    if not isinstance(current, list):
        log_debug("array_override_skipped", **make_event(None, path, {"reason": "property is not an array"}))
        return None
    return current
