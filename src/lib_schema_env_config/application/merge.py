"""Configuration tree construction and override merging.

Purpose
-------
Write values into a configuration tree by property path and merge override
fragments into existing array elements. Free of I/O so both public operations
share the same semantics.

Contents
    - ``create_parent_objects``: auto-vivify the mappings above a path.
    - ``assign_path``: set the value at a path, creating ancestors.
    - ``build_fragment``: a fresh mapping holding only one value at a path.
    - ``merge_override``: merge a fragment onto a clone of an array element.
    - ``_merge_mapping`` / ``_merge_branch``: recursive stanzas that keep the
      override precedence readable.
"""

from __future__ import annotations

from collections.abc import Mapping
from copy import deepcopy
from typing import Any, Sequence

from ..domain.errors import IncompatibleConfig
from ..domain.path import PathSegment, format_path


def create_parent_objects(path: Sequence[PathSegment], root: dict[str, Any]) -> dict[str, Any]:
    """Return the mapping that should hold the last segment of *path*.

    Missing ancestors are created as empty mappings; an existing non-mapping
    ancestor raises :class:`IncompatibleConfig`.

    Examples
    --------
    >>> from lib_schema_env_config.domain.path import NamedSegment
    >>> root = {"a": {"keep": 1}}
    >>> parent = create_parent_objects((NamedSegment("a"), NamedSegment("b"), NamedSegment("c")), root)
    >>> parent["c"] = 2
    >>> root
    {'a': {'keep': 1, 'b': {'c': 2}}}
    """

    cursor = root
    for segment in path[:-1]:
        cursor = _ensure_child_mapping(cursor, segment.value, path)
    return cursor


def assign_path(root: dict[str, Any], path: Sequence[PathSegment], value: Any) -> None:
    """Set *value* at *path* inside *root*, auto-vivifying ancestors."""

    parent = create_parent_objects(path, root)
    parent[path[-1].value] = value


def build_fragment(path: Sequence[PathSegment], value: Any) -> dict[str, Any]:
    """Return a new mapping holding a deep copy of *value* at *path*.

    Examples
    --------
    >>> from lib_schema_env_config.domain.path import LiteralSegment, NamedSegment
    >>> build_fragment((NamedSegment("prop2"), LiteralSegment("sub1")), [1])
    {'prop2': {'sub1': [1]}}
    """

    fragment: dict[str, Any] = {}
    assign_path(fragment, path, deepcopy(value))
    return fragment


def merge_override(element: Any, fragment: Mapping[str, Any]) -> Any:
    """Merge *fragment* onto a deep copy of *element* and return the result.

    Mappings on both sides merge recursively, so sibling properties of the
    element survive; any other value in *fragment* replaces what the element
    held. A non-mapping element is replaced by the fragment.

    Examples
    --------
    >>> element = {"prop1": "a", "prop2": {"sub1": 0, "sub2": 5}}
    >>> merge_override(element, {"prop2": {"sub1": 1}})
    {'prop1': 'a', 'prop2': {'sub1': 1, 'sub2': 5}}
    >>> element["prop2"]["sub1"]
    0
    """

    if not isinstance(element, Mapping):
        return deepcopy(dict(fragment))
    merged = deepcopy(dict(element))
    _merge_mapping(merged, fragment)
    return merged


def _merge_mapping(target: dict[str, Any], incoming: Mapping[str, Any]) -> None:
    """Recursively merge ``incoming`` into ``target``; incoming wins on leaves."""

    for key, value in incoming.items():
        if isinstance(value, Mapping):
            _merge_branch(target, key, value)
        else:
            target[key] = deepcopy(value)


def _merge_branch(target: dict[str, Any], key: str, value: Mapping[str, Any]) -> None:
    """Merge mapping ``value`` into ``target[key]`` and recurse."""

    existing = target.get(key)
    if isinstance(existing, Mapping):
        container = dict(existing)
    else:
        container = {}
    target[key] = container
    _merge_mapping(container, value)


def _ensure_child_mapping(mapping: dict[str, Any], key: str, path: Sequence[PathSegment]) -> dict[str, Any]:
    """Ensure ``mapping[key]`` is a ``dict`` (creating or validating as necessary).

    Why
    ----
    Prevent accidental overwrites of scalar values when nested keys are
    introduced.
    """

    if key not in mapping:
        mapping[key] = {}
    child = mapping[key]
    if not isinstance(child, dict):
        raise IncompatibleConfig(
            f"Cannot recurse into non-object property {key!r} in path {format_path(path)!r}"
        )
    return child
