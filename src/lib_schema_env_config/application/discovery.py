"""Discovery of unnamed properties from environment variable names.

Purpose
-------
``patternProperties`` and ``additionalProperties`` describe properties whose
names the schema does not declare. Their names are inferred from the
environment variables that share the parent property's name prefix, then fed
back to the walker as if they had been declared.

Contents
--------
* :class:`DiscoveredProperty` – a concrete path paired with its schema.
* :func:`discover_additional_properties` – every prefixed variable qualifies.
* :func:`discover_pattern_properties` – prefixed variables matching a regex.
* :func:`pattern_regex` – the effective regex for a pattern, including the
  end-anchor rewrite for object schemas.
* :func:`discover_unnamed_properties` – candidate suffixes to property names.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Mapping

from ..domain.errors import UnsupportedSchema
from ..domain.path import ConfigPropertyPath, LiteralSegment
from ..domain.schema import Applicator, JSONSchema, JSONType, classify
from ..observability import log_debug, make_event
from .naming import get_env_var_name_prefix, transform_property_name
from .ports import NamingOptions


@dataclass(frozen=True, slots=True)
class DiscoveredProperty:
    path: ConfigPropertyPath
    schema: JSONSchema


def discover_additional_properties(
    schema: JSONSchema,
    parent_path: ConfigPropertyPath,
    env: Mapping[str, str],
    options: NamingOptions,
) -> list[DiscoveredProperty]:
    """Discover unnamed properties of *parent_path* described by *schema*.

    Examples
    --------
    >>> from lib_schema_env_config.domain.options import EnvVarNamingOptions
    >>> from lib_schema_env_config.domain.path import NamedSegment
    >>> found = discover_additional_properties(
    ...     {"type": "string"}, (NamedSegment("labels"),), {"LABELS_team": "core", "OTHER": "x"}, EnvVarNamingOptions()
    ... )
    >>> [item.path[-1].value for item in found]
    ['team']
    """

    prefix = get_env_var_name_prefix(parent_path, options)
    suffixes = list(_candidate_suffixes(env, prefix))
    return discover_unnamed_properties(schema, suffixes, parent_path, options)


def discover_pattern_properties(
    pattern: str,
    schema: JSONSchema,
    parent_path: ConfigPropertyPath,
    env: Mapping[str, str],
    options: NamingOptions,
) -> list[DiscoveredProperty]:
    """Discover unnamed properties of *parent_path* whose names match *pattern*."""

    regex = pattern_regex(pattern, schema, options)
    prefix = get_env_var_name_prefix(parent_path, options)
    suffixes: list[str] = []
    for suffix in _candidate_suffixes(env, prefix):
        if regex.search(suffix):
            suffixes.append(suffix)
        else:
            log_debug("pattern_candidate_skipped", env_var=prefix + suffix, pattern=pattern, regex=regex.pattern)
    return discover_unnamed_properties(schema, suffixes, parent_path, options)


def pattern_regex(pattern: str, schema: JSONSchema, options: NamingOptions) -> re.Pattern[str]:
    """Compile *pattern*, widening a trailing ``$`` for object schemas.

    An env var below an object-typed pattern property may continue into one of
    the object's declared properties, so the end anchor also accepts any of
    those property name suffixes. The rewritten anchor is ``\\Z``: it matches
    only at the very end, never before a trailing newline.

    Examples
    --------
    >>> from lib_schema_env_config.domain.options import EnvVarNamingOptions
    >>> schema = {"type": "object", "properties": {"hostName": {"type": "string"}}}
    >>> pattern_regex("^db$", schema, EnvVarNamingOptions()).pattern
    '^db(_HOST_NAME|\\\\Z)'
    >>> pattern_regex("cost\\\\$", schema, EnvVarNamingOptions()).pattern
    'cost\\\\$'
    """

    effective = pattern
    if schema.get("type") == JSONType.OBJECT.value and pattern.endswith("$") and not pattern.endswith("\\$"):
        alternatives = [
            re.escape(options.property_separator + transform_property_name(name, options))
            for name in (schema.get("properties") or {})
        ]
        if alternatives:
            alternatives.append(r"\Z")
            effective = f"{pattern[:-1]}({'|'.join(alternatives)})"
    try:
        return re.compile(effective)
    except re.error as exc:
        raise UnsupportedSchema(f"Invalid patternProperties pattern {pattern!r}: {exc}") from exc


def discover_unnamed_properties(
    schema: JSONSchema,
    candidate_suffixes: list[str],
    parent_path: ConfigPropertyPath,
    options: NamingOptions,
) -> list[DiscoveredProperty]:
    """Map candidate env var name suffixes onto concrete property paths.

    Scalar and array schemas take each suffix verbatim as the property name.
    Object schemas cut a suffix short where one of their declared property
    names begins, since the remainder addresses that nested property.
    Applicator schemas concatenate the results of their elements.
    """

    shape = classify(schema)
    if isinstance(shape, Applicator):
        discovered: list[DiscoveredProperty] = []
        for element in shape.schemas:
            discovered.extend(discover_unnamed_properties(element, candidate_suffixes, parent_path, options))
        return discovered

    if shape.is_untyped:
        return []

    if JSONType.OBJECT in shape.types:
        names = [_object_property_name(suffix, schema, options) for suffix in candidate_suffixes]
    else:
        names = list(candidate_suffixes)
    # Several env vars may address the same object property.
    names = list(dict.fromkeys(names))

    properties = [DiscoveredProperty(parent_path + (LiteralSegment(name),), schema) for name in names]
    for item in properties:
        log_debug("unnamed_property_discovered", **make_event(None, item.path))
    return properties


def _object_property_name(suffix: str, schema: JSONSchema, options: NamingOptions) -> str:
    separator = options.property_separator or "_"
    for name in schema.get("properties") or {}:
        property_suffix = options.property_separator + transform_property_name(name, options)
        index = suffix.find(property_suffix)
        if index <= 0:
            continue
        end = index + len(property_suffix)
        # A declared name inside the suffix must end it or be followed by a separator.
        if end != len(suffix) and not suffix[end:].startswith(separator):
            continue
        log_debug("unnamed_property_split", suffix=suffix, matched=property_suffix)
        return suffix[:index]
    return suffix


def _candidate_suffixes(env: Mapping[str, str], prefix: str) -> Iterable[str]:
    for name in env:
        if name.startswith(prefix):
            yield name[len(prefix) :]
