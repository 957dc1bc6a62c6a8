"""Schema traversal enumerating every statically known property path.

The walker never reads the environment. It reports each typed node to a
:class:`~lib_schema_env_config.application.ports.Visitor` and hands unnamed
properties (``patternProperties`` / ``additionalProperties``) to the visitor so
that it can discover concrete names and walk them in turn.
"""

from __future__ import annotations

from ..domain.path import ConfigPropertyPath, NamedSegment
from ..domain.schema import Applicator, JSONSchema, classify, require_schema
from .ports import Visitor


def walk_config_properties(schema: JSONSchema, path: ConfigPropertyPath, visitor: Visitor) -> None:
    """Visit *schema* at *path* and recurse into its declared properties.

    Applicator nodes (``anyOf``/``oneOf``/``allOf``; first one found wins) walk
    each element against the same *path* and ignore their other keywords.
    Otherwise the order is: the node itself, ``properties`` in declaration
    order, each ``patternProperties`` entry, then ``additionalProperties`` when
    it is a schema object.

    Examples
    --------
    >>> class Recorder:
    ...     def __init__(self):
    ...         self.seen = []
    ...     def visit_schema(self, schema, path):
    ...         self.seen.append([segment.value for segment in path])
    ...     def visit_pattern_property(self, pattern, schema, parent_path):
    ...         self.seen.append(f"pattern {pattern}")
    ...     def visit_additional_properties(self, schema, parent_path):
    ...         self.seen.append("additional")
    >>> recorder = Recorder()
    >>> walk_config_properties(
    ...     {"type": "object", "properties": {"a": {"anyOf": [{"type": "string"}, {"type": "null"}]}},
    ...      "patternProperties": {"^x": {"type": "string"}}, "additionalProperties": False},
    ...     (),
    ...     recorder,
    ... )
    >>> recorder.seen
    [[], ['a'], ['a'], 'pattern ^x']
    """

    shape = classify(schema)
    if isinstance(shape, Applicator):
        # Every element is walked: an env var is only consumed once per call,
        # so the first element able to parse a value claims it.
        for element in shape.schemas:
            walk_config_properties(element, path, visitor)
        return

    visitor.visit_schema(schema, path)

    properties = schema.get("properties")
    if properties is not None:
        for name, property_schema in properties.items():
            walk_config_properties(require_schema(property_schema, "properties"), path + (NamedSegment(name),), visitor)

    pattern_properties = schema.get("patternProperties")
    if pattern_properties is not None:
        for pattern, property_schema in pattern_properties.items():
            visitor.visit_pattern_property(pattern, require_schema(property_schema, "patternProperties"), path)

    additional = schema.get("additionalProperties")
    if additional is not None and not isinstance(additional, bool):
        visitor.visit_additional_properties(require_schema(additional, "additionalProperties"), path)
