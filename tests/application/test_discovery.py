"""Discovery of unnamed property names from env var names."""

from __future__ import annotations

import pytest

from lib_schema_env_config import ArrayOverrideOptions, EnvVarNamingOptions
from lib_schema_env_config.application.discovery import (
    discover_additional_properties,
    discover_pattern_properties,
    discover_unnamed_properties,
    pattern_regex,
)
from lib_schema_env_config.domain.errors import UnsupportedSchema
from lib_schema_env_config.domain.path import LiteralSegment, NamedSegment

OPTIONS = EnvVarNamingOptions()
DB_SCHEMA = {"type": "object", "properties": {"port": {"type": "integer"}, "hostName": {"type": "string"}}}


def _names(discovered) -> list[str]:
    return [item.path[-1].value for item in discovered]


def test_additional_properties_strip_parent_prefix() -> None:
    """Strip the parent's prefix and keep the remainder as a verbatim property name."""

    env = {"LABELS_team": "core", "LABELS_tier": "gold", "LABEL": "x", "OTHER_team": "y"}
    found = discover_additional_properties({"type": "string"}, (NamedSegment("labels"),), env, OPTIONS)
    assert _names(found) == ["team", "tier"]
    assert all(isinstance(item.path[-1], LiteralSegment) for item in found)
    assert found[0].path[0] == NamedSegment("labels")


def test_root_discovery_without_prefix_sees_every_variable() -> None:
    """Without a prefix every env var is a root candidate."""

    found = discover_additional_properties({"type": "string"}, (), {"A": "1", "b": "2"}, OPTIONS)
    assert _names(found) == ["A", "b"]


def test_root_discovery_with_prefix_only_sees_prefixed_variables() -> None:
    """With a prefix only prefixed env vars are root candidates."""

    options = EnvVarNamingOptions(prefix="APP")
    found = discover_additional_properties({"type": "string"}, (), {"APP_mode": "1", "PATH": "/bin"}, options)
    assert _names(found) == ["mode"]


def test_pattern_filters_candidates() -> None:
    """Only names the pattern searches successfully are kept."""

    env = {"secret-code": "other", "secret-key": "k"}
    found = discover_pattern_properties("code", {"type": "string"}, (), env, OPTIONS)
    assert _names(found) == ["secret-code"]


def test_pattern_matching_is_case_sensitive() -> None:
    """Patterns match names exactly as written, case included."""

    found = discover_pattern_properties("^code$", {"type": "string"}, (), {"CODE": "1", "code": "2"}, OPTIONS)
    assert _names(found) == ["code"]


def test_object_candidates_split_at_declared_child_names() -> None:
    """Cut object candidates at the first declared child suffix that ends a word."""

    candidates = ["primary_PORT", "primary_HOST_NAME", "replica", "replica_PORTAL", "_PORT"]
    found = discover_unnamed_properties(DB_SCHEMA, candidates, (NamedSegment("db"),), OPTIONS)
    assert _names(found) == ["primary", "replica", "replica_PORTAL", "_PORT"]


def test_object_split_honours_custom_separator() -> None:
    """Child suffixes are built with the configured separator."""

    schema = {"type": "object", "properties": {"port": {"type": "integer"}}}
    found = discover_unnamed_properties(schema, ["east__port", "west__portal"], (), ArrayOverrideOptions())
    assert _names(found) == ["east", "west__portal"]


def test_scalar_candidates_are_taken_verbatim() -> None:
    """Scalar schemas use the whole candidate as the property name."""

    found = discover_unnamed_properties({"type": "integer"}, ["a_PORT", "b"], (), OPTIONS)
    assert _names(found) == ["a_PORT", "b"]


def test_untyped_schema_discovers_nothing() -> None:
    """A schema without type or applicator yields no properties."""

    assert discover_unnamed_properties({}, ["a", "b"], (), OPTIONS) == []


def test_applicator_concatenates_element_results() -> None:
    """Each applicator element discovers independently, in order."""

    schema = {"anyOf": [{"type": "string"}, {"type": "integer"}]}
    found = discover_unnamed_properties(schema, ["a", "b"], (), OPTIONS)
    assert _names(found) == ["a", "b", "a", "b"]
    assert [item.schema for item in found][::2] == [{"type": "string"}, {"type": "integer"}]


def test_unknown_type_is_unsupported() -> None:
    """An unknown type name aborts discovery."""

    with pytest.raises(UnsupportedSchema):
        discover_unnamed_properties({"type": "map"}, ["a"], (), OPTIONS)


def test_anchor_rewrite_for_object_schemas() -> None:
    """A trailing anchor also accepts declared child suffixes, and still ends at the very end of the name."""

    regex = pattern_regex("^db$", DB_SCHEMA, OPTIONS)
    assert regex.search("db")
    assert regex.search("db_PORT")
    assert regex.search("db_HOST_NAME")
    assert not regex.search("db_USER")
    assert not regex.search("db\n")


@pytest.mark.parametrize(
    ("pattern", "schema"),
    [
        ("^db$", {"type": "string"}),
        ("^db$", {"type": "object"}),
        ("^cost\\$", DB_SCHEMA),
        ("^db", DB_SCHEMA),
    ],
)
def test_anchor_left_alone(pattern: str, schema: dict) -> None:
    """Patterns that are not object typed or not end-anchored compile unchanged."""

    assert pattern_regex(pattern, schema, OPTIONS).pattern == pattern


def test_invalid_pattern_is_unsupported() -> None:
    """A pattern that does not compile is reported as an unsupported schema."""

    with pytest.raises(UnsupportedSchema):
        pattern_regex("(unclosed", {"type": "string"}, OPTIONS)
