"""Public API scenarios and properties through ``import lib_schema_env_config``."""

from __future__ import annotations

from pathlib import Path

import pytest
from hypothesis import given
from hypothesis import strategies as st

import lib_schema_env_config as lib
from lib_schema_env_config import (
    ArrayOverrideOptions,
    EnvVarNamingOptions,
    UnsupportedSchema,
    describe_env_vars,
    load_from_env,
    override_array_values,
)

ARRAY_SCHEMA = {
    "type": "object",
    "properties": {
        "array": {
            "type": "array",
            "items": {"type": "object", "properties": {"prop1": {"type": "string"}, "prop2": {"type": "number"}}},
        }
    },
}
ARRAY_CONFIG = {"array": [{"prop1": "a", "prop2": 0}, {"prop1": "b"}]}

SERVICE_SCHEMA = {
    "type": "object",
    "properties": {
        "service": {
            "type": "object",
            "properties": {
                "port": {"type": "integer"},
                "debug": {"type": "boolean"},
                "name": {"type": "string"},
                "ratio": {"type": "number"},
            },
        }
    },
}

ENV_VALUES = st.one_of(
    st.integers().map(str),
    st.sampled_from(["true", "false", "null", "1.5", "x", ""]),
    st.text(max_size=8),
)
SERVICE_ENV = st.dictionaries(
    st.sampled_from(["SERVICE_PORT", "SERVICE_DEBUG", "SERVICE_NAME", "SERVICE_RATIO"]), ENV_VALUES, max_size=4
)


def test_scenario_camel_cased_nested_property() -> None:
    """camelCased nested properties map to SCREAMING_SNAKE_CASE names."""

    schema = {
        "type": "object",
        "properties": {"camelCased": {"type": "object", "properties": {"propertyName": {"type": "string"}}}},
    }
    assert load_from_env({"CAMEL_CASED_PROPERTY_NAME": "test"}, schema) == {"camelCased": {"propertyName": "test"}}


def test_scenario_non_integer_left_unset() -> None:
    """A non-integer value for an integer property is left out."""

    assert load_from_env({"INT": "3.14"}, {"type": "object", "properties": {"int": {"type": "integer"}}}) == {}


def test_scenario_every_override() -> None:
    """`every` sets a property on all array elements."""

    result = override_array_values(ARRAY_CONFIG, {"array__every__prop_2": "1"}, ARRAY_SCHEMA)
    assert result == {"array": [{"prop1": "a", "prop2": 1}, {"prop1": "b", "prop2": 1}]}


def test_scenario_each_override() -> None:
    """`each` assigns values by index and never extends by default."""

    result = override_array_values(ARRAY_CONFIG, {"array__each__prop_2": "1,2"}, ARRAY_SCHEMA)
    assert result == {"array": [{"prop1": "a", "prop2": 1}, {"prop1": "b", "prop2": 2}]}
    result = override_array_values(ARRAY_CONFIG, {"array__each__prop_2": "1"}, ARRAY_SCHEMA)
    assert result == {"array": [{"prop1": "a", "prop2": 1}, {"prop1": "b"}]}


def test_scenario_pattern_property_discovered_verbatim() -> None:
    """Pattern properties keep the env var name as written."""

    schema = {"type": "object", "patternProperties": {"code": {"type": "string"}}}
    assert load_from_env({"secret-code": "other"}, schema) == {"secret-code": "other"}


def test_scenario_conflicting_names_first_declared_wins() -> None:
    """The first property in walk order claims a shared name."""

    schema = {
        "type": "object",
        "properties": {
            "a": {"type": "object", "properties": {"b": {"type": "string"}}},
            "aB": {"type": "string"},
        },
    }
    assert load_from_env({"A_B": "value"}, schema) == {"a": {"b": "value"}}


def test_property_named_like_a_file_variant_keeps_sibling_value() -> None:
    """``aFile`` taking ``A_FILE`` leaves ``A`` to the ``a`` property."""

    schema = {"type": "object", "properties": {"aFile": {"type": "string"}, "a": {"type": "string"}}}
    assert load_from_env({"A_FILE": "/some/path", "A": "direct"}, schema) == {"aFile": "/some/path", "a": "direct"}


def test_env_defaults_to_process_environment(monkeypatch) -> None:
    """Passing None reads the process environment."""

    monkeypatch.setenv("LSEC_API_TIMEOUT", "30")
    schema = {"type": "object", "properties": {"timeout": {"type": "integer"}}}
    assert load_from_env(None, schema, EnvVarNamingOptions(prefix="LSEC_API")) == {"timeout": 30}


def test_override_with_options(tmp_path: Path) -> None:
    """Override options and file variants work through the public API."""

    secret = tmp_path / "names"
    secret.write_text("x,y,z\n", encoding="utf-8")
    options = ArrayOverrideOptions(extend_target_arrays=True)
    result = override_array_values(ARRAY_CONFIG, {"array__each__prop_1__FILE": str(secret)}, ARRAY_SCHEMA, options)
    assert [element["prop1"] for element in result["array"]] == ["x", "y", "z"]


def test_unsupported_schema_propagates() -> None:
    """Schema errors propagate to the caller."""

    schema = {"type": "object", "properties": {"array": {"type": "array", "items": {"type": "object"}}}, "anyOf": [True]}
    with pytest.raises(UnsupportedSchema):
        override_array_values({}, {}, schema)


def test_describe_env_vars_defaults_to_loader_naming() -> None:
    """describe_env_vars uses loader naming by default."""

    assert [d.name for d in describe_env_vars(SERVICE_SCHEMA)][:2] == ["SERVICE", "SERVICE_PORT"]


def test_public_surface() -> None:
    """Every name in __all__ is importable from the package."""

    for name in lib.__all__:
        assert hasattr(lib, name)


@given(SERVICE_ENV)
def test_loader_is_idempotent(env) -> None:
    """Loading twice from the same env gives the same config."""

    assert load_from_env(env, SERVICE_SCHEMA) == load_from_env(env, SERVICE_SCHEMA)


@given(SERVICE_ENV, st.dictionaries(st.from_regex(r"\AUNRELATED_[A-Z]{1,6}\Z"), ENV_VALUES, max_size=3))
def test_unrelated_variables_never_interfere(env, unrelated) -> None:
    """Env vars outside the schema never change the result."""

    assert load_from_env({**env, **unrelated}, SERVICE_SCHEMA) == load_from_env(env, SERVICE_SCHEMA)


@given(SERVICE_ENV)
def test_loaded_values_come_from_their_own_variables(env) -> None:
    """Each loaded value comes from the env var named after its path."""

    config = load_from_env(env, SERVICE_SCHEMA)
    for key, value in config.get("service", {}).items():
        assert f"SERVICE_{key.upper()}" in env
        if key == "name":
            assert value == env["SERVICE_NAME"]


@given(st.integers(), st.integers())
def test_direct_value_beats_file_variant(tmp_path_factory, direct, from_file) -> None:
    """The direct value wins over the file variant for any pair of integers."""

    secret = tmp_path_factory.mktemp("secrets") / "port"
    secret.write_text(str(from_file), encoding="utf-8")
    schema = {"type": "object", "properties": {"port": {"type": "integer"}}}
    assert load_from_env({"PORT": str(direct), "PORT_FILE": str(secret)}, schema) == {"port": direct}
