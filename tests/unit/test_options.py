"""Naming and override option defaults."""

from __future__ import annotations

import dataclasses

import pytest

from lib_schema_env_config import ArrayOverrideOptions, EnvVarNamingOptions
from lib_schema_env_config.application.ports import NamingOptions


def test_loader_defaults() -> None:
    """Loader options default to SCREAMING_SNAKE_CASE joined by ``_``."""

    options = EnvVarNamingOptions()
    assert (options.case, options.property_separator, options.prefix) == ("SCREAMING_SNAKE_CASE", "_", None)


def test_override_defaults() -> None:
    """Override options default to snake_case joined by ``__`` with no length changes."""

    options = ArrayOverrideOptions()
    assert (options.case, options.property_separator, options.prefix) == ("snake_case", "__", None)
    assert options.truncate_target_arrays is False
    assert options.extend_target_arrays is False


def test_partial_options_keep_remaining_defaults() -> None:
    """Setting one field keeps the other defaults."""

    options = ArrayOverrideOptions(extend_target_arrays=True)
    assert options.property_separator == "__"
    assert options.extend_target_arrays is True


def test_options_are_frozen() -> None:
    """Options are immutable once built."""

    with pytest.raises(dataclasses.FrozenInstanceError):
        EnvVarNamingOptions().prefix = "APP"  # type: ignore[misc]


def test_both_option_types_satisfy_naming_port() -> None:
    """Both option types satisfy the NamingOptions port."""

    assert isinstance(EnvVarNamingOptions(), NamingOptions)
    assert isinstance(ArrayOverrideOptions(), NamingOptions)
