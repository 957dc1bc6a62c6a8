"""Run the usage examples embedded in module docstrings."""

from __future__ import annotations

import doctest
import importlib

import pytest

MODULES = [
    "lib_schema_env_config.adapters.env.default",
    "lib_schema_env_config.adapters.file_loaders.structured",
    "lib_schema_env_config.application.discovery",
    "lib_schema_env_config.application.inventory",
    "lib_schema_env_config.application.loading",
    "lib_schema_env_config.application.merge",
    "lib_schema_env_config.application.naming",
    "lib_schema_env_config.application.override",
    "lib_schema_env_config.application.parsing",
    "lib_schema_env_config.application.walking",
    "lib_schema_env_config.cli",
    "lib_schema_env_config.core",
    "lib_schema_env_config.domain.options",
    "lib_schema_env_config.domain.path",
    "lib_schema_env_config.domain.schema",
    "lib_schema_env_config.observability",
]


@pytest.mark.parametrize("module_name", MODULES)
def test_docstring_examples(module_name: str) -> None:
    """Docstring examples in each module run cleanly."""

    module = importlib.import_module(module_name)
    result = doctest.testmod(module, optionflags=doctest.ELLIPSIS)
    assert result.failed == 0
