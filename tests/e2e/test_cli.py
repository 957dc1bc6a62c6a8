"""End-to-end CLI coverage for the public commands exposed by lib_schema_env_config.

These tests exercise the documented CLI workflows (env-vars, load, override,
metadata lookups) against schema documents written to a temporary directory.
"""

from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

import lib_cli_exit_tools

from lib_schema_env_config import cli

SCHEMA = {
    "type": "object",
    "properties": {
        "lsecService": {
            "type": "object",
            "properties": {
                "port": {"type": "integer"},
                "hosts": {
                    "type": "array",
                    "items": {"type": "object", "properties": {"name": {"type": "string"}, "weight": {"type": "number"}}},
                },
            },
        }
    },
}


def _write_schema(tmp_path: Path, schema: dict = SCHEMA, name: str = "schema.json") -> Path:
    path = tmp_path / name
    path.write_text(json.dumps(schema), encoding="utf-8")
    return path


def _runner() -> CliRunner:
    """Return a fresh CLI runner so each test starts from a clean state."""

    return CliRunner()


def test_cli_load_outputs_json(tmp_path: Path) -> None:
    """`cli load` should print the configuration the environment describes."""

    schema = _write_schema(tmp_path)
    result = _runner().invoke(
        cli.cli,
        ["load", "--schema", str(schema), "--indent", "2"],
        env={"LSEC_SERVICE_PORT": "8080", "LSEC_SERVICE_HOSTS": '[{"name": "a"}]'},
    )
    assert result.exit_code == 0
    assert json.loads(result.output) == {"lsecService": {"port": 8080, "hosts": [{"name": "a"}]}}


def test_cli_load_honours_naming_flags(tmp_path: Path) -> None:
    """`cli load` should honour --case, --separator and --prefix."""

    schema = _write_schema(tmp_path)
    result = _runner().invoke(
        cli.cli,
        ["load", "--schema", str(schema), "--case", "snake_case", "--separator", "__", "--prefix", "app"],
        env={"app__lsec_service__port": "1", "LSEC_SERVICE_PORT": "2"},
    )
    assert result.exit_code == 0
    assert json.loads(result.output) == {"lsecService": {"port": 1}}


def test_cli_load_reads_yaml_schema(tmp_path: Path) -> None:
    """`cli load` should accept YAML schema documents."""

    path = tmp_path / "schema.yaml"
    path.write_text("type: object\nproperties:\n  lsecDebug:\n    type: boolean\n", encoding="utf-8")
    result = _runner().invoke(cli.cli, ["load", "--schema", str(path)], env={"LSEC_DEBUG": "true"})
    assert result.exit_code == 0
    assert json.loads(result.output) == {"lsecDebug": True}


def test_cli_env_vars_lists_names(tmp_path: Path) -> None:
    """`cli env-vars` should list the accepted names in walk order."""

    schema = _write_schema(tmp_path)
    result = _runner().invoke(cli.cli, ["env-vars", "--schema", str(schema)])
    assert result.exit_code == 0
    names = [entry["name"] for entry in json.loads(result.output)]
    assert names == ["LSEC_SERVICE", "LSEC_SERVICE_PORT", "LSEC_SERVICE_HOSTS"]


def test_cli_override_applies_every_and_each(tmp_path: Path) -> None:
    """`cli override` should apply every and each markers to a TOML config."""

    schema = _write_schema(tmp_path)
    config = tmp_path / "config.toml"
    config.write_text(
        '[lsecService]\nport = 1\n[[lsecService.hosts]]\nname = "a"\n[[lsecService.hosts]]\nname = "b"\n',
        encoding="utf-8",
    )
    result = _runner().invoke(
        cli.cli,
        ["override", "--schema", str(schema), "--config", str(config), "--extend"],
        env={"lsec_service__hosts__each__name": "x,y,z", "lsec_service__hosts__every__weight": "0.5"},
    )
    assert result.exit_code == 0
    assert json.loads(result.output) == {
        "lsecService": {
            "port": 1,
            "hosts": [{"name": "x", "weight": 0.5}, {"name": "y", "weight": 0.5}, {"name": "z", "weight": 0.5}],
        }
    }


def test_cli_rejects_empty_separator(tmp_path: Path) -> None:
    """An empty --separator is a usage error."""

    schema = _write_schema(tmp_path)
    result = _runner().invoke(cli.cli, ["load", "--schema", str(schema), "--separator", ""])
    assert result.exit_code != 0
    assert "Separator must not be empty" in result.output


def test_cli_unsupported_schema_fails(tmp_path: Path) -> None:
    """Unsupported schema types fail the command."""

    schema = _write_schema(tmp_path, {"type": "object", "properties": {"when": {"type": "date"}}})
    result = _runner().invoke(cli.cli, ["load", "--schema", str(schema)])
    assert result.exit_code != 0
    assert "Cannot handle JSON schema type" in str(result.exception)


def test_cli_info_handles_missing_metadata(monkeypatch) -> None:
    """`cli info` must degrade gracefully when package metadata is unavailable."""

    def _raise_pkg_not_found(*_args, **_kwargs):
        raise cli.metadata.PackageNotFoundError()

    monkeypatch.setattr(cli.metadata, "metadata", _raise_pkg_not_found)
    result = _runner().invoke(cli.cli, ["info"])
    assert result.exit_code == 0
    assert "metadata unavailable" in result.output


def test_cli_main_restores_traceback_flag(tmp_path: Path, monkeypatch) -> None:
    """`cli main` should restore lib_cli_exit_tools tracebacks after execution."""

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    monkeypatch.setenv("LSEC_SERVICE_PORT", "1")
    schema = _write_schema(tmp_path)
    exit_code = cli.main(["--traceback", "load", "--schema", str(schema)], restore_traceback=True)
    assert exit_code == 0
    assert getattr(lib_cli_exit_tools.config, "traceback", False) == previous_traceback


def test_cli_main_reports_failures_with_exit_code(tmp_path: Path) -> None:
    """`cli main` should turn failures into a non-zero exit code."""

    schema = _write_schema(tmp_path, {"type": "object", "properties": {"flag": True}})
    assert cli.main(["load", "--schema", str(schema)]) != 0
