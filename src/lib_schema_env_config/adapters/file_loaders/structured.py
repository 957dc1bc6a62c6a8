"""Structured document loaders for schemas and configuration files.

Purpose
-------
Convert on-disk JSON schemas and configuration documents into Python mappings
for the CLI. Adapters are small wrappers around ``json``/``tomllib``/
``yaml.safe_load`` so error handling and observability live in one place.

Contents
--------
* :class:`BaseFileLoader` – shared helpers for reading files and validating
  mapping outputs.
* :class:`JSONFileLoader` / :class:`TOMLFileLoader` / :class:`YAMLFileLoader`.
* :func:`load_document` – pick a loader by file suffix.

System Role
-----------
Invoked by :mod:`lib_schema_env_config.cli` before handing schemas and
configuration objects to the composition root.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Mapping

try:  # Python >= 3.11
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - fallback for <3.11
    import tomli as tomllib  # type: ignore[no-redef]

import yaml

from ...application.ports import DocumentLoader
from ...domain.errors import InvalidFormat, NotFound
from ...observability import log_debug, log_error


class BaseFileLoader:
    """Common utilities shared by the structured file loaders."""

    format_name = "unknown"

    def _read(self, path: str) -> bytes:
        """Read *path* as bytes, raising :class:`NotFound` when the file is missing.

        Examples
        --------
        >>> from tempfile import NamedTemporaryFile
        >>> tmp = NamedTemporaryFile(delete=False)
        >>> _ = tmp.write(b'{"type": "object"}')
        >>> tmp.close()
        >>> BaseFileLoader()._read(tmp.name)[:7]
        b'{"type"'
        >>> Path(tmp.name).unlink()
        """

        file_path = Path(path)
        if not file_path.is_file():
            raise NotFound(f"Document not found: {path}")
        payload = file_path.read_bytes()
        log_debug("document_read", path=path, size=len(payload))
        return payload

    @staticmethod
    def _ensure_mapping(data: object, *, path: str) -> Mapping[str, object]:
        """Ensure *data* behaves like a mapping, otherwise raise ``InvalidFormat``.

        Examples
        --------
        >>> BaseFileLoader._ensure_mapping({"type": "object"}, path="demo")
        {'type': 'object'}
        >>> BaseFileLoader._ensure_mapping([1], path="demo")
        Traceback (most recent call last):
        ...
        lib_schema_env_config.domain.errors.InvalidFormat: File demo did not produce a mapping
        """

        if not isinstance(data, Mapping):
            raise InvalidFormat(f"File {path} did not produce a mapping")
        return data

    def _invalid(self, path: str, exc: Exception) -> InvalidFormat:
        log_error("document_invalid", path=path, format=self.format_name, error=str(exc))
        return InvalidFormat(f"Invalid {self.format_name.upper()} in {path}: {exc}")

    def _loaded(self, data: object, path: str) -> Mapping[str, object]:
        result = self._ensure_mapping(data, path=path)
        log_debug("document_loaded", path=path, format=self.format_name)
        return result


class JSONFileLoader(BaseFileLoader):
    """Load JSON documents, the native format of JSON schemas."""

    format_name = "json"

    def load(self, path: str) -> Mapping[str, object]:
        """Return mapping extracted from JSON file at *path*.

        Examples
        --------
        >>> from tempfile import NamedTemporaryFile
        >>> tmp = NamedTemporaryFile('w', delete=False, encoding='utf-8')
        >>> _ = tmp.write('{"type": "object"}')
        >>> tmp.close()
        >>> JSONFileLoader().load(tmp.name)["type"]
        'object'
        >>> Path(tmp.name).unlink()
        """

        try:
            data = json.loads(self._read(path))
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise self._invalid(path, exc) from exc
        return self._loaded(data, path)


class TOMLFileLoader(BaseFileLoader):
    """Load TOML documents using the standard library parser."""

    format_name = "toml"

    def load(self, path: str) -> Mapping[str, object]:
        """Return mapping extracted from TOML file at *path*."""

        try:
            data = tomllib.loads(self._read(path).decode("utf-8"))
        except (tomllib.TOMLDecodeError, UnicodeDecodeError) as exc:
            raise self._invalid(path, exc) from exc
        return self._loaded(data, path)


class YAMLFileLoader(BaseFileLoader):
    """Load YAML documents; an empty document is an empty mapping."""

    format_name = "yaml"

    def load(self, path: str) -> Mapping[str, object]:
        """Return mapping extracted from YAML file at *path*."""

        try:
            data = yaml.safe_load(self._read(path))
        except yaml.YAMLError as exc:
            raise self._invalid(path, exc) from exc
        if data is None:
            data = {}
        return self._loaded(data, path)


# Supported structured loaders keyed by suffix.
_LOADERS: dict[str, DocumentLoader] = {
    ".json": JSONFileLoader(),
    ".toml": TOMLFileLoader(),
    ".yaml": YAMLFileLoader(),
    ".yml": YAMLFileLoader(),
}


def load_document(path: str | Path) -> Mapping[str, object]:
    """Load *path* with the loader registered for its suffix.

    Raises
    ------
    InvalidFormat
        When the suffix is unsupported or the content is malformed.
    NotFound
        When the file does not exist.
    """

    loader = _LOADERS.get(Path(path).suffix.lower())
    if loader is None:
        raise InvalidFormat(f"Unsupported document type for {path}; expected one of {', '.join(sorted(_LOADERS))}")
    return loader.load(str(path))
